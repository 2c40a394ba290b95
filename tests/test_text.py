import re

from app.utils.text import (
    calculate_reading_time,
    contains_pattern,
    generate_slug,
    join_skills,
    normalize_tag,
    slug_suffix,
    split_skills,
)


def test_slug_lowercases_and_hyphenates():
    assert generate_slug("Hello World") == "hello-world"


def test_slug_strips_punctuation_and_collapses_hyphens():
    assert generate_slug("  Hello,  World!! -- Part 2 ") == "hello-world-part-2"


def test_slug_of_only_symbols_is_empty():
    assert generate_slug("!!!") == ""


def test_slug_suffix_is_eight_hex_chars():
    assert re.fullmatch(r"[0-9a-f]{8}", slug_suffix())


def test_reading_time_rounds_up():
    assert calculate_reading_time("word " * 250) == 2
    assert calculate_reading_time("word " * 200) == 1
    assert calculate_reading_time("word " * 201) == 2


def test_reading_time_ignores_markup_and_has_a_floor():
    assert calculate_reading_time("") == 1
    assert calculate_reading_time("<p></p>") == 1
    html = "<p>" + "<b>word</b> " * 400 + "</p>"
    assert calculate_reading_time(html) == 2


def test_normalize_tag():
    assert normalize_tag("  python ") == "PYTHON"


def test_contains_pattern_escapes_like_wildcards():
    assert contains_pattern("plain") == "%plain%"
    assert contains_pattern("100%") == "%100\\%%"
    assert contains_pattern("snake_case") == "%snake\\_case%"
    assert contains_pattern("a\\b") == "%a\\\\b%"


def test_skills_are_stored_comma_separated():
    assert join_skills(["Python", " SQL ", ""]) == "Python, SQL"
    assert split_skills("Python, SQL,") == ["Python", "SQL"]
    assert split_skills(None) == []
