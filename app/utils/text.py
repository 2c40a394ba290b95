# app/utils/text.py

import math
import re
import uuid

WORDS_PER_MINUTE = 200
SLUG_SUFFIX_LENGTH = 8

_TAG_RE = re.compile(r"<[^>]+>")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def generate_slug(title: str) -> str:
    """
    Turn a post title into a URL-safe slug.

    Args:
        title (str): The post title.

    Returns:
        str: Lowercase slug, e.g. "Hello, World!" -> "hello-world".
    """
    slug = title.lower()
    slug = _SLUG_INVALID_RE.sub("", slug)
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def slug_suffix() -> str:
    return uuid.uuid4().hex[:SLUG_SUFFIX_LENGTH]


def calculate_reading_time(content: str) -> int:
    """Reading time in whole minutes at 200 words per minute, never below 1."""
    if not content or not content.strip():
        return 1
    text = _TAG_RE.sub(" ", content)
    word_count = len(text.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def normalize_tag(name: str) -> str:
    return name.strip().upper()


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere; use with ``escape=LIKE_ESCAPE``."""
    escaped = text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")
    return f"%{escaped}%"


def join_skills(skills) -> str:
    return ", ".join(skill.strip() for skill in skills if skill and skill.strip())


def split_skills(value) -> list:
    if not value:
        return []
    return [skill.strip() for skill in value.split(",") if skill.strip()]
