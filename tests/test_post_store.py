import re

import pytest

from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.core.security import Caller
from app.models import BlogPost, BlogPostLike, Bookmark, Comment, Notification, PostImage, Reaction, Tag
from app.models.user import UserRole
from app.schemas.blog_post import BlogPostUpdate, PostImageCreate
from app.schemas.comment import CommentCreate
from app.schemas.common import PaginationParams
from app.schemas.draft_blog import DraftSave


def as_caller(user):
    return Caller(id=user.id, role=user.role.value)


def test_create_post_sets_slug_reading_time_and_publish_flags(make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice, title="Hello World", content="word " * 250)

    assert post.slug == "hello-world"
    assert post.reading_time_minutes == 2
    assert post.is_published is True
    assert post.is_draft is False
    assert post.author_username == "alice"
    assert post.view_count == 0


def test_duplicate_title_gets_random_suffix(make_user, make_post):
    alice = make_user("alice")
    first = make_post(alice, title="Hello World")
    second = make_post(alice, title="Hello World")

    assert first.slug == "hello-world"
    assert re.fullmatch(r"hello-world-[0-9a-f]{8}", second.slug)


def test_title_without_slug_characters_falls_back(make_user, make_post):
    post = make_post(make_user(), title="!!!")
    assert post.slug == "post"


def test_draft_post_is_not_published(make_user, make_post):
    post = make_post(make_user(), is_draft=True)
    assert post.is_draft is True
    assert post.is_published is False


def test_tags_are_normalized_and_deduplicated(db, make_user, make_post):
    post = make_post(make_user(), tags=[" python ", "Python", "web", "  "])

    assert post.tags == ["python", "web"]
    assert {t.normalized_name for t in db.query(Tag).all()} == {"PYTHON", "WEB"}


def test_update_keeps_slug_and_adds_tags(db, services, make_user, make_post):
    alice = make_user("alice")
    post = make_post(alice, title="Original", tags=["python"])

    updated = services.posts.update_post(
        db, as_caller(alice), post.id,
        BlogPostUpdate(title="Completely New Title", content="word " * 401, tags=["PYTHON", "news"]),
    )

    assert updated.slug == "original"
    assert updated.title == "Completely New Title"
    assert updated.reading_time_minutes == 3
    assert updated.tags == ["news", "python"]
    assert db.query(Tag).count() == 2


def test_update_by_other_user_is_forbidden(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)

    with pytest.raises(ForbiddenError):
        services.posts.update_post(db, as_caller(bob), post.id, BlogPostUpdate(title="x", content="y"))


def test_admin_can_update_and_delete_any_post(db, services, make_user, make_post):
    alice = make_user("alice")
    admin = make_user("admin", role=UserRole.ADMIN)
    post = make_post(alice)

    updated = services.posts.update_post(db, as_caller(admin), post.id, BlogPostUpdate(title="Moderated", content="y"))
    assert updated.title == "Moderated"

    services.posts.delete_post(db, as_caller(admin), post.id)
    with pytest.raises(NotFoundError):
        services.posts.get_post_by_id(db, post.id)


def test_update_unknown_post_is_not_found(db, services, make_user):
    alice = make_user()
    with pytest.raises(NotFoundError):
        services.posts.update_post(db, as_caller(alice), 999, BlogPostUpdate(title="x", content="y"))


def test_delete_cascades_to_owned_rows(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice, tags=["python"])
    services.posts.add_image(db, as_caller(alice), post.id, PostImageCreate(image_url="https://cdn/x.png"))
    top = services.posts.add_comment(db, bob.id, post.id, CommentCreate(content="nice"))
    services.posts.add_comment(db, alice.id, post.id, CommentCreate(content="thanks", parent_comment_id=top.id))
    services.engagement.toggle_like(db, bob.id, post.id)
    services.engagement.toggle_bookmark(db, bob.id, post.id)
    services.engagement.toggle_reaction(db, bob.id, post.id, "Fire")

    with pytest.raises(ForbiddenError):
        services.posts.delete_post(db, as_caller(bob), post.id)

    services.posts.delete_post(db, as_caller(alice), post.id)

    assert db.query(BlogPost).count() == 0
    for model in (PostImage, Comment, BlogPostLike, Bookmark, Reaction):
        assert db.query(model).count() == 0
    # Tags outlive the posts that used them
    assert db.query(Tag).count() == 1


def test_get_by_slug_counts_a_view_but_get_by_id_does_not(db, services, make_user, make_post):
    post = make_post(make_user())

    viewed = services.posts.get_post_by_slug(db, post.slug)
    assert viewed.view_count == 1
    assert services.posts.get_post_by_id(db, post.id).view_count == 1

    services.posts.get_post_by_slug(db, post.slug)
    assert services.posts.get_post_by_id(db, post.id).view_count == 2


def test_get_unknown_post_is_not_found(db, services):
    with pytest.raises(NotFoundError):
        services.posts.get_post_by_id(db, 42)
    with pytest.raises(NotFoundError):
        services.posts.get_post_by_slug(db, "nope")


def test_post_is_annotated_for_the_caller(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)
    services.engagement.toggle_like(db, bob.id, post.id)
    services.engagement.toggle_bookmark(db, bob.id, post.id)
    services.engagement.toggle_reaction(db, bob.id, post.id, "Love")

    as_bob = services.posts.get_post_by_id(db, post.id, bob.id)
    assert as_bob.is_liked_by_current_user is True
    assert as_bob.is_bookmarked_by_current_user is True
    assert as_bob.current_user_reaction == "Love"
    assert as_bob.like_count == 1
    assert as_bob.reaction_counts == {"Love": 1}

    anonymous = services.posts.get_post_by_id(db, post.id)
    assert anonymous.is_liked_by_current_user is False
    assert anonymous.is_bookmarked_by_current_user is False
    assert anonymous.current_user_reaction is None
    assert anonymous.like_count == 1


def test_list_by_author_only_returns_published_posts_newest_first(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    first = make_post(alice, title="First")
    second = make_post(alice, title="Second")
    make_post(alice, title="Draft", is_draft=True)
    make_post(bob, title="Other")

    page = services.posts.list_posts_by_author(db, alice.id, PaginationParams())

    assert page.total_count == 2
    assert [p.id for p in page.items] == [second.id, first.id]


def test_search_is_case_insensitive_substring_over_published_posts(db, services, make_user, make_post):
    alice = make_user()
    hit_title = make_post(alice, title="Learning Python")
    hit_summary = make_post(alice, title="Other", summary="a python story")
    make_post(alice, title="python draft", is_draft=True)
    make_post(alice, title="Unrelated", content="nothing here")

    page = services.posts.search_posts(db, "PYTHON", PaginationParams())

    assert {p.id for p in page.items} == {hit_title.id, hit_summary.id}
    assert page.total_count == 2


def test_search_rejects_blank_query(db, services):
    with pytest.raises(InvalidArgumentError):
        services.posts.search_posts(db, "   ", PaginationParams())


def test_search_matches_wildcard_characters_literally(db, services, make_user, make_post):
    alice = make_user()
    make_post(alice, title="plain title")
    snake = make_post(alice, title="snake_case naming")
    make_post(alice, title="growth of 100 users")
    coverage = make_post(alice, title="100% coverage")

    underscore = services.posts.search_posts(db, "_", PaginationParams())
    percent = services.posts.search_posts(db, "100%", PaginationParams())

    assert [p.id for p in underscore.items] == [snake.id]
    assert [p.id for p in percent.items] == [coverage.id]


def test_full_text_search_covers_posts_users_and_tags(db, services, make_user, make_post):
    alice = make_user("alice")
    pythonista = make_user("pythonista")
    fan = make_user("monty", display_name="Python Fan")
    make_user("python_off", is_active=False)
    services.engagement.toggle_follow(db, alice.id, pythonista.id)

    by_title = make_post(alice, title="Learning Python")
    by_tag = make_post(alice, title="Weekend notes", tags=["python"])
    make_post(alice, title="python draft", is_draft=True)
    make_post(alice, title="Unrelated")
    db.get(BlogPost, by_title.id).view_count = 5
    db.get(BlogPost, by_tag.id).view_count = 10
    db.commit()

    result = services.posts.full_text_search(db, "python", PaginationParams())

    # most viewed first
    assert [p.id for p in result.posts] == [by_tag.id, by_title.id]
    assert [(u.id, u.followers_count) for u in result.users] == [(pythonista.id, 1), (fan.id, 0)]
    assert result.tags == ["python"]
    assert result.total_results == 5


def test_full_text_search_pages_posts_but_counts_them_all(db, services, make_user, make_post):
    alice = make_user("alice")
    for i in range(3):
        make_post(alice, title=f"Rust {i}")

    result = services.posts.full_text_search(db, "rust", PaginationParams(page=1, page_size=2))

    assert len(result.posts) == 2
    assert result.users == []
    assert result.tags == []
    assert result.total_results == 3


def test_full_text_search_rejects_blank_query(db, services):
    with pytest.raises(InvalidArgumentError):
        services.posts.full_text_search(db, " ", PaginationParams())


def test_bookmarked_posts(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    kept = make_post(alice, title="Kept")
    make_post(alice, title="Ignored")
    services.engagement.toggle_bookmark(db, bob.id, kept.id)

    page = services.posts.list_bookmarked_posts(db, bob.id, PaginationParams())
    assert [p.id for p in page.items] == [kept.id]
    assert page.items[0].is_bookmarked_by_current_user is True

    empty = services.posts.list_bookmarked_posts(db, alice.id, PaginationParams())
    assert empty.items == []
    assert empty.total_count == 0


def test_images_are_appended_in_order_and_owner_only(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)

    first = services.posts.add_image(db, as_caller(alice), post.id, PostImageCreate(image_url="https://cdn/1.png"))
    second = services.posts.add_image(db, as_caller(alice), post.id, PostImageCreate(image_url="https://cdn/2.png", alt_text="two"))
    assert (first.sort_order, second.sort_order) == (1, 2)

    with pytest.raises(ForbiddenError):
        services.posts.add_image(db, as_caller(bob), post.id, PostImageCreate(image_url="https://cdn/3.png"))

    services.posts.remove_image(db, as_caller(alice), post.id, first.id)
    assert [i.image_url for i in services.posts.get_post_by_id(db, post.id).images] == ["https://cdn/2.png"]

    with pytest.raises(NotFoundError):
        services.posts.remove_image(db, as_caller(alice), post.id, first.id)


def test_comment_threads_are_built_from_flat_rows(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)
    top = services.posts.add_comment(db, bob.id, post.id, CommentCreate(content="first"))
    reply = services.posts.add_comment(db, alice.id, post.id, CommentCreate(content="reply", parent_comment_id=top.id))
    services.posts.add_comment(db, bob.id, post.id, CommentCreate(content="nested", parent_comment_id=reply.id))
    services.posts.add_comment(db, bob.id, post.id, CommentCreate(content="second"))

    page = services.posts.list_comments(db, post.id, PaginationParams())

    assert page.total_count == 2
    assert [c.content for c in page.items] == ["second", "first"]
    thread = page.items[1]
    assert [r.content for r in thread.replies] == ["reply"]
    assert [r.content for r in thread.replies[0].replies] == ["nested"]
    assert thread.username == "bob"
    assert services.posts.get_post_by_id(db, post.id).comment_count == 4


def test_comment_notifies_the_post_author_but_not_self(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)

    services.posts.add_comment(db, bob.id, post.id, CommentCreate(content="hi"))
    services.posts.add_comment(db, alice.id, post.id, CommentCreate(content="own comment"))

    notifications = db.query(Notification).all()
    assert len(notifications) == 1
    assert notifications[0].user_id == alice.id
    assert notifications[0].type.value == "Comment"
    assert notifications[0].message == "bob commented on your post"
    assert notifications[0].reference_id == post.id


def test_reply_must_belong_to_the_same_post(db, services, make_user, make_post):
    alice = make_user()
    post_a = make_post(alice, title="A")
    post_b = make_post(alice, title="B")
    top = services.posts.add_comment(db, alice.id, post_a.id, CommentCreate(content="on a"))

    with pytest.raises(InvalidArgumentError):
        services.posts.add_comment(db, alice.id, post_b.id, CommentCreate(content="x", parent_comment_id=top.id))
    with pytest.raises(NotFoundError):
        services.posts.add_comment(db, alice.id, post_b.id, CommentCreate(content="x", parent_comment_id=999))


def test_delete_comment_removes_its_replies(db, services, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)
    top = services.posts.add_comment(db, bob.id, post.id, CommentCreate(content="first"))
    services.posts.add_comment(db, alice.id, post.id, CommentCreate(content="reply", parent_comment_id=top.id))

    with pytest.raises(ForbiddenError):
        services.posts.delete_comment(db, as_caller(alice), top.id)

    services.posts.delete_comment(db, as_caller(bob), top.id)
    assert db.query(Comment).count() == 0

    with pytest.raises(NotFoundError):
        services.posts.delete_comment(db, as_caller(bob), top.id)


def test_drafts_are_private_to_their_author(db, services, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    draft = services.posts.save_draft(db, alice.id, DraftSave(title="WIP", content="start"))

    updated = services.posts.save_draft(db, alice.id, DraftSave(id=draft.id, title="WIP 2", content="more", tags="a,b"))
    assert updated.id == draft.id
    assert updated.title == "WIP 2"
    assert updated.tags == "a,b"

    assert [d.id for d in services.posts.list_drafts(db, alice.id)] == [draft.id]
    assert services.posts.list_drafts(db, bob.id) == []

    with pytest.raises(ForbiddenError):
        services.posts.get_draft(db, bob.id, draft.id)
    with pytest.raises(ForbiddenError):
        services.posts.save_draft(db, bob.id, DraftSave(id=draft.id, title="hijack"))
    with pytest.raises(ForbiddenError):
        services.posts.delete_draft(db, bob.id, draft.id)

    services.posts.delete_draft(db, alice.id, draft.id)
    with pytest.raises(NotFoundError):
        services.posts.get_draft(db, alice.id, draft.id)


def test_draft_for_unknown_post_is_not_found(db, services, make_user):
    with pytest.raises(NotFoundError):
        services.posts.save_draft(db, make_user().id, DraftSave(title="x", post_id=404))
