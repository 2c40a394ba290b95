from datetime import timedelta

import pytest

from app.core.exceptions import NotFoundError
from app.models import BlogPost, Follow
from app.schemas.comment import CommentCreate
from app.schemas.common import PaginationParams
from app.schemas.user import ProfileUpdate


def test_profile_counts_and_follow_flag(db, services, make_user, make_post):
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    make_post(alice)
    make_post(alice, is_draft=True)
    services.engagement.toggle_follow(db, bob.id, alice.id)
    services.engagement.toggle_follow(db, alice.id, carol.id)

    as_bob = services.profiles.get_profile(db, alice.id, bob.id)
    assert (as_bob.followers_count, as_bob.following_count, as_bob.posts_count) == (1, 1, 1)
    assert as_bob.is_followed_by_current_user is True

    as_carol = services.profiles.get_profile_by_username(db, "alice", carol.id)
    assert as_carol.is_followed_by_current_user is False


def test_unknown_profile_is_not_found(db, services):
    with pytest.raises(NotFoundError):
        services.profiles.get_profile(db, 999)
    with pytest.raises(NotFoundError):
        services.profiles.get_profile_by_username(db, "ghost")


def test_update_profile_keeps_unset_fields(db, services, make_user):
    alice = make_user("alice", bio="old bio")

    profile = services.profiles.update_profile(db, alice.id, ProfileUpdate(display_name="Alice A."))

    assert profile.display_name == "Alice A."
    assert profile.bio == "old bio"


def test_followers_and_following_pages(db, services, make_user):
    alice = make_user("alice")
    fans = [make_user(f"fan{i}") for i in range(3)]
    for fan in fans:
        services.engagement.toggle_follow(db, fan.id, alice.id)

    followers = services.profiles.get_followers(db, alice.id, PaginationParams(page=1, page_size=2), fans[0].id)
    assert followers.total_count == 3
    assert len(followers.items) == 2
    assert followers.total_pages == 2

    following = services.profiles.get_following(db, fans[0].id, PaginationParams())
    assert [p.username for p in following.items] == ["alice"]


def test_suggested_users_are_most_followed_not_yet_followed(db, services, make_user):
    me = make_user("me")
    popular, known, quiet = make_user("popular"), make_user("known"), make_user("quiet")
    inactive = make_user("inactive", is_active=False)
    services.engagement.toggle_follow(db, me.id, known.id)
    for _ in range(2):
        fan = make_user()
        services.engagement.toggle_follow(db, fan.id, popular.id)
        services.engagement.toggle_follow(db, fan.id, inactive.id)

    suggested = services.profiles.get_suggested_users(db, me.id, count=2)

    # ties on follower count fall back to the oldest account
    assert [p.username for p in suggested] == ["popular", quiet.username]


def test_creator_analytics(db, services, clock, make_user, make_post):
    creator = make_user("creator")
    viewed = make_post(creator, title="viewed")
    reacted = make_post(creator, title="reacted")
    make_post(creator, title="draft", is_draft=True)

    post = db.get(BlogPost, viewed.id)
    post.view_count = 10
    db.commit()
    for _ in range(4):
        services.engagement.toggle_reaction(db, make_user().id, reacted.id, "Love")
    services.posts.add_comment(db, make_user().id, viewed.id, CommentCreate(content="great"))

    recent_fan, old_fan = make_user(), make_user()
    services.engagement.toggle_follow(db, recent_fan.id, creator.id)
    services.engagement.toggle_follow(db, old_fan.id, creator.id)
    old_follow = db.query(Follow).filter(Follow.follower_id == old_fan.id).one()
    old_follow.created_at = clock() - timedelta(days=45)
    db.commit()

    analytics = services.profiles.get_creator_analytics(db, creator.id)

    assert analytics.total_views == 10
    assert analytics.total_reactions == 4
    assert analytics.total_comments == 1
    assert analytics.total_followers == 2
    assert analytics.followers_growth_last_30_days == 1
    # reacted scores 0 + 4 * 3 = 12, viewed scores 10
    assert [p.id for p in analytics.top_posts] == [reacted.id, viewed.id]
    assert analytics.top_posts[0].reaction_count == 4
    assert analytics.top_posts[1].comment_count == 1


def test_extended_profile_fields_round_trip_and_keep_unset(db, services, make_user):
    alice = make_user("alice", location="Lisbon")

    profile = services.profiles.update_profile(db, alice.id, ProfileUpdate(
        website="https://alice.dev",
        social_links={"github": "alice", "twitter": "@alice"},
        skills=["Python", " SQL ", ""],
    ))

    assert profile.website == "https://alice.dev"
    assert profile.location == "Lisbon"
    assert profile.social_links == {"github": "alice", "twitter": "@alice"}
    assert profile.skills == ["Python", "SQL"]

    again = services.profiles.update_profile(db, alice.id, ProfileUpdate(bio="hi"))
    assert again.skills == ["Python", "SQL"]
    assert again.social_links == {"github": "alice", "twitter": "@alice"}


def test_profile_defaults_for_new_user(db, services, make_user):
    profile = services.profiles.get_profile(db, make_user().id)

    assert profile.cover_photo_url is None
    assert profile.social_links == {}
    assert profile.skills == []


def test_update_cover_photo_and_picture(db, services, make_user):
    alice = make_user("alice")

    assert services.profiles.update_cover_photo(db, alice.id, "https://cdn/cover.png") == "https://cdn/cover.png"
    assert services.profiles.update_profile_picture(db, alice.id, "https://cdn/me.png") == "https://cdn/me.png"

    profile = services.profiles.get_profile(db, alice.id)
    assert profile.cover_photo_url == "https://cdn/cover.png"
    assert profile.profile_picture_url == "https://cdn/me.png"

    with pytest.raises(NotFoundError):
        services.profiles.update_cover_photo(db, 999, "https://cdn/x.png")
