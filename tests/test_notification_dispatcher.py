import pytest

from app.core.exceptions import InvalidArgumentError
from app.models import Notification, NotificationType
from app.schemas.common import PaginationParams


def test_notify_stages_a_row_and_pushes_after_commit(db, services, push_channel, make_user):
    alice, bob = make_user("alice"), make_user("bob")

    notification = services.notifications.notify(db, alice.id, bob.id, "Follow", "bob started following you")
    assert notification is not None
    services.push.wait(timeout=5)
    assert push_channel.events == []

    db.commit()
    services.push.wait(timeout=5)

    assert len(push_channel.events) == 1
    event = push_channel.events[0]
    assert (event.recipient_id, event.type, event.message, event.reference_id) == (
        alice.id, "Follow", "bob started following you", None,
    )


def test_rolled_back_notification_is_never_pushed(db, services, push_channel, make_user):
    alice, bob = make_user("alice"), make_user("bob")

    services.notifications.notify(db, alice.id, bob.id, NotificationType.COMMENT, "bob commented on your post", 7)
    db.rollback()
    db.commit()
    services.push.wait(timeout=5)

    assert push_channel.events == []
    assert db.query(Notification).count() == 0


def test_self_notification_is_a_no_op(db, services, push_channel, make_user):
    alice = make_user()

    assert services.notifications.notify(db, alice.id, alice.id, "Follow", "hi me") is None
    db.commit()
    services.push.wait(timeout=5)

    assert db.query(Notification).count() == 0
    assert push_channel.events == []


def test_unknown_notification_type_is_invalid(db, services, make_user):
    alice, bob = make_user(), make_user()
    with pytest.raises(InvalidArgumentError):
        services.notifications.notify(db, alice.id, bob.id, "Mention", "hey")


def test_push_failure_does_not_break_the_write(db, services, push_channel, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    push_channel.fail = True

    assert services.engagement.toggle_follow(db, bob.id, alice.id) is True
    services.push.wait(timeout=5)

    assert services.notifications.unread_count(db, alice.id) == 1


def test_engagement_notifications_reach_the_push_channel(db, services, push_channel, make_user, make_post):
    alice, bob = make_user("alice"), make_user("bob")
    post = make_post(alice)

    services.engagement.toggle_reaction(db, bob.id, post.id, "Fire")
    services.push.wait(timeout=5)

    assert [(e.recipient_id, e.type, e.reference_id) for e in push_channel.events] == [(alice.id, "Reaction", post.id)]


def test_list_is_newest_first_with_actor_details(db, services, make_user):
    alice = make_user("alice")
    bob = make_user("bob", display_name="Bob B.")
    carol = make_user("carol")
    services.engagement.toggle_follow(db, bob.id, alice.id)
    services.engagement.toggle_follow(db, carol.id, alice.id)

    page = services.notifications.list_notifications(db, alice.id, PaginationParams())

    assert page.total_count == 2
    assert [n.actor_username for n in page.items] == ["carol", "bob"]
    assert page.items[1].actor_display_name == "Bob B."
    assert all(n.type == "Follow" and n.is_read is False for n in page.items)


def test_mark_read_is_idempotent_and_scoped_to_the_owner(db, services, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    services.engagement.toggle_follow(db, bob.id, alice.id)
    notification_id = services.notifications.list_notifications(db, alice.id, PaginationParams()).items[0].id

    # Someone else's id and unknown ids are ignored
    services.notifications.mark_read(db, bob.id, notification_id)
    services.notifications.mark_read(db, alice.id, 999)
    assert services.notifications.unread_count(db, alice.id) == 1

    services.notifications.mark_read(db, alice.id, notification_id)
    services.notifications.mark_read(db, alice.id, notification_id)
    assert services.notifications.unread_count(db, alice.id) == 0


def test_mark_all_read(db, services, make_user):
    alice = make_user("alice")
    for _ in range(3):
        services.engagement.toggle_follow(db, make_user().id, alice.id)

    assert services.notifications.mark_all_read(db, alice.id) == 3
    assert services.notifications.unread_count(db, alice.id) == 0
    assert services.notifications.mark_all_read(db, alice.id) == 0
