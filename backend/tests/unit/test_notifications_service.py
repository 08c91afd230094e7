import pydantic
import pytest
from sqlmodel import Session

from exceptions import NotFound
from models.notifications import (
    FriendRequestData,
    GameUpdateData,
    MessageData,
    NewUserMatchData,
    Notification,
    NotificationType,
    parse_notification_data,
)
from services import notifications


def notify(session, user, data, title="Hello"):
    return notifications.create_notification(
        session, user_id=user.id, title=title, content="content", data=data
    )


class TestNotificationPayloads:
    def test_payload_follows_the_type(self):
        payload = parse_notification_data(
            "friend_request", {"friendship_id": 7, "requester_id": "u1"}
        )
        assert isinstance(payload, FriendRequestData)
        assert payload.friendship_id == 7

        payload = parse_notification_data("game_update", {"game_id": "g1"})
        assert isinstance(payload, GameUpdateData)
        assert payload.sport is None

    def test_payload_must_match_its_type(self):
        with pytest.raises(pydantic.ValidationError):
            parse_notification_data("friend_request", {"sender_id": "u1"})
        with pytest.raises(pydantic.ValidationError):
            parse_notification_data("unknown", {})

    def test_type_column_comes_from_payload(self, test_session: Session, users):
        alice, _, _ = users
        notification = notify(
            test_session, alice, NewUserMatchData(user_id="u9", sport="padel")
        )
        assert notification.type == NotificationType.new_user_match
        assert notification.data == {"user_id": "u9", "sport": "padel"}
        assert notification.payload == NewUserMatchData(user_id="u9", sport="padel")
        assert notification.to_dict()["type"] == "new_user_match"


def test_list_newest_first_with_limit(test_session: Session, users):
    alice, bob, _ = users
    created = [
        notify(test_session, alice, MessageData(sender_id=bob.id), title=f"n{i}")
        for i in range(3)
    ]
    notify(test_session, bob, MessageData(sender_id=alice.id))

    listed = notifications.list_notifications(test_session, user_id=alice.id)
    assert [n.id for n in listed] == [n.id for n in reversed(created)]

    limited = notifications.list_notifications(test_session, user_id=alice.id, limit=2)
    assert [n.title for n in limited] == ["n2", "n1"]


def test_mark_read_and_counts(test_session: Session, users):
    alice, bob, _ = users
    first = notify(test_session, alice, MessageData(sender_id=bob.id))
    notify(test_session, alice, MessageData(sender_id=bob.id))
    assert notifications.unread_count(test_session, user_id=alice.id) == 2

    notifications.mark_read(test_session, notification_id=first.id, user_id=alice.id)
    assert notifications.unread_count(test_session, user_id=alice.id) == 1

    assert notifications.mark_all_read(test_session, user_id=alice.id) == 1
    assert notifications.unread_count(test_session, user_id=alice.id) == 0
    assert notifications.mark_all_read(test_session, user_id=alice.id) == 0


def test_other_users_notifications_are_not_found(test_session: Session, users):
    alice, bob, _ = users
    notification = notify(test_session, alice, MessageData(sender_id=bob.id))

    with pytest.raises(NotFound):
        notifications.mark_read(
            test_session, notification_id=notification.id, user_id=bob.id
        )
    with pytest.raises(NotFound):
        notifications.delete_notification(
            test_session, notification_id=notification.id, user_id=bob.id
        )
    assert test_session.get(Notification, notification.id).read is False


def test_delete(test_session: Session, users):
    alice, bob, _ = users
    kept = notify(test_session, bob, MessageData(sender_id=alice.id))
    first = notify(test_session, alice, MessageData(sender_id=bob.id))
    notify(test_session, alice, MessageData(sender_id=bob.id))

    notifications.delete_notification(
        test_session, notification_id=first.id, user_id=alice.id
    )
    assert len(notifications.list_notifications(test_session, user_id=alice.id)) == 1

    assert notifications.delete_all(test_session, user_id=alice.id) == 1
    assert notifications.list_notifications(test_session, user_id=alice.id) == []
    assert test_session.get(Notification, kept.id) is not None


def test_mark_friend_request_read_matches_payload(test_session: Session, users):
    alice, bob, carol = users
    notify(test_session, alice, FriendRequestData(friendship_id=1, requester_id=bob.id))
    notify(test_session, alice, FriendRequestData(friendship_id=2, requester_id=carol.id))

    marked = notifications.mark_friend_request_read(
        test_session, user_id=alice.id, friendship_id=2
    )
    test_session.commit()
    assert marked == 1

    unread = [
        n.payload.friendship_id
        for n in notifications.list_notifications(test_session, user_id=alice.id)
        if not n.read
    ]
    assert unread == [1]
