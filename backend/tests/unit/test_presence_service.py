import datetime

import pytest
from sqlmodel import Session

from models.presence import Presence, PresenceStatus
from services.friendship import accept_request, send_request
from services.presence import (
    count_online_users,
    effective_status,
    get_presence_for_users,
    get_user_presence,
    is_online,
    list_all_online_users,
    list_online_friends,
    mark_presence,
)

NOW = datetime.datetime(2026, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)


def minutes(n: float) -> datetime.timedelta:
    return datetime.timedelta(minutes=n)


@pytest.fixture
def friends(test_session: Session, users):
    alice, bob, carol = users
    for other in (bob, carol):
        fr = send_request(test_session, requester=alice, addressee_id=other.id)
        accept_request(test_session, friendship_id=fr.id, user=other)
    return alice, bob, carol


@pytest.mark.parametrize(
    "status, age, expected",
    [
        (PresenceStatus.online, minutes(0), True),
        (PresenceStatus.online, minutes(4.9), True),
        (PresenceStatus.online, minutes(5), False),
        (PresenceStatus.online, minutes(6), False),
        (PresenceStatus.away, minutes(1), False),
        (PresenceStatus.offline, minutes(0), False),
    ],
)
def test_is_online(status, age, expected):
    presence = Presence(user_id="u", status=status, last_seen=NOW - age)
    assert is_online(presence, NOW) is expected


def test_stale_online_reads_as_offline():
    presence = Presence(user_id="u", status=PresenceStatus.online, last_seen=NOW - minutes(6))
    assert effective_status(presence, NOW) == PresenceStatus.offline
    assert effective_status(None, NOW) == PresenceStatus.offline

    away = Presence(user_id="u", status=PresenceStatus.away, last_seen=NOW - minutes(1))
    assert effective_status(away, NOW) == PresenceStatus.away


def test_naive_last_seen_is_taken_as_utc():
    presence = Presence(
        user_id="u",
        status=PresenceStatus.online,
        last_seen=(NOW - minutes(1)).replace(tzinfo=None),
    )
    assert is_online(presence, NOW)


def test_mark_presence_upserts(test_session: Session, users):
    alice, _, _ = users
    mark_presence(test_session, user_id=alice.id, status=PresenceStatus.online, now=NOW)
    mark_presence(
        test_session,
        user_id=alice.id,
        status=PresenceStatus.away,
        now=NOW + minutes(1),
    )

    row = test_session.get(Presence, alice.id)
    assert row.status == PresenceStatus.away
    assert row.last_seen == NOW + minutes(1)


def test_online_friends_respects_freshness(test_session: Session, friends):
    alice, bob, carol = friends
    mark_presence(test_session, user_id=bob.id, status=PresenceStatus.online, now=NOW)
    mark_presence(
        test_session,
        user_id=carol.id,
        status=PresenceStatus.online,
        now=NOW - minutes(6),
    )

    online = list_online_friends(test_session, user_id=alice.id, now=NOW)
    assert [p.user_id for p in online] == [bob.id]

    # six minutes later nobody sent a heartbeat
    assert list_online_friends(test_session, user_id=alice.id, now=NOW + minutes(6)) == []


def test_online_friends_only_lists_friends(test_session: Session, users, make_user):
    alice, bob, _ = users
    stranger = make_user("stranger")
    mark_presence(test_session, user_id=stranger.id, status=PresenceStatus.online, now=NOW)

    assert list_online_friends(test_session, user_id=alice.id, now=NOW) == []
    assert [p.user_id for p in list_all_online_users(test_session, now=NOW)] == [
        stranger.id
    ]


def test_online_friends_without_friends_skips_query(test_session: Session, users, mocker):
    alice, _, _ = users
    spy = mocker.spy(test_session, "exec")
    assert list_online_friends(test_session, user_id=alice.id, now=NOW) == []
    # only the friend lookup ran
    assert spy.call_count == 1


def test_count_online_users(test_session: Session, users):
    alice, bob, carol = users
    mark_presence(test_session, user_id=alice.id, status=PresenceStatus.online, now=NOW)
    mark_presence(test_session, user_id=bob.id, status=PresenceStatus.away, now=NOW)
    mark_presence(
        test_session,
        user_id=carol.id,
        status=PresenceStatus.online,
        now=NOW - minutes(10),
    )
    assert count_online_users(test_session, now=NOW) == 1


def test_presence_readers_apply_the_window(test_session: Session, users):
    alice, bob, carol = users
    mark_presence(
        test_session,
        user_id=alice.id,
        status=PresenceStatus.online,
        now=NOW - minutes(6),
    )
    mark_presence(test_session, user_id=bob.id, status=PresenceStatus.online, now=NOW)

    stale = get_user_presence(test_session, user_id=alice.id, now=NOW)
    assert stale["status"] == "offline"
    assert stale["online"] is False
    assert stale["last_seen"] == (NOW - minutes(6)).isoformat()

    presences = get_presence_for_users(
        test_session, user_ids=[alice.id, bob.id, carol.id], now=NOW
    )
    assert [(p["user_id"], p["status"]) for p in presences] == [
        (alice.id, "offline"),
        (bob.id, "online"),
        (carol.id, "offline"),
    ]
    assert presences[2]["last_seen"] is None
