"""End-to-end flows through the HTTP API."""

import datetime

from fastapi.testclient import TestClient

from models.presence import Presence
from services.presence import list_online_friends


def test_friends_then_messages(client: TestClient, users, login_as):
    alice, bob, carol = users

    login_as(alice)
    friendship_id = client.post(f"/friendship/request/{bob.username}").json()[
        "friendship"
    ]["id"]
    assert client.get(f"/friendship/status/{bob.username}").json() == {
        "status": "pending",
        "is_requester": True,
        "friendship_id": friendship_id,
    }

    login_as(bob)
    assert client.get(f"/friendship/status/{alice.username}").json()[
        "is_requester"
    ] is False
    client.post(f"/friendship/accept/{friendship_id}")
    assert client.get(f"/friendship/status/{alice.username}").json()["status"] == "accepted"

    login_as(alice)
    assert client.get(f"/friendship/status/{bob.username}").json()["status"] == "accepted"
    r = client.post(f"/messages/{bob.id}", json={"content": "Padel tomorrow?"})
    assert r.status_code == 200

    login_as(carol)
    client.post(f"/messages/{bob.id}", json={"content": "Hi, need a goalkeeper?"})

    login_as(bob)
    conversations = client.get("/messages/conversations").json()["conversations"]
    by_partner = {c["partner_id"]: c for c in conversations}
    assert by_partner[alice.id]["unread_count"] == 1
    assert by_partner[alice.id]["is_friend"] is True
    assert by_partner[carol.id]["is_friend"] is False
    assert client.get("/messages/unread").json() == {"unread": 2}

    # bob opens the conversation with alice
    messages = client.get(f"/messages/{alice.id}").json()["messages"]
    assert [m["content"] for m in messages] == ["Padel tomorrow?"]
    assert client.post(f"/messages/{alice.id}/read").json() == {"marked": 1}

    conversations = client.get("/messages/conversations").json()["conversations"]
    by_partner = {c["partner_id"]: c for c in conversations}
    assert by_partner[alice.id]["unread_count"] == 0
    assert by_partner[carol.id]["unread_count"] == 1

    inbox = client.get("/messages/inbox").json()
    assert inbox["friends"]["unread"] == 0
    assert inbox["requests"]["unread"] == 1

    badges = client.get("/messages/badges").json()
    assert badges["messages"] == 1
    # the friend request notification went read on accept, alice's message
    # notification on reading the conversation, carol's is still there
    assert badges["notifications"] == 1


def test_presence_goes_stale_without_heartbeats(
    client: TestClient, test_session, users, login_as
):
    alice, bob, _ = users

    login_as(alice)
    friendship_id = client.post(f"/friendship/request/{bob.username}").json()[
        "friendship"
    ]["id"]
    login_as(bob)
    client.post(f"/friendship/accept/{friendship_id}")
    r = client.post("/presence/heartbeat", json={"status": "online"})
    assert r.json()["online"] is True

    login_as(alice)
    online = client.get("/presence/friends").json()["online"]
    assert [p["user_id"] for p in online] == [bob.id]
    assert client.get("/presence/count").json() == {"online": 1}

    # six minutes after bob's last heartbeat, without any offline write
    last_seen = test_session.get(Presence, bob.id).last_seen
    later = last_seen + datetime.timedelta(minutes=6)
    assert list_online_friends(test_session, user_id=alice.id, now=later) == []


def test_background_shows_away(client: TestClient, users, login_as):
    alice, bob, _ = users
    login_as(bob)
    client.post("/presence/heartbeat", json={"status": "away"})

    login_as(alice)
    assert client.get(f"/presence/user/{bob.id}").json()["status"] == "away"
    r = client.get("/presence/users", params={"ids": [bob.id, alice.id]})
    assert [p["status"] for p in r.json()["presence"]] == ["away", "offline"]


def test_notifications_flow(client: TestClient, users, login_as):
    alice, bob, _ = users
    login_as(alice)
    client.post(f"/friendship/request/{bob.username}")
    client.post(f"/messages/{bob.id}", json={"content": "hello"})

    login_as(bob)
    notifications = client.get("/notifications").json()["notifications"]
    assert [n["type"] for n in notifications] == ["message", "friend_request"]
    assert notifications[1]["data"]["requester_id"] == alice.id
    assert client.get("/notifications/unread").json() == {"unread": 2}

    first = notifications[0]["id"]
    r = client.post(f"/notifications/{first}/read")
    assert r.json()["notification"]["read"] is True
    assert client.post("/notifications/read").json() == {"marked": 1}

    login_as(alice)
    assert client.post(f"/notifications/{first}/read").status_code == 404

    login_as(bob)
    assert client.delete(f"/notifications/{first}").status_code == 200
    assert client.delete("/notifications").json() == {"deleted": 1}


def test_games_and_leaderboard(client: TestClient, users, login_as):
    alice, bob, _ = users

    login_as(alice)
    r = client.post("/stats/games", json={"sport": "padel", "result": "win"})
    assert r.json()["game"]["rating"] == 2.4
    assert client.post(
        "/stats/games", json={"sport": "padel", "result": "tie"}
    ).status_code == 422

    login_as(bob)
    client.post("/stats/games", json={"sport": "padel", "result": "loss"})
    r = client.get("/stats/leaderboard/padel")
    board = r.json()
    assert [e["user"]["username"] for e in board["leaderboard"]] == ["alice", "bob"]
    assert board["my_rank"] == 2

    r = client.get(f"/stats/{alice.id}/padel")
    assert r.json()["statistics"]["games_won"] == 1
    assert client.get(f"/stats/{alice.id}/football").status_code == 404

    r = client.post(
        "/stats/questionnaire/football",
        json={"answers": {"frequency": "Jednom nedeljno", "enjoyment": "too short"}},
    )
    assert r.status_code == 400


def test_find_a_player_and_open_their_profile(client: TestClient, users, login_as):
    alice, bob, _ = users
    login_as(alice)

    r = client.get("/users/search", params={"q": "BO"})
    assert [u["username"] for u in r.json()["users"]] == ["bob"]
    assert client.get("/users/search", params={"q": "alice"}).json()["users"] == []
    assert client.get("/users/search", params={"q": " "}).status_code == 400

    client.post(f"/friendship/request/{bob.username}")
    r = client.get(f"/users/{bob.id}")
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["username"] == "bob"
    assert "email" not in body["user"]
    assert body["friendship"]["status"] == "pending"
    assert body["presence"]["status"] == "offline"

    assert client.get(f"/users/{alice.id}").json()["friendship"] == {"status": "self"}
    assert client.get("/users/ghost").status_code == 404


def test_another_players_history_and_achievements(client: TestClient, users, login_as):
    alice, bob, _ = users
    login_as(bob)
    client.post("/stats/games", json={"sport": "football", "result": "win", "goals_scored": 2})

    login_as(alice)
    games = client.get(f"/stats/{bob.id}/history").json()["games"]
    assert [(g["sport"], g["goals_scored"]) for g in games] == [("football", 2)]
    assert client.get(f"/stats/{bob.id}/history", params={"sport": "padel"}).json() == {
        "games": []
    }

    achievements = client.get(f"/stats/{bob.id}/achievements").json()["achievements"]
    assert [(a["type"], a["sport"]) for a in achievements] == [("first_game", "football")]
    assert client.get("/stats/me/achievements").json() == {"achievements": []}
    assert client.get("/stats/ghost/history").status_code == 404
