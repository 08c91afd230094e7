from fastapi.testclient import TestClient


def test_request_status_and_accept_flow(client: TestClient, users, login_as):
    alice, bob, carol = users

    login_as(alice)
    r = client.get(f"/friendship/status/{bob.username}")
    assert r.status_code == 200
    assert r.json() == {"status": "none"}

    r = client.get(f"/friendship/status/{alice.username}")
    assert r.json() == {"status": "self"}

    r = client.post(f"/friendship/request/{bob.username}")
    assert r.status_code == 200
    friendship = r.json()["friendship"]
    assert friendship["status"] == "pending"
    friendship_id = friendship["id"]

    r = client.get(f"/friendship/status/{bob.username}")
    assert r.json()["is_requester"] is True

    r = client.get("/friendship/sent")
    assert [s["user"]["username"] for s in r.json()["sent"]] == ["bob"]

    # the requester can't accept
    r = client.post(f"/friendship/accept/{friendship_id}")
    assert r.status_code == 403

    # an outsider doesn't even see it
    login_as(carol)
    r = client.post(f"/friendship/accept/{friendship_id}")
    assert r.status_code == 404

    login_as(bob)
    r = client.get(f"/friendship/status/{alice.id}")
    assert r.json()["is_requester"] is False

    r = client.get("/friendship/pending")
    pending = r.json()["pending"]
    assert len(pending) == 1
    assert pending[0]["user"]["id"] == alice.id

    r = client.post(f"/friendship/accept/{friendship_id}")
    assert r.status_code == 200
    assert r.json()["friendship"]["status"] == "accepted"

    r = client.get("/friendship/list")
    assert [f["username"] for f in r.json()["friends"]] == ["alice"]

    r = client.get("/friendship/pending")
    assert r.json()["pending"] == []


def test_duplicate_and_reverse_requests_conflict(client: TestClient, users, login_as):
    alice, bob, _ = users

    login_as(alice)
    assert client.post(f"/friendship/request/{bob.username}").status_code == 200
    r = client.post(f"/friendship/request/{bob.username}")
    assert r.status_code == 409
    assert r.json() == {"detail": "Friendship request already exists"}

    login_as(bob)
    assert client.post(f"/friendship/request/{alice.username}").status_code == 409


def test_request_errors(client: TestClient, users, login_as):
    alice, _, _ = users
    login_as(alice)

    assert client.post("/friendship/request/nobody").status_code == 404
    assert client.post(f"/friendship/request/{alice.username}").status_code == 400
    assert client.post("/friendship/accept/999").status_code == 404


def test_decline_and_remove(client: TestClient, users, login_as):
    alice, bob, carol = users

    login_as(alice)
    declined_id = client.post(f"/friendship/request/{bob.username}").json()[
        "friendship"
    ]["id"]
    accepted_id = client.post(f"/friendship/request/{carol.username}").json()[
        "friendship"
    ]["id"]

    login_as(bob)
    r = client.post(f"/friendship/decline/{declined_id}")
    assert r.json()["friendship"]["status"] == "declined"
    # same answer twice is fine, changing it is not
    assert client.post(f"/friendship/decline/{declined_id}").status_code == 200
    assert client.post(f"/friendship/accept/{declined_id}").status_code == 409

    login_as(carol)
    client.post(f"/friendship/accept/{accepted_id}")

    login_as(alice)
    assert client.delete(f"/friendship/{declined_id}").status_code == 409
    r = client.delete(f"/friendship/{accepted_id}")
    assert r.status_code == 200
    assert client.get("/friendship/list").json()["friends"] == []
    assert client.get(f"/friendship/status/{carol.username}").json() == {
        "status": "none"
    }
