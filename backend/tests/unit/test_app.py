"""Unit tests for main application endpoints."""


class TestAppEndpoints:
    """Test main application endpoints."""

    def test_index_endpoint(self, client):
        """Test the index endpoint returns version and status."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "version" in data
        assert data["status"] == "ok"

    def test_get_current_user_info_unauthenticated(self, client):
        response = client.get("/user/me")
        assert response.status_code == 200
        assert response.json()["user"] is None

    def test_get_current_user_info_authenticated(self, client, users, login_as):
        alice, _, _ = users
        login_as(alice)

        response = client.get("/user/me")
        assert response.status_code == 200
        data = response.json()["user"]
        assert data["id"] == alice.id
        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert "password_hash" not in data

    def test_protected_routes_require_authentication(self, client):
        for path in (
            "/friendship/list",
            "/presence/friends",
            "/messages/conversations",
            "/notifications",
            "/stats/me",
        ):
            response = client.get(path)
            assert response.status_code == 401, path
            assert response.json() == {"detail": "Not authenticated"}


def test_profile_cache(test_session, users):
    from services.cache import CacheService

    alice, bob, _ = users
    cache = CacheService()
    profiles = cache.get_users([alice.id, bob.id, "ghost"], test_session)

    assert profiles[alice.id]["username"] == "alice"
    assert profiles[bob.id]["first_name"] == "Bob"
    assert profiles["ghost"] is None
    assert alice.id in cache.user_cache

    cache.forget_user(alice.id)
    assert alice.id not in cache.user_cache
