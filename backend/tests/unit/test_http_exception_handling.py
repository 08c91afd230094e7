from fastapi import HTTPException
from fastapi.testclient import TestClient

from exceptions import AlreadyExists, NotAuthenticated, RemoteError, ValidationError


def test_app_error_returns_json_and_status(test_app):
    async def conflict():
        raise AlreadyExists("Friendship request already exists")

    test_app.add_api_route("/test/conflict", conflict, methods=["GET"])  # type: ignore[arg-type]

    client = TestClient(test_app)

    resp = client.get("/test/conflict")
    assert resp.status_code == 409
    assert resp.headers.get("content-type", "").startswith("application/json")
    assert resp.json() == {"detail": "Friendship request already exists"}


def test_app_error_default_detail(test_app):
    async def anonymous():
        raise NotAuthenticated()

    test_app.add_api_route("/test/anonymous", anonymous, methods=["GET"])  # type: ignore[arg-type]

    resp = TestClient(test_app).get("/test/anonymous")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Not authenticated"}


def test_error_status_codes():
    assert ValidationError.status_code == 400
    error = RemoteError("boom", remote_status=503)
    assert error.status_code == 502
    assert error.remote_status == 503
    assert str(error) == "boom"


def test_http_exception_still_passes_through(test_app):
    async def raise_429():
        raise HTTPException(
            status_code=429,
            detail="Too many requests",
            headers={"Retry-After": "7"},
        )

    test_app.add_api_route("/test/raise429", raise_429, methods=["GET"])  # type: ignore[arg-type]

    resp = TestClient(test_app).get("/test/raise429")
    assert resp.status_code == 429
    assert resp.json() == {"detail": "Too many requests"}
    assert resp.headers.get("Retry-After") == "7"


def test_unexpected_errors_do_not_leak(test_app):
    async def explode():
        raise RuntimeError("database password is hunter2")

    test_app.add_api_route("/test/explode", explode, methods=["GET"])  # type: ignore[arg-type]

    resp = TestClient(test_app, raise_server_exceptions=False).get("/test/explode")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "An unexpected error occurred."}
