from datetime import timedelta

from conftest import register
from eunoia.models import db, User, UserSession, utcnow
from eunoia.store import UserStore


def login(client, username="alice", password="secret1"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_register_login_flow(app):
    client = app.test_client()
    resp = register(client, "alice", "secret1")
    assert resp.status_code == 201
    assert resp.get_json()["username"] == "alice"
    assert set(resp.get_json()) == {"id", "username"}

    other = app.test_client()
    assert login(other, "alice", "wrong").status_code == 401

    resp = login(other, "alice", "secret1")
    assert resp.status_code == 200
    cookie = resp.headers["Set-Cookie"]
    assert cookie.startswith(app.config["SESSION_COOKIE_NAME"] + "=")
    assert "HttpOnly" in cookie

    anonymous = app.test_client()
    assert anonymous.get("/api/entries").status_code == 401


def test_register_signs_in(client):
    register(client)
    resp = client.get("/api/auth/me")
    assert resp.status_code == 200
    assert resp.get_json()["username"] == "alice"


def test_register_duplicate_username(client, app):
    register(client)
    resp = register(app.test_client(), "alice", "another1")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Username already taken"


def test_register_race_on_username(client, app, monkeypatch):
    register(client)
    # both requests passed the lookup before either inserted
    monkeypatch.setattr(UserStore, "get_by_username", lambda self, username: None)
    resp = register(app.test_client(), "alice", "another1")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Username already taken"
    assert body["details"] == [{"field": "username", "message": "Username already taken"}]
    with app.app_context():
        assert User.query.count() == 1


def test_register_weak_password(client):
    resp = register(client, "alice", "short")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["details"][0]["field"] == "password"


def test_register_missing_fields(client):
    resp = client.post("/api/auth/register", json={"username": "alice"})
    assert resp.status_code == 400
    assert resp.get_json()["details"] == [{"field": "password", "message": "Field required"}]


def test_register_rejects_non_json(client):
    resp = client.post("/api/auth/register", data="username=alice", content_type="text/plain")
    assert resp.status_code == 400


def test_login_unknown_user(client):
    resp = login(client, "nobody", "secret1")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid username or password"}


def test_usernames_are_case_sensitive(client, app):
    register(client, "Alice", "secret1")
    assert login(app.test_client(), "alice", "secret1").status_code == 401


def test_me_requires_session(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Not authenticated"}


def test_logout_ends_session(alice):
    resp = alice.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Logged out"}
    assert alice.get("/api/auth/me").status_code == 401


def test_logout_destroys_server_side_session(app, alice):
    # a copy of the old cookie must not work once the server forgot the token
    cookie = alice.get_cookie(app.config["SESSION_COOKIE_NAME"])
    alice.post("/api/auth/logout")
    replay = app.test_client()
    replay.set_cookie(cookie.key, cookie.value)
    assert replay.get("/api/auth/me").status_code == 401


def test_logout_when_anonymous(client):
    assert client.post("/api/auth/logout").status_code == 200


def test_expired_session_is_rejected(app, alice):
    with app.app_context():
        for row in UserSession.query.all():
            row.expires_at = utcnow() - timedelta(seconds=1)
        db.session.commit()
    assert alice.get("/api/auth/me").status_code == 401
