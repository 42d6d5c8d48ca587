from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

import app.api as api_module
from app.auth_utils import SESSION_COOKIE_NAME
from app.routes import auth
from core.db.base import utc_now
from core.db.users import user_store
from core.db.users.sessions import issue_session_token


@pytest.fixture
def client():
    return TestClient(api_module.app)


def _register(client, email="a@b.com", password="Passw0rd!"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "confirmPassword": password},
    )


def _login(client, email="a@b.com", password="Passw0rd!"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_register_created_then_conflict(client):
    resp = _register(client, "Test@X.com")
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "test@x.com"
    assert set(body["user"]) == {"id", "email", "createdAt"}
    assert SESSION_COOKIE_NAME not in resp.cookies

    dup = _register(client, "test@x.com ")
    assert dup.status_code == 409
    assert dup.json()["error"] == "DUPLICATE_EMAIL"


def test_register_validation_errors(client):
    resp = client.post("/api/auth/register", json={"email": "a@b.com"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "MISSING_FIELDS"

    resp = client.post(
        "/api/auth/register",
        json={"email": "a@b.com", "password": "Passw0rd!", "confirmPassword": "nope-nope"},
    )
    body = resp.json()
    assert resp.status_code == 400
    assert body["error"] == "PASSWORD_MISMATCH"
    assert body["statusCode"] == 400
    assert body["timestamp"]


def test_login_sets_http_only_cookie(client):
    _register(client)
    resp = _login(client, "A@B.com")
    assert resp.status_code == 200
    assert set(resp.json()["user"]) == {"id", "email", "lastLoginAt"}

    set_cookie = resp.headers["set-cookie"]
    assert f"{SESSION_COOKIE_NAME}=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert f"Max-Age={7 * 24 * 60 * 60}" in set_cookie


def test_login_failures_share_one_response(client):
    _register(client)
    wrong_pw = _login(client, password="WrongPassw0rd!")
    unknown = _login(client, email="nobody@b.com")
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json()["message"] == unknown.json()["message"]
    assert wrong_pw.json()["error"] == unknown.json()["error"] == "INVALID_CREDENTIALS"


def test_me_and_logout(client):
    assert client.get("/api/auth/me").json()["error"] == "NO_TOKEN"

    _register(client)
    _login(client)
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "a@b.com"

    out = client.post("/api/auth/logout")
    assert out.status_code == 200
    assert out.json() == {"message": "Successfully logged out"}
    assert "Max-Age=0" in out.headers["set-cookie"]


def test_me_with_bad_or_orphaned_token(client):
    client.cookies.set(SESSION_COOKIE_NAME, "garbage")
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["error"] == "INVALID_TOKEN"

    client.cookies.set(SESSION_COOKIE_NAME, issue_session_token("gone", "gone@b.com"))
    resp = client.get("/api/auth/me")
    assert resp.status_code == 404
    assert resp.json()["error"] == "USER_NOT_FOUND"


def test_forgot_password_identical_for_known_and_unknown(client, monkeypatch):
    sent = []
    monkeypatch.setattr(auth, "send_reset_email", lambda email, link: sent.append((email, link)))
    _register(client)

    known = client.post("/api/auth/forgot-password", json={"email": "a@b.com"})
    unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@b.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.content == unknown.content
    assert len(sent) == 1
    token = user_store.get_user_by_email("a@b.com")["reset_token"]
    assert sent[0] == ("a@b.com", f"http://testserver/reset-password?token={token}")


def test_forgot_password_rejects_bad_email(client):
    resp = client.post("/api/auth/forgot-password", json={"email": "nope"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "INVALID_EMAIL"


def test_full_reset_flow_over_http(client, monkeypatch):
    sent = []
    monkeypatch.setattr(auth, "send_reset_email", lambda email, link: sent.append(link))
    _register(client)
    client.post("/api/auth/forgot-password", json={"email": "a@b.com"})
    token = sent[0].split("token=", 1)[1]

    weak = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "short"})
    assert weak.status_code == 400
    assert weak.json()["error"] == "INVALID_PASSWORD"

    mismatch = client.post(
        "/api/auth/reset-password",
        json={"token": token, "newPassword": "NewPassw0rd!", "confirmPassword": "NewPassw0rd?"},
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["error"] == "PASSWORD_MISMATCH"

    ok = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "NewPassw0rd!"})
    assert ok.status_code == 200
    assert ok.json() == {"message": "Password has been successfully reset"}

    reused = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "NewPassw0rd!"})
    assert reused.status_code == 400
    assert reused.json()["error"] == "INVALID_OR_EXPIRED_TOKEN"

    assert _login(client).status_code == 401
    assert _login(client, password="NewPassw0rd!").status_code == 200


def test_gate_redirects_anonymous_visitor(client):
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?returnUrl=%2F"


def test_gate_clears_expired_cookie(client):
    stale = issue_session_token("user-1", "a@b.com", now=utc_now() - timedelta(days=8))
    client.cookies.set(SESSION_COOKIE_NAME, stale)
    resp = client.get("/demo-auth", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?returnUrl=%2Fdemo-auth"
    assert "Max-Age=0" in resp.headers["set-cookie"]


def test_gate_with_session(client):
    _register(client)
    _login(client)

    assert client.get("/demo-auth").status_code == 200

    away = client.get("/login", follow_redirects=False)
    assert away.status_code == 303
    assert away.headers["location"] == "/dashboard"

    back = client.get("/login?returnUrl=/demo-auth", follow_redirects=False)
    assert back.headers["location"] == "/demo-auth"


def test_register_page_open_without_session(client):
    resp = client.get("/register", follow_redirects=False)
    assert resp.status_code == 200
    assert b"confirmPassword" in resp.content


def test_login_rate_limit(client, monkeypatch):
    calls = {"count": 0}

    def fake_allow_request_with_remaining(key, limit=5, window_seconds=60):
        calls["count"] += 1
        allowed = calls["count"] < 2
        return allowed, (1 if allowed else 0)

    monkeypatch.setattr(auth, "allow_request_with_remaining", fake_allow_request_with_remaining)
    _login(client)
    resp = _login(client)
    assert resp.status_code == 429
    assert resp.json()["error"] == "RATE_LIMITED"
