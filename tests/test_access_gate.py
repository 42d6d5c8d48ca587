from datetime import timedelta

import pytest

from app import access_gate as gate
from core.db.base import utc_now
from core.db.users.sessions import issue_session_token


@pytest.fixture
def valid_token():
    return issue_session_token("user-1", "a@b.com")


@pytest.fixture
def expired_token():
    return issue_session_token("user-1", "a@b.com", now=utc_now() - timedelta(days=8))


@pytest.mark.parametrize("token", [None, "", "garbage"])
def test_root_requires_login(token):
    decision = gate.decide("/", token)
    assert decision.action == gate.REDIRECT_TO_LOGIN
    assert decision.location == "/login?returnUrl=%2F"


def test_protected_path_return_url_is_encoded():
    decision = gate.decide("/demo-auth/board 1")
    assert decision.location == "/login?returnUrl=%2Fdemo-auth%2Fboard%201"


def test_expired_token_on_protected_path_is_cleared(expired_token):
    decision = gate.decide("/dashboard", expired_token)
    assert decision.action == gate.REDIRECT_TO_LOGIN
    assert decision.location == "/login?returnUrl=%2Fdashboard"
    assert decision.clear_token is True


def test_missing_token_does_not_ask_for_clear():
    assert gate.decide("/dashboard").clear_token is False


def test_valid_token_allows_protected(valid_token):
    assert gate.decide("/", valid_token).action == gate.ALLOW
    assert gate.decide("/profile/settings", valid_token).action == gate.ALLOW


def test_login_with_valid_token_goes_to_landing(valid_token):
    decision = gate.decide("/login", valid_token)
    assert decision == gate.Decision(gate.REDIRECT_AWAY, "/dashboard")


def test_login_with_valid_token_honours_return_url(valid_token):
    assert gate.decide("/login", valid_token, "/demo-auth").location == "/demo-auth"


@pytest.mark.parametrize("return_url", ["https://evil.example", "//evil.example", "/\\evil.example", "demo-auth"])
def test_offsite_return_url_falls_back_to_landing(valid_token, return_url):
    assert gate.decide("/register", valid_token, return_url).location == "/dashboard"


def test_landing_path_from_env(monkeypatch, valid_token):
    monkeypatch.setenv("DEFAULT_LANDING_PATH", "/")
    assert gate.decide("/login", valid_token).location == "/"


def test_public_pages_open_without_token():
    for path in ("/register", "/login", "/forgot-password", "/reset-password"):
        assert gate.decide(path).action == gate.ALLOW


def test_public_prefix_beats_protected(monkeypatch, expired_token):
    monkeypatch.setenv("PROTECTED_PATHS", "/reset-password,/dashboard")
    assert gate.decide("/reset-password/confirm", expired_token).action == gate.ALLOW


def test_reset_pages_not_redirected_when_signed_in(valid_token):
    assert gate.decide("/forgot-password", valid_token).action == gate.ALLOW
    assert gate.decide("/login/help", valid_token).action == gate.ALLOW


def test_neutral_routes_always_allowed():
    assert gate.decide("/about").action == gate.ALLOW
    assert gate.decide("/about", "garbage").action == gate.ALLOW


def test_protected_paths_from_env(monkeypatch):
    monkeypatch.setenv("PROTECTED_PATHS", "/boards, /team")
    assert gate.decide("/boards/1").action == gate.REDIRECT_TO_LOGIN
    assert gate.decide("/dashboard").action == gate.ALLOW
    assert gate.decide("/").action == gate.REDIRECT_TO_LOGIN
