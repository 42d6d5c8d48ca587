import pytest

from app import security


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Fresh user file per test, fast bcrypt, fixed signing key, no leaked rate limits."""
    db_path = tmp_path / "data" / "users.json"
    monkeypatch.setenv("USERS_DB_PATH", str(db_path))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    for name in ("PROTECTED_PATHS", "DEFAULT_LANDING_PATH", "COOKIE_SECURE", "PUBLIC_BASE_URL", "EMAIL_USER", "EMAIL_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    security.reset_rate_limits()
    yield db_path
    security.reset_rate_limits()


@pytest.fixture
def db_path(_isolated_env):
    return _isolated_env
