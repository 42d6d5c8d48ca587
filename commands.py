# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install the app with test dependencies (includes httpx for TestClient)
# python -m pip install -e ".[test]"

# Run the full test suite
# python -m pytest

# Run focused test files
# python -m pytest tests/test_validation.py
# python -m pytest tests/test_security_headers.py
# python -m pytest tests/test_access_gate.py
# python -m pytest tests/test_session_tokens.py tests/test_password_hashing.py
# python -m pytest tests/test_password_reset.py
# python -m pytest tests/test_accounts.py tests/test_auth_flow.py

# Start the API locally (with env vars loaded)
# python -m dotenv run -- python -m uvicorn app.api:app --reload
# or: python main.py

# Inspect / clean up the user file (USERS_DB_PATH, default data/users.json)
# python -m scripts.users_admin list
# python -m scripts.users_admin delete you@example.com
