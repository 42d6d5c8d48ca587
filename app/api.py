from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from app.access_gate import ALLOW, decide
from app.auth_utils import SESSION_COOKIE_NAME, clear_session_cookie
from app.routes import auth, pages
from core.database import ensure_database

# Ensure .env values are loaded even if uvicorn is launched without `dotenv run`.
# Use override=True so editing `.env` (and restarting uvicorn) reliably takes effect even if
# older values exist in the environment from a previous shell/session.
load_dotenv(override=True)

# Paths the access gate never looks at
GATE_EXEMPT_PREFIXES = ("/api/", "/static/", "/favicon.ico")


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_database()
    yield


app = FastAPI(lifespan=lifespan)


app.include_router(auth.router)
app.include_router(pages.router)


@app.middleware("http")
async def access_gate(request: Request, call_next):
    path = request.url.path
    if path.startswith(GATE_EXEMPT_PREFIXES):
        return await call_next(request)

    decision = decide(
        path,
        request.cookies.get(SESSION_COOKIE_NAME),
        request.query_params.get("returnUrl"),
    )
    if decision.action == ALLOW:
        return await call_next(request)

    response = RedirectResponse(url=decision.location, status_code=303)
    if decision.clear_token:
        clear_session_cookie(response)
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault(
        "Content-Security-Policy",
        "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'; script-src 'self' 'unsafe-inline'; "
        "font-src 'self' data:; connect-src 'self';",
    )
    return response
