"""Authentication: bcrypt password hashing and HMAC-signed session cookies."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import time

import bcrypt
from fastapi import Depends, HTTPException, Request, Response

from notepress.config import settings

logger = logging.getLogger("notepress.auth")

COOKIE_NAME = "np_session"

_fallback_secret: str | None = None


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def session_secret() -> bytes:
    """Signing key for cookies and CSRF tokens.

    Without NOTEPRESS_SESSION_SECRET a random key is generated once per
    process, so sessions do not survive a restart.
    """
    global _fallback_secret
    if settings.session_secret:
        return settings.session_secret.encode()
    if _fallback_secret is None:
        logger.warning("NOTEPRESS_SESSION_SECRET not set; using a random per-process secret")
        _fallback_secret = secrets.token_hex(32)
    return _fallback_secret.encode()


def _sign(payload: str) -> str:
    return hmac.new(session_secret(), payload.encode(), hashlib.sha256).hexdigest()[:32]


def _is_secure_request(request: Request | None) -> bool:
    if request is None:
        return True
    host = request.headers.get("host", "")
    if request.url.scheme == "http" or host.startswith("localhost") or host.startswith("127."):
        return False
    return True


def start_session(resp: Response, request: Request | None = None) -> Response:
    """Set a signed session cookie marking the caller as the admin."""
    ts = str(int(time.time()))
    resp.set_cookie(
        COOKIE_NAME,
        f"{ts}.{_sign(ts)}",
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=_is_secure_request(request),
        samesite="lax",
    )
    return resp


def end_session(resp: Response) -> Response:
    resp.delete_cookie(COOKIE_NAME)
    return resp


def is_authenticated(request: Request) -> bool:
    """Check the session cookie is well formed, correctly signed and unexpired."""
    cookie = request.cookies.get(COOKIE_NAME, "")
    if "." not in cookie:
        return False
    ts_str, sig = cookie.rsplit(".", 1)
    try:
        ts = int(ts_str)
    except ValueError:
        return False
    if time.time() - ts > settings.session_max_age_seconds:
        return False
    return hmac.compare_digest(sig, _sign(ts_str))


async def require_admin(request: Request) -> None:
    if not is_authenticated(request):
        raise HTTPException(status_code=401, detail="Unauthorized")


AdminAuth = Depends(require_admin)


def _csrf_for_hour(hour: int) -> str:
    return _sign(f"csrf-{hour}")


def csrf_token() -> str:
    """CSRF token for HTML forms, rotated hourly."""
    return _csrf_for_hour(int(time.time()) // 3600)


def verify_csrf(token: str) -> bool:
    """Accept the current and the previous hour's token."""
    hour = int(time.time()) // 3600
    return hmac.compare_digest(token, _csrf_for_hour(hour)) or hmac.compare_digest(
        token, _csrf_for_hour(hour - 1)
    )
