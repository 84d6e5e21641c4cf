"""Admin password setup, login and logout."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from notepress.auth import end_session, is_authenticated, start_session
from notepress.config import settings
from notepress.content import parse_body, render_response
from notepress.database import get_db_session
from notepress.models import (
    AuthStatusResponse,
    ErrorResponse,
    PasswordRequest,
    SuccessResponse,
)
from notepress.rate_limit import limiter
from notepress.services.admin import check_password, has_password, set_initial_password

from .validation import validate_body

router = APIRouter()
logger = logging.getLogger("notepress.api.auth")


@router.get("/api/auth/check", response_model=AuthStatusResponse)
async def auth_check(request: Request, session=Depends(get_db_session)):
    """Whether a password exists yet, and whether this caller is logged in."""
    return render_response(
        request,
        AuthStatusResponse(
            has_password=await has_password(session),
            is_authenticated=is_authenticated(request),
        ),
    )


@router.post(
    "/api/auth/setup",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_login)
async def auth_setup(request: Request, session=Depends(get_db_session)):
    """Set the admin password. Only works once; logs the caller in."""
    req = validate_body(PasswordRequest, await parse_body(request))
    await set_initial_password(session, req.password)
    return start_session(render_response(request, SuccessResponse()), request)


@router.post(
    "/api/auth/login",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_login)
async def auth_login(request: Request, session=Depends(get_db_session)):
    req = validate_body(PasswordRequest, await parse_body(request))
    await check_password(session, req.password)
    logger.info("Admin logged in")
    return start_session(render_response(request, SuccessResponse()), request)


@router.post("/api/auth/logout", response_model=SuccessResponse)
async def auth_logout(request: Request):
    return end_session(render_response(request, SuccessResponse()))
