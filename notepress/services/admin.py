"""Single admin password: setup and verification."""

from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notepress.auth import hash_password, verify_password
from notepress.config import settings
from notepress.db_models import Admin

logger = logging.getLogger("notepress.services.admin")


async def _get_admin(session: AsyncSession) -> Admin | None:
    result = await session.execute(select(Admin).order_by(Admin.id).limit(1))
    return result.scalar_one_or_none()


async def has_password(session: AsyncSession) -> bool:
    return await _get_admin(session) is not None


async def set_initial_password(session: AsyncSession, password: str) -> None:
    """Store the admin password. Only allowed once."""
    if len(password) < settings.min_password_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.min_password_length} characters",
        )
    if await has_password(session):
        raise HTTPException(status_code=400, detail="Password already set")
    session.add(Admin(password_hash=hash_password(password)))
    await session.commit()
    logger.info("Admin password set")


async def check_password(session: AsyncSession, password: str) -> None:
    admin = await _get_admin(session)
    if admin is None:
        raise HTTPException(status_code=400, detail="No password set")
    if not verify_password(password, admin.password_hash):
        logger.info("Failed admin login")
        raise HTTPException(status_code=401, detail="Incorrect password")
