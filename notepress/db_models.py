"""SQLModel table definitions for Notepress."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    id: str = Field(primary_key=True)
    title: str
    description: str
    content: str  # raw text; rendered on demand, never stored as HTML
    category: str = Field(index=True)
    tags: str = Field(default="[]")  # JSON-encoded list
    difficulty: str
    timestamp: int = Field(index=True)  # epoch ms, creation
    updated: int  # epoch ms, last edit


class Admin(SQLModel, table=True):
    __tablename__ = "admin"

    id: int | None = Field(default=None, primary_key=True)
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow)
