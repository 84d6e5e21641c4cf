"""Post storage backed by SQLModel."""

from __future__ import annotations

import json
import logging

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from notepress.db_models import Post
from notepress.ids import now_ms, post_id
from notepress.models import PostCreateRequest, PostUpdateRequest

logger = logging.getLogger("notepress.services.posts")


def _tags(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return []
    return [str(t) for t in tags] if isinstance(tags, list) else []


def post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "description": post.description,
        "content": post.content,
        "category": post.category,
        "tags": _tags(post.tags),
        "difficulty": post.difficulty,
        "timestamp": post.timestamp,
        "updated": post.updated,
    }


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def _get_or_404(session: AsyncSession, pid: str) -> Post:
    post = await session.get(Post, pid)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


async def create_post(session: AsyncSession, req: PostCreateRequest) -> dict:
    """Insert a post. Id and timestamps are filled in when the client omits them."""
    pid = req.id or post_id()
    if await session.get(Post, pid):
        raise HTTPException(status_code=409, detail="Post already exists")
    now = now_ms()
    post = Post(
        id=pid,
        title=req.title,
        description=req.description,
        content=req.content,
        category=req.category,
        tags=json.dumps(req.tags),
        difficulty=req.difficulty,
        timestamp=req.timestamp if req.timestamp is not None else now,
        updated=req.updated if req.updated is not None else now,
    )
    session.add(post)
    await session.commit()
    logger.info("Created post %s", pid)
    return post_to_dict(post)


async def get_post(session: AsyncSession, pid: str) -> dict:
    return post_to_dict(await _get_or_404(session, pid))


async def list_posts(
    session: AsyncSession,
    *,
    query: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> list[dict]:
    """Posts, newest first, optionally filtered.

    ``query`` matches title, description or content case-insensitively;
    ``tag`` must be one of the post's tags exactly.
    """
    stmt = select(Post)
    if query:
        pattern = _like_pattern(query)
        stmt = stmt.where(
            or_(
                col(Post.title).ilike(pattern, escape="\\"),
                col(Post.description).ilike(pattern, escape="\\"),
                col(Post.content).ilike(pattern, escape="\\"),
            )
        )
    if category:
        stmt = stmt.where(Post.category == category)
    if tag:
        stmt = stmt.where(col(Post.tags).contains(json.dumps(tag), autoescape=True))
    stmt = stmt.order_by(col(Post.timestamp).desc(), col(Post.id)).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return [post_to_dict(p) for p in result.scalars().all()]


async def update_post(session: AsyncSession, pid: str, req: PostUpdateRequest) -> dict:
    """Replace a post's editable fields. Creation timestamp is kept."""
    post = await _get_or_404(session, pid)
    post.title = req.title
    post.description = req.description
    post.content = req.content
    post.category = req.category
    post.tags = json.dumps(req.tags)
    post.difficulty = req.difficulty
    post.updated = req.updated if req.updated is not None else now_ms()
    session.add(post)
    await session.commit()
    logger.info("Updated post %s", pid)
    return post_to_dict(post)


async def delete_post(session: AsyncSession, pid: str) -> None:
    post = await _get_or_404(session, pid)
    await session.delete(post)
    await session.commit()
    logger.info("Deleted post %s", pid)


async def all_tags(session: AsyncSession) -> list[str]:
    """Distinct tags in first-seen order, newest post first."""
    result = await session.execute(select(Post.tags).order_by(col(Post.timestamp).desc()))
    seen: dict[str, None] = {}
    for raw in result.scalars().all():
        for tag in _tags(raw):
            seen.setdefault(tag, None)
    return list(seen)
