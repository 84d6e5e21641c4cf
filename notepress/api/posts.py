"""Post CRUD routes, tag listing and content rendering."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from notepress.auth import AdminAuth
from notepress.config import settings
from notepress.content import parse_body, render_response
from notepress.database import get_db_session
from notepress.md_render import render
from notepress.models import (
    ErrorResponse,
    PostCreateRequest,
    PostHTMLResponse,
    PostResponse,
    PostUpdateRequest,
    RenderRequest,
    RenderResponse,
    SuccessResponse,
    TagsResponse,
)
from notepress.rate_limit import limiter
from notepress.services.posts import (
    all_tags,
    create_post,
    delete_post,
    get_post,
    list_posts,
    update_post,
)

from .validation import validate_body

router = APIRouter()


@router.get("/api/posts", response_model=list[PostResponse])
@limiter.limit(settings.rate_limit_read)
async def posts_index(
    request: Request,
    session=Depends(get_db_session),
    q: str | None = Query(None, max_length=200, description="Search title, description, content"),
    category: str | None = Query(None, max_length=50),
    tag: str | None = Query(None, max_length=50),
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.page_size, ge=1, le=500),
):
    """All posts, newest first."""
    posts = await list_posts(
        session, query=q, category=category, tag=tag, offset=offset, limit=limit
    )
    # Lists are always JSON.
    return posts


@router.get("/api/tags", response_model=TagsResponse)
async def tags_index(request: Request, session=Depends(get_db_session)):
    return render_response(request, {"tags": await all_tags(session)})


@router.get(
    "/api/posts/{post_id}",
    response_model=PostResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_read)
async def posts_show(request: Request, post_id: str, session=Depends(get_db_session)):
    """One post. Send ``Accept: text/markdown`` for frontmatter + raw content."""
    return render_response(request, await get_post(session, post_id))


@router.get(
    "/api/posts/{post_id}/html",
    response_model=PostHTMLResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_read)
async def posts_show_html(request: Request, post_id: str, session=Depends(get_db_session)):
    post = await get_post(session, post_id)
    return render_response(request, {"id": post["id"], "html": render(post["content"])})


@router.post(
    "/api/posts",
    status_code=201,
    response_model=PostResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def posts_create(request: Request, _=AdminAuth, session=Depends(get_db_session)):
    """Create a post from JSON or markdown-with-frontmatter."""
    req = validate_body(PostCreateRequest, await parse_body(request))
    post = await create_post(session, req)
    return render_response(request, {"success": True, **post}, status_code=201)


@router.put(
    "/api/posts/{post_id}",
    response_model=PostResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def posts_update(
    request: Request, post_id: str, _=AdminAuth, session=Depends(get_db_session)
):
    req = validate_body(PostUpdateRequest, await parse_body(request))
    post = await update_post(session, post_id, req)
    return render_response(request, {"success": True, **post})


@router.delete(
    "/api/posts/{post_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def posts_delete(
    request: Request, post_id: str, _=AdminAuth, session=Depends(get_db_session)
):
    await delete_post(session, post_id)
    return render_response(request, SuccessResponse())


@router.post("/api/render", response_model=RenderResponse)
@limiter.limit(settings.rate_limit_read)
async def render_preview(request: Request):
    """Render unsaved content, for the editor preview."""
    req = validate_body(RenderRequest, await parse_body(request))
    return render_response(request, {"html": render(req.content)})
