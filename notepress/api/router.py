"""Mount all API and page routes."""

from fastapi import APIRouter

from notepress.api.auth import router as auth_router
from notepress.api.pages import router as pages_router
from notepress.api.posts import router as posts_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(posts_router, tags=["posts"])
api_router.include_router(pages_router, tags=["pages"])
