"""Notepress: single-author blog for math and competitive-programming notes."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.responses import Response
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from notepress.api.router import api_router
from notepress.config import settings
from notepress.content import render_response
from notepress.database import close_db, database_url, init_db
from notepress.rate_limit import limiter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("notepress")


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_url = database_url(settings.database_url)
    await init_db(db_url)
    safe_url = re.sub(r"://[^:]+:[^@]+@", "://***:***@", db_url)
    logger.info("Database connected: %s", safe_url)

    yield

    await close_db()
    logger.info("Database closed")


app = FastAPI(
    title="Notepress",
    description="Single-author blog for math and competitive-programming notes",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return render_response(
        request,
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/robots.txt", include_in_schema=False)
async def robots_txt():
    return Response(
        "User-agent: *\nAllow: /\nDisallow: /api/\nDisallow: /login\nDisallow: /setup\n",
        media_type="text/plain",
    )


def main():
    import uvicorn

    uvicorn.run(
        "notepress.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
