"""Content negotiation: accept JSON or markdown with YAML frontmatter."""

from __future__ import annotations

import json
import re

import frontmatter
import yaml
from fastapi import HTTPException, Request, Response
from pydantic import BaseModel

_YAML = frontmatter.YAMLHandler()
# Opening "---" on the first line, closing "---" on a line of its own.
_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.S | re.M)


async def parse_body(request: Request) -> dict:
    """Parse request body as JSON or markdown with YAML frontmatter.

    In markdown bodies the frontmatter carries the post metadata and the
    text below it becomes ``content``, kept verbatim.
    """
    content_type = request.headers.get("content-type", "")
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Body must be UTF-8")

    if not text.strip():
        return {}

    if "text/markdown" not in content_type and (
        "application/json" in content_type or text.lstrip().startswith("{")
    ):
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="JSON body must be an object")
        return data

    try:
        metadata, body = split_frontmatter(text)
    except yaml.YAMLError:
        raise HTTPException(status_code=400, detail="Invalid frontmatter")
    result = dict(metadata)
    if body.strip():
        result["content"] = body
    return result


def split_frontmatter(text: str) -> tuple[dict, str]:
    """Split ``---`` delimited YAML from the markdown body.

    The body is everything after the closing delimiter line, byte for byte.
    Text without a frontmatter block is all body.
    """
    m = _FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    metadata = _YAML.load(m.group(1)) or {}
    if not isinstance(metadata, dict):
        raise HTTPException(status_code=400, detail="Frontmatter must be a mapping")
    return metadata, text[m.end() :]


def wants_markdown(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "text/markdown" in accept


def render_response(
    request: Request,
    data: dict | BaseModel,
    status_code: int = 200,
    headers: dict | None = None,
) -> Response:
    """Return JSON, or markdown when the client asks for it via Accept."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")

    if not wants_markdown(request):
        return Response(
            content=json.dumps(data),
            status_code=status_code,
            media_type="application/json",
            headers=headers,
        )

    # Copy before mutating so callers' dicts are not affected
    data = dict(data)

    # Markdown: structured fields as YAML frontmatter, 'content'/'error' as body
    body = ""
    for k in ("content", "error", "html"):
        if k in data:
            body = str(data.pop(k))
            break

    content = frontmatter.dumps(frontmatter.Post(body, **data)) if data else body
    return Response(
        content=content,
        status_code=status_code,
        media_type="text/markdown",
        headers=headers,
    )
