"""Pydantic models for request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from notepress.config import settings


def _normalize_tags(tags: list[str]) -> list[str]:
    """Strip, drop empties and duplicates, keep first-seen order."""
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if not tag:
            continue
        if len(tag) > 50:
            raise ValueError(f"Tag too long (max 50 chars): {tag[:50]}...")
        if tag not in seen:
            seen.append(tag)
    if len(seen) > settings.max_tags:
        raise ValueError(f"Maximum {settings.max_tags} tags allowed")
    return seen


class PasswordRequest(BaseModel):
    password: str = Field(default="", max_length=1000)


class AuthStatusResponse(BaseModel):
    has_password: bool
    is_authenticated: bool


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class _PostFields(BaseModel):
    title: str = Field(..., max_length=500)
    description: str = Field(..., max_length=5000)
    content: str = Field(..., max_length=500_000)
    category: str = Field(default_factory=lambda: settings.default_category)
    tags: list[str] = Field(default_factory=list)
    difficulty: str = Field(default_factory=lambda: settings.default_difficulty)
    updated: int | None = Field(default=None, ge=0, description="Epoch ms; defaults to now")

    @field_validator("title", "description", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("category")
    @classmethod
    def known_category(cls, v: str) -> str:
        if v not in settings.categories:
            raise ValueError(f"category must be one of {', '.join(settings.categories)}")
        return v

    @field_validator("difficulty")
    @classmethod
    def known_difficulty(cls, v: str) -> str:
        if v not in settings.difficulties:
            raise ValueError(f"difficulty must be one of {', '.join(settings.difficulties)}")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        # Frontmatter and form bodies may send "a, b, c"
        if isinstance(v, str):
            return v.split(",")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v)


class PostCreateRequest(_PostFields):
    id: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Client-chosen id; generated when omitted",
    )
    timestamp: int | None = Field(default=None, ge=0, description="Epoch ms; defaults to now")


class PostUpdateRequest(_PostFields):
    pass


class PostResponse(BaseModel):
    id: str
    title: str
    description: str
    content: str
    category: str
    tags: list[str]
    difficulty: str
    timestamp: int
    updated: int


class PostHTMLResponse(BaseModel):
    id: str
    html: str


class RenderRequest(BaseModel):
    content: str = Field(default="", max_length=500_000)


class RenderResponse(BaseModel):
    html: str


class TagsResponse(BaseModel):
    tags: list[str]
