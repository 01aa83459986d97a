"""Pydantic schemas for API request and response validation."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PostStatus = Literal["publish", "draft", "pending", "private", "future", "trash"]


# ============================================================================
# Common/Shared Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")


# ============================================================================
# Post Schemas
# ============================================================================

def _clean_names(names: Optional[List[str]]) -> Optional[List[str]]:
    if names is None:
        return None
    return [name.strip() for name in names if name and name.strip()]


class PostCreateRequest(BaseModel):
    """Request body for creating a post."""

    title: str = Field("", max_length=1000)
    content: str = ""
    excerpt: str = ""
    status: PostStatus = "draft"
    post_type: str = Field("post", min_length=1, max_length=20, pattern=r"^[a-z0-9_-]+$")
    slug: Optional[str] = Field(None, max_length=200)
    post_date: Optional[datetime] = Field(None, description="Publish date (defaults to now)")
    tags: List[str] = Field(default_factory=list, description="Tag names")
    categories: List[str] = Field(default_factory=list, description="Category names")

    @field_validator("tags", "categories")
    @classmethod
    def clean_term_names(cls, value):
        return _clean_names(value)


class PostUpdateRequest(BaseModel):
    """Request body for updating a post; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, max_length=1000)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    status: Optional[PostStatus] = None
    slug: Optional[str] = Field(None, max_length=200)
    post_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    categories: Optional[List[str]] = None

    @field_validator("tags", "categories")
    @classmethod
    def clean_term_names(cls, value):
        return _clean_names(value)


class AuthorResponse(BaseModel):
    """Author summary embedded in post responses."""

    id: int
    login: str
    display_name: str

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Response model for a post."""

    id: int
    post_type: str
    status: str
    title: str
    slug: str
    content: str
    excerpt: str
    post_date: datetime
    created_at: datetime
    modified_at: datetime
    author: AuthorResponse
    tags: List[str]
    categories: List[str]

    @classmethod
    def from_post(cls, post) -> "PostResponse":
        return cls(
            id=post.id,
            post_type=post.post_type,
            status=post.status,
            title=post.title,
            slug=post.slug,
            content=post.content,
            excerpt=post.excerpt,
            post_date=post.post_date,
            created_at=post.created_at,
            modified_at=post.modified_at,
            author=AuthorResponse.model_validate(post.author),
            tags=post.tag_names,
            categories=post.category_names,
        )


class PostListResponse(BaseModel):
    """Response model for post list."""

    posts: List[PostResponse]
    total: int
    limit: int
    offset: int


# ============================================================================
# Settings Schemas
# ============================================================================

class WebhookSettingsRequest(BaseModel):
    """Request body for updating the webhook URL. Empty disables the webhook."""

    url: Optional[str] = Field("", max_length=2048)


class WebhookSettingsResponse(BaseModel):
    """Current webhook URL."""

    url: str
    enabled: bool


# ============================================================================
# Health Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Overall health status."""

    status: str = Field(..., description="healthy or unhealthy")
    database_connected: bool
    webhook_configured: bool
    uptime_seconds: float

