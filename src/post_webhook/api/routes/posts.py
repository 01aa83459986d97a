"""Post management endpoints."""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload, selectinload

from ..dependencies import get_db, get_post_service, get_site, require_capability
from ..schemas import ErrorResponse, PostCreateRequest, PostListResponse, PostResponse, PostUpdateRequest
from ...constants import CAP_EDIT_POSTS, CAP_PUBLISH_POSTS, STATUS_PUBLISH
from ...content.links import Site
from ...database.models import Post, User
from ...posts.service import PostNotFoundError, PostService
from ...webhook.models import WebhookPayload
from ...webhook.payload import build_payload

router = APIRouter()


def ensure_can_publish(user: User, requested_status: Optional[str]) -> None:
    """
    Reject publishing by users without the publish capability.

    Raises:
        HTTPException: 403 if the user may not publish
    """
    if requested_status == STATUS_PUBLISH and not user.can(CAP_PUBLISH_POSTS):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Capability '{CAP_PUBLISH_POSTS}' required to publish",
        )


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    description="Create a post or page. Creating it as published sends the webhook for posts.",
)
async def create_post(
    request: PostCreateRequest,
    user: User = Depends(require_capability(CAP_EDIT_POSTS)),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """
    Create a post authored by the calling user.

    Args:
        request: Post fields
        user: Authenticated user with edit_posts
        service: Post service

    Returns:
        The created post
    """
    ensure_can_publish(user, request.status)

    post = await service.create_post(
        author_id=user.id,
        title=request.title,
        content=request.content,
        excerpt=request.excerpt,
        status=request.status,
        post_type=request.post_type,
        slug=request.slug,
        post_date=request.post_date,
        tags=request.tags,
        categories=request.categories,
    )
    return PostResponse.from_post(post)


@router.get(
    "/posts",
    response_model=PostListResponse,
    summary="List posts",
    description="List posts with optional status and type filters, newest first",
)
async def list_posts(
    post_status: Optional[str] = Query(None, alias="status", description="Filter by status"),
    post_type: Optional[str] = Query(None, description="Filter by post type"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0, description="Number of posts to skip"),
    user: User = Depends(require_capability(CAP_EDIT_POSTS)),
    db: Session = Depends(get_db),
) -> PostListResponse:
    """
    Query posts with filters.

    Returns:
        Paginated list of posts matching the filters
    """
    query = db.query(Post)

    if post_status:
        query = query.filter(Post.status == post_status)
    if post_type:
        query = query.filter(Post.post_type == post_type)

    total = query.count()

    posts = (
        query.options(joinedload(Post.author), selectinload(Post.terms))
        .order_by(desc(Post.post_date), desc(Post.id))
        .limit(limit)
        .offset(offset)
        .all()
    )

    return PostListResponse(
        posts=[PostResponse.from_post(post) for post in posts],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    summary="Get a post",
    responses={404: {"model": ErrorResponse}},
)
async def get_post(
    post_id: int,
    user: User = Depends(require_capability(CAP_EDIT_POSTS)),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Get a single post by id."""
    try:
        post = service.load(post_id)
    except PostNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Post {post_id} not found")
    return PostResponse.from_post(post)


@router.patch(
    "/posts/{post_id}",
    response_model=PostResponse,
    summary="Update a post",
    responses={404: {"model": ErrorResponse}},
    description="Update post fields. Moving a post to publish from any other status sends the webhook.",
)
async def update_post(
    post_id: int,
    request: PostUpdateRequest,
    user: User = Depends(require_capability(CAP_EDIT_POSTS)),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """
    Update a post; omitted fields keep their values.

    Raises:
        HTTPException: 404 if the post does not exist
    """
    ensure_can_publish(user, request.status)

    changes = {
        key: value
        for key, value in request.model_dump(exclude_unset=True).items()
        if value is not None
    }

    try:
        post = await service.update_post(post_id, **changes)
    except PostNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Post {post_id} not found")
    return PostResponse.from_post(post)


@router.get(
    "/posts/{post_id}/payload",
    response_model=WebhookPayload,
    summary="Preview webhook payload",
    responses={404: {"model": ErrorResponse}},
    description="Return the JSON body that would be sent to the webhook for this post",
)
async def preview_payload(
    post_id: int,
    user: User = Depends(require_capability(CAP_EDIT_POSTS)),
    service: PostService = Depends(get_post_service),
    site: Site = Depends(get_site),
) -> WebhookPayload:
    """Build the webhook payload for a post without sending it."""
    try:
        post = service.load(post_id)
    except PostNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Post {post_id} not found")
    return build_payload(post, site)
