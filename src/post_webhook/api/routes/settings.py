"""Webhook settings endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..dependencies import get_db, require_capability
from ..schemas import WebhookSettingsRequest, WebhookSettingsResponse
from ...constants import CAP_MANAGE_OPTIONS
from ...database.models import User
from ...database.options import get_webhook_url, set_webhook_url

router = APIRouter()


@router.get(
    "/settings/webhook",
    response_model=WebhookSettingsResponse,
    summary="Get webhook URL",
)
async def get_webhook_settings(
    user: User = Depends(require_capability(CAP_MANAGE_OPTIONS)),
    db: Session = Depends(get_db),
) -> WebhookSettingsResponse:
    """Return the configured webhook URL (empty when disabled)."""
    url = get_webhook_url(db)
    return WebhookSettingsResponse(url=url, enabled=bool(url))


@router.put(
    "/settings/webhook",
    response_model=WebhookSettingsResponse,
    summary="Set webhook URL",
    description="Store the webhook URL to ping when a new post is published. Keep empty to disable.",
)
async def update_webhook_settings(
    request: WebhookSettingsRequest,
    user: User = Depends(require_capability(CAP_MANAGE_OPTIONS)),
    db: Session = Depends(get_db),
) -> WebhookSettingsResponse:
    """
    Sanitize and store the webhook URL.

    Values that are not http(s) URLs are stored as empty, which disables
    the webhook.
    """
    url = set_webhook_url(db, request.url)
    return WebhookSettingsResponse(url=url, enabled=bool(url))
