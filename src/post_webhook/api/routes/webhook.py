"""Webhook test-send endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..dependencies import get_db, get_dispatcher, get_optional_user, get_site
from ...content.links import Site
from ...database.models import User
from ...database.options import get_webhook_url
from ...webhook.dispatcher import MSG_NO_PERMISSION, WebhookDispatcher
from ...webhook.hooks import latest_post_payload
from ...webhook.models import AjaxResult

router = APIRouter()


@router.post(
    "/webhook/test",
    response_model=AjaxResult,
    summary="Send a test webhook",
    description="Send the payload of the most recent published post to the configured webhook URL",
    responses={
        403: {"model": AjaxResult, "description": "Caller may not manage options"},
        404: {"model": AjaxResult, "description": "No posts to send"},
    },
)
async def send_test_webhook(
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
    site: Site = Depends(get_site),
):
    """
    Send a test event.

    The response reports success once the request has been made, whether
    or not the webhook endpoint accepted it.
    """
    result = await dispatcher.send_test_event(
        user,
        get_webhook_url(db),
        lambda: latest_post_payload(site),
    )

    if result.success:
        status_code = status.HTTP_200_OK
    elif result.data == MSG_NO_PERMISSION:
        status_code = status.HTTP_403_FORBIDDEN
    else:
        status_code = status.HTTP_404_NOT_FOUND

    return JSONResponse(status_code=status_code, content=result.model_dump())
