"""Decide when a post status change sends the webhook, and run test sends."""

import logging
from typing import Callable, Optional

from ..constants import CAP_MANAGE_OPTIONS, POST_TYPE_POST, STATUS_PUBLISH
from ..database.models import User
from .handler import WebhookHandler
from .models import AjaxResult, WebhookPayload

logger = logging.getLogger(__name__)

MSG_NO_PERMISSION = "You don't have permission."
MSG_NO_POSTS = "No posts found to send a test."
MSG_TEST_SENT = "Test webhook sent successfully."


def should_dispatch(
    new_status: str,
    old_status: str,
    post_type: str,
    configured_url: Optional[str],
) -> bool:
    """
    Whether a status transition is a new publish that must be sent.

    True only with a URL configured, a post of type ``post``, and a move
    into ``publish`` from any other status. Re-saving a published post does
    not qualify.
    """
    if not configured_url:
        return False
    return (
        new_status == STATUS_PUBLISH
        and old_status != STATUS_PUBLISH
        and post_type == POST_TYPE_POST
    )


class WebhookDispatcher:
    """Routes publish transitions and test requests to the webhook handler."""

    def __init__(self, handler: WebhookHandler):
        """
        Initialize dispatcher.

        Args:
            handler: Handler performing the HTTP POST
        """
        self.handler = handler

    async def maybe_dispatch(
        self,
        new_status: str,
        old_status: str,
        post_type: str,
        configured_url: Optional[str],
        post_data_provider: Callable[[], WebhookPayload],
    ) -> None:
        """
        Send the payload if this transition is a new publish.

        The payload is only built when a send happens. The call returns once
        the request completes or times out; its outcome is not reported.

        Args:
            new_status: Status after the change
            old_status: Status before the change ("new" for a fresh insert)
            post_type: Post type of the changed post
            configured_url: Current webhook URL, empty when disabled
            post_data_provider: Builds the payload for the changed post
        """
        if not should_dispatch(new_status, old_status, post_type, configured_url):
            logger.debug(
                f"No dispatch for {post_type} transition {old_status} -> {new_status}"
                f"{'' if configured_url else ' (webhook disabled)'}"
            )
            return

        payload = post_data_provider()
        logger.info(f"Post {payload.id} published, sending webhook")
        await self.handler.send(configured_url, payload, trigger="publish")

    async def send_test_event(
        self,
        user: Optional[User],
        configured_url: Optional[str],
        latest_post_provider: Callable[[], Optional[WebhookPayload]],
    ) -> AjaxResult:
        """
        Send the latest post's payload on demand.

        Args:
            user: Caller; must be able to manage options
            configured_url: Current webhook URL
            latest_post_provider: Payload of the most recent post, or None

        Returns:
            Failure for a caller without permission or when there are no
            posts; otherwise success, whatever the request's outcome.
        """
        if user is None or not user.can(CAP_MANAGE_OPTIONS):
            logger.warning(
                f"Test webhook refused for {user.login if user else 'anonymous caller'}"
            )
            return AjaxResult(success=False, data=MSG_NO_PERMISSION)

        payload = latest_post_provider()
        if payload is None:
            return AjaxResult(success=False, data=MSG_NO_POSTS)

        logger.info(f"Sending test webhook for post {payload.id}")
        await self.handler.send(configured_url, payload, trigger="test")

        return AjaxResult(success=True, data=MSG_TEST_SENT)
