"""Glue between the content store and the webhook dispatcher."""

from typing import Optional

from ..content.links import Site
from ..database.engine import session_scope
from ..database.models import Post
from ..database.options import get_webhook_url
from .dispatcher import WebhookDispatcher
from .models import WebhookPayload
from .payload import build_payload


def current_webhook_url() -> str:
    """Read the webhook URL from the settings store."""
    with session_scope() as session:
        return get_webhook_url(session)


def latest_post_payload(site: Site) -> Optional[WebhookPayload]:
    """Payload for the most recent published post, or None if there is none."""
    with session_scope() as session:
        post = Post.latest_published(session)
        if post is None:
            return None
        return build_payload(post, site)


def make_publish_listener(dispatcher: WebhookDispatcher, site: Site):
    """
    Build the post-transition listener that sends the webhook on publish.

    The URL is read at call time, so settings changes apply to the next
    transition without a restart.
    """

    async def on_transition(new_status: str, old_status: str, post: Post) -> None:
        await dispatcher.maybe_dispatch(
            new_status,
            old_status,
            post.post_type,
            current_webhook_url(),
            lambda: build_payload(post, site),
        )

    return on_transition
