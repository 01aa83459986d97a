"""Webhook module for notifying an external URL about newly published posts."""

from .dispatcher import WebhookDispatcher, should_dispatch
from .handler import WebhookHandler
from .models import AjaxResult, AuthorData, DateData, WebhookPayload
from .payload import build_payload, payload_to_json

__all__ = [
    "WebhookDispatcher",
    "WebhookHandler",
    "WebhookPayload",
    "AuthorData",
    "DateData",
    "AjaxResult",
    "build_payload",
    "payload_to_json",
    "should_dispatch",
]
