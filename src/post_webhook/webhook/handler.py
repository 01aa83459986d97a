"""WebhookHandler for POSTing post payloads to the configured URL."""

import asyncio
import logging
import time
from typing import Optional

import httpx

from ..metrics import get_metrics
from .models import WebhookPayload
from .payload import payload_to_json

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
JSON_HEADERS = {"content-type": "application/json"}


class WebhookHandler:
    """Sends a single webhook HTTP POST per call and never raises on failure."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT, record_metrics: bool = True):
        """
        Initialize webhook handler.

        Args:
            timeout: HTTP request timeout in seconds
            record_metrics: Whether to count requests in Prometheus metrics
        """
        self.timeout = timeout
        self.record_metrics = record_metrics
        self.client = httpx.AsyncClient(timeout=timeout)

        logger.info(f"WebhookHandler initialized: timeout={timeout}s")

    async def send(self, url: Optional[str], payload: WebhookPayload, trigger: str = "publish") -> None:
        """
        POST a payload once.

        The outcome is logged and counted but not returned: a timeout,
        connection failure or non-2xx response ends here.

        Args:
            url: Webhook URL; empty means nothing is sent
            payload: Payload to serialize as the request body
            trigger: What caused the send ("publish" or "test"), for logs and metrics
        """
        if not url:
            logger.debug(f"No webhook URL configured, skipping {trigger} dispatch")
            return

        body = payload_to_json(payload)
        log_extra = {"post_id": payload.id, "webhook_url": url, "trigger": trigger}
        started = time.monotonic()
        outcome = "success"

        try:
            # Total deadline; the client timeout only bounds each network operation
            response = await asyncio.wait_for(
                self.client.post(url, content=body, headers=JSON_HEADERS),
                timeout=self.timeout,
            )
            response.raise_for_status()

            logger.info(
                f"Webhook sent: post {payload.id} to {url} (status={response.status_code})",
                extra={**log_extra, "status_code": response.status_code},
            )

        except httpx.HTTPStatusError as e:
            outcome = "http_error"
            logger.warning(
                f"Webhook HTTP error: {e.response.status_code} - {url}",
                extra={**log_extra, "status_code": e.response.status_code},
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            outcome = "timeout"
            logger.warning(f"Webhook timeout after {self.timeout}s: {url}", extra=log_extra)
        except Exception as e:
            outcome = "error"
            logger.warning(f"Webhook error: {type(e).__name__}: {e} - {url}", extra=log_extra)

        if self.record_metrics:
            get_metrics().record_dispatch(trigger, outcome, time.monotonic() - started)

    async def close(self) -> None:
        """Close HTTP client connection pool."""
        await self.client.aclose()
        logger.debug("WebhookHandler closed")
