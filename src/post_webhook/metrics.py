"""Prometheus metrics collector."""

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Collects and exposes Prometheus metrics."""

    def __init__(self):
        """Initialize metrics."""

        self.transitions_total = Counter(
            "post_webhook_transitions_total",
            "Post status transitions observed",
            ["post_type", "old_status", "new_status"],
        )

        self.dispatches_total = Counter(
            "post_webhook_dispatches_total",
            "Webhook requests attempted",
            ["trigger", "outcome"],
        )

        self.dispatch_seconds = Histogram(
            "post_webhook_dispatch_seconds",
            "Webhook request duration in seconds",
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
        )

        self.errors_total = Counter(
            "post_webhook_errors_total", "Total errors encountered", ["component", "error_type"]
        )

    def record_transition(self, post_type: str, old_status: str, new_status: str) -> None:
        """Record a post status transition."""
        self.transitions_total.labels(
            post_type=post_type, old_status=old_status, new_status=new_status
        ).inc()

    def record_dispatch(self, trigger: str, outcome: str, seconds: float) -> None:
        """Record a webhook request and how long it took."""
        self.dispatches_total.labels(trigger=trigger, outcome=outcome).inc()
        self.dispatch_seconds.observe(seconds)

    def record_error(self, component: str, error_type: str) -> None:
        """Record an error."""
        self.errors_total.labels(component=component, error_type=error_type).inc()


# Global metrics collector instance
_metrics: MetricsCollector = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
