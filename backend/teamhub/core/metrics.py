"""
Prometheus Metrics

HTTP request metrics collected by ``PrometheusMiddleware`` plus counters for
the membership workflows. Each process keeps its own registry; scrape every
instance.
"""

import logging
import re
import time
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# =============================================================================
# Application Info Metrics
# =============================================================================

try:
    APP_VERSION = get_version("teamhub-backend")
except PackageNotFoundError:
    APP_VERSION = "unknown"

app_info = Info("teamhub_app", "Application information")
app_info.info({"version": APP_VERSION, "app_name": "TeamHub"})

# =============================================================================
# HTTP Request Metrics
# =============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
)

# =============================================================================
# Membership Workflow Metrics
# =============================================================================

join_requests_submitted_total = Counter(
    "join_requests_submitted_total",
    "Team join requests created",
)

join_requests_decided_total = Counter(
    "join_requests_decided_total",
    "Team join requests moved out of pending",
    ["decision"],  # approved, rejected
)

team_members_removed_total = Counter(
    "team_members_removed_total",
    "Team memberships removed",
    ["reason"],  # left, removed
)

team_role_changes_total = Counter(
    "team_role_changes_total",
    "Team member role changes",
    ["role"],
)

event_joins_total = Counter(
    "event_joins_total",
    "Team event join attempts by outcome",
    ["result"],  # joined, rejoined, full, duplicate
)

team_invites_redeemed_total = Counter(
    "team_invites_redeemed_total",
    "Team invite links redeemed into join requests",
)

# =============================================================================
# Notification Metrics
# =============================================================================

notifications_sent_total = Counter(
    "notifications_sent_total",
    "Notifications delivered by channel",
    ["channel"],  # in_app, push
)

notifications_failed_total = Counter(
    "notifications_failed_total",
    "Notification deliveries that failed",
    ["channel"],
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to automatically collect HTTP request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = self._normalize_path(request.url.path)

        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()
        start_time = time.time()
        status = 500

        try:
            response = await call_next(request)
            status = response.status_code
        except Exception as e:
            logger.error(f"Error in PrometheusMiddleware: {e}")
            raise
        finally:
            duration = time.time() - start_time
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)
            http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
            http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

        return response

    def _normalize_path(self, path: str) -> str:
        """Replace id segments (uuid, ObjectId, numeric) and invite tokens with placeholders."""
        path = re.sub(r"/invites/[0-9a-f]{64}", "/invites/{token}", path, flags=re.IGNORECASE)
        path = re.sub(
            r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
            "/{id}",
            path,
            flags=re.IGNORECASE,
        )
        path = re.sub(r"/[0-9a-f]{24}", "/{id}", path, flags=re.IGNORECASE)
        path = re.sub(r"/\d+", "/{id}", path)
        return path


def metrics_response() -> Response:
    """Render the default registry in the Prometheus text format."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
