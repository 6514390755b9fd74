import logging
from typing import Any, Dict, List, Optional

import httpx

from teamhub.core.config import settings
from teamhub.services.notifications.base import NotificationProvider

logger = logging.getLogger(__name__)


class PushProvider(NotificationProvider):
    """Forwards push notifications to the push gateway configured in PUSH_WEBHOOK_URL."""

    channel = "push"

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.PUSH_WEBHOOK_URL
        self.timeout = timeout if timeout is not None else settings.PUSH_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send(
        self,
        destinations: List[str],
        subject: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        if not self.enabled or not destinations:
            return False

        payload = {
            "user_ids": destinations,
            "title": subject,
            "body": message,
            "data": data or {},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Push gateway request failed: {e}")
            return False

        if response.status_code >= 300:
            logger.error(
                f"Push gateway rejected notification. Status: {response.status_code}, Body: {response.text}"
            )
            return False
        return True
