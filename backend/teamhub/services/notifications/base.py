from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class NotificationProvider(ABC):
    channel: str

    @abstractmethod
    async def send(
        self,
        destinations: List[str],
        subject: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Send a notification.
        :param destinations: The recipient user ids
        :param subject: The title of the notification
        :param message: The body of the notification
        :param data: Extra payload for the client (type, related id)
        :return: True if successful, False otherwise
        """
        pass
