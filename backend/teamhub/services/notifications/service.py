import logging
from typing import Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.core.constants import NotificationType
from teamhub.core.metrics import notifications_failed_total, notifications_sent_total
from teamhub.models.notification import Notification
from teamhub.repositories import NotificationRepository
from teamhub.services.notifications.push_provider import PushProvider

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, push_provider: Optional[PushProvider] = None):
        self.push_provider = push_provider or PushProvider()

    async def notify(
        self,
        db: AsyncIOMotorDatabase,
        user_ids: Iterable[str],
        notification_type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None,
    ) -> int:
        """
        Store an in-app notification for every recipient, then forward a push.

        Duplicate and empty recipient ids are dropped. Returns the number of
        in-app notifications created.
        """
        recipients: List[str] = list(dict.fromkeys(uid for uid in user_ids if uid))
        if not recipients:
            return 0

        notifications = [
            Notification(
                user_id=uid,
                type=notification_type,
                title=title,
                message=message,
                related_id=related_id,
            )
            for uid in recipients
        ]
        created = await NotificationRepository(db).create_many(notifications)
        notifications_sent_total.labels(channel="in_app").inc(created)

        if self.push_provider.enabled:
            delivered = await self.push_provider.send(
                recipients,
                title,
                message,
                data={"type": NotificationType(notification_type).value, "related_id": related_id},
            )
            if delivered:
                notifications_sent_total.labels(channel="push").inc(len(recipients))
            else:
                notifications_failed_total.labels(channel="push").inc(len(recipients))

        return created


notification_service = NotificationService()


async def dispatch_notification(
    db: AsyncIOMotorDatabase,
    user_ids: Iterable[str],
    notification_type: NotificationType,
    title: str,
    message: str,
    related_id: Optional[str] = None,
) -> None:
    """
    Fire-and-forget entry point, scheduled with ``BackgroundTasks.add_task``.

    Runs after the response has been sent. Failures are logged and counted,
    never raised: the membership change that triggered the notification has
    already been committed.
    """
    try:
        await notification_service.notify(db, user_ids, notification_type, title, message, related_id)
    except Exception:
        notifications_failed_total.labels(channel="in_app").inc()
        logger.exception(f"Failed to dispatch {NotificationType(notification_type).value} notification")
