from teamhub.services.notifications.service import (
    NotificationService,
    dispatch_notification,
    notification_service,
)

__all__ = ["NotificationService", "dispatch_notification", "notification_service"]
