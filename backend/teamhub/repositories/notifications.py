"""
Notification Repository

Centralizes all database operations for in-app notifications.
"""

from typing import Any, Dict, List

from teamhub.models.notification import Notification
from teamhub.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification database operations."""

    collection_name = "notifications"
    model_class = Notification

    async def find_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> List[Notification]:
        query: Dict[str, Any] = {"user_id": user_id}
        if unread_only:
            query["is_read"] = False
        return await self.find_many(query, skip=skip, limit=limit, sort_by="created_at", sort_order=-1)

    async def count_unread(self, user_id: str) -> int:
        return await self.count({"user_id": user_id, "is_read": False})

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        """Mark one of the user's notifications read. Returns False if it is not theirs."""
        result = await self.collection.update_one(
            {"_id": notification_id, "user_id": user_id},
            {"$set": {"is_read": True}},
        )
        return result.matched_count > 0

    async def mark_all_read(self, user_id: str) -> int:
        result = await self.collection.update_many(
            {"user_id": user_id, "is_read": False},
            {"$set": {"is_read": True}},
        )
        return result.modified_count
