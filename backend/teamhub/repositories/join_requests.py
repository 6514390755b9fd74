"""
Join Request Repository

Status changes are compare-and-set writes guarded by ``status: pending``,
so a request leaves the pending state at most once.
"""

from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession
from pymongo import ReturnDocument

from teamhub.core.constants import JoinRequestStatus
from teamhub.models.join_request import TeamJoinRequest
from teamhub.repositories.base import BaseRepository


class JoinRequestRepository(BaseRepository[TeamJoinRequest]):
    """Repository for team join request database operations."""

    collection_name = "team_join_requests"
    model_class = TeamJoinRequest

    async def find_pending_for_team(self, team_id: str, limit: int = 100) -> List[TeamJoinRequest]:
        """Pending requests for a team, newest first."""
        return await self.find_many(
            {"team_id": team_id, "status": JoinRequestStatus.PENDING.value},
            sort_by="created_at",
            sort_order=-1,
            limit=limit,
        )

    async def get_pending(self, team_id: str, user_id: str) -> Optional[TeamJoinRequest]:
        return await self.find_one(
            {"team_id": team_id, "user_id": user_id, "status": JoinRequestStatus.PENDING.value}
        )

    async def transition_from_pending(
        self,
        request_id: str,
        status: JoinRequestStatus,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> Optional[TeamJoinRequest]:
        """
        Atomically move a pending request to ``status``.

        Returns the updated request, or None if it was no longer pending.
        """
        data = await self.collection.find_one_and_update(
            {"_id": request_id, "status": JoinRequestStatus.PENDING.value},
            {"$set": {"status": JoinRequestStatus(status).value, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
            session=session,
        )
        return self._to_model(data)

    async def restore_pending(self, request_id: str, from_status: JoinRequestStatus) -> bool:
        """Undo a transition when the follow-up write failed without a transaction."""
        result = await self.collection.update_one(
            {"_id": request_id, "status": JoinRequestStatus(from_status).value},
            {"$set": {"status": JoinRequestStatus.PENDING.value, "updated_at": datetime.now(timezone.utc)}},
        )
        return result.modified_count > 0

    async def delete_by_team(self, team_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> int:
        return await self.delete_many({"team_id": team_id}, session=session)
