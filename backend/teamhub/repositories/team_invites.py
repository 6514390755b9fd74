"""
Team Invite Repository

Redeeming a link is a compare-and-set on ``used_at``: the filter only
matches an unused, unexpired invite, so one link yields at most one join
request.
"""

from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession
from pymongo import ReturnDocument

from teamhub.models.team_invite import TeamInvite
from teamhub.repositories.base import BaseRepository


class TeamInviteRepository(BaseRepository[TeamInvite]):
    """Repository for team invite links."""

    collection_name = "team_invites"
    model_class = TeamInvite

    async def find_by_team(self, team_id: str, limit: int = 100) -> List[TeamInvite]:
        """Invites of a team, newest first."""
        return await self.find_many({"team_id": team_id}, sort_by="created_at", sort_order=-1, limit=limit)

    async def get_by_token(self, token: str) -> Optional[TeamInvite]:
        return await self.find_one({"token": token})

    async def mark_used(self, token: str, user_id: str) -> Optional[TeamInvite]:
        """
        Claim the invite for ``user_id``.

        Returns the claimed invite, or None if it is unknown, expired or
        already used.
        """
        now = datetime.now(timezone.utc)
        data = await self.collection.find_one_and_update(
            {"token": token, "used_at": None, "expires_at": {"$gt": now}},
            {"$set": {"used_at": now, "used_by": user_id}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(data)

    async def release(self, token: str, user_id: str) -> bool:
        """Give back a claim whose join request could not be created."""
        result = await self.collection.update_one(
            {"token": token, "used_by": user_id},
            {"$set": {"used_at": None, "used_by": None}},
        )
        return result.modified_count > 0

    async def delete_by_team(self, team_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> int:
        return await self.delete_many({"team_id": team_id}, session=session)
