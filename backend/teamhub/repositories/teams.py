"""
Team Repository

Centralizes all database operations for teams and their embedded members.
Membership writes are conditional single-document updates, so the
"one row per (team, user)" and "owner is never removed" rules hold even
under concurrent requests.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession

from teamhub.core.constants import TeamRole, TeamVisibility
from teamhub.models.team import Team, TeamMember
from teamhub.repositories.base import BaseRepository

_MEMBERS_USER_ID = "members.user_id"


class TeamRepository(BaseRepository[Team]):
    """Repository for team database operations."""

    collection_name = "teams"
    model_class = Team

    async def find_visible(
        self,
        user_id: Optional[str],
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Team]:
        """Public teams plus every team the user belongs to."""
        visibility_query: Dict[str, Any] = {"visibility": TeamVisibility.PUBLIC.value}
        if user_id:
            visibility_query = {"$or": [visibility_query, {_MEMBERS_USER_ID: user_id}]}

        query = visibility_query
        if search:
            query = {"$and": [visibility_query, {"name": {"$regex": re.escape(search), "$options": "i"}}]}

        return await self.find_many(query, skip=skip, limit=limit, sort_by="created_at", sort_order=-1)

    async def add_member(
        self,
        team_id: str,
        member: TeamMember,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        """
        Append a member unless the user already has a membership.

        Returns False when the team is missing or the user is already a member.
        """
        result = await self.collection.update_one(
            {"_id": team_id, _MEMBERS_USER_ID: {"$ne": member.user_id}},
            {
                "$push": {"members": member.model_dump()},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
            session=session,
        )
        return result.modified_count > 0

    async def update_member_role(self, team_id: str, user_id: str, role: TeamRole) -> bool:
        """Set a non-owner member's role. Returns False if no such non-owner member exists."""
        result = await self.collection.update_one(
            {
                "_id": team_id,
                "members": {"$elemMatch": {"user_id": user_id, "role": {"$ne": TeamRole.OWNER.value}}},
            },
            {
                "$set": {
                    "members.$.role": TeamRole(role).value,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.matched_count > 0

    async def remove_member(self, team_id: str, user_id: str) -> bool:
        """Pull a non-owner member. The owner's entry never matches."""
        result = await self.collection.update_one(
            {
                "_id": team_id,
                "owner_id": {"$ne": user_id},
                "members": {"$elemMatch": {"user_id": user_id, "role": {"$ne": TeamRole.OWNER.value}}},
            },
            {
                "$pull": {"members": {"user_id": user_id, "role": {"$ne": TeamRole.OWNER.value}}},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        return result.modified_count > 0

    async def update_details(self, team_id: str, update_data: Dict[str, Any]) -> Optional[Team]:
        update_data = {**update_data, "updated_at": datetime.now(timezone.utc)}
        return await self.update(team_id, update_data)
