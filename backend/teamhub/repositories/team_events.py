"""
Team Event Repository

Participation lives inside the event document. Joining is a single
conditional update whose filter carries the capacity check, so two
concurrent joins can never push the confirmed count past
``max_participants``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClientSession
from pymongo import ReturnDocument

from teamhub.core.constants import ParticipationStatus
from teamhub.models.team_event import EventParticipant, TeamEvent
from teamhub.repositories.base import BaseRepository

_CONFIRMED = ParticipationStatus.CONFIRMED.value
_CANCELLED = ParticipationStatus.CANCELLED.value


def confirmed_count_expr() -> Dict[str, Any]:
    return {
        "$size": {
            "$filter": {
                "input": {"$ifNull": ["$participants", []]},
                "as": "p",
                "cond": {"$eq": ["$$p.status", _CONFIRMED]},
            }
        }
    }


def has_capacity_filter() -> Dict[str, Any]:
    """Match events with no limit or with fewer confirmed participants than the limit."""
    confirmed_count = confirmed_count_expr()
    return {
        "$expr": {
            "$or": [
                {"$eq": [{"$ifNull": ["$max_participants", None]}, None]},
                {"$lt": [confirmed_count, "$max_participants"]},
            ]
        }
    }


class TeamEventRepository(BaseRepository[TeamEvent]):
    """Repository for team events and their participants."""

    collection_name = "team_events"
    model_class = TeamEvent

    async def find_by_team(
        self,
        team_id: str,
        upcoming_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[TeamEvent]:
        query: Dict[str, Any] = {"team_id": team_id}
        if upcoming_only:
            query["starts_at"] = {"$gte": datetime.now(timezone.utc)}
        return await self.find_many(query, skip=skip, limit=limit, sort_by="starts_at", sort_order=1)

    async def rejoin(self, event_id: str, team_id: str, user_id: str) -> bool:
        """Flip a cancelled participation back to confirmed if there is room."""
        result = await self.collection.update_one(
            {
                "_id": event_id,
                "team_id": team_id,
                "participants": {"$elemMatch": {"user_id": user_id, "status": _CANCELLED}},
                **has_capacity_filter(),
            },
            {
                "$set": {
                    "participants.$.status": _CONFIRMED,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.modified_count > 0

    async def add_participant(self, event_id: str, team_id: str, participant: EventParticipant) -> bool:
        """Append a confirmed participation for a user with no entry yet, if there is room."""
        result = await self.collection.update_one(
            {
                "_id": event_id,
                "team_id": team_id,
                "participants.user_id": {"$ne": participant.user_id},
                **has_capacity_filter(),
            },
            {
                "$push": {"participants": participant.model_dump()},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        return result.modified_count > 0

    async def cancel_participation(self, event_id: str, user_id: str) -> bool:
        """Mark the user's participation cancelled. Returns False if they have none."""
        result = await self.collection.update_one(
            {"_id": event_id, "participants.user_id": user_id},
            {
                "$set": {
                    "participants.$.status": _CANCELLED,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.matched_count > 0

    async def update_details(self, event_id: str, team_id: str, update_data: Dict[str, Any]) -> Optional[TeamEvent]:
        """
        Apply an edit and return the updated event.

        A new ``max_participants`` only lands while it still covers every
        confirmed participant, so a concurrent join cannot leave the event
        over capacity. Returns None when the event is gone or the limit is
        too low.
        """
        query: Dict[str, Any] = {"_id": event_id, "team_id": team_id}
        if update_data.get("max_participants") is not None:
            query["$expr"] = {"$gte": [update_data["max_participants"], confirmed_count_expr()]}

        data = await self.collection.find_one_and_update(
            query,
            {"$set": {**update_data, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(data)

    async def delete_by_team(self, team_id: str, session: Optional[AsyncIOMotorClientSession] = None) -> int:
        return await self.delete_many({"team_id": team_id}, session=session)

    async def get_for_team(self, event_id: str, team_id: str) -> Optional[TeamEvent]:
        return await self.find_one({"_id": event_id, "team_id": team_id})
