"""
Team Event Participation

Join and leave a team event. The capacity check travels inside the update
filter (see ``TeamEventRepository``), so the read below is only used to pick
an error message; it never decides whether a seat is taken.
"""

import logging
from typing import Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.core.constants import MSG_ALREADY_PARTICIPATING, MSG_EVENT_FULL, ParticipationStatus
from teamhub.core.exceptions import BadRequest, Conflict, Forbidden, NotFound
from teamhub.core.metrics import event_joins_total
from teamhub.core.permissions import can_participate
from teamhub.models.team import Team
from teamhub.models.team_event import EventParticipant, TeamEvent
from teamhub.repositories import TeamEventRepository, TeamRepository

logger = logging.getLogger(__name__)


def _rejection_for(event: TeamEvent, user_id: str) -> Optional[BadRequest]:
    """Explain why a join cannot proceed, checking capacity first."""
    if event.is_full:
        return BadRequest(MSG_EVENT_FULL)
    participant = event.get_participant(user_id)
    if participant and participant.status == ParticipationStatus.CONFIRMED:
        return BadRequest(MSG_ALREADY_PARTICIPATING)
    return None


class EventParticipationService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.team_repo = TeamRepository(db)
        self.event_repo = TeamEventRepository(db)

    async def _get_team_event(self, team_id: str, event_id: str) -> Tuple[Team, TeamEvent]:
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFound("Team not found")

        event = await self.event_repo.get_by_id(event_id)
        if not event:
            raise NotFound("Event not found")
        return team, event

    async def join(self, team_id: str, event_id: str, user_id: str) -> Tuple[TeamEvent, EventParticipant]:
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFound("Team not found")
        can_participate(team, user_id)

        event = await self.event_repo.get_by_id(event_id)
        if not event:
            raise NotFound("Event not found")
        if event.team_id != team_id:
            raise Forbidden("Event does not belong to this team")

        rejection = _rejection_for(event, user_id)
        if rejection:
            event_joins_total.labels(result="full" if event.is_full else "duplicate").inc()
            raise rejection

        existing = event.get_participant(user_id)
        if existing:
            joined = await self.event_repo.rejoin(event_id, team_id, user_id)
        else:
            joined = await self.event_repo.add_participant(event_id, team_id, EventParticipant(user_id=user_id))

        current = await self.event_repo.get_by_id(event_id)
        if current is None:
            raise NotFound("Event not found")

        if not joined:
            # Another request changed the event between our read and write
            rejection = _rejection_for(current, user_id)
            if rejection:
                event_joins_total.labels(result="full" if current.is_full else "duplicate").inc()
                raise rejection
            raise Conflict("Event participation changed, please retry")

        event_joins_total.labels(result="rejoined" if existing else "joined").inc()
        logger.info(f"User {user_id} joined event {event_id} ({current.confirmed_count} confirmed)")
        return current, current.get_participant(user_id)

    async def leave(self, team_id: str, event_id: str, user_id: str) -> TeamEvent:
        team, event = await self._get_team_event(team_id, event_id)
        if event.team_id != team.id:
            raise NotFound("Event not found")

        if not await self.event_repo.cancel_participation(event_id, user_id):
            raise NotFound("You are not participating in this event")

        logger.info(f"User {user_id} left event {event_id}")
        return event
