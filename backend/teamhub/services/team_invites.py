"""
Team Invite Links

Owner and admins mint single-use links that expire after
``INVITE_EXPIRE_HOURS``. Redeeming a link does not grant membership: it files
a pending join request through the regular workflow, which an owner or admin
still has to approve.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.core.config import settings
from teamhub.core.exceptions import BadRequest, NotFound, TeamHubError
from teamhub.core.metrics import team_invites_redeemed_total
from teamhub.core.permissions import can_manage_team
from teamhub.models.join_request import TeamJoinRequest
from teamhub.models.team import Team
from teamhub.models.team_invite import TeamInvite
from teamhub.repositories import TeamInviteRepository, TeamRepository
from teamhub.services.join_requests import JoinRequestService

logger = logging.getLogger(__name__)

MSG_INVITE_INVALID = "Invalid invite link"
MSG_INVITE_EXPIRED = "Invite link has expired"
MSG_INVITE_USED = "Invite link has already been used"


def invite_problem(invite: Optional[TeamInvite]) -> Optional[str]:
    """Why the invite cannot be redeemed, or None if it can."""
    if invite is None:
        return MSG_INVITE_INVALID
    if invite.is_expired():
        return MSG_INVITE_EXPIRED
    if invite.is_used:
        return MSG_INVITE_USED
    return None


def invite_url(invite: TeamInvite) -> str:
    return f"{settings.FRONTEND_BASE_URL.rstrip('/')}/invite/{invite.token}"


class TeamInviteService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.team_repo = TeamRepository(db)
        self.invite_repo = TeamInviteRepository(db)

    async def _get_team(self, team_id: str) -> Team:
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFound("Team not found")
        return team

    async def create(self, team_id: str, acting_user_id: str) -> TeamInvite:
        team = await self._get_team(team_id)
        can_manage_team(team, acting_user_id)

        invite = TeamInvite(
            team_id=team_id,
            created_by=acting_user_id,
            expires_at=datetime.now(timezone.utc) + timedelta(hours=settings.INVITE_EXPIRE_HOURS),
        )
        await self.invite_repo.create(invite)
        logger.info(f"Invite {invite.id} for team {team_id} created by {acting_user_id}")
        return invite

    async def list_for_team(self, team_id: str, acting_user_id: str) -> List[TeamInvite]:
        team = await self._get_team(team_id)
        can_manage_team(team, acting_user_id)
        return await self.invite_repo.find_by_team(team_id)

    async def preview(self, token: str) -> Tuple[Optional[str], Optional[Team]]:
        """Return ``(problem, team)``; exactly one of them is set."""
        invite = await self.invite_repo.get_by_token(token)
        problem = invite_problem(invite)
        if problem:
            return problem, None

        team = await self.team_repo.get_by_id(invite.team_id)
        if team is None:
            return MSG_INVITE_INVALID, None
        return None, team

    async def accept(self, token: str, user_id: str) -> Tuple[Team, TeamJoinRequest]:
        """Redeem the invite and file a pending join request for ``user_id``."""
        invite = await self.invite_repo.get_by_token(token)
        if invite is None:
            raise NotFound(MSG_INVITE_INVALID)
        problem = invite_problem(invite)
        if problem:
            raise BadRequest(problem)

        if await self.invite_repo.mark_used(token, user_id) is None:
            # Redeemed or expired between the read and the claim
            current = await self.invite_repo.get_by_token(token)
            if current is None:
                raise NotFound(MSG_INVITE_INVALID)
            raise BadRequest(invite_problem(current) or MSG_INVITE_USED)

        try:
            team, join_request = await JoinRequestService(self.db).submit(invite.team_id, user_id)
        except TeamHubError:
            await self.invite_repo.release(token, user_id)
            raise

        team_invites_redeemed_total.inc()
        logger.info(f"Invite {invite.id} redeemed by {user_id}; join request {join_request.id} filed")
        return team, join_request
