"""
Join Request Workflow

State machine per request: ``pending`` -> ``approved`` | ``rejected``.
Both terminal states are final. Approval also creates the membership; the
status write and the member insert commit together or not at all.
"""

import logging
from typing import List, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from teamhub.core.constants import (
    MSG_ALREADY_PROCESSED,
    JoinRequestAction,
    JoinRequestStatus,
    TeamRole,
)
from teamhub.core.exceptions import BadRequest, Conflict, NotFound
from teamhub.core.metrics import join_requests_decided_total, join_requests_submitted_total
from teamhub.core.permissions import can_approve_join_request, can_manage_team
from teamhub.db.mongodb import transaction
from teamhub.models.join_request import TeamJoinRequest
from teamhub.models.team import Team, TeamMember
from teamhub.repositories import JoinRequestRepository, TeamRepository

logger = logging.getLogger(__name__)

MSG_PENDING_EXISTS = "You already have a pending join request"


class JoinRequestService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.team_repo = TeamRepository(db)
        self.request_repo = JoinRequestRepository(db)

    async def _get_team(self, team_id: str) -> Team:
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFound("Team not found")
        return team

    async def submit(self, team_id: str, user_id: str) -> Tuple[Team, TeamJoinRequest]:
        """Create a pending request for ``user_id`` to join the team."""
        team = await self._get_team(team_id)

        if team.is_member(user_id):
            raise BadRequest("You are already a member of this team")

        if await self.request_repo.get_pending(team_id, user_id):
            raise BadRequest(MSG_PENDING_EXISTS)

        join_request = TeamJoinRequest(team_id=team_id, user_id=user_id)
        try:
            await self.request_repo.create(join_request)
        except DuplicateKeyError:
            # Lost a race with a concurrent submit; the partial unique index kept one
            raise BadRequest(MSG_PENDING_EXISTS)

        join_requests_submitted_total.inc()
        logger.info(f"Join request {join_request.id} created for user {user_id} on team {team_id}")
        return team, join_request

    async def list_pending(self, team_id: str, acting_user_id: str) -> Tuple[Team, List[TeamJoinRequest]]:
        team = await self._get_team(team_id)
        can_manage_team(team, acting_user_id)
        return team, await self.request_repo.find_pending_for_team(team_id)

    async def _load_for_decision(
        self, team_id: str, request_id: str, acting_user_id: str
    ) -> Tuple[Team, TeamJoinRequest]:
        team = await self._get_team(team_id)

        join_request = await self.request_repo.get_by_id(request_id)
        if not join_request:
            raise NotFound("Join request not found")

        if join_request.team_id != team_id:
            raise BadRequest("Join request does not belong to this team")

        if not join_request.is_pending:
            raise BadRequest(MSG_ALREADY_PROCESSED)

        can_approve_join_request(team, acting_user_id)
        return team, join_request

    async def approve(self, team_id: str, request_id: str, acting_user_id: str) -> Tuple[Team, TeamJoinRequest]:
        team, join_request = await self._load_for_decision(team_id, request_id, acting_user_id)

        async with transaction(self.db) as session:
            updated = await self.request_repo.transition_from_pending(
                request_id, JoinRequestStatus.APPROVED, session=session
            )
            if updated is None:
                raise BadRequest(MSG_ALREADY_PROCESSED)

            member = TeamMember(user_id=join_request.user_id, role=TeamRole.MEMBER)
            added = await self.team_repo.add_member(team_id, member, session=session)
            if not added:
                if session is None:
                    await self.request_repo.restore_pending(request_id, JoinRequestStatus.APPROVED)
                raise Conflict("User is already a member of this team")

        join_requests_decided_total.labels(decision="approved").inc()
        logger.info(
            f"Join request {request_id} approved by {acting_user_id}; "
            f"user {join_request.user_id} added to team {team_id}"
        )
        return team, updated

    async def reject(self, team_id: str, request_id: str, acting_user_id: str) -> Tuple[Team, TeamJoinRequest]:
        team, join_request = await self._load_for_decision(team_id, request_id, acting_user_id)

        updated = await self.request_repo.transition_from_pending(request_id, JoinRequestStatus.REJECTED)
        if updated is None:
            raise BadRequest(MSG_ALREADY_PROCESSED)

        join_requests_decided_total.labels(decision="rejected").inc()
        logger.info(f"Join request {request_id} rejected by {acting_user_id}")
        return team, updated

    async def decide(
        self, team_id: str, request_id: str, acting_user_id: str, action: JoinRequestAction
    ) -> Tuple[Team, TeamJoinRequest]:
        if action == JoinRequestAction.APPROVE:
            return await self.approve(team_id, request_id, acting_user_id)
        return await self.reject(team_id, request_id, acting_user_id)
