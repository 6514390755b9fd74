"""
Team membership endpoints: list members, change a member's role, remove a
member or leave a team.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.api import deps
from teamhub.api.v1.helpers import build_member_list, build_member_response, get_team_or_404, load_users
from teamhub.api.v1.helpers.responses import RESP_400, RESP_AUTH_404
from teamhub.core.constants import NotificationType, TeamRole
from teamhub.core.exceptions import NotFound
from teamhub.core.metrics import team_members_removed_total, team_role_changes_total
from teamhub.core.permissions import (
    can_change_role,
    can_remove_member,
    can_view_members,
    ensure_not_owner_target,
)
from teamhub.db.mongodb import get_database
from teamhub.models.team import Team, TeamMember
from teamhub.models.user import User
from teamhub.repositories import TeamRepository, UserRepository
from teamhub.schemas.common import MessageResponse
from teamhub.schemas.team import TeamMemberResponse, TeamMemberRoleUpdate
from teamhub.services.notifications import dispatch_notification, templates

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_member_or_404(team: Team, user_id: str) -> TeamMember:
    member = team.get_member(user_id)
    if member is None:
        raise NotFound("Member not found")
    return member


@router.get("/{team_id}/members", response_model=List[TeamMemberResponse], responses={**RESP_AUTH_404})
async def list_members(
    team_id: str,
    current_user: Optional[User] = Depends(deps.get_optional_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    List team members, oldest first. Private teams are visible to members only.
    """
    team = await get_team_or_404(TeamRepository(db), team_id)
    can_view_members(team, current_user.id if current_user else None)

    users = await load_users(UserRepository(db), (m.user_id for m in team.members))
    return build_member_list(team, users)


@router.patch(
    "/{team_id}/members/{user_id}",
    response_model=TeamMemberResponse,
    responses={**RESP_AUTH_404, **RESP_400},
)
async def update_member_role(
    team_id: str,
    user_id: str,
    role_in: TeamMemberRoleUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Assign the admin or member role. Owner only; the owner's own role is fixed.
    """
    team_repo = TeamRepository(db)
    team = await get_team_or_404(team_repo, team_id)
    _get_member_or_404(team, user_id)

    ensure_not_owner_target(team, user_id, removing=False)
    can_change_role(team, current_user.id)

    if not await team_repo.update_member_role(team_id, user_id, role_in.role):
        # Member left or was removed since the team was read
        raise NotFound("Member not found")

    team_role_changes_total.labels(role=TeamRole(role_in.role).value).inc()
    logger.info(f"Role of {user_id} in team {team_id} set to {TeamRole(role_in.role).value} by {current_user.id}")

    updated_team = await get_team_or_404(team_repo, team_id)
    member = _get_member_or_404(updated_team, user_id)

    title, message = templates.role_changed(team.name, role_in.role)
    background_tasks.add_task(
        dispatch_notification, db, [user_id], NotificationType.TEAM_ROLE_CHANGED, title, message, team_id
    )

    users = await load_users(UserRepository(db), [user_id])
    return build_member_response(member, users)


@router.delete(
    "/{team_id}/members/{user_id}",
    response_model=MessageResponse,
    responses={**RESP_AUTH_404, **RESP_400},
)
async def remove_member(
    team_id: str,
    user_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Remove a member from the team, or leave it when ``user_id`` is the caller.
    """
    team_repo = TeamRepository(db)
    team = await get_team_or_404(team_repo, team_id)
    _get_member_or_404(team, user_id)

    can_remove_member(team, current_user.id, user_id)

    if not await team_repo.remove_member(team_id, user_id):
        raise NotFound("Member not found")

    is_self = user_id == current_user.id
    team_members_removed_total.labels(reason="left" if is_self else "removed").inc()

    if is_self:
        logger.info(f"User {user_id} left team {team_id}")
        title, message = templates.member_left(current_user.display_name, team.name)
        background_tasks.add_task(
            dispatch_notification, db, [team.owner_id], NotificationType.TEAM_MEMBER_LEFT, title, message, team_id
        )
        return {"message": "Left team successfully"}

    logger.info(f"User {user_id} removed from team {team_id} by {current_user.id}")
    title, message = templates.member_removed(team.name)
    background_tasks.add_task(
        dispatch_notification, db, [user_id], NotificationType.TEAM_MEMBER_REMOVED, title, message, team_id
    )
    return {"message": "Member removed successfully"}
