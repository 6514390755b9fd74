import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.api import deps
from teamhub.api.v1.helpers import build_team_response, get_team_or_404, load_users
from teamhub.api.v1.helpers.responses import RESP_400, RESP_401, RESP_AUTH_404
from teamhub.core.config import settings
from teamhub.core.constants import TeamRole
from teamhub.core.exceptions import NotFound
from teamhub.core.permissions import can_delete_team, can_manage_team, can_view_members
from teamhub.db.mongodb import get_database, transaction
from teamhub.models.team import Team, TeamMember
from teamhub.models.user import User
from teamhub.repositories import (
    JoinRequestRepository,
    TeamEventRepository,
    TeamInviteRepository,
    TeamRepository,
    UserRepository,
)
from teamhub.schemas.common import MessageResponse
from teamhub.schemas.team import TeamCreate, TeamResponse, TeamUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED, responses={**RESP_401, **RESP_400})
async def create_team(
    team_in: TeamCreate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Create a new team. The creator becomes its owner and only member.
    """
    team = Team(
        name=team_in.name,
        description=team_in.description,
        icon_image=team_in.icon_image,
        visibility=team_in.visibility,
        owner_id=current_user.id,
        members=[TeamMember(user_id=current_user.id, role=TeamRole.OWNER)],
    )
    await TeamRepository(db).create(team)
    logger.info(f"Team {team.id} created by {current_user.id}")

    return build_team_response(team, {current_user.id: current_user})


@router.get("", response_model=List[TeamResponse])
async def list_teams(
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=500),
    current_user: Optional[User] = Depends(deps.get_optional_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    List public teams plus, for an authenticated caller, the teams they belong to.
    """
    user_id = current_user.id if current_user else None
    teams = await TeamRepository(db).find_visible(user_id, search=search, skip=skip, limit=limit)

    users = await load_users(UserRepository(db), (m.user_id for t in teams for m in t.members))
    return [build_team_response(team, users) for team in teams]


@router.get("/{team_id}", response_model=TeamResponse, responses={**RESP_AUTH_404})
async def get_team(
    team_id: str,
    current_user: Optional[User] = Depends(deps.get_optional_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    team = await get_team_or_404(TeamRepository(db), team_id)
    can_view_members(team, current_user.id if current_user else None)

    users = await load_users(UserRepository(db), (m.user_id for m in team.members))
    return build_team_response(team, users)


@router.patch("/{team_id}", response_model=TeamResponse, responses={**RESP_AUTH_404, **RESP_400})
async def update_team(
    team_id: str,
    team_in: TeamUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Update team details. Owner and admins only.
    """
    team_repo = TeamRepository(db)
    team = await get_team_or_404(team_repo, team_id)
    can_manage_team(team, current_user.id)

    update_data = team_in.model_dump(mode="json", exclude_unset=True)
    # name and visibility are required on the stored document
    for field in ("name", "visibility"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    if update_data:
        updated = await team_repo.update_details(team_id, update_data)
        if updated is None:
            raise NotFound("Team not found")
        team = updated
        logger.info(f"Team {team_id} updated by {current_user.id}: {sorted(update_data)}")

    users = await load_users(UserRepository(db), (m.user_id for m in team.members))
    return build_team_response(team, users)


@router.delete("/{team_id}", response_model=MessageResponse, responses={**RESP_AUTH_404})
async def delete_team(
    team_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Delete a team with its join requests, events and invite links. Owner only.
    """
    team_repo = TeamRepository(db)
    team = await get_team_or_404(team_repo, team_id)
    can_delete_team(team, current_user.id)

    async with transaction(db) as session:
        requests_deleted = await JoinRequestRepository(db).delete_by_team(team_id, session=session)
        events_deleted = await TeamEventRepository(db).delete_by_team(team_id, session=session)
        invites_deleted = await TeamInviteRepository(db).delete_by_team(team_id, session=session)
        await team_repo.delete(team_id, session=session)

    logger.info(
        f"Team {team_id} deleted by {current_user.id} "
        f"({requests_deleted} join requests, {events_deleted} events, {invites_deleted} invites removed)"
    )
    return {"message": "Team deleted successfully"}
