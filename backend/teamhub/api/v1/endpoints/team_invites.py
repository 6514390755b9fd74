from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.api import deps
from teamhub.api.v1.helpers import build_invite_response, build_join_request_response, load_users, manager_ids
from teamhub.api.v1.helpers.responses import RESP_400, RESP_401, RESP_404, RESP_AUTH_404
from teamhub.core.constants import NotificationType
from teamhub.db.mongodb import get_database
from teamhub.models.user import User
from teamhub.repositories import UserRepository
from teamhub.schemas.team_invite import (
    InviteAcceptResponse,
    InvitePreviewResponse,
    InviteTeamPreview,
    TeamInviteResponse,
)
from teamhub.services.notifications import dispatch_notification, templates
from teamhub.services.team_invites import TeamInviteService, invite_url

router = APIRouter()


@router.get("/invites/{token}", response_model=InvitePreviewResponse)
async def preview_invite(
    token: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Check an invite link and show the team behind it. No login needed;
    an unusable link answers ``valid: false`` with the reason.
    """
    problem, team = await TeamInviteService(db).preview(token)
    if problem:
        return InvitePreviewResponse(valid=False, error=problem)

    return InvitePreviewResponse(
        valid=True,
        team=InviteTeamPreview(
            id=team.id,
            name=team.name,
            description=team.description,
            icon_image=team.icon_image,
            member_count=len(team.members),
        ),
    )


@router.post("/invites/{token}", response_model=InviteAcceptResponse, responses={**RESP_401, **RESP_400, **RESP_404})
async def accept_invite(
    token: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Redeem an invite link. Files a pending join request for the caller and
    uses up the link; owner and admins are notified.
    """
    team, join_request = await TeamInviteService(db).accept(token, current_user.id)

    title, message = templates.join_request_received(current_user.display_name, team.name)
    background_tasks.add_task(
        dispatch_notification,
        db,
        manager_ids(team),
        NotificationType.TEAM_JOIN_REQUEST,
        title,
        message,
        join_request.id,
    )

    return {
        "message": "Join request submitted successfully",
        "join_request": build_join_request_response(join_request, {current_user.id: current_user}, team),
    }


@router.post(
    "/{team_id}/invites",
    response_model=TeamInviteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404},
)
async def create_invite(
    team_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Generate a single-use invite link. Owner and admins only.
    """
    invite = await TeamInviteService(db).create(team_id, current_user.id)
    return build_invite_response(invite, {current_user.id: current_user}, invite_url(invite))


@router.get("/{team_id}/invites", response_model=List[TeamInviteResponse], responses={**RESP_AUTH_404})
async def list_invites(
    team_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    All invite links of the team, newest first, used or not. Owner and admins only.
    """
    invites = await TeamInviteService(db).list_for_team(team_id, current_user.id)
    user_ids = [i.created_by for i in invites] + [i.used_by for i in invites if i.used_by]
    users = await load_users(UserRepository(db), user_ids)
    return [build_invite_response(i, users, invite_url(i)) for i in invites]
