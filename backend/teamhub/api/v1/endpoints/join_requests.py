from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.api import deps
from teamhub.api.v1.helpers import build_join_request_response, load_users, manager_ids
from teamhub.api.v1.helpers.responses import RESP_400, RESP_409, RESP_AUTH_400_404, RESP_AUTH_404
from teamhub.core.constants import JoinRequestStatus, NotificationType
from teamhub.db.mongodb import get_database
from teamhub.models.user import User
from teamhub.repositories import UserRepository
from teamhub.schemas.join_request import JoinRequestDecision, JoinRequestDecisionResponse, JoinRequestResponse
from teamhub.services.join_requests import JoinRequestService
from teamhub.services.notifications import dispatch_notification, templates

router = APIRouter()


@router.post(
    "/{team_id}/join-requests",
    response_model=JoinRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404, **RESP_400},
)
async def create_join_request(
    team_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Ask to join a team. Owner and admins are notified.
    """
    team, join_request = await JoinRequestService(db).submit(team_id, current_user.id)

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

    return build_join_request_response(join_request, {current_user.id: current_user}, team)


@router.get("/{team_id}/join-requests", response_model=List[JoinRequestResponse], responses={**RESP_AUTH_404})
async def list_join_requests(
    team_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Pending join requests, newest first. Owner and admins only.
    """
    team, pending = await JoinRequestService(db).list_pending(team_id, current_user.id)
    users = await load_users(UserRepository(db), (r.user_id for r in pending))
    return [build_join_request_response(r, users, team) for r in pending]


@router.patch(
    "/{team_id}/join-requests/{request_id}",
    response_model=JoinRequestDecisionResponse,
    responses={**RESP_AUTH_400_404, **RESP_409},
)
async def decide_join_request(
    team_id: str,
    request_id: str,
    decision: JoinRequestDecision,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Approve or reject a pending join request.

    Approval adds the requester as a ``member``. A request is decided once;
    any later decision fails with 400.
    """
    team, join_request = await JoinRequestService(db).decide(team_id, request_id, current_user.id, decision.action)

    approved = join_request.status == JoinRequestStatus.APPROVED
    notification_type = NotificationType.TEAM_JOIN_APPROVED if approved else NotificationType.TEAM_JOIN_REJECTED
    title, message = templates.join_request_decided(team.name, approved)
    background_tasks.add_task(
        dispatch_notification, db, [join_request.user_id], notification_type, title, message, team_id
    )

    return {
        "message": "Join request approved" if approved else "Join request rejected",
        "status": join_request.status,
    }
