import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.api import deps
from teamhub.api.v1.helpers import build_event_response, build_participant_response, get_team_or_404, load_users
from teamhub.api.v1.helpers.responses import RESP_400, RESP_409, RESP_AUTH_400_404, RESP_AUTH_404
from teamhub.core.config import settings
from teamhub.core.constants import NotificationType
from teamhub.core.exceptions import BadRequest, Forbidden, NotFound
from teamhub.core.permissions import can_edit_event, can_manage_team, can_view_events
from teamhub.db.mongodb import get_database
from teamhub.models.team_event import TeamEvent
from teamhub.models.types import ensure_utc
from teamhub.models.user import User
from teamhub.repositories import TeamEventRepository, TeamRepository, UserRepository
from teamhub.schemas.common import MessageResponse
from teamhub.schemas.team_event import EventJoinResponse, TeamEventCreate, TeamEventResponse, TeamEventUpdate
from teamhub.services.event_participation import EventParticipationService
from teamhub.services.notifications import dispatch_notification, templates

logger = logging.getLogger(__name__)

MSG_LIMIT_BELOW_CONFIRMED = "max_participants cannot be lower than the number of confirmed participants"

router = APIRouter()


@router.post(
    "/{team_id}/events",
    response_model=TeamEventResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**RESP_AUTH_404, **RESP_400},
)
async def create_event(
    team_id: str,
    event_in: TeamEventCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Schedule a team event. Owner and admins only; the other members are notified.
    """
    team = await get_team_or_404(TeamRepository(db), team_id)
    can_manage_team(team, current_user.id)

    event = TeamEvent(team_id=team_id, created_by=current_user.id, **event_in.model_dump())
    await TeamEventRepository(db).create(event)
    logger.info(f"Event {event.id} created in team {team_id} by {current_user.id}")

    recipients = [m.user_id for m in team.members if m.user_id != current_user.id]
    title, message = templates.team_event_created(team.name, event.title)
    background_tasks.add_task(
        dispatch_notification, db, recipients, NotificationType.TEAM_EVENT_CREATED, title, message, event.id
    )

    return build_event_response(event, {})


@router.get("/{team_id}/events", response_model=List[TeamEventResponse], responses={**RESP_AUTH_404})
async def list_events(
    team_id: str,
    upcoming_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=500),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Team events ordered by start time. Team members only.
    """
    team = await get_team_or_404(TeamRepository(db), team_id)
    can_view_events(team, current_user.id)

    events = await TeamEventRepository(db).find_by_team(team_id, upcoming_only=upcoming_only, skip=skip, limit=limit)
    users = await load_users(UserRepository(db), (p.user_id for e in events for p in e.participants))
    return [build_event_response(e, users) for e in events]


@router.get("/{team_id}/events/{event_id}", response_model=TeamEventResponse, responses={**RESP_AUTH_404})
async def get_event(
    team_id: str,
    event_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    team = await get_team_or_404(TeamRepository(db), team_id)
    can_view_events(team, current_user.id)

    event = await TeamEventRepository(db).get_for_team(event_id, team_id)
    if not event:
        raise NotFound("Event not found")

    users = await load_users(UserRepository(db), (p.user_id for p in event.participants))
    return build_event_response(event, users)


async def _get_editable_event(
    db: AsyncIOMotorDatabase, team_id: str, event_id: str, acting_user_id: str
) -> TeamEvent:
    team = await get_team_or_404(TeamRepository(db), team_id)

    event = await TeamEventRepository(db).get_by_id(event_id)
    if not event:
        raise NotFound("Event not found")
    if event.team_id != team_id:
        raise Forbidden("Event does not belong to this team")

    can_edit_event(team, event, acting_user_id)
    return event


@router.patch(
    "/{team_id}/events/{event_id}",
    response_model=TeamEventResponse,
    responses={**RESP_AUTH_400_404},
)
async def update_event(
    team_id: str,
    event_id: str,
    event_in: TeamEventUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Edit an event. Allowed for its creator, the owner and admins.

    ``max_participants`` cannot drop below the number of confirmed participants.
    """
    event = await _get_editable_event(db, team_id, event_id, current_user.id)

    update_data = event_in.model_dump(exclude_unset=True)
    # title and starts_at are required on the stored document
    for field in ("title", "starts_at"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    starts_at = ensure_utc(update_data.get("starts_at", event.starts_at))
    ends_at = ensure_utc(update_data.get("ends_at", event.ends_at))
    if ends_at is not None and ends_at <= starts_at:
        raise BadRequest("ends_at must be after starts_at")

    new_limit = update_data.get("max_participants")
    if new_limit is not None and new_limit < event.confirmed_count:
        raise BadRequest(MSG_LIMIT_BELOW_CONFIRMED)

    if update_data:
        event_repo = TeamEventRepository(db)
        updated = await event_repo.update_details(event_id, team_id, update_data)
        if updated is None:
            # Deleted, or joins raised the confirmed count past the new limit
            if await event_repo.get_for_team(event_id, team_id) is None:
                raise NotFound("Event not found")
            raise BadRequest(MSG_LIMIT_BELOW_CONFIRMED)
        event = updated
        logger.info(f"Event {event_id} updated by {current_user.id}: {sorted(update_data)}")

    users = await load_users(UserRepository(db), (p.user_id for p in event.participants))
    return build_event_response(event, users)


@router.delete("/{team_id}/events/{event_id}", response_model=MessageResponse, responses={**RESP_AUTH_404})
async def delete_event(
    team_id: str,
    event_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Delete an event with its participations. Allowed for its creator, the owner and admins.
    """
    await _get_editable_event(db, team_id, event_id, current_user.id)

    if not await TeamEventRepository(db).delete(event_id):
        raise NotFound("Event not found")

    logger.info(f"Event {event_id} deleted by {current_user.id}")
    return {"message": "Event deleted successfully"}


@router.post(
    "/{team_id}/events/{event_id}/join",
    response_model=EventJoinResponse,
    responses={**RESP_AUTH_400_404, **RESP_409},
)
async def join_event(
    team_id: str,
    event_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Take a seat at a team event. Team members only; fails with 400 when the
    event is full or the caller already participates.
    """
    event, participant = await EventParticipationService(db).join(team_id, event_id, current_user.id)

    if event.created_by != current_user.id:
        title, message = templates.event_joined(current_user.display_name, event.title)
        background_tasks.add_task(
            dispatch_notification, db, [event.created_by], NotificationType.EVENT_JOINED, title, message, event.id
        )

    return {
        "message": "Joined event successfully",
        "participation": build_participant_response(participant, {current_user.id: current_user}),
    }


@router.delete("/{team_id}/events/{event_id}/join", response_model=MessageResponse, responses={**RESP_AUTH_404})
async def leave_event(
    team_id: str,
    event_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Cancel the caller's participation. The entry is kept as ``cancelled`` so
    the caller can join again later.
    """
    event = await EventParticipationService(db).leave(team_id, event_id, current_user.id)

    if event.created_by != current_user.id:
        title, message = templates.event_cancelled(current_user.display_name, event.title)
        background_tasks.add_task(
            dispatch_notification, db, [event.created_by], NotificationType.EVENT_CANCELLED, title, message, event.id
        )

    return {"message": "Left event successfully"}
