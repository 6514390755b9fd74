from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.api import deps
from teamhub.api.v1.helpers.responses import RESP_401, RESP_404
from teamhub.core.config import settings
from teamhub.core.exceptions import NotFound
from teamhub.db.mongodb import get_database
from teamhub.models.user import User
from teamhub.repositories import NotificationRepository
from teamhub.schemas.common import MessageResponse
from teamhub.schemas.notification import MarkAllReadResponse, NotificationListResponse, NotificationResponse

router = APIRouter()


@router.get("", response_model=NotificationListResponse, responses={**RESP_401})
async def list_notifications(
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=500),
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    The caller's notifications, newest first, with the total unread count.
    """
    repo = NotificationRepository(db)
    notifications = await repo.find_for_user(current_user.id, unread_only=unread_only, skip=skip, limit=limit)
    return {
        "items": [NotificationResponse(**n.model_dump()) for n in notifications],
        "unread_count": await repo.count_unread(current_user.id),
    }


@router.patch("/{notification_id}/read", response_model=MessageResponse, responses={**RESP_401, **RESP_404})
async def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    if not await NotificationRepository(db).mark_read(notification_id, current_user.id):
        raise NotFound("Notification not found")
    return {"message": "Notification marked as read"}


@router.post("/read-all", response_model=MarkAllReadResponse, responses={**RESP_401})
async def mark_all_notifications_read(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    updated = await NotificationRepository(db).mark_all_read(current_user.id)
    return {"updated": updated}
