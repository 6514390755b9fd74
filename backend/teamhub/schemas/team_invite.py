from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from teamhub.schemas.common import UserSummary
from teamhub.schemas.join_request import JoinRequestResponse


class TeamInviteResponse(BaseModel):
    id: str
    team_id: str
    token: str
    invite_url: str
    expires_at: datetime
    used_at: Optional[datetime] = None
    created_at: datetime
    created_by: Optional[UserSummary] = None
    used_by: Optional[UserSummary] = None


class InviteTeamPreview(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    icon_image: Optional[str] = None
    member_count: int


class InvitePreviewResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
    team: Optional[InviteTeamPreview] = None


class InviteAcceptResponse(BaseModel):
    message: str
    join_request: JoinRequestResponse
