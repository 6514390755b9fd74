from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from teamhub.core.constants import JoinRequestAction, JoinRequestStatus
from teamhub.schemas.common import UserSummary
from teamhub.schemas.team import TeamBrief


class JoinRequestResponse(BaseModel):
    id: str
    team_id: str
    user_id: str
    status: JoinRequestStatus
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None
    team: Optional[TeamBrief] = None


class JoinRequestDecision(BaseModel):
    action: JoinRequestAction


class JoinRequestDecisionResponse(BaseModel):
    message: str
    status: JoinRequestStatus
