from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from teamhub.core.constants import ParticipationStatus
from teamhub.models.types import ensure_utc
from teamhub.schemas.common import UserSummary


class TeamEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    starts_at: datetime
    ends_at: Optional[datetime] = None
    max_participants: Optional[int] = Field(None, ge=1)

    @field_validator("starts_at", "ends_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_time_range(self) -> "TeamEventCreate":
        if self.ends_at is not None and self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class ParticipantResponse(BaseModel):
    id: str
    user_id: str
    status: ParticipationStatus
    joined_at: datetime
    user: Optional[UserSummary] = None


class TeamEventResponse(BaseModel):
    id: str
    team_id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    starts_at: datetime
    ends_at: Optional[datetime] = None
    max_participants: Optional[int] = None
    confirmed_count: int
    created_by: str
    participants: List[ParticipantResponse]
    created_at: datetime


class EventJoinResponse(BaseModel):
    message: str
    participation: ParticipantResponse


class TeamEventUpdate(BaseModel):
    """Partial edit. ``max_participants: null`` lifts the limit."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    max_participants: Optional[int] = Field(None, ge=1)

    @field_validator("starts_at", "ends_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)
