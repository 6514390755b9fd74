import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from teamhub.core.constants import ParticipationStatus
from teamhub.models.types import PyObjectId


class EventParticipant(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    status: ParticipationStatus = ParticipationStatus.CONFIRMED
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class TeamEvent(BaseModel):
    id: PyObjectId = Field(
        default_factory=lambda: str(uuid.uuid4()),
        validation_alias="_id",
        serialization_alias="_id",
    )
    team_id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    starts_at: datetime
    ends_at: Optional[datetime] = None
    max_participants: Optional[int] = None  # None = unlimited
    created_by: str
    participants: List[EventParticipant] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    def get_participant(self, user_id: str) -> Optional[EventParticipant]:
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None

    @property
    def confirmed_count(self) -> int:
        return sum(1 for p in self.participants if p.status == ParticipationStatus.CONFIRMED)

    @property
    def is_full(self) -> bool:
        return self.max_participants is not None and self.confirmed_count >= self.max_participants
