import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from teamhub.core.constants import JoinRequestStatus
from teamhub.models.types import PyObjectId


class TeamJoinRequest(BaseModel):
    id: PyObjectId = Field(
        default_factory=lambda: str(uuid.uuid4()),
        validation_alias="_id",
        serialization_alias="_id",
    )
    team_id: str
    user_id: str
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    @property
    def is_pending(self) -> bool:
        return self.status == JoinRequestStatus.PENDING
