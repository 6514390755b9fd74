import secrets
import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from teamhub.models.types import PyObjectId, ensure_utc


class TeamInvite(BaseModel):
    """Single-use link that lets its holder ask to join a team."""

    id: PyObjectId = Field(
        default_factory=lambda: str(uuid.uuid4()),
        validation_alias="_id",
        serialization_alias="_id",
    )
    team_id: str
    token: str = Field(default_factory=lambda: secrets.token_hex(32))
    created_by: str
    expires_at: datetime
    used_at: Optional[datetime] = None
    used_by: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("expires_at", "used_at", "created_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    @property
    def is_used(self) -> bool:
        return self.used_at is not None
