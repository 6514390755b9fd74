import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from teamhub.core.constants import TeamRole, TeamVisibility
from teamhub.models.types import PyObjectId


class TeamMember(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    role: TeamRole = TeamRole.MEMBER
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class Team(BaseModel):
    # validation_alias="_id": accepts _id from MongoDB
    # serialization_alias="_id": model_dump(by_alias=True) outputs _id for MongoDB
    id: PyObjectId = Field(
        default_factory=lambda: str(uuid.uuid4()),
        validation_alias="_id",
        serialization_alias="_id",
    )
    name: str
    description: Optional[str] = None
    icon_image: Optional[str] = None
    owner_id: str
    visibility: TeamVisibility = TeamVisibility.PUBLIC
    members: List[TeamMember] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    def get_member(self, user_id: Optional[str]) -> Optional[TeamMember]:
        if user_id is None:
            return None
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def role_of(self, user_id: Optional[str]) -> Optional[TeamRole]:
        member = self.get_member(user_id)
        return TeamRole(member.role) if member else None

    def is_member(self, user_id: Optional[str]) -> bool:
        return self.get_member(user_id) is not None
