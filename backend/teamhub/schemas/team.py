from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from teamhub.core.constants import ASSIGNABLE_ROLES, TeamRole, TeamVisibility
from teamhub.schemas.common import UserSummary


class TeamBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    icon_image: Optional[str] = None
    visibility: TeamVisibility = TeamVisibility.PUBLIC


class TeamCreate(TeamBase):
    pass


class TeamUpdate(TeamBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    visibility: Optional[TeamVisibility] = None


class TeamMemberResponse(BaseModel):
    id: str
    user_id: str
    role: TeamRole
    joined_at: datetime
    user: Optional[UserSummary] = None


class TeamResponse(TeamBase):
    id: str
    owner_id: str
    member_count: int
    members: List[TeamMemberResponse]
    created_at: datetime
    updated_at: datetime


class TeamBrief(BaseModel):
    id: str
    name: str
    icon_image: Optional[str] = None


class TeamMemberRoleUpdate(BaseModel):
    role: TeamRole

    @field_validator("role")
    @classmethod
    def validate_assignable(cls, v: TeamRole) -> TeamRole:
        if v not in ASSIGNABLE_ROLES:
            raise ValueError("Role must be 'admin' or 'member'")
        return v
