from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from teamhub.models.types import PyObjectId


class User(BaseModel):
    """Read-only view of a user profile owned by the identity provider."""

    id: PyObjectId = Field(validation_alias="_id", serialization_alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    nickname: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool = True

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def display_name(self) -> str:
        return self.nickname or self.name or self.email or self.id
