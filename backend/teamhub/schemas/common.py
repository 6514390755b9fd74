from typing import Optional

from pydantic import BaseModel

from teamhub.models.user import User


class UserSummary(BaseModel):
    id: str
    name: Optional[str] = None
    nickname: Optional[str] = None
    email: Optional[str] = None
    profile_image: Optional[str] = None

    @classmethod
    def from_user(cls, user: Optional[User]) -> Optional["UserSummary"]:
        if user is None:
            return None
        return cls(
            id=user.id,
            name=user.name,
            nickname=user.nickname,
            email=user.email,
            profile_image=user.profile_image,
        )


class MessageResponse(BaseModel):
    message: str
