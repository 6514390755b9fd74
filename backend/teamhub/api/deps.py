from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamhub.core.exceptions import Unauthorized
from teamhub.core.security import decode_access_token
from teamhub.db.mongodb import get_database
from teamhub.models.user import User
from teamhub.repositories import UserRepository

# Missing credentials arrive as None; public read endpoints accept anonymous callers
bearer_scheme = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, db: AsyncIOMotorDatabase) -> User:
    token_data = decode_access_token(token)
    user = await UserRepository(db).get_by_id(token_data.sub)
    if user is None or not user.is_active:
        raise Unauthorized("Could not validate credentials")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> User:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Authentication required")
    return await _resolve_user(credentials.credentials, db)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> Optional[User]:
    """Caller identity for public read endpoints; None when no token is sent."""
    if credentials is None or not credentials.credentials:
        return None
    return await _resolve_user(credentials.credentials, db)
