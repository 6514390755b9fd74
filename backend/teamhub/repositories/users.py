"""
User Repository

Read-only access to user profiles synced from the identity provider.
Profiles synced from older identity stores keep ObjectId ``_id`` values, so
lookups match an id both as a string and as an ObjectId.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClientSession

from teamhub.models.user import User
from teamhub.repositories.base import BaseRepository


def id_variants(user_id: str) -> List[Any]:
    """The string id plus its ObjectId form when it is a valid ObjectId."""
    if ObjectId.is_valid(user_id):
        return [user_id, ObjectId(user_id)]
    return [user_id]


class UserRepository(BaseRepository[User]):
    """Repository for user lookups."""

    collection_name = "users"
    model_class = User

    async def get_by_id(self, id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[User]:
        data = await self.collection.find_one({"_id": {"$in": id_variants(id)}}, session=session)
        return self._to_model(data)

    async def find_by_ids(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        candidates = [variant for user_id in user_ids for variant in id_variants(user_id)]
        cursor = self.collection.find({"_id": {"$in": candidates}})
        docs = await cursor.to_list(None)
        return self._to_model_list(docs)

    async def get_map(self, user_ids: List[str]) -> Dict[str, User]:
        """Map user id to user for the given ids; unknown ids are omitted."""
        return {user.id: user for user in await self.find_by_ids(list(set(user_ids)))}
