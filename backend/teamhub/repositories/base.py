"""
Base Repository Pattern

Generic base class for the collection-backed repositories.
Multi-document workflows pass an optional ``session`` so the same calls can
run inside a transaction.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Generic base repository providing common CRUD operations.

    Usage:
        class TeamRepository(BaseRepository[Team]):
            collection_name = "teams"
            model_class = Team
    """

    collection_name: str
    model_class: Type[T]

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection: AsyncIOMotorCollection = db[self.collection_name]

    def _to_model(self, data: Optional[Dict[str, Any]]) -> Optional[T]:
        if data is None:
            return None
        return self.model_class(**data)

    def _to_model_list(self, docs: List[Dict[str, Any]]) -> List[T]:
        return [self.model_class(**doc) for doc in docs]

    async def get_by_id(self, id: str, session: Optional[AsyncIOMotorClientSession] = None) -> Optional[T]:
        """Get a document by ID and return as model instance."""
        data = await self.collection.find_one({"_id": id}, session=session)
        return self._to_model(data)

    async def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        data = await self.collection.find_one(query)
        return self._to_model(data)

    async def find_many(
        self,
        query: Dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort_by: Optional[str] = None,
        sort_order: int = 1,
    ) -> List[T]:
        """Find multiple documents and return as model instances."""
        cursor = self.collection.find(query)
        if sort_by:
            cursor = cursor.sort(sort_by, sort_order)
        cursor = cursor.skip(skip).limit(limit)
        docs = await cursor.to_list(limit)
        return self._to_model_list(docs)

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(query or {})

    async def create(self, model: T, session: Optional[AsyncIOMotorClientSession] = None) -> T:
        """Insert a model. Unique index violations propagate as DuplicateKeyError."""
        await self.collection.insert_one(model.model_dump(by_alias=True), session=session)
        return model

    async def create_many(self, models: List[T]) -> int:
        if not models:
            return 0
        docs = [m.model_dump(by_alias=True) for m in models]
        result = await self.collection.insert_many(docs)
        return len(result.inserted_ids)

    async def update(self, id: str, update_data: Dict[str, Any]) -> Optional[T]:
        """Update a document by ID and return the updated model."""
        if update_data:
            await self.collection.update_one({"_id": id}, {"$set": update_data})
        return await self.get_by_id(id)

    async def delete(self, id: str, session: Optional[AsyncIOMotorClientSession] = None) -> bool:
        result = await self.collection.delete_one({"_id": id}, session=session)
        return result.deleted_count > 0

    async def delete_many(self, query: Dict[str, Any], session: Optional[AsyncIOMotorClientSession] = None) -> int:
        result = await self.collection.delete_many(query, session=session)
        return result.deleted_count
