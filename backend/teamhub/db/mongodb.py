import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorDatabase

from teamhub.core.config import settings

logger = logging.getLogger(__name__)


class Database:
    client: AsyncIOMotorClient = None


db = Database()


async def get_database() -> AsyncIOMotorDatabase:
    return db.client[settings.DATABASE_NAME]


async def connect_to_mongo():
    db.client = AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)
    logger.info("Connected to MongoDB")


async def close_mongo_connection():
    if db.client is not None:
        db.client.close()
        logger.info("Closed MongoDB connection")


@asynccontextmanager
async def transaction(database: AsyncIOMotorDatabase) -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
    """
    Run a block inside a multi-document transaction.

    Yields the session to pass to every operation in the block. Any exception
    raised inside the block aborts the transaction. When transactions are
    disabled (standalone server) yields ``None`` and the caller is responsible
    for compensating on failure.
    """
    if not settings.MONGODB_TRANSACTIONS:
        yield None
        return

    async with await database.client.start_session() as session:
        async with session.start_transaction():
            yield session
