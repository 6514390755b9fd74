import logging

import pymongo

from teamhub.core.constants import JoinRequestStatus
from teamhub.db.mongodb import get_database

logger = logging.getLogger(__name__)


async def create_indexes(db):
    """Creates indexes for all collections to ensure performance."""
    logger.info("Creating database indexes...")

    # Teams
    await db["teams"].create_index("members.user_id")
    await db["teams"].create_index("visibility")
    await db["teams"].create_index([("created_at", pymongo.DESCENDING)])

    # Join Requests
    # At most one pending request per (team, user); decided requests are kept as history
    await db["team_join_requests"].create_index(
        [("team_id", pymongo.ASCENDING), ("user_id", pymongo.ASCENDING)],
        unique=True,
        partialFilterExpression={"status": JoinRequestStatus.PENDING.value},
        name="unique_pending_join_request",
    )
    await db["team_join_requests"].create_index(
        [("team_id", pymongo.ASCENDING), ("status", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)]
    )

    # Team Events
    await db["team_events"].create_index("team_id")
    await db["team_events"].create_index([("team_id", pymongo.ASCENDING), ("starts_at", pymongo.ASCENDING)])

    # Team Invites
    await db["team_invites"].create_index("token", unique=True)
    await db["team_invites"].create_index([("team_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)])

    # Notifications
    await db["notifications"].create_index([("user_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)])
    await db["notifications"].create_index([("user_id", pymongo.ASCENDING), ("is_read", pymongo.ASCENDING)])

    logger.info("Database indexes created")


async def init_db():
    db = await get_database()
    await create_indexes(db)
