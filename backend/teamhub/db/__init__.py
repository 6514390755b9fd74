"""
MongoDB client lifecycle and transaction helper.
"""

from teamhub.db.mongodb import (
    close_mongo_connection,
    connect_to_mongo,
    db,
    get_database,
    transaction,
)

__all__ = [
    "close_mongo_connection",
    "connect_to_mongo",
    "db",
    "get_database",
    "transaction",
]
