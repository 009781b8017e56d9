"""
MongoDB Connection Utility

The document store holds the same entities as the relational store, one
collection each. Integer ids are allocated from the ``counters`` collection
so API payloads look the same whichever backend is running.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

from app.core.config import Settings
from app.core.exceptions import Conflict, StoreError, StoreUnavailable

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: Optional[MongoClient] = None

# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "alumni": "alumni",
    "jobs": "pekerjaan_alumni",
    "files": "files",
    "counters": "counters",
}

UNAVAILABLE_ERRORS = (
    AutoReconnect,
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    ServerSelectionTimeoutError,
    WTimeoutError,
)


def get_mongo_client(settings: Settings) -> MongoClient:
    """Get or create MongoDB client (singleton), every operation bounded by the store timeout."""
    global _client
    if _client is None:
        timeout_ms = int(settings.store_timeout_seconds * 1000)
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
        )
    return _client


def get_mongo_db(settings: Settings) -> Database:
    """Get the configured database"""
    return get_mongo_client(settings)[settings.mongodb_db]


@contextmanager
def mongo_errors() -> Iterator[None]:
    """Translate pymongo failures into application errors."""
    try:
        yield
    except DuplicateKeyError as exc:
        logger.info("Duplicate key: %s", exc.details)
        raise Conflict("Record conflicts with existing data") from exc
    except UNAVAILABLE_ERRORS as exc:
        logger.warning("MongoDB unavailable: %s", exc)
        raise StoreUnavailable() from exc
    except PyMongoError as exc:
        logger.error("MongoDB error: %s", exc)
        raise StoreError() from exc


def next_sequence(db: Database, name: str) -> int:
    """Atomically allocate the next integer id for a collection."""
    counter = db[COLLECTIONS["counters"]].find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(counter["seq"])


def get_collection(db: Database, key: str) -> Collection:
    return db[COLLECTIONS[key]]


def test_mongo_connection(db: Database) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with mongo_errors():
            db.command("ping")
        return True
    except (StoreUnavailable, StoreError) as exc:
        logger.warning("MongoDB connection check failed: %s", exc)
        return False


def init_mongo_indexes(db: Database) -> None:
    """
    Create indexes for the lookups and uniqueness rules.
    Call this once during app startup.
    """
    with mongo_errors():
        users = get_collection(db, "users")
        users.create_index("username", unique=True)
        users.create_index("email", unique=True)

        alumni = get_collection(db, "alumni")
        alumni.create_index("nim", unique=True)
        # One profile per user; ownerless profiles omit the field
        alumni.create_index("user_id", unique=True, sparse=True)

        jobs = get_collection(db, "jobs")
        jobs.create_index([("alumni_id", ASCENDING), ("is_deleted", ASCENDING)])
        jobs.create_index([("is_deleted", ASCENDING), ("deleted_at", DESCENDING)])

        get_collection(db, "files").create_index("alumni_id")

    logger.info("MongoDB indexes ensured")
