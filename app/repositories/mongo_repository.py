"""
MongoDB implementation of the record store.

Collections in this database:
1. users            - login identities
2. alumni           - alumni profiles
3. pekerjaan_alumni - job records, including trashed ones
4. files            - upload metadata (blobs live on disk)
5. counters         - integer id sequences

Job state transitions are single update_one/delete_one calls whose filter
carries the expected is_deleted value, so a racing request simply matches
nothing.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from app.db.mongodb import get_collection, mongo_errors, next_sequence, test_mongo_connection
from app.models.domain import Alumni, JobRecord, StoredFile, User
from app.repositories.base import (
    ALUMNI_SEARCH_FIELDS,
    JOB_SEARCH_FIELDS,
    AlumniFilter,
    AlumniRepository,
    FileRepository,
    JobFilter,
    JobRepository,
    Repositories,
    SortSpec,
    UserRepository,
)


# ============================================================
# HELPERS
# ============================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Turn a stored document into plain record fields (``_id`` -> ``id``)."""
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = doc.pop("_id")
    return doc


def search_filter(fields, search: str) -> dict:
    if not search:
        return {}
    pattern = re.escape(search)
    return {"$or": [{name: {"$regex": pattern, "$options": "i"}} for name in fields]}


def sort_keys(sort: SortSpec) -> list:
    direction = DESCENDING if sort.descending else ASCENDING
    field = "_id" if sort.field == "id" else sort.field
    keys = [(field, direction)]
    if field != "_id":
        keys.append(("_id", direction))
    return keys


# ============================================================
# USERS
# ============================================================

class MongoUserRepository(UserRepository):
    def __init__(self, db: Database):
        self.db = db
        self.collection: Collection = get_collection(db, "users")

    def get_by_id(self, user_id: int) -> Optional[User]:
        with mongo_errors():
            doc = self.collection.find_one({"_id": user_id})
        return User.model_validate(serialize_doc(doc)) if doc else None

    def get_by_login(self, username_or_email: str) -> Optional[User]:
        with mongo_errors():
            doc = self.collection.find_one(
                {"$or": [{"username": username_or_email}, {"email": username_or_email}]}
            )
        return User.model_validate(serialize_doc(doc)) if doc else None

    def create(self, username: str, email: str, password_hash: str, role: str) -> User:
        now = _utcnow()
        with mongo_errors():
            doc = {
                "_id": next_sequence(self.db, "users"),
                "username": username,
                "email": email,
                "password_hash": password_hash,
                "role": role,
                "created_at": now,
                "updated_at": now,
            }
            self.collection.insert_one(doc)
        return User.model_validate(serialize_doc(doc))


# ============================================================
# ALUMNI
# ============================================================

class MongoAlumniRepository(AlumniRepository):
    def __init__(self, db: Database):
        self.db = db
        self.collection: Collection = get_collection(db, "alumni")

    def get_by_id(self, alumni_id: int) -> Optional[Alumni]:
        with mongo_errors():
            doc = self.collection.find_one({"_id": alumni_id})
        return Alumni.model_validate(serialize_doc(doc)) if doc else None

    def get_by_user_id(self, user_id: int) -> Optional[Alumni]:
        with mongo_errors():
            doc = self.collection.find_one({"user_id": user_id})
        return Alumni.model_validate(serialize_doc(doc)) if doc else None

    def create(self, values: Dict[str, Any]) -> Alumni:
        now = _utcnow()
        doc = {k: v for k, v in values.items() if not (k == "user_id" and v is None)}
        with mongo_errors():
            doc.update({"_id": next_sequence(self.db, "alumni"), "created_at": now, "updated_at": now})
            self.collection.insert_one(doc)
        return Alumni.model_validate(serialize_doc(doc))

    def update(self, alumni_id: int, values: Dict[str, Any]) -> Optional[Alumni]:
        with mongo_errors():
            doc = self.collection.find_one_and_update(
                {"_id": alumni_id},
                {"$set": {**values, "updated_at": _utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
        return Alumni.model_validate(serialize_doc(doc)) if doc else None

    def delete(self, alumni_id: int) -> bool:
        with mongo_errors():
            result = self.collection.delete_one({"_id": alumni_id})
            if result.deleted_count == 0:
                return False
            # No foreign keys here, so dependents are removed explicitly
            get_collection(self.db, "jobs").delete_many({"alumni_id": alumni_id})
            get_collection(self.db, "files").delete_many({"alumni_id": alumni_id})
        return True

    def list_page(self, flt: AlumniFilter, sort: SortSpec, limit: int, offset: int) -> List[Alumni]:
        with mongo_errors():
            cursor = (
                self.collection.find(search_filter(ALUMNI_SEARCH_FIELDS, flt.search))
                .sort(sort_keys(sort))
                .skip(offset)
                .limit(limit)
            )
            docs = list(cursor)
        return [Alumni.model_validate(serialize_doc(d)) for d in docs]

    def count(self, flt: AlumniFilter) -> int:
        with mongo_errors():
            return self.collection.count_documents(search_filter(ALUMNI_SEARCH_FIELDS, flt.search))


# ============================================================
# JOB RECORDS
# ============================================================

class MongoJobRepository(JobRepository):
    def __init__(self, db: Database):
        self.db = db
        self.collection: Collection = get_collection(db, "jobs")

    def _query(self, flt: JobFilter) -> dict:
        query = {"is_deleted": flt.deleted, **search_filter(JOB_SEARCH_FIELDS, flt.search)}
        if flt.alumni_id is not None:
            query["alumni_id"] = flt.alumni_id
        return query

    def get_by_id(self, job_id: int) -> Optional[JobRecord]:
        with mongo_errors():
            doc = self.collection.find_one({"_id": job_id})
        return JobRecord.model_validate(serialize_doc(doc)) if doc else None

    def create(self, values: Dict[str, Any]) -> JobRecord:
        now = _utcnow()
        with mongo_errors():
            doc = {
                **values,
                "_id": next_sequence(self.db, "jobs"),
                "is_deleted": False,
                "deleted_at": None,
                "deleted_by": None,
                "created_at": now,
                "updated_at": now,
            }
            self.collection.insert_one(doc)
        return JobRecord.model_validate(serialize_doc(doc))

    def update(self, job_id: int, values: Dict[str, Any]) -> Optional[JobRecord]:
        with mongo_errors():
            doc = self.collection.find_one_and_update(
                {"_id": job_id, "is_deleted": False},
                {"$set": {**values, "updated_at": _utcnow()}},
                return_document=ReturnDocument.AFTER,
            )
        return JobRecord.model_validate(serialize_doc(doc)) if doc else None

    def transition(self, job_id: int, from_deleted: bool, deleted_by: Optional[int], at: datetime) -> bool:
        if from_deleted:
            changes = {"is_deleted": False, "deleted_at": None, "deleted_by": None}
        else:
            changes = {"is_deleted": True, "deleted_at": at, "deleted_by": deleted_by}
        with mongo_errors():
            result = self.collection.update_one(
                {"_id": job_id, "is_deleted": from_deleted},
                {"$set": changes},
            )
        return result.modified_count == 1

    def list_page(self, flt: JobFilter, sort: SortSpec, limit: int, offset: int) -> List[JobRecord]:
        with mongo_errors():
            docs = list(
                self.collection.find(self._query(flt))
                .sort(sort_keys(sort))
                .skip(offset)
                .limit(limit)
            )
        return [JobRecord.model_validate(serialize_doc(d)) for d in docs]

    def count(self, flt: JobFilter) -> int:
        with mongo_errors():
            return self.collection.count_documents(self._query(flt))

    def list_by_alumni(self, alumni_id: int) -> List[JobRecord]:
        with mongo_errors():
            docs = list(
                self.collection.find({"alumni_id": alumni_id, "is_deleted": False})
                .sort([("start_date", DESCENDING), ("_id", DESCENDING)])
            )
        return [JobRecord.model_validate(serialize_doc(d)) for d in docs]

    def delete(self, job_id: int, only_deleted: Optional[bool] = None) -> bool:
        query: Dict[str, Any] = {"_id": job_id}
        if only_deleted is not None:
            query["is_deleted"] = only_deleted
        with mongo_errors():
            result = self.collection.delete_one(query)
        return result.deleted_count == 1


# ============================================================
# FILE METADATA
# ============================================================

class MongoFileRepository(FileRepository):
    def __init__(self, db: Database):
        self.db = db
        self.collection: Collection = get_collection(db, "files")

    def create(self, values: Dict[str, Any]) -> StoredFile:
        with mongo_errors():
            doc = {**values, "_id": next_sequence(self.db, "files"), "uploaded_at": _utcnow()}
            self.collection.insert_one(doc)
        return StoredFile.model_validate(serialize_doc(doc))

    def get_by_id(self, file_id: int) -> Optional[StoredFile]:
        with mongo_errors():
            doc = self.collection.find_one({"_id": file_id})
        return StoredFile.model_validate(serialize_doc(doc)) if doc else None

    def list_by_alumni(self, alumni_id: int) -> List[StoredFile]:
        with mongo_errors():
            docs = list(
                self.collection.find({"alumni_id": alumni_id})
                .sort([("uploaded_at", DESCENDING), ("_id", DESCENDING)])
            )
        return [StoredFile.model_validate(serialize_doc(d)) for d in docs]

    def delete(self, file_id: int) -> bool:
        with mongo_errors():
            result = self.collection.delete_one({"_id": file_id})
        return result.deleted_count == 1


def build_mongo_repositories(db: Database) -> Repositories:
    return Repositories(
        users=MongoUserRepository(db),
        alumni=MongoAlumniRepository(db),
        jobs=MongoJobRepository(db),
        files=MongoFileRepository(db),
        backend="mongodb",
        ping=lambda: test_mongo_connection(db),
    )
