"""
SQL implementation of the record store (PostgreSQL, or SQLite in tests).

State changes on job records are single conditional statements
(UPDATE/DELETE ... WHERE id = :id AND is_deleted = :expected); the number of
affected rows tells the caller whether the precondition held.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import Table, asc, delete, desc, func, insert, or_, select, true, update
from sqlalchemy.engine import Engine

from app.db.postgres import (
    alumni_table,
    files_table,
    get_connection,
    jobs_table,
    test_sql_connection,
    users_table,
)
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

M = TypeVar("M", bound=BaseModel)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_model(model: Type[M], row) -> Optional[M]:
    if row is None:
        return None
    return model.model_validate(dict(row))


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_clause(table: Table, fields, search: str):
    if not search:
        return true()
    pattern = f"%{_escape_like(search)}%"
    return or_(*[table.c[name].ilike(pattern, escape="\\") for name in fields])


def _order_by(table: Table, sort: SortSpec):
    direction = desc if sort.descending else asc
    primary = direction(table.c[sort.field]).nulls_last()
    return [primary, direction(table.c.id)]


class SqlUserRepository(UserRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def get_by_id(self, user_id: int) -> Optional[User]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                select(users_table).where(users_table.c.id == user_id)
            ).mappings().first()
        return _to_model(User, row)

    def get_by_login(self, username_or_email: str) -> Optional[User]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                select(users_table).where(
                    or_(users_table.c.username == username_or_email, users_table.c.email == username_or_email)
                )
            ).mappings().first()
        return _to_model(User, row)

    def create(self, username: str, email: str, password_hash: str, role: str) -> User:
        now = _utcnow()
        with get_connection(self.engine) as conn:
            row = conn.execute(
                insert(users_table)
                .values(username=username, email=email, password_hash=password_hash,
                        role=role, created_at=now, updated_at=now)
                .returning(*users_table.c)
            ).mappings().one()
        return _to_model(User, row)


class SqlAlumniRepository(AlumniRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def get_by_id(self, alumni_id: int) -> Optional[Alumni]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                select(alumni_table).where(alumni_table.c.id == alumni_id)
            ).mappings().first()
        return _to_model(Alumni, row)

    def get_by_user_id(self, user_id: int) -> Optional[Alumni]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                select(alumni_table).where(alumni_table.c.user_id == user_id)
            ).mappings().first()
        return _to_model(Alumni, row)

    def create(self, values: Dict[str, Any]) -> Alumni:
        now = _utcnow()
        with get_connection(self.engine) as conn:
            row = conn.execute(
                insert(alumni_table)
                .values(**values, created_at=now, updated_at=now)
                .returning(*alumni_table.c)
            ).mappings().one()
        return _to_model(Alumni, row)

    def update(self, alumni_id: int, values: Dict[str, Any]) -> Optional[Alumni]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                update(alumni_table)
                .where(alumni_table.c.id == alumni_id)
                .values(**values, updated_at=_utcnow())
                .returning(*alumni_table.c)
            ).mappings().first()
        return _to_model(Alumni, row)

    def delete(self, alumni_id: int) -> bool:
        # Job records and file metadata follow through ON DELETE CASCADE
        with get_connection(self.engine) as conn:
            result = conn.execute(delete(alumni_table).where(alumni_table.c.id == alumni_id))
        return result.rowcount > 0

    def list_page(self, flt: AlumniFilter, sort: SortSpec, limit: int, offset: int) -> List[Alumni]:
        query = (
            select(alumni_table)
            .where(_search_clause(alumni_table, ALUMNI_SEARCH_FIELDS, flt.search))
            .order_by(*_order_by(alumni_table, sort))
            .limit(limit)
            .offset(offset)
        )
        with get_connection(self.engine) as conn:
            rows = conn.execute(query).mappings().all()
        return [_to_model(Alumni, r) for r in rows]

    def count(self, flt: AlumniFilter) -> int:
        query = (
            select(func.count())
            .select_from(alumni_table)
            .where(_search_clause(alumni_table, ALUMNI_SEARCH_FIELDS, flt.search))
        )
        with get_connection(self.engine) as conn:
            return int(conn.execute(query).scalar_one())


class SqlJobRepository(JobRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def _where(self, flt: JobFilter):
        clauses = [
            jobs_table.c.is_deleted == flt.deleted,
            _search_clause(jobs_table, JOB_SEARCH_FIELDS, flt.search),
        ]
        if flt.alumni_id is not None:
            clauses.append(jobs_table.c.alumni_id == flt.alumni_id)
        return clauses

    def get_by_id(self, job_id: int) -> Optional[JobRecord]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                select(jobs_table).where(jobs_table.c.id == job_id)
            ).mappings().first()
        return _to_model(JobRecord, row)

    def create(self, values: Dict[str, Any]) -> JobRecord:
        now = _utcnow()
        with get_connection(self.engine) as conn:
            row = conn.execute(
                insert(jobs_table)
                .values(**values, is_deleted=False, created_at=now, updated_at=now)
                .returning(*jobs_table.c)
            ).mappings().one()
        return _to_model(JobRecord, row)

    def update(self, job_id: int, values: Dict[str, Any]) -> Optional[JobRecord]:
        active = False
        with get_connection(self.engine) as conn:
            row = conn.execute(
                update(jobs_table)
                .where(jobs_table.c.id == job_id, jobs_table.c.is_deleted == active)
                .values(**values, updated_at=_utcnow())
                .returning(*jobs_table.c)
            ).mappings().first()
        return _to_model(JobRecord, row)

    def transition(self, job_id: int, from_deleted: bool, deleted_by: Optional[int], at: datetime) -> bool:
        if from_deleted:
            changes = {"is_deleted": False, "deleted_at": None, "deleted_by": None}
        else:
            changes = {"is_deleted": True, "deleted_at": at, "deleted_by": deleted_by}
        with get_connection(self.engine) as conn:
            result = conn.execute(
                update(jobs_table)
                .where(jobs_table.c.id == job_id, jobs_table.c.is_deleted == from_deleted)
                .values(**changes)
            )
        return result.rowcount == 1

    def list_page(self, flt: JobFilter, sort: SortSpec, limit: int, offset: int) -> List[JobRecord]:
        query = (
            select(jobs_table)
            .where(*self._where(flt))
            .order_by(*_order_by(jobs_table, sort))
            .limit(limit)
            .offset(offset)
        )
        with get_connection(self.engine) as conn:
            rows = conn.execute(query).mappings().all()
        return [_to_model(JobRecord, r) for r in rows]

    def count(self, flt: JobFilter) -> int:
        query = select(func.count()).select_from(jobs_table).where(*self._where(flt))
        with get_connection(self.engine) as conn:
            return int(conn.execute(query).scalar_one())

    def list_by_alumni(self, alumni_id: int) -> List[JobRecord]:
        active = False
        query = (
            select(jobs_table)
            .where(jobs_table.c.alumni_id == alumni_id, jobs_table.c.is_deleted == active)
            .order_by(desc(jobs_table.c.start_date), desc(jobs_table.c.id))
        )
        with get_connection(self.engine) as conn:
            rows = conn.execute(query).mappings().all()
        return [_to_model(JobRecord, r) for r in rows]

    def delete(self, job_id: int, only_deleted: Optional[bool] = None) -> bool:
        query = delete(jobs_table).where(jobs_table.c.id == job_id)
        if only_deleted is not None:
            query = query.where(jobs_table.c.is_deleted == only_deleted)
        with get_connection(self.engine) as conn:
            result = conn.execute(query)
        return result.rowcount > 0


class SqlFileRepository(FileRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def create(self, values: Dict[str, Any]) -> StoredFile:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                insert(files_table)
                .values(**values, uploaded_at=_utcnow())
                .returning(*files_table.c)
            ).mappings().one()
        return _to_model(StoredFile, row)

    def get_by_id(self, file_id: int) -> Optional[StoredFile]:
        with get_connection(self.engine) as conn:
            row = conn.execute(
                select(files_table).where(files_table.c.id == file_id)
            ).mappings().first()
        return _to_model(StoredFile, row)

    def list_by_alumni(self, alumni_id: int) -> List[StoredFile]:
        with get_connection(self.engine) as conn:
            rows = conn.execute(
                select(files_table)
                .where(files_table.c.alumni_id == alumni_id)
                .order_by(desc(files_table.c.uploaded_at), desc(files_table.c.id))
            ).mappings().all()
        return [_to_model(StoredFile, r) for r in rows]

    def delete(self, file_id: int) -> bool:
        with get_connection(self.engine) as conn:
            result = conn.execute(delete(files_table).where(files_table.c.id == file_id))
        return result.rowcount > 0


def build_sql_repositories(engine: Engine) -> Repositories:
    return Repositories(
        users=SqlUserRepository(engine),
        alumni=SqlAlumniRepository(engine),
        jobs=SqlJobRepository(engine),
        files=SqlFileRepository(engine),
        backend="postgres",
        ping=lambda: test_sql_connection(engine),
    )
