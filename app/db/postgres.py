"""
Relational store connection utility and table definitions.

PostgreSQL in production; any SQLAlchemy URL works (the tests run on
in-memory SQLite). Tables are declared with SQLAlchemy Core so the same
queries compile for both dialects.
"""

import logging
import math
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    event,
    false,
    text,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import StaticPool

from app.core.exceptions import Conflict, StoreError, StoreUnavailable

logger = logging.getLogger(__name__)

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(50), nullable=False, unique=True),
    Column("email", String(100), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(10), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

alumni_table = Table(
    "alumni",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="SET NULL"), unique=True, nullable=True),
    Column("nim", String(20), nullable=False, unique=True),
    Column("name", String(100), nullable=False),
    Column("program", String(100), nullable=False),
    Column("cohort_year", Integer, nullable=False),
    Column("graduation_year", Integer, nullable=False),
    Column("email", String(100), nullable=False),
    Column("phone", String(20)),
    Column("address", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

jobs_table = Table(
    "pekerjaan_alumni",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("alumni_id", Integer, ForeignKey("alumni.id", ondelete="CASCADE"), nullable=False),
    Column("company", String(100), nullable=False),
    Column("position", String(100), nullable=False),
    Column("industry", String(100), nullable=False),
    Column("location", String(100), nullable=False),
    Column("salary_range", String(50)),
    Column("start_date", String(10), nullable=False),
    Column("end_date", String(10)),
    Column("status", String(20), nullable=False),
    Column("description", Text),
    Column("is_deleted", Boolean, nullable=False, default=False, server_default=false()),
    Column("deleted_at", DateTime(timezone=True)),
    Column("deleted_by", Integer, ForeignKey("users.id", ondelete="SET NULL")),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_pekerjaan_alumni_alumni_id", "alumni_id"),
    Index("ix_pekerjaan_alumni_trash", "is_deleted", "deleted_at"),
)

files_table = Table(
    "files",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("alumni_id", Integer, ForeignKey("alumni.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("category", String(20), nullable=False),
    Column("file_name", String(100), nullable=False),
    Column("original_name", String(255), nullable=False),
    Column("file_path", String(500), nullable=False),
    Column("file_size", BigInteger, nullable=False),
    Column("content_type", String(100), nullable=False),
    Column("uploaded_at", DateTime(timezone=True), nullable=False),
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sql_engine(url: str, timeout_seconds: float = 5.0, echo: bool = False) -> Engine:
    """
    Build an engine whose every interaction is bounded by ``timeout_seconds``.

    pool_size=5 / max_overflow=10: a handful of ready connections, more under load.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout_seconds}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=timeout_seconds,
        pool_pre_ping=True,
        echo=echo,
        connect_args={
            "connect_timeout": max(1, math.ceil(timeout_seconds)),
            "options": f"-c statement_timeout={int(timeout_seconds * 1000)}",
        },
    )


def create_schema(engine: Engine) -> None:
    """Create missing tables. Call once during app startup."""
    with get_connection(engine) as conn:
        metadata.create_all(conn)


@contextmanager
def get_connection(engine: Engine) -> Iterator[Connection]:
    """
    Transactional connection with driver errors translated.

    Usage:
        with get_connection(engine) as conn:
            conn.execute(select(users_table))
    """
    try:
        with engine.begin() as conn:
            yield conn
    except IntegrityError as exc:
        logger.info("Integrity violation: %s", exc.orig)
        raise Conflict("Record conflicts with existing data") from exc
    except (OperationalError, PoolTimeoutError) as exc:
        logger.warning("SQL store unavailable: %s", exc)
        raise StoreUnavailable() from exc
    except SQLAlchemyError as exc:
        logger.error("SQL store error: %s", exc)
        raise StoreError() from exc


def test_sql_connection(engine: Engine) -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_connection(engine) as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1
    except (StoreUnavailable, StoreError) as exc:
        logger.warning("SQL connection check failed: %s", exc)
        return False
