"""
Record Store Interface.

The services only talk to these abstract repositories. Two implementations
exist (SQL through SQLAlchemy, documents through pymongo); which one runs
is decided once at startup by build_repositories().

Every method either returns a result or raises one of:
- StoreUnavailable: timeout / connectivity problem (retryable)
- StoreError: any other backend failure
- Conflict: a uniqueness rule was violated
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from app.models.domain import Alumni, JobRecord, StoredFile, User


@dataclass(frozen=True)
class SortSpec:
    """Already allow-listed sort field plus direction."""
    field: str
    descending: bool = True


@dataclass(frozen=True)
class AlumniFilter:
    search: str = ""


@dataclass(frozen=True)
class JobFilter:
    deleted: bool = False
    search: str = ""
    alumni_id: Optional[int] = None


# Fields covered by case-insensitive substring search
ALUMNI_SEARCH_FIELDS = ("name", "nim", "program", "email")
JOB_SEARCH_FIELDS = ("company", "position", "industry", "location", "status")


class UserRepository(ABC):
    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_by_login(self, username_or_email: str) -> Optional[User]:
        """Exact, case-sensitive match on username or email."""

    @abstractmethod
    def create(self, username: str, email: str, password_hash: str, role: str) -> User: ...


class AlumniRepository(ABC):
    @abstractmethod
    def get_by_id(self, alumni_id: int) -> Optional[Alumni]: ...

    @abstractmethod
    def get_by_user_id(self, user_id: int) -> Optional[Alumni]: ...

    @abstractmethod
    def create(self, values: Dict[str, Any]) -> Alumni: ...

    @abstractmethod
    def update(self, alumni_id: int, values: Dict[str, Any]) -> Optional[Alumni]:
        """Returns None when the record does not exist."""

    @abstractmethod
    def delete(self, alumni_id: int) -> bool:
        """Hard delete, together with the alumni's job records and file metadata."""

    @abstractmethod
    def list_page(self, flt: AlumniFilter, sort: SortSpec, limit: int, offset: int) -> List[Alumni]: ...

    @abstractmethod
    def count(self, flt: AlumniFilter) -> int: ...


class JobRepository(ABC):
    @abstractmethod
    def get_by_id(self, job_id: int) -> Optional[JobRecord]:
        """Fetch regardless of trash state."""

    @abstractmethod
    def create(self, values: Dict[str, Any]) -> JobRecord: ...

    @abstractmethod
    def update(self, job_id: int, values: Dict[str, Any]) -> Optional[JobRecord]:
        """Conditional update of an Active record; None if absent or trashed."""

    @abstractmethod
    def transition(self, job_id: int, from_deleted: bool, deleted_by: Optional[int], at: datetime) -> bool:
        """
        Single conditional write flipping is_deleted away from ``from_deleted``.

        Moving to trash stamps deleted_at/deleted_by; moving back clears them.
        Returns False when no record with id ``job_id`` is in the expected state.
        """

    @abstractmethod
    def list_page(self, flt: JobFilter, sort: SortSpec, limit: int, offset: int) -> List[JobRecord]: ...

    @abstractmethod
    def count(self, flt: JobFilter) -> int: ...

    @abstractmethod
    def list_by_alumni(self, alumni_id: int) -> List[JobRecord]:
        """Active records of one alumni, newest start_date first."""

    @abstractmethod
    def delete(self, job_id: int, only_deleted: Optional[bool] = None) -> bool:
        """
        Remove permanently. ``only_deleted`` restricts the delete to records in
        that trash state; None removes regardless. False when nothing matched.
        """


class FileRepository(ABC):
    @abstractmethod
    def create(self, values: Dict[str, Any]) -> StoredFile: ...

    @abstractmethod
    def get_by_id(self, file_id: int) -> Optional[StoredFile]: ...

    @abstractmethod
    def list_by_alumni(self, alumni_id: int) -> List[StoredFile]: ...

    @abstractmethod
    def delete(self, file_id: int) -> bool: ...


@dataclass
class Repositories:
    """Everything a request needs from the backing store."""

    users: UserRepository
    alumni: AlumniRepository
    jobs: JobRepository
    files: FileRepository
    backend: str
    ping: Callable[[], bool]
