"""
Domain records shared by every store implementation.

Both the SQL and the document repositories hand these back, so services
never see driver rows or raw documents.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    admin = "admin"
    user = "user"


class JobStatus(str, Enum):
    active = "active"
    completed = "completed"
    resigned = "resigned"


class FileCategory(str, Enum):
    photo = "photo"
    certificate = "certificate"


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    password_hash: str = Field(default="", exclude=True, repr=False)
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Alumni(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    nim: str
    name: str
    program: str
    cohort_year: int
    graduation_year: int
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    alumni_id: int
    company: str
    position: str
    industry: str
    location: str
    salary_range: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    status: str
    description: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_trashed(self) -> bool:
        return self.is_deleted


class StoredFile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    alumni_id: int
    category: FileCategory
    file_name: str
    original_name: str
    file_path: str
    file_size: int
    content_type: str
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class Actor:
    """Authenticated identity performing a request.

    ``alumni_id`` is filled lazily by services that need ownership checks.
    """

    user_id: int
    username: str
    role: UserRole
    alumni_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
