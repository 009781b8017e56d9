"""
Pydantic Schemas - Request/Response contracts

Request bodies are deliberately lenient (every field optional) so the
service layer can report all broken rules at once instead of failing on
the first missing field.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from app.models.domain import User

T = TypeVar("T")


# ============================================================
# AUTH SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    username: str = ""  # username or email
    password: str = ""


class LoginResponse(BaseModel):
    user: User
    token: str
    token_type: str = "bearer"


# ============================================================
# ALUMNI SCHEMAS
# ============================================================

class AlumniCreate(BaseModel):
    user_id: Optional[int] = None  # admin only; users always register themselves
    nim: Optional[str] = None
    name: Optional[str] = None
    program: Optional[str] = None
    cohort_year: Optional[int] = None
    graduation_year: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class AlumniUpdate(BaseModel):
    name: Optional[str] = None
    program: Optional[str] = None
    cohort_year: Optional[int] = None
    graduation_year: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    alumni_id: Optional[int] = None
    company: Optional[str] = None
    position: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


class JobUpdate(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


# ============================================================
# ENVELOPES
# ============================================================

class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
    sort_by: Optional[str] = None
    order: Optional[str] = None
    search: str = ""


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class PagedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: List[T]
    meta: PageMeta


class MessageResponse(BaseModel):
    success: bool = True
    message: str

