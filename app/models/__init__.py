"""
Models module - domain records returned by the repositories.
"""

from app.models.domain import (
    Actor,
    Alumni,
    FileCategory,
    JobRecord,
    JobStatus,
    StoredFile,
    User,
    UserRole,
)

__all__ = [
    "Actor",
    "Alumni",
    "FileCategory",
    "JobRecord",
    "JobStatus",
    "StoredFile",
    "User",
    "UserRole",
]
