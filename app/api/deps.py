"""Dependency functions for FastAPI routes."""

from functools import lru_cache

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.repositories import Repositories, build_repositories
from app.services.alumni_service import AlumniService
from app.services.auth_service import AuthService
from app.services.file_service import FileService
from app.services.job_service import JobService


@lru_cache()
def get_repositories() -> Repositories:
    """Store handles for the process, built on first use. Tests override this."""
    return build_repositories(get_settings())


def get_auth_service(repos: Repositories = Depends(get_repositories)) -> AuthService:
    return AuthService(repos.users)


def get_alumni_service(repos: Repositories = Depends(get_repositories)) -> AlumniService:
    return AlumniService(repos.alumni, repos.users, repos.files)


def get_job_service(repos: Repositories = Depends(get_repositories)) -> JobService:
    return JobService(repos.jobs, repos.alumni)


def get_file_service(
    repos: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
) -> FileService:
    return FileService(repos.files, repos.alumni, settings.upload_dir)
