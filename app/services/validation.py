"""
Field rules for alumni and job payloads.

Each validator walks every rule and collects the broken ones, so a client
gets the full list in one ValidationError instead of fixing fields one by one.
"""

from datetime import date
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import ValidationError
from app.models.domain import JobStatus
from app.schemas.schemas import AlumniCreate, AlumniUpdate, JobCreate, JobUpdate

JOB_STATUSES = tuple(s.value for s in JobStatus)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _raise_if_any(errors: List[str]) -> None:
    if errors:
        raise ValidationError(errors)


def _alumni_rules(data, errors: List[str]) -> None:
    if _blank(data.name):
        errors.append("name is required")
    if _blank(data.program):
        errors.append("program is required")
    if _blank(data.email):
        errors.append("email is required")
    else:
        try:
            validate_email(data.email, check_deliverability=False)
        except EmailNotValidError:
            errors.append("email must be a valid email address")
    if data.cohort_year is None or data.cohort_year <= 0:
        errors.append("cohort_year must be greater than 0")
    if data.graduation_year is None or data.graduation_year <= 0:
        errors.append("graduation_year must be greater than 0")
    if (data.cohort_year is not None and data.graduation_year is not None
            and data.graduation_year < data.cohort_year):
        errors.append("graduation_year cannot be earlier than cohort_year")


def validate_alumni_create(data: AlumniCreate) -> None:
    errors: List[str] = []
    if _blank(data.nim):
        errors.append("nim is required")
    _alumni_rules(data, errors)
    _raise_if_any(errors)


def validate_alumni_update(data: AlumniUpdate) -> None:
    errors: List[str] = []
    _alumni_rules(data, errors)
    _raise_if_any(errors)


def _job_rules(data, errors: List[str]) -> None:
    if _blank(data.company):
        errors.append("company is required")
    if _blank(data.position):
        errors.append("position is required")
    if _blank(data.industry):
        errors.append("industry is required")
    if _blank(data.location):
        errors.append("location is required")

    start = None
    if _blank(data.start_date):
        errors.append("start_date is required")
    else:
        start = _parse_date(data.start_date)
        if start is None:
            errors.append("start_date must be a date in YYYY-MM-DD format")

    if not _blank(data.end_date):
        end = _parse_date(data.end_date)
        if end is None:
            errors.append("end_date must be a date in YYYY-MM-DD format")
        elif start is not None and end < start:
            errors.append("end_date cannot be earlier than start_date")

    if _blank(data.status):
        errors.append("status is required")
    elif data.status not in JOB_STATUSES:
        errors.append("status must be one of: " + ", ".join(JOB_STATUSES))


def validate_job_create(data: JobCreate) -> None:
    errors: List[str] = []
    if data.alumni_id is None:
        errors.append("alumni_id is required")
    _job_rules(data, errors)
    _raise_if_any(errors)


def validate_job_update(data: JobUpdate) -> None:
    errors: List[str] = []
    _job_rules(data, errors)
    _raise_if_any(errors)
