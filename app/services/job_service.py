"""
Job Lifecycle Manager - job records and their trash.

States:
    Active  --soft_delete-->  Trashed  --restore-->  Active
    Trashed --hard_delete_from_trash-->  (removed)
    any     --delete (admin)-->          (removed)

Every transition is a single conditional write in the store. The record is
read first only to tell "missing" (NotFound) from "not yours" (Forbidden);
the write itself re-checks the state, so a racing request ends in NotFound
rather than a double transition.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional

from app.core.exceptions import Forbidden, NotFound
from app.core.policy import Action, can_act_on
from app.models.domain import Actor, JobRecord
from app.repositories.base import AlumniRepository, JobFilter, JobRepository, SortSpec
from app.schemas.schemas import JobCreate, JobUpdate
from app.services.pagination import Page, build_meta, normalize_paging, offset_for, resolve_sort
from app.services.validation import validate_job_create, validate_job_update

logger = logging.getLogger(__name__)

JOB_SORT_FIELDS = frozenset({
    "id", "alumni_id", "company", "position", "industry", "location", "status",
    "start_date", "created_at",
})

TRASH_SORT = SortSpec(field="deleted_at", descending=True)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _job_values(data) -> dict:
    return {
        "company": data.company.strip(),
        "position": data.position.strip(),
        "industry": data.industry.strip(),
        "location": data.location.strip(),
        "salary_range": _clean(data.salary_range),
        "start_date": data.start_date.strip(),
        "end_date": _clean(data.end_date),
        "status": data.status,
        "description": _clean(data.description),
    }


class JobService:
    def __init__(self, jobs: JobRepository, alumni: AlumniRepository):
        self.jobs = jobs
        self.alumni = alumni

    # ------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------

    def _resolve_actor(self, actor: Actor) -> Actor:
        """Attach the actor's own alumni id, needed for ownership checks."""
        if actor.is_admin or actor.alumni_id is not None:
            return actor
        profile = self.alumni.get_by_user_id(actor.user_id)
        return replace(actor, alumni_id=profile.id) if profile else actor

    def _authorize(self, actor: Actor, record: JobRecord, action: Action) -> None:
        if not can_act_on(actor, record, action):
            logger.warning("User %s denied %s on job id=%s", actor.user_id, action.value, record.id)
            raise Forbidden(f"Access denied: you can only {action.value.replace('_', ' ')} your own job records")

    # ------------------------------------------------------------
    # active records
    # ------------------------------------------------------------

    def list(self, search: str = "", sort_by: Optional[str] = None, order: Optional[str] = None,
             page: Optional[int] = None, limit: Optional[int] = None) -> Page[JobRecord]:
        page, limit = normalize_paging(page, limit)
        search = (search or "").strip()
        sort = resolve_sort(sort_by, order, JOB_SORT_FIELDS)
        flt = JobFilter(deleted=False, search=search)

        items = self.jobs.list_page(flt, sort, limit, offset_for(page, limit))
        total = self.jobs.count(flt)
        return Page(items=items, meta=build_meta(page, limit, total, sort, search))

    def get(self, job_id: int) -> JobRecord:
        record = self.jobs.get_by_id(job_id)
        if record is None or record.is_trashed:
            raise NotFound("Job record not found")
        return record

    def list_by_alumni(self, alumni_id: int) -> List[JobRecord]:
        if self.alumni.get_by_id(alumni_id) is None:
            raise NotFound("Alumni not found")
        return self.jobs.list_by_alumni(alumni_id)

    def create(self, data: JobCreate, actor: Actor) -> JobRecord:
        if data.alumni_id is not None and self.alumni.get_by_id(data.alumni_id) is None:
            raise NotFound("Alumni not found")
        validate_job_create(data)

        record = self.jobs.create({"alumni_id": data.alumni_id, **_job_values(data)})
        logger.info("%s created job id=%s for alumni id=%s", actor.username, record.id, record.alumni_id)
        return record

    def update(self, job_id: int, data: JobUpdate) -> JobRecord:
        self.get(job_id)
        validate_job_update(data)
        # Conditional on the record still being active
        record = self.jobs.update(job_id, _job_values(data))
        if record is None:
            raise NotFound("Job record not found")
        return record

    def delete(self, job_id: int) -> None:
        """Admin delete: permanent, whatever the trash state."""
        if not self.jobs.delete(job_id, only_deleted=None):
            raise NotFound("Job record not found")
        logger.info("Job id=%s permanently deleted by admin", job_id)

    # ------------------------------------------------------------
    # trash
    # ------------------------------------------------------------

    def soft_delete(self, job_id: int, actor: Actor) -> None:
        actor = self._resolve_actor(actor)
        record = self.jobs.get_by_id(job_id)
        if record is None or record.is_trashed:
            raise NotFound("Job record not found")
        self._authorize(actor, record, Action.SOFT_DELETE)

        moved = self.jobs.transition(job_id, from_deleted=False, deleted_by=actor.user_id,
                                     at=datetime.now(timezone.utc))
        if not moved:
            raise NotFound("Job record not found")
        logger.info("Job id=%s moved to trash by user id=%s", job_id, actor.user_id)

    def list_trash(self, actor: Actor, search: str = "", page: Optional[int] = None,
                   limit: Optional[int] = None) -> Page[JobRecord]:
        actor = self._resolve_actor(actor)
        page, limit = normalize_paging(page, limit)
        search = (search or "").strip()

        if not actor.is_admin and actor.alumni_id is None:
            return Page(items=[], meta=build_meta(page, limit, 0, TRASH_SORT, search))

        flt = JobFilter(
            deleted=True,
            search=search,
            alumni_id=None if actor.is_admin else actor.alumni_id,
        )
        items = self.jobs.list_page(flt, TRASH_SORT, limit, offset_for(page, limit))
        total = self.jobs.count(flt)
        return Page(items=items, meta=build_meta(page, limit, total, TRASH_SORT, search))

    def restore(self, job_id: int, actor: Actor) -> None:
        actor = self._resolve_actor(actor)
        record = self.jobs.get_by_id(job_id)
        if record is None or not record.is_trashed:
            raise NotFound("Job record not found in trash")
        self._authorize(actor, record, Action.RESTORE)

        if not self.jobs.transition(job_id, from_deleted=True, deleted_by=None,
                                    at=datetime.now(timezone.utc)):
            raise NotFound("Job record not found in trash")
        logger.info("Job id=%s restored by user id=%s", job_id, actor.user_id)

    def hard_delete_from_trash(self, job_id: int, actor: Actor) -> None:
        actor = self._resolve_actor(actor)
        record = self.jobs.get_by_id(job_id)
        if record is None or not record.is_trashed:
            raise NotFound("Job record not found in trash")
        self._authorize(actor, record, Action.HARD_DELETE)

        if not self.jobs.delete(job_id, only_deleted=True):
            raise NotFound("Job record not found in trash")
        logger.info("Job id=%s permanently deleted from trash by user id=%s", job_id, actor.user_id)
