"""
Alumni service - profile CRUD.

Admins manage every profile. A regular user may only register their own
profile, once.
"""

import logging
from typing import Optional

from app.core.exceptions import Conflict, NotFound
from app.models.domain import Actor, Alumni
from app.repositories.base import AlumniFilter, AlumniRepository, FileRepository, UserRepository
from app.schemas.schemas import AlumniCreate, AlumniUpdate
from app.services.pagination import Page, build_meta, normalize_paging, offset_for, resolve_sort
from app.services.validation import validate_alumni_create, validate_alumni_update
from app.utils.file_upload import remove_blob

logger = logging.getLogger(__name__)

ALUMNI_SORT_FIELDS = frozenset({
    "id", "nim", "name", "program", "cohort_year", "graduation_year", "email", "created_at",
})


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AlumniService:
    def __init__(self, alumni: AlumniRepository, users: UserRepository, files: FileRepository):
        self.alumni = alumni
        self.users = users
        self.files = files

    def list(self, search: str = "", sort_by: Optional[str] = None, order: Optional[str] = None,
             page: Optional[int] = None, limit: Optional[int] = None) -> Page[Alumni]:
        page, limit = normalize_paging(page, limit)
        search = (search or "").strip()
        sort = resolve_sort(sort_by, order, ALUMNI_SORT_FIELDS)
        flt = AlumniFilter(search=search)

        items = self.alumni.list_page(flt, sort, limit, offset_for(page, limit))
        total = self.alumni.count(flt)
        return Page(items=items, meta=build_meta(page, limit, total, sort, search))

    def get(self, alumni_id: int) -> Alumni:
        alumni = self.alumni.get_by_id(alumni_id)
        if alumni is None:
            raise NotFound("Alumni not found")
        return alumni

    def create(self, data: AlumniCreate, actor: Actor) -> Alumni:
        # Self-registration always targets the caller's own account
        user_id = data.user_id if actor.is_admin else actor.user_id
        validate_alumni_create(data)

        if user_id is not None:
            if actor.is_admin and self.users.get_by_id(user_id) is None:
                raise NotFound("User not found")
            if self.alumni.get_by_user_id(user_id) is not None:
                raise Conflict("An alumni profile already exists for this user")

        alumni = self.alumni.create({
            "user_id": user_id,
            "nim": data.nim.strip(),
            "name": data.name.strip(),
            "program": data.program.strip(),
            "cohort_year": data.cohort_year,
            "graduation_year": data.graduation_year,
            "email": data.email.strip(),
            "phone": _clean(data.phone),
            "address": _clean(data.address),
        })
        logger.info("%s %s created alumni id=%s", actor.role.value, actor.username, alumni.id)
        return alumni

    def update(self, alumni_id: int, data: AlumniUpdate) -> Alumni:
        self.get(alumni_id)
        validate_alumni_update(data)

        alumni = self.alumni.update(alumni_id, {
            "name": data.name.strip(),
            "program": data.program.strip(),
            "cohort_year": data.cohort_year,
            "graduation_year": data.graduation_year,
            "email": data.email.strip(),
            "phone": _clean(data.phone),
            "address": _clean(data.address),
        })
        if alumni is None:
            raise NotFound("Alumni not found")
        return alumni

    def delete(self, alumni_id: int) -> None:
        # Store cascade covers metadata only, not blobs on disk
        blobs = [f.file_path for f in self.files.list_by_alumni(alumni_id)]
        if not self.alumni.delete(alumni_id):
            raise NotFound("Alumni not found")
        for path in blobs:
            remove_blob(path)
        logger.info("Alumni id=%s deleted with its job records and files", alumni_id)
