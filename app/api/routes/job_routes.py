"""
Job Record Routes (pekerjaan alumni)

GET /pekerjaan - List active job records
GET /pekerjaan/trash - List trashed records (admin: all, user: own)
GET /pekerjaan/alumni/{alumni_id} - Active records of one alumni (admin only)
GET /pekerjaan/{job_id} - Get one active record
POST /pekerjaan - Create record (admin only)
PUT /pekerjaan/{job_id} - Update active record (admin only)
DELETE /pekerjaan/{job_id} - Permanently delete, any state (admin only)
PATCH /pekerjaan/{job_id}/soft-delete - Move to trash (admin or owner)
PATCH /pekerjaan/{job_id}/restore - Restore from trash (admin or owner)
DELETE /pekerjaan/{job_id}/hard-delete - Permanently delete from trash (admin or owner)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_job_service
from app.core.auth import get_current_user, require_admin
from app.models.domain import Actor, JobRecord
from app.schemas.schemas import ApiResponse, JobCreate, JobUpdate, MessageResponse, PagedResponse
from app.services.job_service import JobService

router = APIRouter(prefix="/pekerjaan", tags=["Job Records"])


@router.get("", response_model=PagedResponse[JobRecord])
def list_jobs(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    search: str = Query("", description="Match company, position, industry, location or status"),
    actor: Actor = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """List active job records with search, sort and pagination."""
    result = service.list(search=search, sort_by=sort_by, order=order, page=page, limit=limit)
    return PagedResponse(message="Job records retrieved", data=result.items, meta=result.meta)


# Declared before /{job_id} so "trash" is not parsed as an id
@router.get("/trash", response_model=PagedResponse[JobRecord])
def list_trash(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    search: str = Query(""),
    actor: Actor = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Trashed records, most recently deleted first."""
    result = service.list_trash(actor, search=search, page=page, limit=limit)
    return PagedResponse(message="Trash retrieved", data=result.items, meta=result.meta)


@router.get("/alumni/{alumni_id}", response_model=ApiResponse[List[JobRecord]])
def list_jobs_by_alumni(
    alumni_id: int,
    admin: Actor = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    return ApiResponse(message="Job records retrieved", data=service.list_by_alumni(alumni_id))


@router.get("/{job_id}", response_model=ApiResponse[JobRecord])
def get_job(
    job_id: int,
    actor: Actor = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    return ApiResponse(message="Job record retrieved", data=service.get(job_id))


@router.post("", response_model=ApiResponse[JobRecord], status_code=201)
def create_job(
    request: JobCreate,
    admin: Actor = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    return ApiResponse(message="Job record created", data=service.create(request, admin))


@router.put("/{job_id}", response_model=ApiResponse[JobRecord])
def update_job(
    job_id: int,
    request: JobUpdate,
    admin: Actor = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    return ApiResponse(message="Job record updated", data=service.update(job_id, request))


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: int,
    admin: Actor = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    service.delete(job_id)
    return MessageResponse(message="Job record deleted")


@router.patch("/{job_id}/soft-delete", response_model=MessageResponse)
def soft_delete_job(
    job_id: int,
    actor: Actor = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    service.soft_delete(job_id, actor)
    return MessageResponse(message="Job record moved to trash")


@router.patch("/{job_id}/restore", response_model=MessageResponse)
def restore_job(
    job_id: int,
    actor: Actor = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    service.restore(job_id, actor)
    return MessageResponse(message="Job record restored")


@router.delete("/{job_id}/hard-delete", response_model=MessageResponse)
def hard_delete_job(
    job_id: int,
    actor: Actor = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    service.hard_delete_from_trash(job_id, actor)
    return MessageResponse(message="Job record permanently deleted")
