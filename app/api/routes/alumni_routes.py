"""
Alumni Routes

GET /alumni - List alumni (search, sort, pagination)
GET /alumni/{alumni_id} - Get one alumni profile
POST /alumni - Create profile (admin, or a user registering their own)
PUT /alumni/{alumni_id} - Update profile (admin only)
DELETE /alumni/{alumni_id} - Delete profile with its jobs and files (admin only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_alumni_service
from app.core.auth import get_current_user, require_admin
from app.models.domain import Actor, Alumni
from app.schemas.schemas import AlumniCreate, AlumniUpdate, ApiResponse, MessageResponse, PagedResponse
from app.services.alumni_service import AlumniService

router = APIRouter(prefix="/alumni", tags=["Alumni"])


@router.get("", response_model=PagedResponse[Alumni])
def list_alumni(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    search: str = Query("", description="Match name, nim, program or email"),
    actor: Actor = Depends(get_current_user),
    service: AlumniService = Depends(get_alumni_service),
):
    result = service.list(search=search, sort_by=sort_by, order=order, page=page, limit=limit)
    return PagedResponse(message="Alumni retrieved", data=result.items, meta=result.meta)


@router.get("/{alumni_id}", response_model=ApiResponse[Alumni])
def get_alumni(
    alumni_id: int,
    actor: Actor = Depends(get_current_user),
    service: AlumniService = Depends(get_alumni_service),
):
    return ApiResponse(message="Alumni retrieved", data=service.get(alumni_id))


@router.post("", response_model=ApiResponse[Alumni], status_code=201)
def create_alumni(
    request: AlumniCreate,
    actor: Actor = Depends(get_current_user),
    service: AlumniService = Depends(get_alumni_service),
):
    """
    Create an alumni profile.

    Admins may attach it to any user via user_id. Regular users always
    register their own profile, once.
    """
    alumni = service.create(request, actor)
    return ApiResponse(message="Alumni created", data=alumni)


@router.put("/{alumni_id}", response_model=ApiResponse[Alumni])
def update_alumni(
    alumni_id: int,
    request: AlumniUpdate,
    admin: Actor = Depends(require_admin),
    service: AlumniService = Depends(get_alumni_service),
):
    return ApiResponse(message="Alumni updated", data=service.update(alumni_id, request))


@router.delete("/{alumni_id}", response_model=MessageResponse)
def delete_alumni(
    alumni_id: int,
    admin: Actor = Depends(require_admin),
    service: AlumniService = Depends(get_alumni_service),
):
    service.delete(alumni_id)
    return MessageResponse(message="Alumni deleted")
