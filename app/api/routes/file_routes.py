"""
File Routes

POST /upload/photo - Upload profile photo (JPEG/PNG, max 1MB)
POST /upload/certificate - Upload certificate (PDF, max 2MB)
GET /files/alumni/{alumni_id} - List an alumni's files (admin or owner)
DELETE /files/{file_id} - Delete a file (admin or owner)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_file_service
from app.core.auth import get_current_user
from app.models.domain import Actor, FileCategory, StoredFile
from app.schemas.schemas import ApiResponse, MessageResponse
from app.services.file_service import FileService

router = APIRouter(tags=["Files"])


@router.post("/upload/photo", response_model=ApiResponse[StoredFile], status_code=201)
def upload_photo(
    file: UploadFile = File(...),
    alumni_id: Optional[int] = Form(None, description="Target profile; admins only"),
    actor: Actor = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    stored = service.upload(file, FileCategory.photo, actor, alumni_id)
    return ApiResponse(message="Photo uploaded", data=stored)


@router.post("/upload/certificate", response_model=ApiResponse[StoredFile], status_code=201)
def upload_certificate(
    file: UploadFile = File(...),
    alumni_id: Optional[int] = Form(None, description="Target profile; admins only"),
    actor: Actor = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    stored = service.upload(file, FileCategory.certificate, actor, alumni_id)
    return ApiResponse(message="Certificate uploaded", data=stored)


@router.get("/files/alumni/{alumni_id}", response_model=ApiResponse[List[StoredFile]])
def list_files(
    alumni_id: int,
    actor: Actor = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    return ApiResponse(message="Files retrieved", data=service.list_by_alumni(alumni_id, actor))


@router.delete("/files/{file_id}", response_model=MessageResponse)
def delete_file(
    file_id: int,
    actor: Actor = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    service.delete(file_id, actor)
    return MessageResponse(message="File deleted")
