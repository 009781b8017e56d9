"""
File service - photo and certificate uploads for alumni profiles.
"""

import logging
import os
from dataclasses import replace
from typing import List, Optional

from fastapi import UploadFile

from app.core.exceptions import AppError, Forbidden, NotFound, ValidationError
from app.core.policy import Action, can_act_on
from app.models.domain import Actor, Alumni, FileCategory, StoredFile
from app.repositories.base import AlumniRepository, FileRepository
from app.utils.file_upload import read_upload, remove_blob, save_blob

logger = logging.getLogger(__name__)


class FileService:
    def __init__(self, files: FileRepository, alumni: AlumniRepository, upload_dir: str):
        self.files = files
        self.alumni = alumni
        self.upload_dir = upload_dir

    def _target_alumni(self, actor: Actor, alumni_id: Optional[int]) -> Alumni:
        """Admins name the profile explicitly; users always upload for their own."""
        if actor.is_admin:
            if alumni_id is None:
                raise ValidationError(["alumni_id is required"])
            alumni = self.alumni.get_by_id(alumni_id)
            if alumni is None:
                raise NotFound("Alumni not found")
            return alumni

        alumni = self.alumni.get_by_user_id(actor.user_id)
        if alumni is None:
            raise Forbidden("Create your alumni profile before uploading files")
        return alumni

    def _resolve_actor(self, actor: Actor) -> Actor:
        if actor.is_admin or actor.alumni_id is not None:
            return actor
        own = self.alumni.get_by_user_id(actor.user_id)
        return replace(actor, alumni_id=own.id) if own else actor

    def upload(self, file: UploadFile, category: FileCategory, actor: Actor,
               alumni_id: Optional[int] = None) -> StoredFile:
        alumni = self._target_alumni(actor, alumni_id)
        actor = self._resolve_actor(actor)
        if not can_act_on(actor, alumni, Action.UPLOAD):
            raise Forbidden("Access denied: you can only upload files for your own profile")

        upload = read_upload(file, category)
        path = save_blob(self.upload_dir, category, upload)
        try:
            stored = self.files.create({
                "alumni_id": alumni.id,
                "category": category.value,
                "file_name": os.path.basename(path),
                "original_name": upload.original_name,
                "file_path": path,
                "file_size": len(upload.content),
                "content_type": upload.content_type,
            })
        except AppError:
            remove_blob(path)
            raise

        logger.info("User id=%s uploaded %s id=%s for alumni id=%s (%d bytes)",
                    actor.user_id, category.value, stored.id, alumni.id, stored.file_size)
        return stored

    def list_by_alumni(self, alumni_id: int, actor: Actor) -> List[StoredFile]:
        alumni = self.alumni.get_by_id(alumni_id)
        if alumni is None:
            raise NotFound("Alumni not found")
        if not can_act_on(self._resolve_actor(actor), alumni, Action.VIEW):
            raise Forbidden("Access denied: you can only view your own files")
        return self.files.list_by_alumni(alumni_id)

    def delete(self, file_id: int, actor: Actor) -> None:
        stored = self.files.get_by_id(file_id)
        if stored is None:
            raise NotFound("File not found")

        actor = self._resolve_actor(actor)
        if not can_act_on(actor, stored, Action.DELETE_FILE):
            raise Forbidden("Access denied: you can only delete your own files")

        if not self.files.delete(file_id):
            raise NotFound("File not found")
        remove_blob(stored.file_path)
        logger.info("File id=%s deleted by user id=%s", file_id, actor.user_id)
