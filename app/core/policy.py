"""
Ownership policy.

Every lifecycle and file operation asks can_act_on() instead of carrying
its own admin/owner branch.
"""

from enum import Enum
from typing import Union

from app.models.domain import Actor, Alumni, JobRecord, StoredFile


class Action(str, Enum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"
    SOFT_DELETE = "soft_delete"
    RESTORE = "restore"
    HARD_DELETE = "hard_delete"
    UPLOAD = "upload"
    DELETE_FILE = "delete_file"


ADMIN_ONLY_ACTIONS = frozenset({Action.UPDATE, Action.DELETE})

OwnedRecord = Union[Alumni, JobRecord, StoredFile]


def owning_alumni_id(record: OwnedRecord) -> int:
    if isinstance(record, Alumni):
        return record.id
    return record.alumni_id


def can_act_on(actor: Actor, record: OwnedRecord, action: Action) -> bool:
    """
    Decide whether ``actor`` may perform ``action`` on ``record``.

    Admins may do anything. Users may never perform admin-only actions and
    otherwise only touch records belonging to their own alumni profile;
    ``actor.alumni_id`` must already be resolved by the caller.
    """
    if actor.is_admin:
        return True
    if action in ADMIN_ONLY_ACTIONS:
        return False
    if actor.alumni_id is None:
        return False
    return owning_alumni_id(record) == actor.alumni_id
