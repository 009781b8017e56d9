"""
Ownership policy shared by lifecycle and file operations.
"""

import pytest

from app.core.policy import Action, can_act_on, owning_alumni_id
from app.models.domain import Actor, Alumni, FileCategory, JobRecord, StoredFile, UserRole

ADMIN = Actor(user_id=1, username="admin", role=UserRole.admin)
OWNER = Actor(user_id=2, username="budi", role=UserRole.user, alumni_id=10)
STRANGER = Actor(user_id=3, username="sari", role=UserRole.user, alumni_id=20)
NO_PROFILE = Actor(user_id=4, username="baru", role=UserRole.user)

JOB = JobRecord(id=100, alumni_id=10, company="PT A", position="Dev", industry="IT",
                location="Jakarta", start_date="2023-01-01", status="active")
ALUMNI = Alumni(id=10, user_id=2, nim="123", name="Budi", program="TI",
                cohort_year=2019, graduation_year=2023, email="budi@example.com")
FILE = StoredFile(id=5, alumni_id=10, category=FileCategory.photo, file_name="a.png",
                  original_name="me.png", file_path="uploads/photo/a.png", file_size=10,
                  content_type="image/png")

OWNER_ACTIONS = [Action.VIEW, Action.SOFT_DELETE, Action.RESTORE, Action.HARD_DELETE,
                 Action.UPLOAD, Action.DELETE_FILE]


def test_owning_alumni_id():
    assert owning_alumni_id(ALUMNI) == 10
    assert owning_alumni_id(JOB) == 10
    assert owning_alumni_id(FILE) == 10


@pytest.mark.parametrize("action", list(Action))
@pytest.mark.parametrize("record", [JOB, ALUMNI, FILE])
def test_admin_may_do_anything(record, action):
    assert can_act_on(ADMIN, record, action) is True


@pytest.mark.parametrize("action", OWNER_ACTIONS)
@pytest.mark.parametrize("record", [JOB, ALUMNI, FILE])
def test_owner_may_act_on_own_records(record, action):
    assert can_act_on(OWNER, record, action) is True


@pytest.mark.parametrize("action", list(Action))
def test_other_user_is_denied(action):
    assert can_act_on(STRANGER, JOB, action) is False


@pytest.mark.parametrize("action", list(Action))
def test_user_without_profile_owns_nothing(action):
    assert can_act_on(NO_PROFILE, JOB, action) is False


@pytest.mark.parametrize("action", [Action.UPDATE, Action.DELETE])
def test_admin_only_actions_denied_to_owner(action):
    assert can_act_on(OWNER, JOB, action) is False
