"""
Alumni profiles: self-registration, admin management and cascade delete.
"""

import pytest

from app.core.exceptions import Conflict, NotFound
from app.schemas.schemas import AlumniCreate
from app.services.alumni_service import AlumniService


@pytest.fixture
def alumni_payload():
    return {
        "nim": "2019100",
        "name": "Budi Santoso",
        "program": "Informatika",
        "cohort_year": 2019,
        "graduation_year": 2023,
        "email": "budi.santoso@example.com",
        "phone": "08123456789",
    }


@pytest.fixture
def service(repos):
    return AlumniService(repos.alumni, repos.users, repos.files)


class TestAlumniService:
    def test_user_registers_own_profile_once(self, service, owner_actor, stranger, alumni_payload):
        # user_id in the payload is ignored for non-admins
        created = service.create(AlumniCreate(**alumni_payload, user_id=stranger.id), owner_actor)
        assert created.user_id == owner_actor.user_id

        alumni_payload["nim"] = "2019101"
        with pytest.raises(Conflict):
            service.create(AlumniCreate(**alumni_payload), owner_actor)

    def test_duplicate_nim_conflicts(self, service, admin_actor, alumni_payload):
        service.create(AlumniCreate(**alumni_payload), admin_actor)
        with pytest.raises(Conflict):
            service.create(AlumniCreate(**alumni_payload), admin_actor)

    def test_admin_links_profile_to_existing_user_only(self, service, admin_actor, owner, alumni_payload):
        with pytest.raises(NotFound):
            service.create(AlumniCreate(**alumni_payload, user_id=9999), admin_actor)

        created = service.create(AlumniCreate(**alumni_payload, user_id=owner.id), admin_actor)
        assert created.user_id == owner.id

    def test_delete_cascades_to_jobs(self, service, repos, make_job, owner_alumni):
        job = make_job(owner_alumni.id)

        service.delete(owner_alumni.id)

        assert repos.alumni.get_by_id(owner_alumni.id) is None
        assert repos.jobs.get_by_id(job.id) is None
        with pytest.raises(NotFound):
            service.delete(owner_alumni.id)

    def test_list_search_and_sort(self, service, make_alumni):
        make_alumni(name="Citra", program="Sistem Informasi")
        make_alumni(name="Andi")
        make_alumni(name="Bayu")

        page = service.list(sort_by="name", order="asc")
        assert [a.name for a in page.items] == ["Andi", "Bayu", "Citra"]

        page = service.list(search="sistem")
        assert [a.name for a in page.items] == ["Citra"]
        assert page.meta.total == 1


class TestAlumniRoutes:
    def test_user_self_registration(self, client, owner, owner_headers, alumni_payload):
        response = client.post("/api/alumni", json=alumni_payload, headers=owner_headers)

        assert response.status_code == 201
        assert response.json()["data"]["user_id"] == owner.id

        alumni_payload["nim"] = "2019999"
        response = client.post("/api/alumni", json=alumni_payload, headers=owner_headers)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "conflict"

    def test_invalid_payload(self, client, admin_headers):
        response = client.post("/api/alumni", json={"nim": "1", "cohort_year": 2020, "graduation_year": 2019},
                               headers=admin_headers)

        assert response.status_code == 400
        details = response.json()["error"]["details"]
        assert "name is required" in details
        assert "graduation_year cannot be earlier than cohort_year" in details

    def test_update_and_delete_are_admin_only(self, client, owner_headers, admin_headers, owner_alumni,
                                              alumni_payload):
        alumni_payload.pop("nim")
        url = f"/api/alumni/{owner_alumni.id}"

        assert client.put(url, json=alumni_payload, headers=owner_headers).status_code == 403
        assert client.delete(url, headers=owner_headers).status_code == 403

        response = client.put(url, json=alumni_payload, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Budi Santoso"
        assert response.json()["data"]["nim"] == owner_alumni.nim

        assert client.delete(url, headers=admin_headers).status_code == 200
        assert client.get(url, headers=admin_headers).status_code == 404

    def test_list_envelope(self, client, owner_headers, make_alumni):
        make_alumni()
        body = client.get("/api/alumni", params={"sort_by": "nim", "order": "asc"}, headers=owner_headers).json()

        assert body["success"] is True
        assert len(body["data"]) == 1
        assert body["meta"]["sort_by"] == "nim"
        assert body["meta"]["pages"] == 1
