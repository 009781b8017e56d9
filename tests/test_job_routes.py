"""
HTTP surface of /api/pekerjaan.
"""


def test_list_requires_token(client):
    response = client.get("/api/pekerjaan")
    assert response.status_code == 401


def test_admin_creates_and_reads_job(client, admin_headers, owner_headers, sample_job_data):
    response = client.post("/api/pekerjaan", json=sample_job_data, headers=admin_headers)

    assert response.status_code == 201
    created = response.json()["data"]
    assert created["company"] == "PT Data Nusantara"
    assert created["is_deleted"] is False

    response = client.get(f"/api/pekerjaan/{created['id']}", headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["data"]["position"] == "Data Analyst"


def test_user_cannot_create_update_or_delete(client, owner_headers, sample_job_data, make_job, owner_alumni):
    job = make_job(owner_alumni.id)

    assert client.post("/api/pekerjaan", json=sample_job_data, headers=owner_headers).status_code == 403
    assert client.put(f"/api/pekerjaan/{job.id}", json=sample_job_data, headers=owner_headers).status_code == 403
    response = client.delete(f"/api/pekerjaan/{job.id}", headers=owner_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Admins only"


def test_create_validation_envelope(client, admin_headers, sample_job_data):
    sample_job_data.update(status="pending", company="")
    response = client.post("/api/pekerjaan", json=sample_job_data, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "validation_error"
    assert body["error"]["details"] == [
        "company is required",
        "status must be one of: active, completed, resigned",
    ]


def test_list_paginates(client, owner_headers, make_job, owner_alumni):
    for i in range(3):
        make_job(owner_alumni.id, company=f"Company {i}")

    response = client.get("/api/pekerjaan", params={"limit": 2, "page": 2, "sort_by": "company", "order": "asc"},
                          headers=owner_headers)

    assert response.status_code == 200
    body = response.json()
    assert [j["company"] for j in body["data"]] == ["Company 2"]
    assert body["meta"] == {
        "page": 2, "limit": 2, "total": 3, "pages": 2,
        "sort_by": "company", "order": "asc", "search": "",
    }


def test_empty_list_has_zero_pages(client, owner_headers):
    body = client.get("/api/pekerjaan", headers=owner_headers).json()
    assert body["data"] == []
    assert body["meta"]["total"] == 0
    assert body["meta"]["pages"] == 0


def test_owner_trash_flow(client, owner_headers, stranger_headers, stranger_alumni, make_job, owner_alumni):
    job = make_job(owner_alumni.id)

    response = client.patch(f"/api/pekerjaan/{job.id}/soft-delete", headers=owner_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Job record moved to trash"}

    assert client.get(f"/api/pekerjaan/{job.id}", headers=owner_headers).status_code == 404

    trash = client.get("/api/pekerjaan/trash", headers=owner_headers).json()
    assert [j["id"] for j in trash["data"]] == [job.id]
    assert client.get("/api/pekerjaan/trash", headers=stranger_headers).json()["data"] == []

    response = client.patch(f"/api/pekerjaan/{job.id}/restore", headers=stranger_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"

    assert client.patch(f"/api/pekerjaan/{job.id}/restore", headers=owner_headers).status_code == 200
    assert client.get(f"/api/pekerjaan/{job.id}", headers=owner_headers).status_code == 200


def test_hard_delete_requires_trash(client, admin_headers, make_job, owner_alumni):
    job = make_job(owner_alumni.id)

    response = client.delete(f"/api/pekerjaan/{job.id}/hard-delete", headers=admin_headers)
    assert response.status_code == 404

    client.patch(f"/api/pekerjaan/{job.id}/soft-delete", headers=admin_headers)
    response = client.delete(f"/api/pekerjaan/{job.id}/hard-delete", headers=admin_headers)
    assert response.status_code == 200
    assert client.get("/api/pekerjaan/trash", headers=admin_headers).json()["meta"]["total"] == 0


def test_soft_delete_twice_is_not_found(client, owner_headers, make_job, owner_alumni):
    job = make_job(owner_alumni.id)

    assert client.patch(f"/api/pekerjaan/{job.id}/soft-delete", headers=owner_headers).status_code == 200
    response = client.patch(f"/api/pekerjaan/{job.id}/soft-delete", headers=owner_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_admin_lists_jobs_by_alumni(client, admin_headers, owner_headers, make_job, owner_alumni):
    make_job(owner_alumni.id, start_date="2021-01-01")
    make_job(owner_alumni.id, start_date="2022-01-01")

    response = client.get(f"/api/pekerjaan/alumni/{owner_alumni.id}", headers=admin_headers)
    assert response.status_code == 200
    assert [j["start_date"] for j in response.json()["data"]] == ["2022-01-01", "2021-01-01"]

    assert client.get(f"/api/pekerjaan/alumni/{owner_alumni.id}", headers=owner_headers).status_code == 403
    assert client.get("/api/pekerjaan/alumni/9999", headers=admin_headers).status_code == 404


def test_admin_update_and_delete(client, admin_headers, make_job, owner_alumni, sample_job_data):
    job = make_job(owner_alumni.id)
    sample_job_data.pop("alumni_id")
    sample_job_data["status"] = "resigned"
    sample_job_data["end_date"] = "2024-02-29"

    response = client.put(f"/api/pekerjaan/{job.id}", json=sample_job_data, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "resigned"
    assert response.json()["data"]["alumni_id"] == owner_alumni.id

    assert client.delete(f"/api/pekerjaan/{job.id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/pekerjaan/{job.id}", headers=admin_headers).status_code == 404


def test_non_numeric_id_is_validation_error(client, owner_headers):
    response = client.get("/api/pekerjaan/abc", headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_create_for_missing_alumni_is_not_found_before_field_checks(client, admin_headers):
    response = client.post("/api/pekerjaan", json={"alumni_id": 9999, "company": "", "status": "pending"},
                           headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_update_missing_or_trashed_record_is_not_found_before_field_checks(client, admin_headers, make_job,
                                                                           owner_alumni):
    response = client.put("/api/pekerjaan/9999", json={"company": ""}, headers=admin_headers)
    assert response.status_code == 404

    job = make_job(owner_alumni.id)
    assert client.patch(f"/api/pekerjaan/{job.id}/soft-delete", headers=admin_headers).status_code == 200
    response = client.put(f"/api/pekerjaan/{job.id}", json={"company": ""}, headers=admin_headers)
    assert response.status_code == 404

    job = make_job(owner_alumni.id)
    response = client.put(f"/api/pekerjaan/{job.id}", json={"company": ""}, headers=admin_headers)
    assert response.status_code == 400
    assert "company is required" in response.json()["error"]["details"]


def test_huge_page_number_is_clamped(client, owner_headers, make_job, owner_alumni):
    make_job(owner_alumni.id)
    response = client.get("/api/pekerjaan", params={"page": "10000000000000000000"}, headers=owner_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["meta"]["total"] == 1
    assert body["meta"]["page"] == (2 ** 63 - 1) // 100
