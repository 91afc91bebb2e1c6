from placenet.services.repositories import ApplicationRepository, JobRepository
from tests.conftest import auth_headers

NEW_JOB = {
    "title": "Data Engineer",
    "company": "Acme",
    "location": "Pune",
    "type": "internship",
    "salaryMin": 30000,
    "salaryMax": 50000,
    "description": "Pipelines all day",
    "requirements": ["SQL"],
    "skills": ["Python", "Airflow"],
}


def test_recruiter_creates_job(client, recruiter):
    response = client.post("/api/jobs", json=NEW_JOB, headers=auth_headers(recruiter))

    assert response.status_code == 201
    body = response.json()
    assert body["recruiterId"] == recruiter["id"]
    assert body["type"] == "internship"
    assert body["skills"] == ["Python", "Airflow"]
    assert body["isActive"] is True


def test_student_cannot_create_job(client, student):
    assert client.post("/api/jobs", json=NEW_JOB, headers=auth_headers(student)).status_code == 403


def test_public_listing_merges_demo_catalog(client, make_job, recruiter):
    job = make_job(recruiter["id"])
    make_job(recruiter["id"], title="Hidden", is_active=False)

    listed = client.get("/api/jobs").json()
    ids = [j["id"] for j in listed]

    assert ids[0] == job["id"]
    assert listed[0]["isDemo"] is False
    assert "Hidden" not in [j["title"] for j in listed]
    assert len(ids) == 11
    assert all(j["isDemo"] for j in listed[1:])


def test_listing_filters_apply_to_demo_jobs(client, make_job, recruiter):
    make_job(recruiter["id"], skills=["Go"])
    listed = client.get("/api/jobs", params={"skill": "kubernetes"}).json()
    assert [j["title"] for j in listed] == ["DevOps Engineer"]

    listed = client.get("/api/jobs", params={"search": "backend"}).json()
    titles = [j["title"] for j in listed]
    assert titles == ["Backend Engineer", "Backend Node.js Developer"]


def test_listing_counts_applicants(client, make_job, make_application, make_user, recruiter):
    job = make_job(recruiter["id"])
    for _ in range(2):
        make_application(make_user("student")["id"], job["id"])

    listed = client.get("/api/jobs").json()
    assert listed[0]["applicants"] == 2


def test_get_demo_job(client):
    response = client.get("/api/jobs/550e8400-e29b-41d4-a716-446655440003")
    assert response.status_code == 200
    assert response.json()["title"] == "AI/ML Engineer"
    assert client.get("/api/jobs/550e8400-e29b-41d4-a716-446655449999").status_code == 404


def test_owner_sees_inactive_job(client, make_job, recruiter):
    job = make_job(recruiter["id"], is_active=False)

    assert client.get(f"/api/jobs/{job['id']}").json()["isActive"] is False
    mine = client.get("/api/recruiter/jobs", headers=auth_headers(recruiter)).json()
    assert [j["id"] for j in mine] == [job["id"]]
    active = client.get("/api/recruiter/jobs", params={"active": "true"}, headers=auth_headers(recruiter)).json()
    assert active == []


def test_update_job_owner_only(client, make_job, recruiter, other_recruiter, admin):
    job = make_job(recruiter["id"])

    forbidden = client.put(f"/api/jobs/{job['id']}", json={"title": "X"}, headers=auth_headers(other_recruiter))
    assert forbidden.status_code == 403

    response = client.put(f"/api/jobs/{job['id']}", json={"isActive": False}, headers=auth_headers(recruiter))
    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert response.json()["title"] == "Backend Engineer"

    by_admin = client.put(f"/api/jobs/{job['id']}", json={"title": "Lead"}, headers=auth_headers(admin))
    assert by_admin.json()["title"] == "Lead"


def test_delete_job_cascades_to_applications(client, database, make_job, make_application, make_user, recruiter):
    job = make_job(recruiter["id"])
    other = make_job(recruiter["id"], title="Keep")
    for _ in range(3):
        make_application(make_user("student")["id"], job["id"])
    kept = make_application(make_user("student")["id"], other["id"])

    response = client.delete(f"/api/jobs/{job['id']}", headers=auth_headers(recruiter))

    assert response.status_code == 200
    applications = ApplicationRepository(database)
    assert applications.list_by_job(job["id"]) == []
    assert [a["id"] for a in applications.list_by_job(other["id"])] == [kept["id"]]
    assert JobRepository(database).get(job["id"]) is None


def test_delete_requires_ownership(client, make_job, recruiter, other_recruiter):
    job = make_job(recruiter["id"])
    response = client.delete(f"/api/jobs/{job['id']}", headers=auth_headers(other_recruiter))
    assert response.status_code == 403
    assert client.get(f"/api/jobs/{job['id']}").status_code == 200


def test_delete_missing_job_is_not_found(client, recruiter):
    assert client.delete("/api/jobs/gone", headers=auth_headers(recruiter)).status_code == 404
