import os

from placenet.schemas.schemas import MAX_EXPECTED_SALARY
from placenet.services.repositories import ApplicationRepository
from tests.conftest import auth_headers


def apply(client, student, job_id, files=None, **fields):
    data = {"jobId": job_id, "coverLetter": "I would love to join."}
    data.update(fields)
    return client.post("/api/applications", data=data, files=files, headers=auth_headers(student))


# ------------------------------------------------------------
# Applying
# ------------------------------------------------------------

def test_apply_to_real_job(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    response = apply(client, student, job["id"], expectedSalary="1200000", customAnswers='{"why": "Python"}')

    assert response.status_code == 201
    body = response.json()
    assert body["jobId"] == job["id"]
    assert body["studentId"] == student["id"]
    assert body["status"] == "applied"
    assert body["version"] == 1
    assert body["resumeVersion"] == "current"
    assert body["expectedSalary"] == 1200000
    assert body["customAnswers"] == {"why": "Python"}


def test_duplicate_application_conflicts(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    assert apply(client, student, job["id"]).status_code == 201
    assert apply(client, student, job["id"]).status_code == 409


def test_inactive_job_rejects_applications(client, make_job, student, recruiter):
    job = make_job(recruiter["id"], is_active=False)
    response = apply(client, student, job["id"])
    assert response.status_code == 400


def test_unknown_job_is_not_found(client, student):
    assert apply(client, student, "no-such-job").status_code == 404


def test_expected_salary_is_capped(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    response = apply(client, student, job["id"], expectedSalary=str(MAX_EXPECTED_SALARY * 10))
    assert response.status_code == 201
    assert response.json()["expectedSalary"] == MAX_EXPECTED_SALARY


def test_negative_salary_is_rejected(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    assert apply(client, student, job["id"], expectedSalary="-1").status_code == 422


def test_bad_custom_answers_rejected(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    assert apply(client, student, job["id"], customAnswers="not json").status_code == 422


def test_resume_upload_is_stored(client, make_job, student, recruiter, settings):
    job = make_job(recruiter["id"])
    files = {"resume": ("cv.pdf", b"%PDF-1.4 fake", "application/pdf")}
    response = apply(client, student, job["id"], files=files)

    assert response.status_code == 201
    path = response.json()["resumeFile"]
    assert path.startswith(settings.upload_dir)
    assert path.endswith(".pdf")
    assert os.path.exists(path)


def test_resume_with_wrong_extension_rejected(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    files = {"resume": ("cv.exe", b"MZ", "application/octet-stream")}
    assert apply(client, student, job["id"], files=files).status_code == 422


def test_demo_job_application_is_not_stored(client, database, student):
    response = apply(client, student, "550e8400-e29b-41d4-a716-446655440001")

    assert response.status_code == 201
    body = response.json()
    assert body["id"].startswith("app-")
    assert body["status"] == "applied"
    assert ApplicationRepository(database).list_by_student(student["id"]) == []


def test_recruiter_cannot_apply(client, make_job, recruiter):
    job = make_job(recruiter["id"])
    assert apply(client, recruiter, job["id"]).status_code == 403


def test_student_sees_own_applications(client, make_job, student, recruiter):
    job = make_job(recruiter["id"])
    apply(client, student, job["id"])

    response = client.get("/api/student/applications", headers=auth_headers(student))
    assert response.status_code == 200
    assert [a["jobId"] for a in response.json()] == [job["id"]]


# ------------------------------------------------------------
# Status changes
# ------------------------------------------------------------

def put_status(client, user, application_id, status, version=None):
    body = {"status": status}
    if version is not None:
        body["version"] = version
    return client.put(f"/api/applications/{application_id}/status", json=body, headers=auth_headers(user))


def test_move_application(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])

    response = put_status(client, recruiter, application["id"], "screening", version=1)
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == application["id"]
    assert body["status"] == "screening"
    assert body["version"] == 2
    assert "updatedAt" in body


def test_stale_version_returns_conflict(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])
    put_status(client, recruiter, application["id"], "screening", version=1)

    response = put_status(client, recruiter, application["id"], "rejected", version=1)
    assert response.status_code == 409


def test_invalid_transition_returns_422(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])

    response = put_status(client, recruiter, application["id"], "hired")
    assert response.status_code == 422
    assert "applied" in response.json()["detail"]


def test_status_change_requires_ownership(client, make_job, make_application, student, recruiter, other_recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])
    assert put_status(client, other_recruiter, application["id"], "screening").status_code == 403


def test_student_cannot_change_status(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])
    assert put_status(client, student, application["id"], "screening").status_code == 403


def test_status_change_requires_auth(client):
    response = client.put("/api/applications/whatever/status", json={"status": "screening"})
    assert response.status_code == 401


def test_demo_application_status_change(client, database, recruiter):
    response = put_status(client, recruiter, "mock-app-001", "interview")

    assert response.status_code == 200
    assert response.json()["status"] == "interview"
    assert response.json()["version"] is None

    listed = client.get("/api/recruiter/applications", headers=auth_headers(recruiter)).json()
    assert {a["id"]: a["status"] for a in listed}["mock-app-001"] == "interview"


# ------------------------------------------------------------
# Recruiter views
# ------------------------------------------------------------

def test_recruiter_applications_include_demo_set(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])

    response = client.get("/api/recruiter/applications", headers=auth_headers(recruiter))
    assert response.status_code == 200
    listed = response.json()

    assert listed[0]["id"] == application["id"]
    assert listed[0]["isDemo"] is False
    assert listed[0]["student"]["firstName"] == "Asha"
    assert sum(1 for a in listed if a["isDemo"]) == 6


def test_recruiter_applications_filter_by_status(client, recruiter):
    response = client.get(
        "/api/recruiter/applications", params={"status": "hired"}, headers=auth_headers(recruiter),
    )
    assert [a["id"] for a in response.json()] == ["mock-app-003"]


def test_pipeline_buckets(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])
    put_status(client, recruiter, application["id"], "screening")
    put_status(client, recruiter, application["id"], "interview")

    pipeline = client.get("/api/recruiter/pipeline", headers=auth_headers(recruiter)).json()

    assert application["id"] in [a["id"] for a in pipeline["interview"]]
    assert application["id"] not in [a["id"] for a in pipeline["applied"] + pipeline["screening"]]
    buckets = ("applied", "screening", "interview", "hired", "rejected", "other")
    assert sum(len(pipeline[b]) for b in buckets) == pipeline["total"] == 7


def test_metrics_endpoint(client, make_job, make_application, student, recruiter):
    job = make_job(recruiter["id"])
    application = make_application(student["id"], job["id"])
    put_status(client, recruiter, application["id"], "screening")
    put_status(client, recruiter, application["id"], "interview")

    metrics = client.get("/api/recruiter/metrics", headers=auth_headers(recruiter)).json()
    assert metrics == {"totalApplications": 1, "interviewRate": 100.0, "hireRate": 0.0, "avgTimeToHire": 0.0}


def test_job_applications_owner_only(client, make_job, make_application, student, recruiter, other_recruiter):
    job = make_job(recruiter["id"])
    make_application(student["id"], job["id"])

    mine = client.get(f"/api/jobs/{job['id']}/applications", headers=auth_headers(recruiter))
    assert mine.status_code == 200
    assert len(mine.json()) == 1

    theirs = client.get(f"/api/jobs/{job['id']}/applications", headers=auth_headers(other_recruiter))
    assert theirs.status_code == 403
