"""
Application Routes

POST /applications - Apply to a job (student only, multipart with optional resume)
PUT /applications/{application_id}/status - Move an application through the pipeline
"""

import json
import logging
import time
from typing import Optional

import pydantic
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import IntegrityError

from placenet.api.deps import get_applications, get_engine, get_jobs
from placenet.core.auth import get_current_recruiter, get_current_student
from placenet.core.errors import BadRequest, Conflict, NotFound, ValidationError
from placenet.db.schema import utcnow
from placenet.schemas.schemas import (
    ApplicationForm, ApplicationResponse, ApplicationStatusUpdate, StatusChangeResponse,
)
from placenet.services.demo_data import is_synthetic_job
from placenet.services.pipeline_service import PipelineEngine
from placenet.services.repositories import ApplicationRepository, JobRepository
from placenet.utils.file_upload import save_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])


def _blank(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def parse_application_form(**raw: Optional[str]) -> ApplicationForm:
    """Build ApplicationForm from multipart strings; blanks count as absent."""
    values = {k: _blank(v) for k, v in raw.items()}

    custom_answers = values.pop("custom_answers", None)
    if custom_answers is not None:
        try:
            values["custom_answers"] = json.loads(custom_answers)
        except json.JSONDecodeError:
            raise ValidationError("customAnswers must be a JSON object")

    try:
        return ApplicationForm(**{k: v for k, v in values.items() if v is not None})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        raise ValidationError(f"{field}: {first['msg']}")


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    job_id: str = Form(..., alias="jobId"),
    cover_letter: Optional[str] = Form(None, alias="coverLetter"),
    resume_version: Optional[str] = Form(None, alias="resumeVersion"),
    linkedin_url: Optional[str] = Form(None, alias="linkedinUrl"),
    github_url: Optional[str] = Form(None, alias="githubUrl"),
    portfolio_url: Optional[str] = Form(None, alias="portfolioUrl"),
    expected_salary: Optional[str] = Form(None, alias="expectedSalary"),
    available_from: Optional[str] = Form(None, alias="availableFrom"),
    custom_answers: Optional[str] = Form(None, alias="customAnswers"),
    resume: Optional[UploadFile] = File(None),
    student: dict = Depends(get_current_student),
    jobs: JobRepository = Depends(get_jobs),
    applications: ApplicationRepository = Depends(get_applications),
    engine: PipelineEngine = Depends(get_engine),
):
    """
    Apply to a job.

    Demo catalog jobs accept the application but nothing is stored: the
    response is a transient record the client can show as submitted.
    """
    form = parse_application_form(
        job_id=job_id, cover_letter=cover_letter, resume_version=resume_version,
        linkedin_url=linkedin_url, github_url=github_url, portfolio_url=portfolio_url,
        expected_salary=expected_salary, available_from=available_from,
        custom_answers=custom_answers,
    )

    if is_synthetic_job(form.job_id):
        if not engine.demo_mode:
            raise NotFound("Job not found")
        resume_file = await save_resume(resume)
        logger.info("Demo application received from %s for job %s", student["user_id"], form.job_id)
        return {
            "id": f"app-{int(time.time() * 1000)}",
            "student_id": student["user_id"],
            "job_id": form.job_id,
            "status": "applied",
            "cover_letter": form.cover_letter,
            "resume_file": resume_file,
            "applied_at": utcnow(),
        }

    job = jobs.get(form.job_id)
    if not job:
        raise NotFound("Job not found")
    if not job["is_active"]:
        raise BadRequest("Job is no longer accepting applications")
    if applications.exists_for(student["user_id"], form.job_id):
        raise Conflict("Already applied to this job")

    resume_file = await save_resume(resume)
    data = form.model_dump(exclude={"job_id"})
    data["resume_version"] = data["resume_version"] or "current"
    if data["available_from"] is not None:
        data["available_from"] = data["available_from"].isoformat()

    try:
        application = applications.create(student["user_id"], form.job_id, {**data, "resume_file": resume_file})
    except IntegrityError:
        # Unique (student_id, job_id) caught a concurrent duplicate
        raise Conflict("Already applied to this job")

    logger.info(
        "New application %s: %s applied for %s at %s%s",
        application["id"], student["user_id"], job["title"], job["company"],
        " with resume upload" if resume_file else "",
    )
    return application


@router.put("/{application_id}/status", response_model=StatusChangeResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    recruiter: dict = Depends(get_current_recruiter),
    engine: PipelineEngine = Depends(get_engine),
):
    """
    Move an application to a new pipeline status.

    Send the version you last saw to get a 409 instead of silently
    overwriting a concurrent change. Demo applications have no version.
    """
    return engine.set_application_status(
        application_id, update.status, recruiter, expected_version=update.version,
    )
