"""
Job Routes

POST /jobs - Create job posting (recruiter only)
GET /jobs - List active jobs with filters, demo catalog appended
GET /jobs/{job_id} - Get job details
PUT /jobs/{job_id} - Update job (owner only)
DELETE /jobs/{job_id} - Delete job and its applications (owner only)
GET /jobs/{job_id}/applications - Applications for one job (owner only)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from placenet.api.deps import get_applications, get_engine, get_jobs
from placenet.core.auth import get_current_recruiter
from placenet.core.errors import Forbidden, NotFound
from placenet.schemas.schemas import (
    ApplicationResponse, JobCreate, JobListing, JobResponse, JobUpdate, MessageResponse,
)
from placenet.services.demo_data import is_synthetic_job, synthetic_jobs
from placenet.services.pipeline_service import PipelineEngine
from placenet.services.repositories import ApplicationRepository, JobRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def matches_filters(job: dict, search: Optional[str], location: Optional[str],
                    job_type: Optional[str], skill: Optional[str]) -> bool:
    """Same filter semantics as JobRepository.list_active, for in-memory jobs."""
    if search and search.lower() not in job["title"].lower():
        return False
    if location and location.lower() not in (job["location"] or "").lower():
        return False
    if job_type and job["type"] != job_type:
        return False
    if skill and skill.lower() not in {s.lower() for s in job["skills"] or []}:
        return False
    return True


def get_owned_job(job_id: str, recruiter: dict, jobs: JobRepository) -> dict:
    """Load a real job and check the caller owns it (admins pass)."""
    job = jobs.get(job_id)
    if not job:
        raise NotFound("Job not found")
    if recruiter["role"] != "admin" and job["recruiter_id"] != recruiter["user_id"]:
        raise Forbidden("Not authorized to modify this job")
    return job


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job: JobCreate,
    recruiter: dict = Depends(get_current_recruiter),
    jobs: JobRepository = Depends(get_jobs),
):
    """Create a new job posting. Only recruiters can create jobs."""
    created = jobs.create(recruiter["user_id"], job.model_dump(mode="json"))
    logger.info("Job %s '%s' posted by %s", created["id"], created["title"], recruiter["user_id"])
    return created


@router.get("", response_model=List[JobListing])
async def list_jobs(
    search: Optional[str] = Query(None, description="Search in title"),
    location: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None),
    skill: Optional[str] = Query(None, description="Filter by required skill"),
    jobs: JobRepository = Depends(get_jobs),
    engine: PipelineEngine = Depends(get_engine),
):
    """List active job postings, newest first, followed by the demo catalog."""
    rows = jobs.list_active(search=search, location=location, job_type=job_type, skill=skill)
    counts = jobs.count_applications(r["id"] for r in rows)
    listings = [JobListing(**r, applicants=counts.get(r["id"], 0)) for r in rows]

    if engine.demo_mode:
        listings.extend(
            JobListing(**j) for j in synthetic_jobs(engine.epoch)
            if matches_filters(j, search, location, job_type, skill)
        )
    return listings


@router.get("/{job_id}", response_model=JobListing)
async def get_job(
    job_id: str,
    jobs: JobRepository = Depends(get_jobs),
    engine: PipelineEngine = Depends(get_engine),
):
    """Get job details. Inactive jobs are still returned here."""
    if is_synthetic_job(job_id):
        if engine.demo_mode:
            for job in synthetic_jobs(engine.epoch):
                if job["id"] == job_id:
                    return job
        raise NotFound("Job not found")

    job = jobs.get(job_id)
    if not job:
        raise NotFound("Job not found")
    counts = jobs.count_applications([job_id])
    return JobListing(**job, applicants=counts.get(job_id, 0))


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    update: JobUpdate,
    recruiter: dict = Depends(get_current_recruiter),
    jobs: JobRepository = Depends(get_jobs),
):
    """Update job posting. Only provided fields are updated."""
    job = get_owned_job(job_id, recruiter, jobs)

    fields = update.model_dump(mode="json", exclude_unset=True)
    if not fields:
        return job
    return jobs.update(job_id, fields)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    recruiter: dict = Depends(get_current_recruiter),
    jobs: JobRepository = Depends(get_jobs),
):
    """Delete job posting together with every application to it."""
    get_owned_job(job_id, recruiter, jobs)
    removed = jobs.delete_with_applications(job_id)
    logger.info("Job %s deleted with %d applications", job_id, removed)
    return MessageResponse(message="Job deleted successfully")


@router.get("/{job_id}/applications", response_model=List[ApplicationResponse])
async def get_job_applications(
    job_id: str,
    recruiter: dict = Depends(get_current_recruiter),
    jobs: JobRepository = Depends(get_jobs),
    applications: ApplicationRepository = Depends(get_applications),
):
    get_owned_job(job_id, recruiter, jobs)
    return applications.list_by_job(job_id)
