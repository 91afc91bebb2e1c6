"""
Recruiter Routes

POST /recruiter/profile - Create recruiter profile
GET /recruiter/profile - Get own profile
GET /recruiter/jobs - Jobs posted by this recruiter (active and inactive)
GET /recruiter/applications - Applications to my jobs plus the demo candidates
GET /recruiter/pipeline - Same set grouped by status
GET /recruiter/metrics - Interview/hire rates over my real applications
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from placenet.api.deps import get_engine, get_jobs, get_profiles
from placenet.core.auth import get_current_recruiter
from placenet.core.errors import Conflict, NotFound
from placenet.schemas.schemas import (
    ApplicationStatus, JobListing, PipelineResponse, RecruiterApplication,
    RecruiterProfileCreate, RecruiterProfileResponse, RecruitmentMetrics,
)
from placenet.services.pipeline_service import PipelineEngine
from placenet.services.repositories import JobRepository, ProfileRepository

router = APIRouter(prefix="/recruiter", tags=["Recruiters"])


@router.post("/profile", response_model=RecruiterProfileResponse, status_code=201)
async def create_profile(
    data: RecruiterProfileCreate,
    recruiter: dict = Depends(get_current_recruiter),
    profiles: ProfileRepository = Depends(get_profiles),
):
    if profiles.get_recruiter(recruiter["user_id"]):
        raise Conflict("Profile already exists")
    return profiles.create_recruiter(recruiter["user_id"], data.model_dump())


@router.get("/profile", response_model=RecruiterProfileResponse)
async def get_profile(
    recruiter: dict = Depends(get_current_recruiter),
    profiles: ProfileRepository = Depends(get_profiles),
):
    profile = profiles.get_recruiter(recruiter["user_id"])
    if not profile:
        raise NotFound("Profile not found. Create one first.")
    return profile


@router.get("/jobs", response_model=List[JobListing])
async def get_recruiter_jobs(
    active: Optional[bool] = Query(None, description="Only active (true) or inactive (false) jobs"),
    recruiter: dict = Depends(get_current_recruiter),
    jobs: JobRepository = Depends(get_jobs),
):
    """Get all jobs posted by this recruiter, newest first, with applicant counts."""
    rows = jobs.list_by_recruiter(recruiter["user_id"])
    if active is not None:
        rows = [r for r in rows if r["is_active"] == active]

    counts = jobs.count_applications(r["id"] for r in rows)
    return [JobListing(**r, applicants=counts.get(r["id"], 0)) for r in rows]


@router.get("/applications", response_model=List[RecruiterApplication])
async def get_recruiter_applications(
    status: Optional[ApplicationStatus] = Query(None),
    recruiter: dict = Depends(get_current_recruiter),
    engine: PipelineEngine = Depends(get_engine),
):
    """
    Real applications to this recruiter's jobs (newest first), followed by
    the demo candidate set when demo mode is on.
    """
    applications = engine.list_applications_for_recruiter(recruiter["user_id"])
    if status is not None:
        applications = [a for a in applications if a["status"] == status.value]
    return applications


@router.get("/pipeline", response_model=PipelineResponse)
async def get_pipeline(
    recruiter: dict = Depends(get_current_recruiter),
    engine: PipelineEngine = Depends(get_engine),
):
    """Applications grouped into pipeline columns."""
    applications = engine.list_applications_for_recruiter(recruiter["user_id"])
    return PipelineResponse(**engine.group_by_status(applications), total=len(applications))


@router.get("/metrics", response_model=RecruitmentMetrics)
async def get_metrics(
    recruiter: dict = Depends(get_current_recruiter),
    engine: PipelineEngine = Depends(get_engine),
):
    return engine.recruitment_metrics(recruiter["user_id"])
