"""
Demo Routes

POST /demo/initialize - Seed starter rows for the caller's role

Recruiters get a profile and one job posting, students get a filled-in
profile. Rows that already exist are left alone, so calling it twice is safe.
"""

import logging

from fastapi import APIRouter, Depends

from placenet.api.deps import get_engine, get_jobs, get_profiles
from placenet.core.auth import get_current_user
from placenet.core.errors import NotFound
from placenet.schemas.schemas import DemoSeedResponse
from placenet.services.demo_data import DEMO_JOB, DEMO_RECRUITER_PROFILE, DEMO_STUDENT_PROFILE
from placenet.services.pipeline_service import PipelineEngine
from placenet.services.repositories import JobRepository, ProfileRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/demo", tags=["Demo"])


@router.post("/initialize", response_model=DemoSeedResponse)
async def initialize_demo_data(
    user: dict = Depends(get_current_user),
    profiles: ProfileRepository = Depends(get_profiles),
    jobs: JobRepository = Depends(get_jobs),
    engine: PipelineEngine = Depends(get_engine),
):
    if not engine.demo_mode:
        raise NotFound("Demo mode is disabled")

    user_id = user["user_id"]
    created = []
    if user["role"] == "recruiter":
        if not profiles.get_recruiter(user_id):
            profiles.create_recruiter(user_id, dict(DEMO_RECRUITER_PROFILE))
            created.append("recruiterProfile")
        if not any(j["title"] == DEMO_JOB["title"] for j in jobs.list_by_recruiter(user_id)):
            jobs.create(user_id, dict(DEMO_JOB))
            created.append("job")
    elif user["role"] == "student":
        if not profiles.get_student(user_id):
            profiles.create_student(user_id, dict(DEMO_STUDENT_PROFILE))
            created.append("studentProfile")

    logger.info("Demo data for %s (%s): %s", user_id, user["role"], created or "nothing new")
    return DemoSeedResponse(message="Demo data initialized successfully", created=created)
