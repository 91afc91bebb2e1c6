"""
Student Routes

POST /student/profile - Create student profile
GET /student/profile - Get own profile
PUT /student/profile - Update profile
GET /student/dashboard - Resume score, job matches, interview score, streak
GET /student/applications - Get my applications
GET /student/interviews - Get my interview sessions
GET /student/resume/latest - Latest resume analysis
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from placenet.api.deps import get_applications, get_interviews, get_jobs, get_profiles, get_resume_analyses
from placenet.core.auth import get_current_student
from placenet.core.errors import Conflict, NotFound
from placenet.schemas.schemas import (
    ApplicationResponse, InterviewSessionResponse, ResumeAnalysisResponse,
    StudentDashboardResponse, StudentProfileCreate, StudentProfileResponse, StudentProfileUpdate,
)
from placenet.services.mongo_service import InterviewSessionService, ResumeAnalysisService
from placenet.services.repositories import ApplicationRepository, JobRepository, ProfileRepository

router = APIRouter(prefix="/student", tags=["Students"])


@router.post("/profile", response_model=StudentProfileResponse, status_code=201)
async def create_profile(
    data: StudentProfileCreate,
    user: dict = Depends(get_current_student),
    profiles: ProfileRepository = Depends(get_profiles),
):
    """Create student profile. User must be registered as student."""
    if profiles.get_student(user["user_id"]):
        raise Conflict("Profile already exists. Use PUT to update.")
    return profiles.create_student(user["user_id"], data.model_dump())


@router.get("/profile", response_model=StudentProfileResponse)
async def get_profile(
    user: dict = Depends(get_current_student),
    profiles: ProfileRepository = Depends(get_profiles),
):
    """Get current student's profile."""
    profile = profiles.get_student(user["user_id"])
    if not profile:
        raise NotFound("Profile not found. Create one first.")
    return profile


@router.put("/profile", response_model=StudentProfileResponse)
async def update_profile(
    data: StudentProfileUpdate,
    user: dict = Depends(get_current_student),
    profiles: ProfileRepository = Depends(get_profiles),
):
    """Update student profile. Only provided fields are updated."""
    if not profiles.get_student(user["user_id"]):
        raise NotFound("Profile not found")

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        return profiles.get_student(user["user_id"])
    return profiles.update_student(user["user_id"], fields)


@router.get("/dashboard", response_model=StudentDashboardResponse)
async def get_dashboard(
    user: dict = Depends(get_current_student),
    profiles: ProfileRepository = Depends(get_profiles),
    jobs: JobRepository = Depends(get_jobs),
    interviews: InterviewSessionService = Depends(get_interviews),
    analyses: ResumeAnalysisService = Depends(get_resume_analyses),
):
    """
    Summary cards for the student home page.

    jobMatches counts active jobs sharing at least one skill with the profile.
    """
    profile = profiles.get_student(user["user_id"]) or {}
    latest = analyses.get_latest(user["user_id"]) or {}

    student_skills = set(profile.get("skills") or [])
    job_matches = sum(
        1 for job in jobs.list_active()
        if student_skills.intersection(job["skills"] or [])
    )

    return StudentDashboardResponse(
        resume_score=latest.get("overall_score") or 0,
        job_matches=job_matches,
        interview_score=interviews.average_score(user["user_id"]),
        learning_streak=profile.get("learning_streak") or 0,
    )


@router.get("/applications", response_model=List[ApplicationResponse])
async def get_my_applications(
    user: dict = Depends(get_current_student),
    applications: ApplicationRepository = Depends(get_applications),
):
    """Get all applications submitted by current student, newest first."""
    return applications.list_by_student(user["user_id"])


@router.get("/interviews", response_model=List[InterviewSessionResponse])
async def get_my_interviews(
    user: dict = Depends(get_current_student),
    interviews: InterviewSessionService = Depends(get_interviews),
):
    return interviews.list_by_student(user["user_id"])


@router.get("/resume/latest", response_model=Optional[ResumeAnalysisResponse])
async def get_latest_resume_analysis(
    user: dict = Depends(get_current_student),
    analyses: ResumeAnalysisService = Depends(get_resume_analyses),
):
    """Latest resume analysis, or null when the student has none."""
    return analyses.get_latest(user["user_id"])
