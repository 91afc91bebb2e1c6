"""
Interview & Resume Analysis Routes

POST /interviews - Store a finished interview session
POST /resume/analyze - Store a resume analysis result

Both record results produced by the client; listings live under /student.
"""

from fastapi import APIRouter, Depends

from placenet.api.deps import get_interviews, get_resume_analyses
from placenet.core.auth import get_current_student
from placenet.schemas.schemas import (
    InterviewSessionCreate, InterviewSessionResponse, ResumeAnalysisCreate, ResumeAnalysisResponse,
)
from placenet.services.mongo_service import InterviewSessionService, ResumeAnalysisService

router = APIRouter(tags=["Interviews"])


@router.post("/interviews", response_model=InterviewSessionResponse, status_code=201)
async def create_interview_session(
    session: InterviewSessionCreate,
    student: dict = Depends(get_current_student),
    interviews: InterviewSessionService = Depends(get_interviews),
):
    return interviews.insert(student["user_id"], session.model_dump(mode="json"))


@router.post("/resume/analyze", response_model=ResumeAnalysisResponse, status_code=201)
async def analyze_resume(
    analysis: ResumeAnalysisCreate,
    student: dict = Depends(get_current_student),
    analyses: ResumeAnalysisService = Depends(get_resume_analyses),
):
    """Store an analysis; it becomes the student's latest resume score."""
    return analyses.insert(student["user_id"], analysis.model_dump(mode="json"))
