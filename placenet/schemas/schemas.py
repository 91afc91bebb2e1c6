"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import date, datetime
from enum import Enum


# Signed 64-bit ceiling of the BIGINT salary columns
MAX_EXPECTED_SALARY = 9_223_372_036_854_775_807


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    recruiter = "recruiter"
    admin = "admin"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"


class ApplicationStatus(str, Enum):
    applied = "applied"
    screening = "screening"
    interview = "interview"
    hired = "hired"
    rejected = "rejected"


class ChatMessageType(str, Enum):
    text = "text"
    file = "file"
    system = "system"


class InterviewType(str, Enum):
    mock = "mock"
    real = "real"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.student
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(CamelModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime
    profile: Optional[Dict[str, Any]] = None


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class StudentProfileCreate(CamelModel):
    college: Optional[str] = None
    degree: Optional[str] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=2000, le=2100)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: List[str] = []
    resume: Optional[str] = None

class StudentProfileUpdate(CamelModel):
    college: Optional[str] = None
    degree: Optional[str] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=2000, le=2100)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[List[str]] = None
    resume: Optional[str] = None
    learning_streak: Optional[int] = Field(None, ge=0)

class StudentProfileResponse(CamelModel):
    id: str
    user_id: str
    college: Optional[str] = None
    degree: Optional[str] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = None
    cgpa: Optional[float] = None
    skills: List[str] = []
    resume: Optional[str] = None
    resume_score: int = 0
    interview_score: int = 0
    learning_streak: int = 0
    created_at: datetime
    updated_at: datetime

class RecruiterProfileCreate(CamelModel):
    company: str = Field(..., min_length=1, max_length=200)
    position: Optional[str] = None
    department: Optional[str] = None

class RecruiterProfileResponse(CamelModel):
    id: str
    user_id: str
    company: str
    position: Optional[str] = None
    department: Optional[str] = None
    verified: bool = False
    created_at: datetime

class StudentDashboardResponse(CamelModel):
    resume_score: int
    job_matches: int
    interview_score: int
    learning_streak: int


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = None
    type: JobType = JobType.full_time
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    requirements: List[str] = []
    skills: List[str] = []
    is_active: bool = True

class JobUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = None
    type: Optional[JobType] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    is_active: Optional[bool] = None

class JobResponse(CamelModel):
    id: str
    recruiter_id: Optional[str] = None
    title: str
    company: str
    location: Optional[str] = None
    type: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    description: Optional[str] = None
    requirements: List[str] = []
    skills: List[str] = []
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class JobListing(JobResponse):
    """Public listing entry; demo catalog entries carry is_demo=True."""
    applicants: int = 0
    is_demo: bool = False


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationForm(CamelModel):
    """Validated fields of the multipart apply form."""
    job_id: str = Field(..., min_length=1)
    cover_letter: Optional[str] = None
    resume_version: Optional[str] = "current"
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    expected_salary: Optional[int] = Field(None, ge=0)
    available_from: Optional[date] = None
    custom_answers: Optional[Dict[str, str]] = None

    @field_validator("expected_salary")
    @classmethod
    def cap_expected_salary(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        return min(value, MAX_EXPECTED_SALARY)

class ApplicationResponse(CamelModel):
    id: str
    student_id: str
    job_id: str
    status: str
    cover_letter: Optional[str] = None
    resume_version: Optional[str] = None
    resume_file: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    expected_salary: Optional[int] = None
    available_from: Optional[str] = None
    custom_answers: Optional[Dict[str, str]] = None
    version: Optional[int] = None
    applied_at: datetime
    updated_at: Optional[datetime] = None

class StudentSummary(CamelModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    skills: List[str] = []
    profile_image_url: Optional[str] = None

class JobSummary(CamelModel):
    id: str
    title: str
    company: str
    location: Optional[str] = None

class RecruiterApplication(ApplicationResponse):
    student: StudentSummary
    job: JobSummary
    is_demo: bool = False

class ApplicationStatusUpdate(CamelModel):
    status: str = Field(..., min_length=1)
    version: Optional[int] = Field(None, ge=1, description="Expected current version for conflict detection")

class StatusChangeResponse(CamelModel):
    id: str
    status: str
    updated_at: datetime
    version: Optional[int] = None

class PipelineResponse(CamelModel):
    applied: List[RecruiterApplication] = []
    screening: List[RecruiterApplication] = []
    interview: List[RecruiterApplication] = []
    hired: List[RecruiterApplication] = []
    rejected: List[RecruiterApplication] = []
    other: List[RecruiterApplication] = []
    total: int = 0

class RecruitmentMetrics(CamelModel):
    total_applications: int
    interview_rate: float
    hire_rate: float
    avg_time_to_hire: float


# ============================================================
# INTERVIEW / RESUME ANALYSIS SCHEMAS
# ============================================================

class InterviewQuestion(CamelModel):
    question: str
    answer: str = ""
    score: int = Field(0, ge=0, le=100)

class InterviewSessionCreate(CamelModel):
    type: InterviewType = InterviewType.mock
    job_id: Optional[str] = None
    questions: List[InterviewQuestion] = []
    overall_score: Optional[int] = Field(None, ge=0, le=100)
    confidence_score: Optional[int] = Field(None, ge=0, le=100)
    clarity_score: Optional[int] = Field(None, ge=0, le=100)
    pace_score: Optional[int] = Field(None, ge=0, le=100)
    feedback: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0, description="Seconds")

class InterviewSessionResponse(InterviewSessionCreate):
    id: str
    student_id: str
    created_at: datetime

class ResumeAnalysisCreate(CamelModel):
    resume_version: str = Field(..., min_length=1)
    overall_score: Optional[int] = Field(None, ge=0, le=100)
    keyword_score: Optional[int] = Field(None, ge=0, le=100)
    format_score: Optional[int] = Field(None, ge=0, le=100)
    skills_coverage: Optional[int] = Field(None, ge=0, le=100)
    suggestions: List[str] = []
    missing_skills: List[str] = []

class ResumeAnalysisResponse(ResumeAnalysisCreate):
    id: str
    student_id: str
    created_at: datetime


# ============================================================
# CHAT / REAL-TIME SCHEMAS
# ============================================================

class ChatMessageCreate(CamelModel):
    receiver_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: ChatMessageType = ChatMessageType.text
    event_id: Optional[str] = None

class ChatMessageResponse(CamelModel):
    id: str
    sender_id: str
    receiver_id: Optional[str] = None
    event_id: Optional[str] = None
    message: str
    type: str
    created_at: datetime


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True

class DemoSeedResponse(CamelModel):
    message: str
    created: List[str] = []
