"""
Route dependencies - repositories and services handed to route handlers.

Everything resolves through the process-wide singletons, so tests swap the
backing stores with set_database()/set_mongo_db() or override a provider
via app.dependency_overrides.
"""

from placenet.db.postgres import get_database
from placenet.services.mongo_service import InterviewSessionService, ResumeAnalysisService
from placenet.services.pipeline_service import PipelineEngine, get_pipeline_engine
from placenet.services.realtime import ChannelHub, get_channel_hub
from placenet.services.repositories import (
    ApplicationRepository, ChatRepository, JobRepository, ProfileRepository, UserRepository,
)


def get_users() -> UserRepository:
    return UserRepository(get_database())


def get_profiles() -> ProfileRepository:
    return ProfileRepository(get_database())


def get_jobs() -> JobRepository:
    return JobRepository(get_database())


def get_applications() -> ApplicationRepository:
    return ApplicationRepository(get_database())


def get_chat() -> ChatRepository:
    return ChatRepository(get_database())


def get_interviews() -> InterviewSessionService:
    return InterviewSessionService()


def get_resume_analyses() -> ResumeAnalysisService:
    return ResumeAnalysisService()


def get_engine() -> PipelineEngine:
    return get_pipeline_engine()


def get_hub() -> ChannelHub:
    return get_channel_hub()
