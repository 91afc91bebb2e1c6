"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placenet.api.routes.auth_routes import router as auth_router
from placenet.api.routes.student_routes import router as student_router
from placenet.api.routes.recruiter_routes import router as recruiter_router
from placenet.api.routes.job_routes import router as job_router
from placenet.api.routes.application_routes import router as application_router
from placenet.api.routes.interview_routes import router as interview_router
from placenet.api.routes.chat_routes import router as chat_router
from placenet.api.routes.demo_routes import router as demo_router
from placenet.api.routes.ws_routes import router as ws_router

# Main API router (mounted under /api)
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(recruiter_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(interview_router)
api_router.include_router(chat_router)
api_router.include_router(demo_router)

__all__ = ["api_router", "ws_router"]
