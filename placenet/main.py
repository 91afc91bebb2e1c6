"""
PlaceNet - Main Application

FastAPI backend with:
- PostgreSQL for structured data (users, jobs, applications, chat)
- MongoDB for documents (interview sessions, resume analyses)
- JWT authentication
- WebSocket fan-out at /ws (chat, announcements, heartbeat)

Run: uvicorn placenet.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from placenet import __version__
from placenet.api.routes import api_router, ws_router
from placenet.core.config import get_settings
from placenet.core.errors import PlacenetError
from placenet.core.logging import setup_logging
from placenet.db.mongodb import init_mongo_indexes, test_mongo_connection
from placenet.db.postgres import get_database, test_postgres_connection
from placenet.services.realtime import get_channel_hub

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and indexes, run the heartbeat while the app is up."""
    get_database().create_tables()
    try:
        init_mongo_indexes()
        print("✅ MongoDB indexes initialized")
    except Exception as e:
        print(f"⚠️ MongoDB index initialization failed: {e}")

    hub = get_channel_hub()
    hub.start_heartbeat(get_settings().heartbeat_interval_seconds)
    yield
    await hub.stop_heartbeat()
    await hub.close_all()


# Create FastAPI app
app = FastAPI(
    title="PlaceNet",
    description="""
    Campus placement platform connecting students, recruiters and placement admins.

    ## Features
    - **Authentication**: JWT-based auth for students, recruiters and admins
    - **Students**: Profile, dashboard, applications, interview and resume results
    - **Recruiters**: Job postings, application pipeline, recruitment metrics
    - **Jobs**: Search and filter active postings, apply with a resume upload
    - **Chat**: Direct messages pushed in real time over /ws

    ## Databases
    - PostgreSQL: Structured data (users, profiles, jobs, applications, chat)
    - MongoDB: Documents (interview sessions, resume analyses)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlacenetError)
async def placenet_error_handler(request: Request, exc: PlacenetError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include API routes
app.include_router(api_router, prefix="/api")
app.include_router(ws_router)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "PlaceNet", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
        "activeConnections": get_channel_hub().connection_count,
    }
