"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info (with profile when one exists)
"""

import logging

from fastapi import APIRouter, Depends

from placenet.api.deps import get_profiles, get_users
from placenet.core.auth import create_access_token, get_current_user, hash_password, verify_password
from placenet.core.errors import Conflict, Forbidden, NotFound, Unauthorized
from placenet.schemas.schemas import (
    LoginRequest, MessageResponse, RegisterRequest, TokenResponse, UserResponse,
)
from placenet.services.repositories import ProfileRepository, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, users: UserRepository = Depends(get_users)):
    """
    Register a new user account.

    After registration, login to get access token, then create profile.
    """
    if users.get_by_email(request.email):
        raise Conflict("Email already registered")

    users.create(
        email=request.email,
        password_hash=hash_password(request.password),
        role=request.role.value,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    logger.info("Registered %s as %s", request.email, request.role.value)
    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, users: UserRepository = Depends(get_users)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = users.get_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise Unauthorized("Invalid email or password")
    if not user["is_active"]:
        raise Forbidden("Account deactivated")

    token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return TokenResponse(access_token=token, user_id=user["id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    user: dict = Depends(get_current_user),
    users: UserRepository = Depends(get_users),
    profiles: ProfileRepository = Depends(get_profiles),
):
    """Get current authenticated user's info."""
    row = users.get(user["user_id"])
    if row is None:
        raise NotFound("User not found")

    profile = None
    if row["role"] == "student":
        profile = profiles.get_student(row["id"])
    elif row["role"] == "recruiter":
        profile = profiles.get_recruiter(row["id"])

    return UserResponse(**row, profile=profile)
