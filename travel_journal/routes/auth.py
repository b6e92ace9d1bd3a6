"""
Travel Journal Backend — Auth Route Handlers
==============================================

What:  Login, registration and the current user's profile.
How:   Delegates to UserService; the returned token is the one the
       authentication gate accepts on every journal route.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from travel_journal.database import get_db_session
from travel_journal.dependencies import get_current_user_id, get_user_service
from travel_journal.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from travel_journal.schemas.common import ErrorResponse
from travel_journal.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in with username and password",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
) -> AuthResponse:
    return await service.login(db, body.username, body.password)


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={400: {"description": "Missing field or user exists", "model": ErrorResponse}},
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
) -> AuthResponse:
    return await service.register(db, body.username, body.email, body.password)


@router.get(
    "/profile",
    response_model=UserResponse,
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "No account for this token", "model": ErrorResponse},
    },
    summary="The authenticated user's account",
)
async def profile(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_user(db, user_id)
