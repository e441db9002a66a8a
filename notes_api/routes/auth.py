"""
Notes API — Account Route Handlers
====================================

What:  POST /auth/register and POST /auth/login.
How:   Thin wrappers over AuthService; no bearer token required.
"""

from fastapi import APIRouter, Depends, status

from notes_api.dependencies import get_auth_service
from notes_api.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from notes_api.schemas.common import ErrorResponse
from notes_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Malformed email or short password", "model": ErrorResponse},
        409: {"description": "Email already in use", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    user = await service.register(email=body.email, name=body.name, password=body.password)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid email or password", "model": ErrorResponse},
    },
    summary="Exchange email and password for a bearer token",
)
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    The token is valid for 24 hours and is presented as
    `Authorization: Bearer <token>`.
    """
    user, token = await service.login(email=body.email, password=body.password)
    return LoginResponse(user=UserResponse.model_validate(user), token=token)
