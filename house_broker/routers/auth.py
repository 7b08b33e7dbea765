"""
Authentication API endpoints for registration, login, and user information.
Provides JWT-based authentication with role claims.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from house_broker.models.user import User
from house_broker.services.auth import AuthService
from house_broker.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    TokenValidationResponse
)
from house_broker.schemas.user import UserResponse
from house_broker.schemas.error import get_error_responses
from house_broker.utils.dependencies import (
    get_auth_service,
    get_current_user,
    security
)


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, token: str, expires_at) -> AuthResponse:
    return AuthResponse(
        token=token,
        token_type="bearer",
        expires_at=expires_at,
        user=UserResponse.model_validate(user.to_dict())
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Register a new user",
    description="Create a HouseSeeker or Broker account and return a JWT token",
    responses=get_error_responses(400, 500)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Register a user and sign them in.

    Raises:
        DuplicateResourceError: If the email is already registered
        ValidationError: If the request is invalid
    """
    user, token, expires_at = await auth_service.register(register_data)
    return _auth_response(user, token, expires_at)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns a JWT token",
    responses=get_error_responses(400, 401, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Authenticate user and return a JWT token.

    Args:
        login_data: Login credentials (email and password)
        auth_service: Authentication service

    Returns:
        Token with user info

    Raises:
        InvalidCredentialsError: If credentials are invalid
    """
    user, token, expires_at = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return _auth_response(user, token, expires_at)


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Get current authenticated user information",
    responses=get_error_responses(401, 404)
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> UserResponse:
    return UserResponse.model_validate(current_user.to_dict())


@router.post(
    "/validate",
    response_model=TokenValidationResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate token",
    description="Report whether the bearer token is currently valid; never fails with 401"
)
async def validate_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> TokenValidationResponse:
    if not credentials:
        return TokenValidationResponse(valid=False)
    return TokenValidationResponse(valid=auth_service.validate_token(credentials.credentials))
