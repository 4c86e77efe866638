"""
Authentication Endpoints
Handles user registration, login, and token refresh.

Endpoints:
- POST /auth/register - Create new user account
- POST /auth/login - Authenticate and get tokens
- POST /auth/refresh - Get new access token using refresh token
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from weighin.db.session import get_db
from weighin.schemas.user import UserCreate, LoginRequest, Token, RefreshTokenRequest
from weighin.services import auth_service

# Logger for auth events
auth_logger = logging.getLogger("auth")


# Create router for authentication endpoints
# This router will be included in the main app with prefix /api/v1/auth
router = APIRouter()


def _issue_tokens(user_id: UUID) -> Token:
    return Token(
        access_token=auth_service.create_access_token(user_id),
        refresh_token=auth_service.create_refresh_token(user_id),
        token_type="bearer"
    )


@router.post(
    "/register",
    response_model=Token,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account and return authentication tokens",
    responses={
        400: {"description": "Email already registered"},
        422: {"description": "Validation error (invalid email, short password, etc.)"}
    }
)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
) -> Token:
    """
    Register a new user account.

    Flow:
    1. Validate user input (email format, password length, etc.)
    2. Check if email already exists
    3. Hash password and create the profile
    4. Return access and refresh tokens

    Example:
        POST /api/v1/auth/register
        {
            "email": "sam@example.com",
            "password": "SecurePass123!",
            "display_name": "Sam"
        }
    """
    if auth_service.get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    try:
        user = auth_service.create_user(db, user_data)
    except IntegrityError:
        # Concurrent registration with the same email
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    auth_logger.info(f"REGISTER | user_id={user.id}")
    return _issue_tokens(user.id)


@router.post(
    "/login",
    response_model=Token,
    summary="Login user",
    description="Authenticate user with email and password, return tokens",
    responses={401: {"description": "Invalid credentials"}}
)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db)
) -> Token:
    """
    Authenticate user and get JWT tokens.

    Failed logins return a generic message that does not reveal whether
    the email exists.
    """
    client_ip = request.client.host if request.client else "unknown"
    user = auth_service.authenticate_user(db, credentials.email, credentials.password)

    if not user:
        auth_logger.warning(
            f"LOGIN_FAILED | email={credentials.email} | ip={client_ip} | reason=invalid_credentials"
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"}
        )

    auth_logger.info(f"LOGIN_SUCCESS | user_id={user.id} | ip={client_ip}")
    return _issue_tokens(user.id)


@router.post(
    "/refresh",
    response_model=Token,
    summary="Refresh access token",
    description="Get new access token using refresh token",
    responses={401: {"description": "Invalid or expired refresh token"}}
)
def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
) -> Token:
    """
    Exchange a valid refresh token for a new token pair.

    Errors:
    - 401: Invalid/expired refresh token, or the user no longer exists
    """
    payload = auth_service.verify_token(refresh_data.refresh_token, expected_type="refresh")
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = auth_service.get_user_by_id(db, UUID(payload.sub))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return _issue_tokens(user.id)
