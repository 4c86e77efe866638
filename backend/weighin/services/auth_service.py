"""
Authentication Service
Handles JWT token creation, verification, and user authentication.

This service provides core authentication functionality:
- JWT token generation (access + refresh tokens)
- Token verification and decoding
- User authentication (login)
- User registration with password hashing
- Profile updates (display name, height)
"""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from weighin.core.config import settings
from weighin.core.security import hash_password, verify_password
from weighin.core.timeutils import utcnow
from weighin.models.user import User
from weighin.schemas.user import UserCreate, UserUpdate, TokenPayload
from weighin.services.conversions import to_canonical_height


# Algorithm used for signing tokens (HS256 = HMAC with SHA-256)
ALGORITHM = "HS256"


# ============================================================================
# JWT Token Functions
# ============================================================================

def _create_token(user_id: UUID, token_type: str, lifetime_seconds: int) -> str:
    payload = {
        "sub": str(user_id),  # Subject (user ID)
        "exp": utcnow() + timedelta(seconds=lifetime_seconds),
        "type": token_type,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(user_id: UUID) -> str:
    """
    Create a short-lived JWT access token (JWT_EXPIRATION, default 1 hour).

    Example:
        token = create_access_token(user.id)
        # Use in header: Authorization: Bearer {token}
    """
    return _create_token(user_id, "access", settings.JWT_EXPIRATION)


def create_refresh_token(user_id: UUID) -> str:
    """Create a long-lived JWT refresh token (REFRESH_TOKEN_EXPIRATION, default 7 days)."""
    return _create_token(user_id, "refresh", settings.REFRESH_TOKEN_EXPIRATION)


def verify_token(token: str, expected_type: str = "access") -> Optional[TokenPayload]:
    """
    Verify and decode a JWT token.

    Validates token signature, expiration, and type.

    Args:
        token: JWT token string to verify
        expected_type: Expected token type ("access" or "refresh")

    Returns:
        TokenPayload if token is valid, None if invalid

    Example:
        payload = verify_token(token, "access")
        if payload:
            user_id = UUID(payload.sub)
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        # Bad signature, expired, malformed, etc.
        return None

    user_id = payload.get("sub")
    token_type = payload.get("type")
    exp = payload.get("exp")

    if not user_id or not token_type or not exp:
        return None
    if token_type != expected_type:
        return None

    return TokenPayload(sub=user_id, exp=exp, type=token_type)


# ============================================================================
# User Authentication Functions
# ============================================================================

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Authenticate a user by email and password.

    Returns:
        User object if credentials are valid, None otherwise
    """
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


# ============================================================================
# User CRUD Functions
# ============================================================================

def create_user(db: Session, user_data: UserCreate) -> User:
    """
    Create a new user account.

    Hashes the password before storing. New accounts always get the basic
    role; admins are promoted directly in the database.

    Raises:
        IntegrityError: If email already exists in database
    """
    user = User(
        email=user_data.email.lower(),
        password_hash=hash_password(user_data.password),
        display_name=user_data.display_name,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    return user


def get_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Case-insensitive: emails are stored lowercased."""
    return db.query(User).filter(User.email == email.lower()).first()


def update_user(db: Session, user: User, user_data: UserUpdate) -> User:
    """
    Update profile fields that were provided in user_data.

    Example:
        user = update_user(db, current_user, UserUpdate(display_name="Sam K."))
    """
    for field, value in user_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def update_height(db: Session, user: User, unit: str, value: Optional[float] = None,
                  feet: Optional[float] = None, inches: Optional[float] = None) -> User:
    """
    Store the user's height in centimeters.

    Args:
        unit: "cm" (uses value) or "ft" (uses feet and inches)

    Raises:
        InvalidInputError: unknown unit or non-positive height
    """
    if (unit or "").lower() == "ft":
        height_cm = to_canonical_height((feet or 0, inches or 0), unit)
    else:
        height_cm = to_canonical_height(value, unit)

    user.height_cm = height_cm
    db.commit()
    db.refresh(user)
    return user
