"""
User Pydantic Schemas
Request and response models for authentication and profile endpoints.

These schemas define the structure of data sent to and received from the API.
They provide automatic validation, serialization, and documentation.
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict, model_validator
from typing import Optional
from uuid import UUID
from datetime import datetime

from weighin.models.user import UserRole


# ============================================================================
# Authentication Schemas
# ============================================================================

class UserCreate(BaseModel):
    """
    Schema for user registration request.

    Used in POST /api/v1/auth/register endpoint.

    Example:
        {
            "email": "sam@example.com",
            "password": "SecurePass123!",
            "display_name": "Sam"
        }
    """
    email: EmailStr = Field(
        ...,
        description="Valid email address for authentication and reminders",
        examples=["sam@example.com"]
    )
    password: str = Field(
        ...,
        min_length=8,
        description="Password (minimum 8 characters)",
        examples=["SecurePass123!"]
    )
    display_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Name shown to other group members",
        examples=["Sam"]
    )


class LoginRequest(BaseModel):
    """
    Schema for user login request.

    Used in POST /api/v1/auth/login endpoint.

    Example:
        {
            "email": "sam@example.com",
            "password": "SecurePass123!"
        }
    """
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class Token(BaseModel):
    """
    Schema for JWT token response.

    Returned by /register, /login, and /refresh endpoints.
    Contains both access token (short-lived) and refresh token (long-lived).
    """
    access_token: str = Field(
        ...,
        description="JWT access token for API authentication"
    )
    refresh_token: str = Field(
        ...,
        description="JWT refresh token for obtaining new access tokens"
    )
    token_type: str = Field(
        default="bearer",
        description="Token type (always 'bearer' for JWT)"
    )


class RefreshTokenRequest(BaseModel):
    """Schema for POST /api/v1/auth/refresh."""
    refresh_token: str = Field(
        ...,
        description="Valid refresh token"
    )


# ============================================================================
# User Profile Schemas
# ============================================================================

class UserResponse(BaseModel):
    """
    Schema for user profile response.

    Used in GET /api/v1/users/me. Never includes password_hash.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "email": "sam@example.com",
            "display_name": "Sam",
            "height_cm": 175.0,
            "role": "basic",
            "created_at": "2025-01-13T10:30:00Z",
            "updated_at": "2025-01-13T10:30:00Z"
        }
    """
    id: UUID = Field(..., description="Unique user identifier")
    email: str = Field(..., description="User's email address")
    display_name: str = Field(..., description="Name shown to other group members")
    height_cm: Optional[float] = Field(None, description="Height in centimeters")
    role: UserRole = Field(..., description="admin or basic")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last profile update timestamp")

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """
    Schema for PUT /api/v1/users/me.

    All fields are optional - only provided fields will be updated.
    """
    display_name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Updated display name"
    )


class HeightUpdate(BaseModel):
    """
    Schema for PUT /api/v1/users/me/height.

    Either centimeters, or feet plus inches.

    Examples:
        {"unit": "cm", "value": 175}
        {"unit": "ft", "feet": 5, "inches": 9}
    """
    unit: str = Field("cm", description="cm or ft")
    value: Optional[float] = Field(None, description="Height in centimeters when unit is cm")
    feet: Optional[float] = Field(None, ge=0, description="Feet when unit is ft")
    inches: Optional[float] = Field(None, ge=0, lt=12, description="Inches when unit is ft")

    @model_validator(mode="after")
    def check_shape(self):
        """cm needs value; ft needs feet (inches default to 0)."""
        unit = (self.unit or "").lower()
        if unit == "cm" and self.value is None:
            raise ValueError("value is required when unit is cm")
        if unit == "ft" and self.feet is None:
            raise ValueError("feet is required when unit is ft")
        return self


# ============================================================================
# Helper Schemas
# ============================================================================

class TokenPayload(BaseModel):
    """
    Schema for JWT token payload (internal use).

    Token payload contains:
    - sub: Subject (user_id)
    - exp: Expiration timestamp
    - type: Token type (access or refresh)
    """
    sub: str = Field(..., description="Subject (user ID)")
    exp: int = Field(..., description="Expiration timestamp (Unix)")
    type: str = Field(..., description="Token type (access or refresh)")
