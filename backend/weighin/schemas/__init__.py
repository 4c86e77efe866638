"""
Pydantic Schemas Module
Contains request/response schemas for API validation and serialization.

Pydantic schemas are used for:
- Validating incoming request data
- Serializing database models to JSON responses
- Auto-generating OpenAPI documentation
"""

from weighin.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    HeightUpdate,
    LoginRequest,
    Token,
    RefreshTokenRequest,
    TokenPayload,
)
from weighin.schemas.weight import (
    WeightEntryCreate,
    WeightEntryResponse,
    WeightEntryListResponse,
)
from weighin.schemas.group import (
    GroupCreate,
    GroupUpdate,
    GroupResponse,
    GroupDetailResponse,
    GroupMemberResponse,
    JoinGroupRequest,
    AssignTeamRequest,
)
from weighin.schemas.team import TeamCreate, TeamUpdate, TeamResponse
from weighin.schemas.progress import (
    MemberProgressResponse,
    TeamProgressResponse,
    SettlementResponse,
    GroupProgressResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "HeightUpdate",
    "LoginRequest",
    "Token",
    "RefreshTokenRequest",
    "TokenPayload",
    # Weight schemas
    "WeightEntryCreate",
    "WeightEntryResponse",
    "WeightEntryListResponse",
    # Group and team schemas
    "GroupCreate",
    "GroupUpdate",
    "GroupResponse",
    "GroupDetailResponse",
    "GroupMemberResponse",
    "JoinGroupRequest",
    "AssignTeamRequest",
    "TeamCreate",
    "TeamUpdate",
    "TeamResponse",
    # Progress schemas
    "MemberProgressResponse",
    "TeamProgressResponse",
    "SettlementResponse",
    "GroupProgressResponse",
]
