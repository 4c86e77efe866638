"""
Group Pydantic Schemas
Defines request and response models for group-related API endpoints.

These schemas handle:
- Request validation (ensuring required fields are present)
- Response serialization (converting DB models to JSON)
- API documentation generation
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID


# ============================================================================
# Request Schemas (for incoming data)
# ============================================================================

class GroupCreate(BaseModel):
    """
    Schema for creating a new group.

    The creator automatically becomes the group owner.

    Example request body:
        {
            "name": "Summer Cut",
            "description": "Office challenge",
            "start_date": "2025-06-01T00:00:00Z",
            "end_date": "2025-09-01T00:00:00Z",
            "is_team_challenge": true
        }
    """
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name for the group",
        examples=["Summer Cut"]
    )
    description: Optional[str] = Field(
        None,
        max_length=1000,
        description="Optional description of the group"
    )
    start_date: Optional[datetime] = Field(
        None,
        description="Entries before this instant are ignored by the leaderboard"
    )
    end_date: Optional[datetime] = Field(
        None,
        description="After this instant the group is concluded and settled"
    )
    is_team_challenge: bool = Field(
        False,
        description="Members compete in teams"
    )


class GroupUpdate(BaseModel):
    """
    Schema for updating group information (owner only).

    All fields are optional. Only provided fields will be updated.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_team_challenge: Optional[bool] = None


class JoinGroupRequest(BaseModel):
    """
    Schema for joining a group with an invite code.

    Example:
        {"invite_code": "k4t2m9"}
    """
    invite_code: str = Field(
        ...,
        min_length=6,
        max_length=6,
        description="6-character invite code (case-insensitive)",
        examples=["K4T2M9"]
    )


class AssignTeamRequest(BaseModel):
    """Schema for PUT /groups/{id}/members/{user_id}/team; null removes the member from their team."""
    team_id: Optional[UUID] = Field(None, description="Team to join, or null")


# ============================================================================
# Response Schemas (for outgoing data)
# ============================================================================

class GroupResponse(BaseModel):
    """
    Basic group information.

    Returned by:
        POST /api/v1/groups, GET /api/v1/groups, PUT /api/v1/groups/{id}
    """
    id: UUID
    name: str
    description: Optional[str] = None
    created_by: UUID
    invite_code: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_team_challenge: bool
    total_weight_lost: Optional[float] = None
    created_at: datetime
    member_count: Optional[int] = Field(None, description="Number of members")

    model_config = ConfigDict(from_attributes=True)


class GroupMemberResponse(BaseModel):
    """One member in the group detail view; never carries weights."""
    user_id: UUID
    display_name: str
    role: str
    team_id: Optional[UUID] = None
    joined_at: datetime


class GroupDetailResponse(GroupResponse):
    """
    Group with member list.

    Returned by:
        GET /api/v1/groups/{id}
    """
    members: List[GroupMemberResponse] = Field(default_factory=list)
    is_concluded: bool = False
