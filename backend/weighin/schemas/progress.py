"""
Progress Pydantic Schemas
Response models for the group leaderboard, team rollups and settlement.

Leaderboard and team models carry percentages only; raw weights appear
solely in the settlement of a concluded group.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class ProgressPoint(BaseModel):
    """One charted entry: percentage and time, nothing else."""
    percentage_change: float
    created_at: datetime


class MemberProgressResponse(BaseModel):
    """
    Ranked summary of one member.

    team_id is withheld (null) for members outside the viewer's team.
    """
    user_id: UUID
    display_name: str
    team_id: Optional[UUID] = None
    latest_change: float = Field(..., description="Percent change of the latest qualifying entry")
    best_change: float = Field(..., description="Lowest percent change among qualifying entries")
    total_entries: int
    days_active: int
    entries: List[ProgressPoint] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class TeamProgressResponse(BaseModel):
    """
    Aggregates of one team.

    members is only filled for the viewer's own team.
    """
    team_id: UUID
    name: str
    color: str
    member_count: int
    average_change: float
    total_entries: int
    best_change: float
    combined_progress: float
    members: Optional[List[MemberProgressResponse]] = None

    model_config = ConfigDict(from_attributes=True)


class SettlementMember(BaseModel):
    user_id: UUID
    display_name: str
    first_weight: float
    last_weight: float
    weight_loss: float
    weight_loss_percentage: float


class SettlementResponse(BaseModel):
    """
    Weight lost by a concluded group.

    Returned by:
        GET /api/v1/groups/{id}/settlement

    Example:
        {
            "members": [
                {"display_name": "A", "first_weight": 200, "last_weight": 190,
                 "weight_loss": 10.0, "weight_loss_percentage": 5.0, ...}
            ],
            "total_weight_lost": 10.0,
            "cached": true
        }
    """
    members: List[SettlementMember] = Field(default_factory=list)
    total_weight_lost: float
    cached: bool = Field(..., description="Total is stored on the group")


class GroupProgressResponse(BaseModel):
    """
    Everything the group progress page needs.

    Returned by:
        GET /api/v1/groups/{id}/progress
    """
    group_id: UUID
    is_team_challenge: bool
    is_concluded: bool
    members: List[MemberProgressResponse] = Field(default_factory=list)
    teams: List[TeamProgressResponse] = Field(default_factory=list)
    settlement: Optional[SettlementResponse] = None
