"""
Team Pydantic Schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from uuid import UUID


HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class TeamCreate(BaseModel):
    """
    Example:
        {"name": "Red Rockets", "color": "#EF4444"}

    color is optional; the next unused palette color is picked when omitted.
    """
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class TeamResponse(BaseModel):
    id: UUID
    group_id: UUID
    name: str
    color: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
