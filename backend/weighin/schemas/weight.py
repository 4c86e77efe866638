"""
Weight Pydantic Schemas
Request and response models for weight entry endpoints.
"""

from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class WeightEntryCreate(BaseModel):
    """
    Schema for recording a weight.

    Used by:
        POST /api/v1/weights

    Request body example:
    {
        "weight": 68.5,
        "unit": "kg",
        "notes": "Morning, before breakfast",
        "is_private": false
    }

    Notes:
        - user_id is inferred from JWT token
        - percentage_change is computed by the server
        - created_at defaults to now and may not precede the latest entry
    """
    weight: float = Field(
        ...,
        gt=0,
        description="Weight in the given unit"
    )
    unit: str = Field(
        "lb",
        description="lb (or lbs) / kg"
    )
    notes: Optional[str] = Field(
        None,
        max_length=1000,
        description="Optional notes about measurement context"
    )
    is_private: bool = Field(
        False,
        description="Keep this entry out of every group view"
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Measurement time (timezone-aware), defaults to now"
    )


class WeightEntryResponse(BaseModel):
    """
    Weight entry as returned to its owner.

    Returned by:
        - POST /api/v1/weights
        - GET /api/v1/weights
    """
    id: UUID = Field(..., description="Unique entry identifier")
    user_id: UUID = Field(..., description="Owner of the entry")
    weight: float = Field(..., description="Weight in pounds")
    weight_kg: float = Field(..., description="Weight in kilograms")
    percentage_change: float = Field(..., description="Percent change relative to the first entry")
    notes: Optional[str] = None
    is_private: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WeightEntryListResponse(BaseModel):
    """
    The user's entries with pagination metadata.

    Returned by:
        GET /api/v1/weights?limit=50&offset=0
    """
    entries: List[WeightEntryResponse] = Field(default_factory=list)
    total: int = Field(..., description="Total number of entries of the user")
    limit: int
    offset: int
