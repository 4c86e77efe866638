"""
Health Pydantic Schemas
Response model for the BMI and calorie summary.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class HealthSummaryResponse(BaseModel):
    """
    Health metrics computed from the latest weight and the profile height.

    Returned by:
        GET /api/v1/users/me/health

    Example:
        {
            "weight": 154.3,
            "height_cm": 175.0,
            "bmi": 22.9,
            "category": "Normal",
            "daily_calories": 2344,
            "weight_loss_calories": 1992,
            "weight_gain_calories": 2696,
            "trend": "down",
            "measured_at": "2025-03-01T07:30:00Z"
        }
    """
    weight: float = Field(..., description="Latest weight in pounds")
    height_cm: float = Field(..., description="Profile height in centimeters")
    bmi: float = Field(..., description="Body mass index, one decimal")
    category: str = Field(..., description="Underweight, Normal, Overweight, Obese or Severely Obese")
    daily_calories: int = Field(..., description="Estimated maintenance calories")
    weight_loss_calories: int = Field(..., description="Daily target for losing weight")
    weight_gain_calories: int = Field(..., description="Daily target for gaining weight")
    trend: Optional[str] = Field(None, description="BMI direction vs. previous entry: up, down or stable")
    measured_at: datetime = Field(..., description="Time of the latest entry")
