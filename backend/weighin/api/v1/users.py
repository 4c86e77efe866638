"""
User Profile Endpoints

Endpoints:
- GET /users/me - Current profile
- PUT /users/me - Update display name
- PUT /users/me/height - Set height (cm or ft/in)
- GET /users/me/health - BMI and calorie summary

All endpoints require authentication.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from weighin.api.v1.deps import get_current_user, raise_http
from weighin.core.exceptions import WeighInError
from weighin.db.session import get_db
from weighin.models.user import User
from weighin.schemas.health import HealthSummaryResponse
from weighin.schemas.user import UserResponse, UserUpdate, HeightUpdate
from weighin.services import auth_service, weight_service


router = APIRouter()


@router.get("/me", response_model=UserResponse, summary="Get current user profile")
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserResponse, summary="Update current user profile")
def update_me(
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Only provided fields are changed."""
    return auth_service.update_user(db, current_user, user_data)


@router.put("/me/height", response_model=UserResponse, summary="Set height")
def update_height(
    height: HeightUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Store the height in centimeters.

    Example:
        PUT /api/v1/users/me/height
        {"unit": "ft", "feet": 5, "inches": 10}   -> height_cm 177.8
    """
    try:
        return auth_service.update_height(
            db, current_user, height.unit,
            value=height.value, feet=height.feet, inches=height.inches
        )
    except WeighInError as e:
        raise_http(e)


@router.get(
    "/me/health",
    response_model=HealthSummaryResponse,
    summary="BMI and calorie summary",
    responses={404: {"description": "Height or weight entries missing"}}
)
def get_health(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    BMI, category, daily calories and targets from the latest entry.

    The trend compares against the previous entry and is null when there
    is only one.
    """
    summary = weight_service.get_health_summary(db, current_user)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Set your height and log a weight to see health metrics"
        )
    return summary
