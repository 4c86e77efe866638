"""
Weight Entry Endpoints

Endpoints:
- POST   /weights      - Record a weight
- GET    /weights      - List own entries (newest first)
- DELETE /weights/{id} - Delete own entry

Entries are append-only: there is no update endpoint.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from weighin.api.v1.deps import get_current_user, raise_http
from weighin.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from weighin.core.exceptions import WeighInError
from weighin.db.session import get_db
from weighin.models.user import User
from weighin.schemas.weight import WeightEntryCreate, WeightEntryResponse, WeightEntryListResponse
from weighin.services import weight_service


router = APIRouter(prefix="/weights", tags=["Weights"])


@router.post(
    "",
    response_model=WeightEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a weight",
    responses={422: {"description": "Invalid weight, unit, or timestamp"}}
)
def create_weight(
    entry_data: WeightEntryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record a weight; the server computes percentage_change.

    Example request:
        POST /api/v1/weights
        {"weight": 145, "unit": "lb"}

    Example response (baseline 150 lb):
        {"weight": 145.0, "percentage_change": -3.3333, ...}
    """
    try:
        return weight_service.create_weight_entry(
            db,
            current_user,
            entry_data.weight,
            unit=entry_data.unit,
            notes=entry_data.notes,
            is_private=entry_data.is_private,
            created_at=entry_data.created_at,
        )
    except WeighInError as e:
        db.rollback()
        raise_http(e)


@router.get("", response_model=WeightEntryListResponse, summary="List own weight entries")
def list_weights(
    from_date: Optional[datetime] = Query(None, description="Only entries at or after this time"),
    to_date: Optional[datetime] = Query(None, description="Only entries at or before this time"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    entries = weight_service.list_weight_entries(
        db, current_user.id, from_date=from_date, to_date=to_date, limit=limit, offset=offset
    )
    return WeightEntryListResponse(
        entries=[WeightEntryResponse.model_validate(e) for e in entries],
        total=weight_service.count_weight_entries(db, current_user.id),
        limit=limit,
        offset=offset,
    )


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete own weight entry")
def delete_weight(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Stored percentages of the remaining entries are left untouched."""
    try:
        weight_service.delete_weight_entry(db, current_user.id, entry_id)
    except WeighInError as e:
        raise_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
