"""
Reminder Endpoints (admin only)

Endpoints:
- GET  /reminders/eligible - Preview who is due for a reminder
- POST /reminders/dispatch - Send reminders and log each attempt

There is no scheduler in the API; an external cron calls /dispatch.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from weighin.api.v1.deps import require_admin
from weighin.db.session import get_db
from weighin.models.user import User
from weighin.schemas.reminder import ReminderCandidateResponse, ReminderDispatchResponse
from weighin.services import reminder_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get(
    "/eligible",
    response_model=List[ReminderCandidateResponse],
    summary="List reminder candidates",
    description="""
    Members of active groups who have not logged a weight for more than
    REMINDER_INACTIVITY_DAYS and were not reminded for that group in the
    last REMINDER_COOLDOWN_DAYS. Nothing is sent.
    """
)
def list_eligible(
    group_id: Optional[UUID] = Query(None, description="Restrict to one group"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return reminder_service.find_eligible_reminders(db, group_id=group_id)


@router.post(
    "/dispatch",
    response_model=ReminderDispatchResponse,
    summary="Send reminders",
    responses={403: {"description": "Admin privileges required"}}
)
async def dispatch(
    group_id: Optional[UUID] = Query(None, description="Restrict to one group"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Email every eligible member and write a reminder log row per attempt,
    successful or not, so the cooldown also applies after failed sends.
    """
    logger.info(f"Reminder dispatch requested by {admin.id}")
    return await reminder_service.dispatch_reminders(db, group_id=group_id)
