"""
Weight Service
Business logic for recording, listing and deleting weight entries.

Recording an entry:
    1. Convert the submitted value to pounds
    2. Reject timestamps not after the user's latest entry (history is
       append-only) or in the future
    3. Compute percentage_change against the user's first-ever entry
       (private entries included); the very first entry gets 0.0
    4. Persist, publish notifications, commit

Stored percentages are never recomputed. The baseline entry cannot be deleted
while later entries still refer to it.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from weighin.core.exceptions import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from weighin.core.timeutils import as_utc, utcnow
from weighin.models.user import User
from weighin.models.weight_entry import WeightEntry
from weighin.services.conversions import percentage_change, to_canonical_weight
from weighin.services.health_metrics import build_health_summary
from weighin.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


# Tolerated clock skew between client and server
FUTURE_TOLERANCE = timedelta(minutes=5)


def get_baseline_entry(db: Session, user_id: UUID) -> Optional[WeightEntry]:
    """The user's first-ever entry, private or not."""
    return (
        db.query(WeightEntry)
        .filter(WeightEntry.user_id == user_id)
        .order_by(WeightEntry.created_at.asc(), WeightEntry.id.asc())
        .first()
    )


def get_latest_entries(db: Session, user_id: UUID, count: int = 1) -> List[WeightEntry]:
    """Most recent entries, newest first."""
    return (
        db.query(WeightEntry)
        .filter(WeightEntry.user_id == user_id)
        .order_by(WeightEntry.created_at.desc())
        .limit(count)
        .all()
    )


def create_weight_entry(
    db: Session,
    user: User,
    value: float,
    unit: str = "lb",
    notes: Optional[str] = None,
    is_private: bool = False,
    created_at: Optional[datetime] = None,
) -> WeightEntry:
    """
    Record a weight for a user.

    Args:
        db: Database session
        user: Author of the entry
        value: Weight in the given unit
        unit: "lb" or "kg"
        notes: Optional free text
        is_private: Keep the entry out of every group view
        created_at: Measurement time (defaults to now)

    Returns:
        The committed WeightEntry

    Raises:
        InvalidInputError: bad weight/unit, or a timestamp not after
            the latest entry or in the future

    Example:
        entry = create_weight_entry(db, current_user, 68.2, unit="kg")
        entry.percentage_change  # e.g. -2.5
    """
    pounds = to_canonical_weight(value, unit)
    now = utcnow()
    created_at = as_utc(created_at) if created_at is not None else now

    if created_at > now + FUTURE_TOLERANCE:
        raise InvalidInputError("Weight entries cannot be dated in the future")

    latest = get_latest_entries(db, user.id, 1)
    if latest and created_at <= as_utc(latest[0].created_at):
        raise InvalidInputError(
            "Weight history is append-only: the entry must be dated after your latest entry"
        )

    baseline = get_baseline_entry(db, user.id)
    change = percentage_change(baseline.weight if baseline else None, pounds)

    entry = WeightEntry(
        user_id=user.id,
        weight=pounds,
        percentage_change=change,
        notes=notes,
        is_private=is_private,
        created_at=created_at,
    )
    db.add(entry)
    db.flush()

    NotificationService.publish_weight_entry(db, entry, user)
    db.commit()
    db.refresh(entry)

    logger.info(f"User {user.id} logged weight entry {entry.id} ({change:.2f}%)")
    return entry


def list_weight_entries(
    db: Session,
    user_id: UUID,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[WeightEntry]:
    """The user's own entries (private included), newest first."""
    query = db.query(WeightEntry).filter(WeightEntry.user_id == user_id)
    if from_date is not None:
        query = query.filter(WeightEntry.created_at >= from_date)
    if to_date is not None:
        query = query.filter(WeightEntry.created_at <= to_date)
    return (
        query.order_by(WeightEntry.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def count_weight_entries(db: Session, user_id: UUID) -> int:
    return db.query(WeightEntry).filter(WeightEntry.user_id == user_id).count()


def delete_weight_entry(db: Session, user_id: UUID, entry_id: UUID) -> None:
    """
    Delete one of the user's own entries.

    Raises:
        NotFoundError: entry does not exist
        PermissionDeniedError: entry belongs to someone else
        ConflictError: entry is the baseline of later entries
    """
    entry = db.query(WeightEntry).filter(WeightEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Weight entry not found")
    if entry.user_id != user_id:
        raise PermissionDeniedError("You can only delete your own weight entries")

    baseline = get_baseline_entry(db, user_id)
    if baseline.id == entry.id and count_weight_entries(db, user_id) > 1:
        raise ConflictError("The first weight entry is the baseline of later entries and cannot be deleted")

    db.delete(entry)
    db.commit()
    logger.info(f"User {user_id} deleted weight entry {entry_id}")


def get_health_summary(db: Session, user: User) -> Optional[dict]:
    """
    Health metrics from the latest entry and the profile height.

    Returns:
        Summary dict (see build_health_summary), or None when the user has
        no height or no entries yet
    """
    if not user.height_cm:
        return None

    latest = get_latest_entries(db, user.id, 2)
    if not latest:
        return None

    previous = latest[1].weight if len(latest) > 1 else None
    summary = build_health_summary(latest[0].weight, user.height_cm, previous)
    summary["measured_at"] = as_utc(latest[0].created_at)
    return summary
