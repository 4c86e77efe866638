"""
Group Settlement Service
Computes how much weight a concluded group lost, and caches the total once.

Settlement compares each member's first and last non-private entries over
their whole history (not only inside the group window). Members with fewer
than two entries, and members who stayed flat or gained, are left out.

Caching:
    groups.total_weight_lost is written with a conditional UPDATE
    (... WHERE total_weight_lost IS NULL), so concurrent settlements can
    never overwrite each other. A failed write is logged and rolled back and
    the freshly computed result is returned anyway.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from weighin.core.timeutils import utcnow
from weighin.models.group import Group
from weighin.models.group_member import GroupMember
from weighin.models.user import User
from weighin.models.weight_entry import WeightEntry

logger = logging.getLogger(__name__)


def settle_member(entries: List) -> Optional[Tuple[float, float, float, float]]:
    """
    First/last comparison for one member.

    Args:
        entries: The member's non-private entries, oldest first

    Returns:
        (first_weight, last_weight, weight_loss, weight_loss_percentage),
        or None when the member does not qualify
    """
    if len(entries) < 2:
        return None

    first = entries[0].weight
    last = entries[-1].weight
    if first <= last:
        return None

    loss = first - last
    return first, last, round(loss, 2), round(loss / first * 100, 2)


def compute_settlement(members: Iterable[Tuple[UUID, str]], entries_by_user: Dict[UUID, List]) -> dict:
    """
    Settlement result for a set of members.

    Args:
        members: (user_id, display_name) pairs
        entries_by_user: Non-private entries per user, oldest first

    Returns:
        {"members": [...], "total_weight_lost": float}; members sorted by
        weight_loss descending, total is the rounded sum of listed losses
    """
    rows = []
    for user_id, display_name in members:
        settled = settle_member(entries_by_user.get(user_id, []))
        if settled is None:
            continue
        first, last, loss, loss_percentage = settled
        rows.append({
            "user_id": user_id,
            "display_name": display_name,
            "first_weight": first,
            "last_weight": last,
            "weight_loss": loss,
            "weight_loss_percentage": loss_percentage,
        })

    rows.sort(key=lambda r: r["weight_loss"], reverse=True)
    total = round(sum(r["weight_loss"] for r in rows), 2) if rows else 0.0
    return {"members": rows, "total_weight_lost": total}


def calculate_group_weight_loss(db: Session, group_id: UUID) -> dict:
    """Read-only settlement computation for every member of the group."""
    memberships = (
        db.query(GroupMember.user_id, User.display_name)
        .join(User, User.id == GroupMember.user_id)
        .filter(GroupMember.group_id == group_id)
        .all()
    )
    user_ids = [user_id for user_id, _ in memberships]

    entries_by_user: Dict[UUID, List[WeightEntry]] = {}
    if user_ids:
        entries = (
            db.query(WeightEntry)
            .filter(
                WeightEntry.user_id.in_(user_ids),
                WeightEntry.is_private.is_(False),
            )
            .order_by(WeightEntry.created_at.asc())
            .all()
        )
        for entry in entries:
            entries_by_user.setdefault(entry.user_id, []).append(entry)

    return compute_settlement(memberships, entries_by_user)


def store_total_weight_lost(db: Session, group_id: UUID, total: float) -> bool:
    """
    Write the settlement cache unless it is already set.

    Returns:
        True when the cache holds a value afterwards (written now or
        earlier), False when the write failed; failures are rolled back
        and logged
    """
    try:
        updated = (
            db.query(Group)
            .filter(Group.id == group_id, Group.total_weight_lost.is_(None))
            .update({Group.total_weight_lost: total}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to cache total_weight_lost for group {group_id}: {e}")
        return False

    if updated:
        logger.info(f"Settled group {group_id}: total_weight_lost={total}")
    else:
        logger.debug(f"Settlement cache for group {group_id} already present")
    return True


def settle_group(db: Session, group: Group, now: Optional[datetime] = None) -> Optional[dict]:
    """
    Settlement for a concluded group, caching the total on first computation.

    Args:
        db: Database session
        group: Group to settle
        now: Evaluation instant (defaults to current UTC time)

    Returns:
        Settlement dict with a "cached" flag, or None while the group is
        still running (or has no end date). Once cached, total_weight_lost
        is the stored value; member rows are always recomputed.

    Example:
        result = settle_group(db, group)
        if result:
            print(result["total_weight_lost"])
    """
    if not group.has_concluded(now or utcnow()):
        return None

    result = calculate_group_weight_loss(db, group.id)
    cached = group.total_weight_lost is not None
    if not cached:
        cached = store_total_weight_lost(db, group.id, result["total_weight_lost"])

    if cached:
        # A concurrent settlement may have won the conditional update
        stored = db.query(Group.total_weight_lost).filter(Group.id == group.id).scalar()
        if stored is not None:
            result["total_weight_lost"] = stored

    result["cached"] = cached
    return result
