"""
Reminder Service
Selects group members who should be reminded to log their weight, and sends
the reminder emails.

Eligibility, per (user, group) membership of an active group:
    - the user's latest weight entry (private ones count, logging is
      activity) is missing or older than REMINDER_INACTIVITY_DAYS, and
    - the latest weight_logging reminder for that pair is missing or older
      than REMINDER_COOLDOWN_DAYS

Dispatch records a ReminderLog for every attempt, successful or not, which
is what enforces the cooldown on the next run.
"""

import html
import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from weighin.core.config import settings
from weighin.core.constants import NEVER_LOGGED_DAYS, REMINDER_TYPE_WEIGHT_LOGGING
from weighin.core.timeutils import as_utc, utcnow
from weighin.integrations.email_client import EmailClient, email_client
from weighin.models.group import Group
from weighin.models.group_member import GroupMember
from weighin.models.reminder_log import ReminderLog
from weighin.models.user import User
from weighin.models.weight_entry import WeightEntry

logger = logging.getLogger(__name__)


@dataclass
class ReminderCandidate:
    """One (user, group) pair due for a reminder."""
    user_id: UUID
    user_email: str
    user_display_name: str
    group_id: UUID
    group_name: str
    days_since_last_entry: int
    last_reminder_sent: Optional[datetime]


def days_since(last_entry_at: Optional[datetime], now: datetime) -> int:
    """Whole days since the last entry, NEVER_LOGGED_DAYS when there is none."""
    if last_entry_at is None:
        return NEVER_LOGGED_DAYS
    elapsed = (as_utc(now) - as_utc(last_entry_at)).total_seconds()
    return max(0, math.floor(elapsed / 86400))


def is_due(
    last_entry_at: Optional[datetime],
    last_reminder_at: Optional[datetime],
    now: datetime,
    inactivity_days: int,
    cooldown_days: int,
) -> bool:
    """Both thresholds are strict: exactly N days ago is not yet "older than"."""
    inactive = last_entry_at is None or as_utc(last_entry_at) < now - timedelta(days=inactivity_days)
    cooled_down = last_reminder_at is None or as_utc(last_reminder_at) < now - timedelta(days=cooldown_days)
    return inactive and cooled_down


def find_eligible_reminders(
    db: Session,
    now: Optional[datetime] = None,
    group_id: Optional[UUID] = None,
    inactivity_days: Optional[int] = None,
    cooldown_days: Optional[int] = None,
) -> List[ReminderCandidate]:
    """
    All (user, group) pairs currently due for a weight logging reminder.

    Args:
        db: Database session
        now: Evaluation instant (defaults to current UTC time)
        group_id: Restrict the selection to one group
        inactivity_days: Override for REMINDER_INACTIVITY_DAYS
        cooldown_days: Override for REMINDER_COOLDOWN_DAYS

    Returns:
        Candidates ordered by group name, then display name
    """
    now = now or utcnow()
    inactivity_days = settings.REMINDER_INACTIVITY_DAYS if inactivity_days is None else inactivity_days
    cooldown_days = settings.REMINDER_COOLDOWN_DAYS if cooldown_days is None else cooldown_days

    query = (
        db.query(GroupMember.user_id, User.email, User.display_name, Group.id, Group.name)
        .join(User, User.id == GroupMember.user_id)
        .join(Group, Group.id == GroupMember.group_id)
        .filter(
            or_(Group.start_date.is_(None), Group.start_date <= now),
            or_(Group.end_date.is_(None), Group.end_date >= now),
        )
    )
    if group_id is not None:
        query = query.filter(Group.id == group_id)
    pairs = query.order_by(Group.name.asc(), User.display_name.asc()).all()
    if not pairs:
        return []

    user_ids = list({row[0] for row in pairs})
    group_ids = list({row[3] for row in pairs})

    last_entries: Dict[UUID, datetime] = dict(
        db.query(WeightEntry.user_id, func.max(WeightEntry.created_at))
        .filter(WeightEntry.user_id.in_(user_ids))
        .group_by(WeightEntry.user_id)
        .all()
    )

    last_reminders: Dict[Tuple[UUID, UUID], datetime] = {
        (user_id, gid): sent_at
        for user_id, gid, sent_at in (
            db.query(ReminderLog.user_id, ReminderLog.group_id, func.max(ReminderLog.sent_at))
            .filter(
                and_(
                    ReminderLog.reminder_type == REMINDER_TYPE_WEIGHT_LOGGING,
                    ReminderLog.user_id.in_(user_ids),
                    ReminderLog.group_id.in_(group_ids),
                )
            )
            .group_by(ReminderLog.user_id, ReminderLog.group_id)
            .all()
        )
    }

    candidates = []
    for user_id, email, display_name, gid, group_name in pairs:
        last_entry_at = last_entries.get(user_id)
        last_reminder_at = last_reminders.get((user_id, gid))
        if not is_due(last_entry_at, last_reminder_at, now, inactivity_days, cooldown_days):
            continue
        candidates.append(ReminderCandidate(
            user_id=user_id,
            user_email=email,
            user_display_name=display_name,
            group_id=gid,
            group_name=group_name,
            days_since_last_entry=days_since(last_entry_at, now),
            last_reminder_sent=as_utc(last_reminder_at),
        ))

    logger.debug(f"{len(candidates)} of {len(pairs)} memberships due for a reminder")
    return candidates


# ============================================================================
# DISPATCH
# ============================================================================

def reminder_subject(candidate: ReminderCandidate) -> str:
    return f"Don't forget to log your weight - {candidate.group_name}"


def reminder_body(candidate: ReminderCandidate) -> str:
    """HTML body for one reminder email."""
    name = html.escape(candidate.user_display_name)
    group_name = html.escape(candidate.group_name)
    if candidate.days_since_last_entry == NEVER_LOGGED_DAYS:
        days_text = "You haven't logged your weight yet"
    else:
        days_text = f"It's been {candidate.days_since_last_entry} days since your last weight entry"

    return (
        "<html><body style=\"font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;\">"
        f"<h2>Hi {name}!</h2>"
        f"<p>{days_text} in your <strong>{group_name}</strong> group.</p>"
        "<p>Regular tracking keeps you motivated and your group is counting on you.</p>"
        f"<p style=\"color: #6b7280; font-size: 12px;\">Reminders are sent after "
        f"{settings.REMINDER_INACTIVITY_DAYS}+ days without an entry, at most once every "
        f"{settings.REMINDER_COOLDOWN_DAYS} days per group.</p>"
        "</body></html>"
    )


async def dispatch_reminders(
    db: Session,
    client: Optional[EmailClient] = None,
    now: Optional[datetime] = None,
    group_id: Optional[UUID] = None,
) -> dict:
    """
    Send a reminder to every eligible pair and log each attempt.

    A failure on one pair (email or log write) is counted and the batch
    continues with the next pair.

    Args:
        db: Database session
        client: Email client (defaults to the module singleton)
        now: Evaluation instant
        group_id: Restrict to one group

    Returns:
        Summary dict: total_processed, reminders_sent, errors, results
    """
    client = client or email_client
    now = now or utcnow()
    candidates = find_eligible_reminders(db, now=now, group_id=group_id)

    sent_count = 0
    error_count = 0
    results = []

    for candidate in candidates:
        email_sent = await client.send_email(
            [candidate.user_email],
            reminder_subject(candidate),
            reminder_body(candidate),
        )

        try:
            db.add(ReminderLog(
                user_id=candidate.user_id,
                group_id=candidate.group_id,
                reminder_type=REMINDER_TYPE_WEIGHT_LOGGING,
                sent_at=now,
                email_sent=email_sent,
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            error_count += 1
            logger.error(f"Failed to log reminder for user {candidate.user_id} in group {candidate.group_id}: {e}")
        else:
            if email_sent:
                sent_count += 1
            else:
                error_count += 1

        result = asdict(candidate)
        result["email_sent"] = email_sent
        results.append(result)

    logger.info(
        f"Reminder dispatch finished: {len(candidates)} processed, "
        f"{sent_count} sent, {error_count} errors"
    )
    return {
        "total_processed": len(candidates),
        "reminders_sent": sent_count,
        "errors": error_count,
        "results": results,
    }
