import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from conftest import utc
from weighin.core.constants import NEVER_LOGGED_DAYS, REMINDER_TYPE_WEIGHT_LOGGING
from weighin.models import ReminderLog
from weighin.services import reminder_service
from weighin.services.reminder_service import days_since, find_eligible_reminders, is_due


NOW = utc(2025, 6, 15, 12)


@pytest.fixture
def log_reminder(db):
    def _log(user, group, sent_at, reminder_type=REMINDER_TYPE_WEIGHT_LOGGING):
        db.add(ReminderLog(
            user_id=user.id,
            group_id=group.id,
            reminder_type=reminder_type,
            sent_at=sent_at,
            email_sent=True,
        ))
        db.commit()
    return _log


def test_days_since():
    assert days_since(None, NOW) == NEVER_LOGGED_DAYS
    assert days_since(NOW - timedelta(days=6, hours=5), NOW) == 6
    assert days_since(NOW + timedelta(hours=1), NOW) == 0


def test_thresholds_are_strict():
    exactly_five = NOW - timedelta(days=5)
    assert not is_due(exactly_five, None, NOW, 5, 4)
    assert is_due(exactly_five - timedelta(seconds=1), None, NOW, 5, 4)

    stale = NOW - timedelta(days=10)
    assert not is_due(stale, NOW - timedelta(days=4), NOW, 5, 4)
    assert is_due(stale, NOW - timedelta(days=4, seconds=1), NOW, 5, 4)


def test_inactive_member_is_eligible_until_reminded(db, make_user, make_group, add_entry, log_reminder):
    sam = make_user("Sam")
    group = make_group(sam)
    add_entry(sam, 150.0, 0.0, NOW - timedelta(days=6))

    [candidate] = find_eligible_reminders(db, now=NOW, inactivity_days=5, cooldown_days=4)
    assert candidate.user_id == sam.id
    assert candidate.group_id == group.id
    assert candidate.days_since_last_entry == 6
    assert candidate.last_reminder_sent is None

    log_reminder(sam, group, NOW - timedelta(days=2))
    assert find_eligible_reminders(db, now=NOW, inactivity_days=5, cooldown_days=4) == []


def test_recent_entry_means_no_reminder(db, make_user, make_group, add_entry):
    sam = make_user("Sam")
    make_group(sam)
    add_entry(sam, 150.0, 0.0, NOW - timedelta(days=1), is_private=True)

    assert find_eligible_reminders(db, now=NOW, inactivity_days=5, cooldown_days=4) == []


def test_never_logged_members_are_reported_with_999(db, make_user, make_group):
    sam = make_user("Sam")
    make_group(sam)

    [candidate] = find_eligible_reminders(db, now=NOW, inactivity_days=5, cooldown_days=4)
    assert candidate.days_since_last_entry == NEVER_LOGGED_DAYS


def test_only_active_groups_are_considered(db, make_user, make_group):
    sam = make_user("Sam")
    make_group(sam, name="Ended", end_date=NOW - timedelta(days=1))
    make_group(sam, name="Future", start_date=NOW + timedelta(days=1))
    current = make_group(sam, name="Current", start_date=NOW - timedelta(days=10), end_date=NOW + timedelta(days=10))

    candidates = find_eligible_reminders(db, now=NOW, inactivity_days=5, cooldown_days=4)
    assert [c.group_id for c in candidates] == [current.id]


def test_cooldown_is_per_group(db, make_user, make_group, add_member, log_reminder):
    owner, sam = make_user("Owner"), make_user("Sam")
    first = make_group(owner, name="First")
    second = make_group(owner, name="Second")
    add_member(first, sam)
    add_member(second, sam)
    log_reminder(sam, first, NOW - timedelta(days=1))
    log_reminder(sam, second, NOW - timedelta(days=1), reminder_type="other")

    pairs = {
        (c.user_display_name, c.group_name)
        for c in find_eligible_reminders(db, now=NOW, inactivity_days=5, cooldown_days=4)
    }
    assert ("Sam", "First") not in pairs
    assert ("Sam", "Second") in pairs


def test_dispatch_sends_and_logs_every_attempt(db, make_user, make_group, add_member):
    owner, sam = make_user("Owner"), make_user("Sam")
    group = make_group(owner)
    add_member(group, sam)

    client = AsyncMock()
    client.send_email.side_effect = lambda to, subject, html: to != [sam.email]

    result = asyncio.run(reminder_service.dispatch_reminders(db, client=client, now=NOW))

    assert result["total_processed"] == 2
    assert result["reminders_sent"] == 1
    assert result["errors"] == 1
    assert {r["user_display_name"]: r["email_sent"] for r in result["results"]} == {"Owner": True, "Sam": False}
    assert client.send_email.await_count == 2

    logs = db.query(ReminderLog).filter(ReminderLog.group_id == group.id).all()
    assert len(logs) == 2
    assert {log.email_sent for log in logs} == {True, False}

    # Both pairs are now cooling down, including the failed one
    assert find_eligible_reminders(db, now=NOW + timedelta(hours=1)) == []


def test_reminder_body_escapes_names():
    candidate = reminder_service.ReminderCandidate(
        user_id=None,
        user_email="x@example.com",
        user_display_name="<b>Sam</b>",
        group_id=None,
        group_name="A & B",
        days_since_last_entry=NEVER_LOGGED_DAYS,
        last_reminder_sent=None,
    )
    body = reminder_service.reminder_body(candidate)
    assert "&lt;b&gt;Sam&lt;/b&gt;" in body
    assert "A &amp; B" in body
    assert "haven't logged" in body
