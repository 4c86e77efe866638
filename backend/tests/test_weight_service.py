from datetime import timedelta

import pytest

from conftest import utc
from weighin.core.exceptions import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from weighin.core.timeutils import utcnow
from weighin.models import Notification, WeightEntry
from weighin.services import weight_service
from weighin.services.notification_service import NotificationService, milestone_for


DAY_1 = utc(2025, 1, 1)


def test_first_entry_becomes_baseline(db, make_user):
    sam = make_user("Sam")
    entry = weight_service.create_weight_entry(db, sam, 68.0, unit="kg", created_at=DAY_1)

    assert entry.percentage_change == 0.0
    assert entry.weight == pytest.approx(68.0 * 2.20462)
    assert entry.weight_kg == pytest.approx(68.0)


def test_private_baseline_still_anchors_changes(db, make_user):
    sam = make_user("Sam")
    weight_service.create_weight_entry(db, sam, 200, is_private=True, created_at=DAY_1)
    entry = weight_service.create_weight_entry(db, sam, 190, created_at=DAY_1 + timedelta(days=1))

    assert entry.percentage_change == pytest.approx(-5.0)


def test_baseline_survives_intermediate_entries(db, make_user):
    sam = make_user("Sam")
    for i, weight in enumerate([150, 170, 120, 145]):
        entry = weight_service.create_weight_entry(db, sam, weight, created_at=DAY_1 + timedelta(days=i))

    assert entry.percentage_change == pytest.approx((145 - 150) / 150 * 100)


def test_backdated_and_future_entries_are_rejected(db, make_user):
    sam = make_user("Sam")
    weight_service.create_weight_entry(db, sam, 150, created_at=DAY_1 + timedelta(days=5))

    with pytest.raises(InvalidInputError):
        weight_service.create_weight_entry(db, sam, 149, created_at=DAY_1)
    with pytest.raises(InvalidInputError):
        weight_service.create_weight_entry(db, sam, 149, created_at=utcnow() + timedelta(hours=1))
    assert weight_service.count_weight_entries(db, sam.id) == 1


def test_entry_at_the_same_instant_as_the_latest_is_rejected(db, make_user):
    sam = make_user("Sam")
    weight_service.create_weight_entry(db, sam, 150, created_at=DAY_1)

    with pytest.raises(InvalidInputError):
        weight_service.create_weight_entry(db, sam, 140, created_at=DAY_1)
    assert weight_service.count_weight_entries(db, sam.id) == 1


def test_baseline_entry_cannot_be_deleted_while_others_exist(db, make_user):
    sam = make_user("Sam")
    first = weight_service.create_weight_entry(db, sam, 150, created_at=DAY_1)
    second = weight_service.create_weight_entry(db, sam, 145, created_at=DAY_1 + timedelta(days=1))

    with pytest.raises(ConflictError):
        weight_service.delete_weight_entry(db, sam.id, first.id)

    third = weight_service.create_weight_entry(db, sam, 140, created_at=DAY_1 + timedelta(days=2))
    assert round(third.percentage_change, 2) == -6.67

    # Once it is the only entry left, it can go
    weight_service.delete_weight_entry(db, sam.id, third.id)
    weight_service.delete_weight_entry(db, sam.id, second.id)
    weight_service.delete_weight_entry(db, sam.id, first.id)
    assert weight_service.count_weight_entries(db, sam.id) == 0


def test_invalid_weight_is_rejected_before_writing(db, make_user):
    sam = make_user("Sam")
    with pytest.raises(InvalidInputError):
        weight_service.create_weight_entry(db, sam, -5)
    with pytest.raises(InvalidInputError):
        weight_service.create_weight_entry(db, sam, 150, unit="stone")
    assert db.query(WeightEntry).count() == 0


def test_list_is_newest_first_and_filterable(db, make_user):
    sam = make_user("Sam")
    for i in range(3):
        weight_service.create_weight_entry(db, sam, 150 - i, created_at=DAY_1 + timedelta(days=i))

    entries = weight_service.list_weight_entries(db, sam.id)
    assert [e.weight for e in entries] == [148.0, 149.0, 150.0]

    recent = weight_service.list_weight_entries(db, sam.id, from_date=DAY_1 + timedelta(days=1))
    assert len(recent) == 2


def test_delete_only_own_entries(db, make_user):
    sam, kim = make_user("Sam"), make_user("Kim")
    entry = weight_service.create_weight_entry(db, sam, 150, created_at=DAY_1)

    with pytest.raises(PermissionDeniedError):
        weight_service.delete_weight_entry(db, kim.id, entry.id)

    weight_service.delete_weight_entry(db, sam.id, entry.id)
    with pytest.raises(NotFoundError):
        weight_service.delete_weight_entry(db, sam.id, entry.id)


def test_health_summary_needs_height_and_entries(db, make_user):
    sam = make_user("Sam")
    assert weight_service.get_health_summary(db, sam) is None

    tall = make_user("Tall", height_cm=175)
    assert weight_service.get_health_summary(db, tall) is None

    weight_service.create_weight_entry(db, tall, 160, created_at=DAY_1)
    weight_service.create_weight_entry(db, tall, 70, unit="kg", created_at=DAY_1 + timedelta(days=1))
    summary = weight_service.get_health_summary(db, tall)

    assert summary["bmi"] == 22.9
    assert summary["trend"] == "down"
    assert summary["measured_at"] == DAY_1 + timedelta(days=1)


# ----------------------------------------------------------------------------
# Notifications published by new entries
# ----------------------------------------------------------------------------

@pytest.mark.parametrize("change, key", [
    (-4.99, None),
    (-5.0, "5_percent_loss"),
    (-12.0, "10_percent_loss"),
    (-15.0, "15_percent_loss"),
    (3.0, None),
])
def test_milestone_tiers(change, key):
    milestone = milestone_for(change)
    assert (milestone[1] if milestone else None) == key


def test_entry_notifies_fellow_members(db, make_user, make_group, add_member):
    sam, kim, lee = make_user("Sam"), make_user("Kim"), make_user("Lee")
    group = make_group(sam)
    add_member(group, kim)
    other = make_group(lee, name="Other")

    weight_service.create_weight_entry(db, sam, 200, created_at=DAY_1)

    [note] = NotificationService.list_for_user(db, kim.id)
    assert note.type == "weight_entry"
    assert note.title == "Progress Update"
    assert note.message == "Sam logged a weight entry (+0.00%)"
    assert note.data["group_id"] == str(group.id)
    assert NotificationService.list_for_user(db, sam.id) == []
    assert NotificationService.list_for_user(db, lee.id) == []
    assert other.id != group.id


def test_private_entry_notifies_nobody_but_milestones_still_fire(db, make_user, make_group, add_member):
    sam, kim = make_user("Sam"), make_user("Kim")
    group = make_group(sam)
    weight_service.create_weight_entry(db, sam, 200, created_at=DAY_1)
    add_member(group, kim)

    weight_service.create_weight_entry(db, sam, 178, is_private=True, created_at=DAY_1 + timedelta(days=1))

    assert NotificationService.list_for_user(db, kim.id) == []
    [milestone] = NotificationService.list_for_user(db, sam.id)
    assert milestone.type == "milestone"
    assert milestone.data["milestone_type"] == "10_percent_loss"


def test_mark_read(db, make_user, make_group, add_member):
    sam, kim = make_user("Sam"), make_user("Kim")
    group = make_group(sam)
    add_member(group, kim)
    weight_service.create_weight_entry(db, sam, 200, created_at=DAY_1)
    weight_service.create_weight_entry(db, sam, 199, created_at=DAY_1 + timedelta(days=1))

    assert NotificationService.unread_count(db, kim.id) == 2
    first = NotificationService.list_for_user(db, kim.id)[0]
    NotificationService.mark_read(db, kim.id, first.id)
    assert NotificationService.unread_count(db, kim.id) == 1

    with pytest.raises(NotFoundError):
        NotificationService.mark_read(db, sam.id, first.id)

    assert NotificationService.mark_all_read(db, kim.id) == 1
    assert NotificationService.unread_count(db, kim.id) == 0
    assert db.query(Notification).filter(Notification.read.is_(True)).count() == 2
