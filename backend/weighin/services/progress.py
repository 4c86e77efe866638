"""
Group Progress Service
Builds the member leaderboard and team rollups shown on a group's progress page.

Only stored percentage changes are read here, never raw weights.

Pipeline:
    1. Load memberships (user, display name, team) of the group
    2. Load qualifying entries: non-private, and not older than the group's
       start_date when one is set
    3. Summarize each member and rank ascending by latest change
       (most negative, i.e. most lost, first)
    4. For team challenges, roll member summaries up per team

The summarizing functions are pure and take any objects exposing
percentage_change, created_at and is_private, so they work on ORM rows and
on plain test doubles alike.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from weighin.core.timeutils import as_utc, utcnow
from weighin.models.group import Group
from weighin.models.group_member import GroupMember
from weighin.models.team import Team
from weighin.models.user import User
from weighin.models.weight_entry import WeightEntry

logger = logging.getLogger(__name__)


SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class MemberProgress:
    """Ranked summary of one member's qualifying entries."""
    user_id: UUID
    display_name: str
    team_id: Optional[UUID]
    latest_change: float
    best_change: float
    total_entries: int
    days_active: int
    entries: List[dict] = field(default_factory=list)


@dataclass
class TeamProgress:
    """Aggregates of one team; members is filled for the viewer's team only."""
    team_id: UUID
    name: str
    color: str
    member_count: int
    average_change: float
    total_entries: int
    best_change: float
    combined_progress: float
    members: Optional[List[MemberProgress]] = None


# ============================================================================
# PURE AGGREGATION
# ============================================================================

def is_qualifying(entry, start_date: Optional[datetime]) -> bool:
    """Non-private and, when start_date is set, created at or after it."""
    if entry.is_private:
        return False
    if start_date is not None and as_utc(entry.created_at) < as_utc(start_date):
        return False
    return True


def days_active(reference: Optional[datetime], now: datetime) -> int:
    """
    Whole days (rounded up) elapsed since reference.

    Returns 0 without a reference and when the reference lies in the future.
    """
    if reference is None:
        return 0
    elapsed = (as_utc(now) - as_utc(reference)).total_seconds()
    if elapsed <= 0:
        return 0
    return math.ceil(elapsed / SECONDS_PER_DAY)


def summarize_member(
    user_id: UUID,
    display_name: str,
    team_id: Optional[UUID],
    entries: Iterable,
    start_date: Optional[datetime],
    now: datetime,
) -> MemberProgress:
    """
    Summarize one member from their entries.

    Args:
        entries: The member's entries in any order; non-qualifying ones
            are dropped here
        start_date: Group start date or None
        now: Evaluation instant

    Returns:
        MemberProgress with zeros when nothing qualifies
    """
    qualifying = sorted(
        (e for e in entries if is_qualifying(e, start_date)),
        key=lambda e: as_utc(e.created_at),
    )

    if qualifying:
        latest_change = qualifying[-1].percentage_change
        best_change = min(e.percentage_change for e in qualifying)
    else:
        latest_change = 0.0
        best_change = 0.0

    # Qualifying entries are never before start_date, so start_date wins when set
    if start_date is not None:
        reference = start_date
    elif qualifying:
        reference = qualifying[0].created_at
    else:
        reference = None

    return MemberProgress(
        user_id=user_id,
        display_name=display_name,
        team_id=team_id,
        latest_change=latest_change,
        best_change=best_change,
        total_entries=len(qualifying),
        days_active=days_active(reference, now),
        entries=[
            {"percentage_change": e.percentage_change, "created_at": as_utc(e.created_at)}
            for e in qualifying
        ],
    )


def rank_members(summaries: List[MemberProgress]) -> List[MemberProgress]:
    """Ascending by latest_change; sorted() is stable so ties keep input order."""
    return sorted(summaries, key=lambda m: m.latest_change)


def summarize_team(team_id: UUID, name: str, color: str, members: List[MemberProgress]) -> TeamProgress:
    """Roll member summaries up into one team; an empty team is all zeros."""
    count = len(members)
    if count:
        combined = sum(m.latest_change for m in members)
        average = combined / count
        best = min(m.best_change for m in members)
    else:
        combined = 0.0
        average = 0.0
        best = 0.0

    return TeamProgress(
        team_id=team_id,
        name=name,
        color=color,
        member_count=count,
        average_change=average,
        total_entries=sum(m.total_entries for m in members),
        best_change=best,
        combined_progress=combined,
    )


def aggregate_teams(
    teams: Iterable,
    members: List[MemberProgress],
    viewer_team_id: Optional[UUID],
) -> List[TeamProgress]:
    """
    Per-team rollups sorted ascending by average_change.

    Args:
        teams: Objects with id, name and color
        members: Member summaries of the whole group
        viewer_team_id: Team of the requesting user; only that team's
            roster is attached

    Returns:
        List of TeamProgress; members without a team are not counted
    """
    by_team: Dict[UUID, List[MemberProgress]] = {}
    for member in members:
        if member.team_id is not None:
            by_team.setdefault(member.team_id, []).append(member)

    results = []
    for team in teams:
        team_members = by_team.get(team.id, [])
        progress = summarize_team(team.id, team.name, team.color, team_members)
        if viewer_team_id is not None and team.id == viewer_team_id:
            progress.members = rank_members(team_members)
        results.append(progress)

    return sorted(results, key=lambda t: t.average_change)


def withhold_foreign_teams(
    members: List[MemberProgress],
    viewer_team_id: Optional[UUID],
) -> List[MemberProgress]:
    """
    Copy of members where team_id is cleared for anyone outside the viewer's team.

    A viewer without a team sees no team assignments at all.
    """
    visible = []
    for member in members:
        keep = viewer_team_id is not None and member.team_id == viewer_team_id
        visible.append(MemberProgress(
            user_id=member.user_id,
            display_name=member.display_name,
            team_id=member.team_id if keep else None,
            latest_change=member.latest_change,
            best_change=member.best_change,
            total_entries=member.total_entries,
            days_active=member.days_active,
            entries=member.entries,
        ))
    return visible


# ============================================================================
# DATABASE ACCESS
# ============================================================================

def fetch_memberships(db: Session, group_id: UUID) -> List[tuple]:
    """(GroupMember, display_name) pairs in join order."""
    return (
        db.query(GroupMember, User.display_name)
        .join(User, User.id == GroupMember.user_id)
        .filter(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at.asc(), GroupMember.user_id.asc())
        .all()
    )


def fetch_qualifying_entries(
    db: Session,
    user_ids: List[UUID],
    start_date: Optional[datetime],
) -> Dict[UUID, List[WeightEntry]]:
    """Non-private entries of the given users since start_date, grouped by user."""
    if not user_ids:
        return {}

    query = db.query(WeightEntry).filter(
        WeightEntry.user_id.in_(user_ids),
        WeightEntry.is_private.is_(False),
    )
    if start_date is not None:
        query = query.filter(WeightEntry.created_at >= start_date)

    grouped: Dict[UUID, List[WeightEntry]] = {}
    for entry in query.order_by(WeightEntry.created_at.asc()).all():
        grouped.setdefault(entry.user_id, []).append(entry)
    return grouped


def get_member_progress(
    db: Session,
    group: Group,
    now: Optional[datetime] = None,
) -> List[MemberProgress]:
    """
    Ranked member leaderboard for a group.

    Args:
        db: Database session
        group: Group to evaluate
        now: Evaluation instant (defaults to current UTC time)

    Returns:
        MemberProgress list, most weight lost (in percent) first

    Example:
        ranking = get_member_progress(db, group)
        leader = ranking[0].display_name if ranking else None
    """
    now = now or utcnow()
    memberships = fetch_memberships(db, group.id)
    entries = fetch_qualifying_entries(db, [m.user_id for m, _ in memberships], group.start_date)

    summaries = [
        summarize_member(
            membership.user_id,
            display_name,
            membership.team_id,
            entries.get(membership.user_id, []),
            group.start_date,
            now,
        )
        for membership, display_name in memberships
    ]
    logger.debug(f"Computed progress for {len(summaries)} members of group {group.id}")
    return rank_members(summaries)


def get_team_progress(
    db: Session,
    group: Group,
    members: List[MemberProgress],
    viewer_id: UUID,
) -> List[TeamProgress]:
    """Team rollups for a team-challenge group, empty for any other group."""
    if not group.is_team_challenge:
        return []

    teams = (
        db.query(Team)
        .filter(Team.group_id == group.id)
        .order_by(Team.created_at.asc())
        .all()
    )
    return aggregate_teams(teams, members, viewer_team_of(members, viewer_id))


def viewer_team_of(members: List[MemberProgress], viewer_id: UUID) -> Optional[UUID]:
    """Team of the viewing user within these summaries, if any."""
    for member in members:
        if member.user_id == viewer_id:
            return member.team_id
    return None
