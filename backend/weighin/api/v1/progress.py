"""
Group Progress Endpoints

Endpoints:
- GET /groups/{id}/progress   - Leaderboard, team rollups and (once ended) settlement
- GET /groups/{id}/settlement - Settlement of a concluded group

Both require group membership (see get_group_access).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from weighin.api.v1.deps import GroupAccess, get_group_access
from weighin.core.timeutils import utcnow
from weighin.db.session import get_db
from weighin.schemas.progress import (
    GroupProgressResponse,
    MemberProgressResponse,
    SettlementResponse,
    TeamProgressResponse,
)
from weighin.services import progress, settlement

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["Progress"])


@router.get(
    "/{group_id}/progress",
    response_model=GroupProgressResponse,
    summary="Group progress",
    description="""
    Members ranked by their latest percentage change (most lost first).

    For team challenges, team rollups sorted by average change are included;
    only the caller's own team carries a member roster, and team assignments
    of other members are hidden.

    Once the group has ended, the settlement is included as well.
    """
)
def get_group_progress(
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    group = access.group
    now = utcnow()

    members = progress.get_member_progress(db, group, now=now)
    teams = progress.get_team_progress(db, group, members, access.user.id)

    visible_members = members
    if group.is_team_challenge:
        visible_members = progress.withhold_foreign_teams(
            members, progress.viewer_team_of(members, access.user.id)
        )

    result = settlement.settle_group(db, group, now=now)

    return GroupProgressResponse(
        group_id=group.id,
        is_team_challenge=group.is_team_challenge,
        is_concluded=group.has_concluded(now),
        members=[MemberProgressResponse.model_validate(m) for m in visible_members],
        teams=[TeamProgressResponse.model_validate(t) for t in teams],
        settlement=SettlementResponse(**result) if result is not None else None,
    )


@router.get(
    "/{group_id}/settlement",
    response_model=SettlementResponse,
    summary="Group settlement",
    responses={409: {"description": "Group has not ended yet"}}
)
def get_group_settlement(
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    """
    Weight lost by each member (first vs. last non-private entry) and in total.

    The first computation after the end date stores total_weight_lost on
    the group; later calls never overwrite it.
    """
    result = settlement.settle_group(db, access.group)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The group has not ended yet"
        )
    return result
