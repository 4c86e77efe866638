"""
Groups API Endpoints
RESTful API for groups, memberships and teams.

Endpoints:
- POST   /groups                                - Create new group
- GET    /groups                                - List user's groups
- POST   /groups/join                           - Join group with invite code
- GET    /groups/{id}                           - Group details with members
- PUT    /groups/{id}                           - Update group (owner only)
- DELETE /groups/{id}                           - Delete group (owner only)
- DELETE /groups/{id}/members/me                - Leave group
- GET    /groups/{id}/teams                     - List teams
- POST   /groups/{id}/teams                     - Create team (owner only)
- PUT    /groups/{id}/teams/{team_id}           - Update team (owner only)
- DELETE /groups/{id}/teams/{team_id}           - Delete team (owner only)
- PUT    /groups/{id}/members/{user_id}/team    - Assign member to team

Every /groups/{id} endpoint goes through get_group_access first:
404 for unknown groups, 403 for non-members.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from weighin.api.v1.deps import GroupAccess, get_current_user, get_group_access, raise_http
from weighin.core.exceptions import WeighInError
from weighin.db.session import get_db
from weighin.models.group import Group
from weighin.models.user import User
from weighin.schemas.group import (
    AssignTeamRequest,
    GroupCreate,
    GroupDetailResponse,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
    JoinGroupRequest,
)
from weighin.schemas.team import TeamCreate, TeamResponse, TeamUpdate
from weighin.services.group_service import GroupService


# Create router with common prefix and tags
router = APIRouter(
    prefix="/groups",
    tags=["Groups"]
)


def _group_response(db: Session, group: Group) -> GroupResponse:
    response = GroupResponse.model_validate(group)
    response.member_count = GroupService.member_count(db, group.id)
    return response


def _group_detail(db: Session, group: Group, viewer: User) -> GroupDetailResponse:
    """
    Group with its members.

    In team challenges only the viewer's own team assignments are shown.
    """
    pairs = GroupService.get_members(db, group.id)
    viewer_team_id = next((m.team_id for m, u in pairs if u.id == viewer.id), None)

    members = []
    for membership, user in pairs:
        team_visible = viewer_team_id is not None and membership.team_id == viewer_team_id
        members.append(GroupMemberResponse(
            user_id=user.id,
            display_name=user.display_name,
            role=membership.role,
            team_id=membership.team_id if team_visible else None,
            joined_at=membership.joined_at,
        ))

    detail = GroupDetailResponse.model_validate(group)
    detail.member_count = len(members)
    detail.members = members
    detail.is_concluded = group.has_concluded()
    return detail


# ============================================================================
# Groups
# ============================================================================

@router.post(
    "",
    response_model=GroupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new group",
    description="""
    Create a new group with the authenticated user as owner.

    A unique 6-character invite code is generated; share it so others
    can join with POST /groups/join.
    """
)
def create_group(
    group_data: GroupCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Example request:
        POST /api/v1/groups
        {
            "name": "Summer Cut",
            "end_date": "2025-09-01T00:00:00Z",
            "is_team_challenge": false
        }
    """
    try:
        group = GroupService.create_group(db, group_data, current_user)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)

    db.refresh(group)
    return _group_detail(db, group, current_user)


@router.get("", response_model=List[GroupResponse], summary="List my groups")
def list_groups(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return [_group_response(db, g) for g in GroupService.get_user_groups(db, current_user.id)]


@router.post(
    "/join",
    response_model=GroupResponse,
    summary="Join group with invite code",
    responses={
        404: {"description": "Invalid invite code"},
        409: {"description": "Already a member"}
    }
)
def join_group(
    join_data: JoinGroupRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Join a group; the code is case-insensitive.

    Other members get a member_joined notification.
    """
    try:
        group = GroupService.join_by_code(db, join_data.invite_code, current_user)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)

    db.refresh(group)
    return _group_response(db, group)


@router.get("/{group_id}", response_model=GroupDetailResponse, summary="Group details")
def get_group(
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    return _group_detail(db, access.group, access.user)


@router.put("/{group_id}", response_model=GroupResponse, summary="Update group (owner only)")
def update_group(
    group_data: GroupUpdate,
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    try:
        group = GroupService.update_group(db, access.group, group_data, access.user.id)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)

    db.refresh(group)
    return _group_response(db, group)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete group (owner only)")
def delete_group(
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    try:
        GroupService.delete_group(db, access.group, access.user.id)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{group_id}/members/me", status_code=status.HTTP_204_NO_CONTENT, summary="Leave group")
def leave_group(
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    """Remaining members get a member_left notification. The owner cannot leave."""
    try:
        GroupService.leave_group(db, access.group, access.user)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Teams
# ============================================================================

@router.get("/{group_id}/teams", response_model=List[TeamResponse], summary="List teams")
def list_teams(
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    return GroupService.list_teams(db, access.group.id)


@router.post(
    "/{group_id}/teams",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create team (owner only)",
    responses={422: {"description": "Group is not a team challenge"}}
)
def create_team(
    team_data: TeamCreate,
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    """Without a color the next unused palette color is used."""
    try:
        team = GroupService.create_team(db, access.group, team_data, access.user.id)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)

    db.refresh(team)
    return team


@router.put("/{group_id}/teams/{team_id}", response_model=TeamResponse, summary="Update team (owner only)")
def update_team(
    team_id: UUID,
    team_data: TeamUpdate,
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    try:
        team = GroupService.update_team(db, access.group, team_id, team_data, access.user.id)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)

    db.refresh(team)
    return team


@router.delete(
    "/{group_id}/teams/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete team (owner only)"
)
def delete_team(
    team_id: UUID,
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    """Members of the team stay in the group without a team."""
    try:
        GroupService.delete_team(db, access.group, team_id, access.user.id)
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{group_id}/members/{user_id}/team",
    response_model=GroupMemberResponse,
    summary="Assign a member to a team"
)
def assign_team(
    user_id: UUID,
    assignment: AssignTeamRequest,
    access: GroupAccess = Depends(get_group_access),
    db: Session = Depends(get_db)
):
    """The owner may assign anyone; members may only move themselves."""
    try:
        membership = GroupService.assign_team(
            db, access.group, user_id, assignment.team_id, access.user.id
        )
        db.commit()
    except WeighInError as e:
        db.rollback()
        raise_http(e)

    db.refresh(membership)
    member = db.get(User, membership.user_id)
    return GroupMemberResponse(
        user_id=membership.user_id,
        display_name=member.display_name,
        role=membership.role,
        team_id=membership.team_id,
        joined_at=membership.joined_at,
    )
