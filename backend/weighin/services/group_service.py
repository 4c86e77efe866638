"""
Group Service - Business Logic Layer
Handles groups, invite codes, memberships and teams.

Key responsibilities:
- CRUD operations for groups (owner-only update/delete)
- Joining by invite code and leaving
- Team management for team-challenge groups
- Membership checks used by the API authorization dependency

Methods flush but do not commit; the calling endpoint owns the
transaction, so a failure anywhere leaves nothing half-applied.
"""

import logging
import random
import string
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from weighin.core.constants import INVITE_CODE_LENGTH, ROLE_MEMBER, ROLE_OWNER, TEAM_COLORS
from weighin.core.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from weighin.core.timeutils import as_utc
from weighin.models.group import Group
from weighin.models.group_member import GroupMember
from weighin.models.team import Team
from weighin.models.user import User
from weighin.schemas.group import GroupCreate, GroupUpdate
from weighin.schemas.team import TeamCreate, TeamUpdate
from weighin.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class GroupService:
    """
    Service class for group-related business logic.

    All methods take a database session as parameter for transaction control.
    The caller (usually API endpoint) is responsible for committing/rolling back.
    """

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    @staticmethod
    def generate_invite_code() -> str:
        """
        Generate a 6-character invitation code.

        Format: uppercase letters and digits (A-Z, 0-9), e.g. "K4T2M9".
        Uniqueness is checked by the caller.
        """
        return "".join(random.choices(string.ascii_uppercase + string.digits, k=INVITE_CODE_LENGTH))

    @staticmethod
    def unique_invite_code(db: Session) -> str:
        """Generate codes until one is unused (collisions are rare with 36^6 codes)."""
        code = GroupService.generate_invite_code()
        while db.query(Group.id).filter(Group.invite_code == code).first():
            code = GroupService.generate_invite_code()
        return code

    @staticmethod
    def _check_window(start_date, end_date) -> None:
        if start_date is not None and end_date is not None and as_utc(end_date) <= as_utc(start_date):
            raise InvalidInputError("end_date must be after start_date")

    @staticmethod
    def create_group(db: Session, group_data: GroupCreate, owner: User) -> Group:
        """
        Create a group with the given user as owner.

        Steps:
        1. Validate the date window
        2. Create the group with a fresh invite code
        3. Add the creator as OWNER member

        Example:
            group = GroupService.create_group(
                db, GroupCreate(name="Summer Cut"), current_user
            )
        """
        GroupService._check_window(group_data.start_date, group_data.end_date)

        group = Group(
            created_by=owner.id,
            name=group_data.name,
            description=group_data.description,
            invite_code=GroupService.unique_invite_code(db),
            start_date=as_utc(group_data.start_date),
            end_date=as_utc(group_data.end_date),
            is_team_challenge=group_data.is_team_challenge,
        )
        db.add(group)
        db.flush()

        db.add(GroupMember(group_id=group.id, user_id=owner.id, role=ROLE_OWNER))
        db.flush()

        logger.info(f"User {owner.id} created group {group.id} ({group.invite_code})")
        return group

    @staticmethod
    def get_group(db: Session, group_id: UUID) -> Optional[Group]:
        return db.query(Group).filter(Group.id == group_id).first()

    @staticmethod
    def get_user_groups(db: Session, user_id: UUID) -> List[Group]:
        """All groups the user belongs to, newest first."""
        return (
            db.query(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .filter(GroupMember.user_id == user_id)
            .order_by(Group.created_at.desc())
            .all()
        )

    @staticmethod
    def get_membership(db: Session, group_id: UUID, user_id: UUID) -> Optional[GroupMember]:
        return db.query(GroupMember).filter(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id,
        ).first()

    @staticmethod
    def member_count(db: Session, group_id: UUID) -> int:
        return db.query(func.count(GroupMember.user_id)).filter(GroupMember.group_id == group_id).scalar()

    @staticmethod
    def get_members(db: Session, group_id: UUID) -> List[Tuple[GroupMember, User]]:
        """(membership, user) pairs in join order."""
        return (
            db.query(GroupMember, User)
            .join(User, User.id == GroupMember.user_id)
            .filter(GroupMember.group_id == group_id)
            .order_by(GroupMember.joined_at.asc())
            .all()
        )

    @staticmethod
    def _require_owner(group: Group, user_id: UUID, action: str) -> None:
        if group.created_by != user_id:
            raise PermissionDeniedError(f"Only the group owner can {action}")

    @staticmethod
    def update_group(db: Session, group: Group, group_data: GroupUpdate, user_id: UUID) -> Group:
        """
        Update group settings (owner only).

        Raises:
            PermissionDeniedError: requester is not the owner
            InvalidInputError: resulting end_date is not after start_date
        """
        GroupService._require_owner(group, user_id, "update the group")

        update_data = group_data.model_dump(exclude_unset=True)
        start_date = update_data.get("start_date", group.start_date)
        end_date = update_data.get("end_date", group.end_date)
        GroupService._check_window(start_date, end_date)

        for field, value in update_data.items():
            if field in ("start_date", "end_date"):
                value = as_utc(value)
            setattr(group, field, value)

        db.flush()
        return group

    @staticmethod
    def delete_group(db: Session, group: Group, user_id: UUID) -> None:
        """Delete a group and, through cascades, its memberships and teams (owner only)."""
        GroupService._require_owner(group, user_id, "delete the group")
        db.query(GroupMember).filter(GroupMember.group_id == group.id).delete(synchronize_session=False)
        db.query(Team).filter(Team.group_id == group.id).delete(synchronize_session=False)
        db.delete(group)
        db.flush()
        logger.info(f"User {user_id} deleted group {group.id}")

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    @staticmethod
    def join_by_code(db: Session, invite_code: str, user: User) -> Group:
        """
        Join a group using its invite code (case-insensitive).

        Raises:
            NotFoundError: no group with this code
            ConflictError: user is already a member
        """
        code = (invite_code or "").strip().upper()
        group = db.query(Group).filter(Group.invite_code == code).first()
        if not group:
            raise NotFoundError("Invalid invite code")

        if GroupService.get_membership(db, group.id, user.id):
            raise ConflictError("You are already a member of this group")

        db.add(GroupMember(group_id=group.id, user_id=user.id, role=ROLE_MEMBER))
        db.flush()

        NotificationService.publish_membership_change(db, group, user, joined=True)
        logger.info(f"User {user.id} joined group {group.id}")
        return group

    @staticmethod
    def leave_group(db: Session, group: Group, user: User) -> None:
        """
        Leave a group.

        Raises:
            NotFoundError: user is not a member
            PermissionDeniedError: the owner cannot leave their own group
        """
        membership = GroupService.get_membership(db, group.id, user.id)
        if not membership:
            raise NotFoundError("You are not a member of this group")
        if group.created_by == user.id:
            raise PermissionDeniedError("The group owner cannot leave; delete the group instead")

        db.delete(membership)
        db.flush()

        NotificationService.publish_membership_change(db, group, user, joined=False)
        logger.info(f"User {user.id} left group {group.id}")

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    @staticmethod
    def _require_team_challenge(group: Group) -> None:
        if not group.is_team_challenge:
            raise InvalidInputError("Teams are only available in team challenge groups")

    @staticmethod
    def list_teams(db: Session, group_id: UUID) -> List[Team]:
        return (
            db.query(Team)
            .filter(Team.group_id == group_id)
            .order_by(Team.created_at.asc())
            .all()
        )

    @staticmethod
    def get_team(db: Session, group_id: UUID, team_id: UUID) -> Team:
        """Raises NotFoundError when the team is not part of the group."""
        team = db.query(Team).filter(Team.id == team_id, Team.group_id == group_id).first()
        if not team:
            raise NotFoundError("Team not found")
        return team

    @staticmethod
    def next_team_color(db: Session, group_id: UUID) -> str:
        """First palette color not used yet in the group, cycling when all are taken."""
        used = {row[0] for row in db.query(Team.color).filter(Team.group_id == group_id).all()}
        for color in TEAM_COLORS:
            if color not in used:
                return color
        return TEAM_COLORS[len(used) % len(TEAM_COLORS)]

    @staticmethod
    def create_team(db: Session, group: Group, team_data: TeamCreate, user_id: UUID) -> Team:
        """Create a team (owner only, team-challenge groups only)."""
        GroupService._require_owner(group, user_id, "manage teams")
        GroupService._require_team_challenge(group)

        team = Team(
            group_id=group.id,
            name=team_data.name,
            color=team_data.color or GroupService.next_team_color(db, group.id),
        )
        db.add(team)
        db.flush()
        return team

    @staticmethod
    def update_team(db: Session, group: Group, team_id: UUID, team_data: TeamUpdate, user_id: UUID) -> Team:
        GroupService._require_owner(group, user_id, "manage teams")
        GroupService._require_team_challenge(group)
        team = GroupService.get_team(db, group.id, team_id)

        for field, value in team_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(team, field, value)
        db.flush()
        return team

    @staticmethod
    def delete_team(db: Session, group: Group, team_id: UUID, user_id: UUID) -> None:
        """Delete a team; its members stay in the group without a team."""
        GroupService._require_owner(group, user_id, "manage teams")
        team = GroupService.get_team(db, group.id, team_id)

        db.query(GroupMember).filter(
            GroupMember.group_id == group.id,
            GroupMember.team_id == team.id,
        ).update({GroupMember.team_id: None}, synchronize_session=False)
        db.delete(team)
        db.flush()

    @staticmethod
    def assign_team(
        db: Session,
        group: Group,
        member_user_id: UUID,
        team_id: Optional[UUID],
        requester_id: UUID,
    ) -> GroupMember:
        """
        Put a member in a team, or take them out with team_id=None.

        The owner may assign anyone. Other members may only pick a team for
        themselves while unassigned. Switching or leaving a team goes through
        the owner.

        Raises:
            PermissionDeniedError: a member tries to move someone else, or
                to leave the team they are already on
            NotFoundError: unknown member or team
            InvalidInputError: group is not a team challenge
        """
        GroupService._require_team_challenge(group)
        if requester_id != member_user_id and group.created_by != requester_id:
            raise PermissionDeniedError("Only the group owner can assign other members to teams")

        membership = GroupService.get_membership(db, group.id, member_user_id)
        if not membership:
            raise NotFoundError("Member not found in this group")
        if group.created_by != requester_id and membership.team_id is not None:
            raise PermissionDeniedError("Only the group owner can move a member out of their team")

        if team_id is not None:
            GroupService.get_team(db, group.id, team_id)

        membership.team_id = team_id
        db.flush()
        return membership
