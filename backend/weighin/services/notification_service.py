"""
Notification Service
Creates and reads in-app notifications.

Events are published explicitly by the services that perform a mutation,
right after it succeeds, in the same transaction:

    - member_joined / member_left: to every other member of the group
    - weight_entry: to fellow members of every group the author belongs
      to, for non-private entries only
    - milestone: to the author when an entry reaches -5%, -10% or -15%
      (only the highest tier reached is sent)

Publishing only adds rows to the session; the caller commits.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from weighin.core.constants import (
    MILESTONES,
    NOTIFICATION_MEMBER_JOINED,
    NOTIFICATION_MEMBER_LEFT,
    NOTIFICATION_MILESTONE,
    NOTIFICATION_WEIGHT_ENTRY,
)
from weighin.core.exceptions import NotFoundError
from weighin.models.group import Group
from weighin.models.group_member import GroupMember
from weighin.models.notification import Notification
from weighin.models.user import User
from weighin.models.weight_entry import WeightEntry

logger = logging.getLogger(__name__)


def milestone_for(percentage_change: float) -> Optional[tuple]:
    """Highest milestone tier reached by a percentage change, or None."""
    for milestone in MILESTONES:
        if percentage_change <= milestone[0]:
            return milestone
    return None


def format_change(percentage_change: float) -> str:
    """Signed percentage text, e.g. "+1.25%" or "-3.33%"."""
    sign = "+" if percentage_change >= 0 else ""
    return f"{sign}{percentage_change:.2f}%"


class NotificationService:
    """Publishing and reading of notifications."""

    @staticmethod
    def _other_member_ids(db: Session, group_id: UUID, exclude_user_id: UUID) -> List[UUID]:
        rows = db.query(GroupMember.user_id).filter(
            GroupMember.group_id == group_id,
            GroupMember.user_id != exclude_user_id,
        ).all()
        return [row[0] for row in rows]

    @staticmethod
    def create(db: Session, user_id: UUID, type: str, title: str, message: str, data: dict) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            data=data,
            read=False,
        )
        db.add(notification)
        return notification

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    @staticmethod
    def publish_membership_change(db: Session, group: Group, member: User, joined: bool) -> int:
        """
        Notify the other members that someone joined or left.

        Must run after the membership row was added (joined) or removed
        (left), so the subject is never among the recipients.

        Returns:
            Number of notifications created
        """
        if joined:
            type_ = NOTIFICATION_MEMBER_JOINED
            title = "New Member Joined"
            message = f'{member.display_name} joined the group "{group.name}"'
        else:
            type_ = NOTIFICATION_MEMBER_LEFT
            title = "Member Left Group"
            message = f'{member.display_name} left the group "{group.name}"'

        data = {
            "group_id": str(group.id),
            "group_name": group.name,
            "member_id": str(member.id),
            "member_name": member.display_name,
        }
        recipients = NotificationService._other_member_ids(db, group.id, member.id)
        for recipient_id in recipients:
            NotificationService.create(db, recipient_id, type_, title, message, data)
        return len(recipients)

    @staticmethod
    def publish_weight_entry(db: Session, entry: WeightEntry, author: User) -> int:
        """
        Fan out a new entry to fellow group members and check milestones.

        Private entries notify nobody else; milestones are personal and are
        checked for every entry.

        Returns:
            Number of notifications created
        """
        created = 0

        if not entry.is_private:
            groups = (
                db.query(Group)
                .join(GroupMember, GroupMember.group_id == Group.id)
                .filter(GroupMember.user_id == author.id)
                .all()
            )
            message = f"{author.display_name} logged a weight entry ({format_change(entry.percentage_change)})"
            for group in groups:
                data = {
                    "group_id": str(group.id),
                    "group_name": group.name,
                    "user_id": str(author.id),
                    "user_name": author.display_name,
                    "percentage_change": entry.percentage_change,
                    "entry_id": str(entry.id),
                }
                for recipient_id in NotificationService._other_member_ids(db, group.id, author.id):
                    NotificationService.create(
                        db, recipient_id, NOTIFICATION_WEIGHT_ENTRY, "Progress Update", message, data
                    )
                    created += 1

        milestone = milestone_for(entry.percentage_change)
        if milestone is not None:
            _, key, title, message = milestone
            NotificationService.create(
                db,
                author.id,
                NOTIFICATION_MILESTONE,
                title,
                message,
                {"milestone_type": key, "percentage_change": entry.percentage_change},
            )
            created += 1

        logger.debug(f"Published {created} notifications for entry {entry.id}")
        return created

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @staticmethod
    def list_for_user(
        db: Session,
        user_id: UUID,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Notification]:
        """Newest first."""
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        return (
            query.order_by(Notification.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def unread_count(db: Session, user_id: UUID) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.read.is_(False),
        ).count()

    @staticmethod
    def mark_read(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
        """
        Mark one of the user's notifications as read.

        Raises:
            NotFoundError: no such notification for this user
        """
        notification = db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")

        notification.read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: UUID) -> int:
        """Returns the number of notifications that changed."""
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )
        db.commit()
        return updated
