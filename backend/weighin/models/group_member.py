"""
GroupMember Model (Association Table)
Many-to-many relationship between Users and Groups.

This model represents group membership and tracks:
- Which users belong to which groups
- Their role in each group (OWNER, MEMBER)
- Their team, when the group is a team challenge
- When they joined the group
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID

from weighin.core.timeutils import utcnow
from weighin.db.base import Base


class GroupMember(Base):
    """
    Association model for user-group membership.

    Composite primary key (group_id, user_id) guarantees one membership per
    user and group.

    Fields:
        group_id (UUID): Foreign key to groups table (composite PK)
        user_id (UUID): Foreign key to users table (composite PK)
        team_id (UUID): Optional team within the group
        role (str): OWNER or MEMBER
        joined_at (datetime): Timestamp when user joined the group

    Example usage:
        membership = GroupMember(
            group_id=group.id,
            user_id=user.id,
            role="MEMBER"
        )
        db.add(membership)
        db.commit()
    """

    __tablename__ = "group_members"

    group_id = Column(
        UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Group the user belongs to"
    )

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
        comment="User who is a member of the group"
    )

    # Cleared when the team is deleted
    team_id = Column(
        UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Team within a team-challenge group"
    )

    role = Column(
        String(50),
        default="MEMBER",
        nullable=False,
        comment="User's role in this group: OWNER or MEMBER"
    )

    joined_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        comment="Timestamp when user joined the group"
    )

    def __repr__(self):
        """String representation for debugging."""
        return (
            f"<GroupMember(user_id={self.user_id}, group_id={self.group_id}, "
            f"role={self.role}, team_id={self.team_id})>"
        )

    @property
    def is_owner(self) -> bool:
        """Check if this membership represents an owner role."""
        return self.role == "OWNER"
