"""
Group Model
Represents a weight-loss group (challenge) that users join by invite code.

A group is the unit of social comparison: its members' percentage changes
are ranked on a shared leaderboard, optionally partitioned into teams.

Key features:
- Unique 6-character invite code
- Optional start/end date window
- Team challenge mode
- One-time settlement cache (total_weight_lost) filled after the group ends
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String, Text, Boolean, Float, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from weighin.core.timeutils import as_utc, utcnow
from weighin.models.base import BaseModel


class Group(BaseModel):
    """
    Group model.

    Fields:
        id (UUID): Primary key, inherited from BaseModel
        created_by (UUID): Foreign key to users table (group owner)
        name (str): Display name
        description (str): Optional description
        invite_code (str): Unique 6-character code used to join
        start_date (datetime): Optional start of the active window
        end_date (datetime): Optional end of the active window
        is_team_challenge (bool): Members are partitioned into teams
        total_weight_lost (float): Settlement cache, NULL until settled

    Lifecycle:
        "Concluded" is not stored; it is derived from end_date. The
        transition triggers a single write of total_weight_lost.

    Example usage:
        group = Group(
            created_by=user.id,
            name="Summer Cut",
            invite_code="K4T2M9",
            end_date=datetime(2025, 9, 1, tzinfo=timezone.utc)
        )
    """

    __tablename__ = "groups"

    created_by = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who created and owns this group"
    )

    name = Column(
        String(255),
        nullable=False,
        comment="Display name for the group"
    )

    description = Column(
        Text,
        nullable=True,
        comment="Optional description of the group"
    )

    invite_code = Column(
        String(6),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique 6-character invitation code"
    )

    # Active window (both optional)
    start_date = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Entries before this instant are ignored by group aggregates"
    )

    end_date = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="After this instant the group is concluded and settled"
    )

    is_team_challenge = Column(
        Boolean,
        default=False,
        nullable=False,
        comment="Members compete in teams"
    )

    # Written once through a conditional update (see settlement service)
    total_weight_lost = Column(
        Float,
        nullable=True,
        comment="Cached combined weight loss (lbs), set once after the group ends"
    )

    def __repr__(self):
        """String representation for debugging."""
        return f"<Group(id={self.id}, name={self.name}, code={self.invite_code})>"

    def has_concluded(self, now: Optional[datetime] = None) -> bool:
        """True once the current time exceeds end_date."""
        if self.end_date is None:
            return False
        return (now or utcnow()) > as_utc(self.end_date)

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """True while now is within [start_date, end_date]; unset bounds are open."""
        now = now or utcnow()
        if self.start_date is not None and as_utc(self.start_date) > now:
            return False
        if self.end_date is not None and as_utc(self.end_date) < now:
            return False
        return True

    @property
    def is_settled(self) -> bool:
        """Settlement total has been cached."""
        return self.total_weight_lost is not None
