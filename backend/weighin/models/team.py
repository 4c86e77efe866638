"""
Team Model
A named, colored subdivision of a team-challenge group.
"""

from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from weighin.models.base import BaseModel


class Team(BaseModel):
    """
    Team within a group.

    Only meaningful when the owning group has is_team_challenge set.
    Members reference their team through GroupMember.team_id; deleting a
    team leaves its members in the group without a team.
    """

    __tablename__ = "teams"

    group_id = Column(
        UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Group this team belongs to"
    )

    name = Column(
        String(100),
        nullable=False,
        comment="Team display name"
    )

    color = Column(
        String(7),
        nullable=False,
        comment="Hex display color, e.g. #3B82F6"
    )

    def __repr__(self):
        return f"<Team(id={self.id}, group_id={self.group_id}, name={self.name})>"
