"""
Weight Entry Model
Stores user weight measurements together with their percentage change.

Entries are append-only by convention: the percentage change is computed
once, at insert time, relative to the user's first-ever entry (the
baseline) and is never recomputed when later entries arrive.

Features:
    - Weight stored in pounds (canonical unit)
    - Percentage change stored alongside, so group views never need raw weights
    - Private flag excluding an entry from every group aggregate
    - Optional notes for context (e.g., "after holidays")
"""

from sqlalchemy import Column, ForeignKey, Float, Boolean, Text, Index
from sqlalchemy.dialects.postgresql import UUID

from weighin.models.base import BaseModel


class WeightEntry(BaseModel):
    """
    Weight measurement with its baseline-relative percentage change.

    Relationships:
        - Belongs to a User (who recorded the weight)

    Privacy:
        Group aggregation reads percentage_change of non-private entries
        only. Raw weights leave the owner's scope solely through the
        settlement of a concluded group.

    Example:
        User records weight three times (baseline 150 lbs):
        - 150.0 lbs -> percentage_change 0.0
        - 145.0 lbs -> percentage_change -3.33
        - 140.0 lbs -> percentage_change -6.67
    """

    __tablename__ = "weight_entries"

    # Owner of the entry
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who recorded this weight"
    )

    # Weight in pounds
    weight = Column(
        Float,
        nullable=False,
        comment="Weight in pounds (canonical unit)"
    )

    # Signed percent difference to the user's baseline; negative = loss
    percentage_change = Column(
        Float,
        nullable=False,
        default=0.0,
        comment="Percent change relative to the user's first entry"
    )

    notes = Column(
        Text,
        nullable=True,
        comment="Optional notes about measurement context"
    )

    is_private = Column(
        Boolean,
        default=False,
        nullable=False,
        comment="Private entries never appear in group aggregates"
    )

    # Most queries read one user's history in chronological order
    __table_args__ = (
        Index("idx_weight_entries_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        """String representation for debugging."""
        return (
            f"<WeightEntry(user_id={self.user_id}, weight={self.weight}, "
            f"percentage_change={self.percentage_change}, private={self.is_private})>"
        )

    @property
    def weight_kg(self) -> float:
        """Weight converted to kilograms for display."""
        from weighin.services.conversions import from_canonical_weight
        return from_canonical_weight(self.weight, "kg")
