"""
User Model
Represents a profile in the weight tracking system.

Each user has:
- Unique email for authentication
- Encrypted password (never stored in plain text)
- Display name shown to fellow group members
- Optional height (centimeters) used for BMI and calorie estimates
- A role claim; admin privileges come from this column, never from a
  hardcoded email address

Profiles are created at registration and mutated only by their owner.
"""

from sqlalchemy import Column, String, Float, Enum as SQLEnum
import enum

from weighin.models.base import BaseModel


class UserRole(str, enum.Enum):
    """User role types."""
    ADMIN = "admin"
    BASIC = "basic"


class User(BaseModel):
    """
    User model for authentication and profile management.

    Fields:
        id (UUID): Primary key, inherited from BaseModel
        email (str): Unique email address for login and reminder emails
        password_hash (str): Bcrypt hashed password
        display_name (str): Name shown in group leaderboards
        height_cm (float): Optional height in centimeters
        role (UserRole): admin or basic
        created_at (datetime): Account creation timestamp
        updated_at (datetime): Last profile update timestamp

    Referenced by (foreign keys only, no ORM relationships):
        weight_entries: One-to-many (WeightEntry.user_id)
        memberships: One-to-many (GroupMember.user_id)
        notifications: One-to-many (Notification.user_id)

    Example usage:
        user = User(
            email="sam@example.com",
            password_hash=hash_password("secret123"),
            display_name="Sam",
            height_cm=172.5
        )
        db.add(user)
        db.commit()
    """

    __tablename__ = "users"

    # Authentication fields
    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,  # Index for fast lookups during login
        comment="User's email address for authentication"
    )

    password_hash = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Profile information
    display_name = Column(
        String(255),
        nullable=False,
        comment="Name shown to other group members"
    )

    height_cm = Column(
        Float,
        nullable=True,
        comment="Height in centimeters (canonical height unit)"
    )

    # ADMIN: may trigger reminder dispatch and other maintenance endpoints
    # BASIC: standard user access
    role = Column(
        SQLEnum(UserRole),
        default=UserRole.BASIC,
        nullable=False,
        comment="User role (admin, basic)"
    )

    def __repr__(self):
        """String representation for debugging."""
        return f"<User(id={self.id}, email={self.email}, name={self.display_name})>"

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN
