"""
SQLAlchemy Declarative Base
Defines the base class for all SQLAlchemy models.

All database models should inherit from the Base class defined here
(usually through weighin.models.base.BaseModel).
"""

from sqlalchemy.orm import declarative_base

# Declarative base class for all models
# Profiles, weight entries, groups, memberships, teams, reminder logs and
# notifications all register their tables on this metadata.
#
# Usage:
#     from weighin.db.base import Base
#
#     class Team(Base):
#         __tablename__ = "teams"
#         ...
Base = declarative_base()
