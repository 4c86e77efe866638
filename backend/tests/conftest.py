"""
Shared pytest fixtures.

Settings are read at import time, so the environment is prepared before
anything from weighin is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["EMAIL_API_KEY"] = ""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from weighin.core.security import hash_password
from weighin.db.session import get_db
from weighin.main import app
from weighin.models import Base, Group, GroupMember, Team, User, UserRole, WeightEntry
from weighin.services.auth_service import create_access_token


PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


def utc(*args) -> datetime:
    """datetime(*args) in UTC."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(display_name="Sam", email=None, role=UserRole.BASIC, height_cm=None):
        user = User(
            email=email or f"{display_name.lower()}-{uuid4().hex[:8]}@example.com",
            password_hash=PASSWORD_HASH,
            display_name=display_name,
            role=role,
            height_cm=height_cm,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_group(db):
    def _make(owner, name="Summer Cut", start_date=None, end_date=None,
              is_team_challenge=False, invite_code=None):
        group = Group(
            created_by=owner.id,
            name=name,
            invite_code=invite_code or uuid4().hex[:6].upper(),
            start_date=start_date,
            end_date=end_date,
            is_team_challenge=is_team_challenge,
        )
        db.add(group)
        db.flush()
        db.add(GroupMember(group_id=group.id, user_id=owner.id, role="OWNER"))
        db.commit()
        db.refresh(group)
        return group
    return _make


@pytest.fixture
def add_member(db):
    def _add(group, user, team=None, joined_at=None):
        membership = GroupMember(
            group_id=group.id,
            user_id=user.id,
            role="MEMBER",
            team_id=team.id if team else None,
        )
        if joined_at is not None:
            membership.joined_at = joined_at
        db.add(membership)
        db.commit()
        return membership
    return _add


@pytest.fixture
def make_team(db):
    def _make(group, name, color="#EF4444"):
        team = Team(group_id=group.id, name=name, color=color)
        db.add(team)
        db.commit()
        db.refresh(team)
        return team
    return _make


@pytest.fixture
def add_entry(db):
    """Insert an entry with an explicit percentage, bypassing the weight service."""
    def _add(user, weight, percentage_change, created_at, is_private=False):
        entry = WeightEntry(
            user_id=user.id,
            weight=weight,
            percentage_change=percentage_change,
            is_private=is_private,
            created_at=created_at,
        )
        db.add(entry)
        db.commit()
        return entry
    return _add


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
