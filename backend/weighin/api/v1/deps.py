"""
API Dependencies
Common dependencies used across API endpoints.

This module provides:
- User authentication (JWT validation)
- Group authorization (membership check before any group data is read)
- Admin role check
- Translation of domain exceptions into HTTP errors

Dependencies are injected into FastAPI endpoints using Depends().
"""

from dataclasses import dataclass
from typing import NoReturn
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from weighin.core.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    WeighInError,
)
from weighin.db.session import get_db
from weighin.models.group import Group
from weighin.models.group_member import GroupMember
from weighin.models.user import User
from weighin.services.auth_service import verify_token, get_user_by_id
from weighin.services.group_service import GroupService


# HTTP Bearer token scheme for JWT authentication
# Used to extract "Authorization: Bearer <token>" from request headers
security = HTTPBearer()


_STATUS_BY_ERROR = {
    InvalidInputError: 422,  # same code FastAPI uses for request validation
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
}


def raise_http(error: WeighInError) -> NoReturn:
    """
    Re-raise a domain error as the matching HTTPException.

    Usage:
        try:
            GroupService.join_by_code(db, code, user)
        except WeighInError as e:
            raise_http(e)
    """
    for error_class, status_code in _STATUS_BY_ERROR.items():
        if isinstance(error, error_class):
            raise HTTPException(status_code=status_code, detail=error.message) from error
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message) from error


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate current user from JWT token.

    This dependency:
    1. Extracts JWT token from Authorization header
    2. Validates token signature, expiration and type
    3. Loads the user from database
    4. Stores the user on request.state for error logging

    Raises:
        HTTPException 401: If token is invalid, expired, or the user no longer exists

    Usage in endpoint:
        @router.get("/profile")
        def get_profile(current_user: User = Depends(get_current_user)):
            return {"email": current_user.email}
    """
    payload = verify_token(credentials.credentials, expected_type="access")
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        user_id = UUID(payload.sub)
    except ValueError:
        user_id = None
    user = get_user_by_id(db, user_id) if user_id else None

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"}
        )

    request.state.user = user
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Only allow users with the admin role.

    Raises:
        HTTPException 403: If the user is not an admin
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return current_user


@dataclass
class GroupAccess:
    """Result of the membership check: the group, the caller and their membership."""
    group: Group
    user: User
    membership: GroupMember

    @property
    def is_owner(self) -> bool:
        return self.group.created_by == self.user.id


def get_group_access(
    group_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> GroupAccess:
    """
    Authorize access to a group-scoped endpoint.

    Every endpoint under /groups/{group_id} depends on this, so no group
    data is read for callers who are not members.

    Raises:
        HTTPException 404: Group does not exist
        HTTPException 403: Caller is not a member of the group
    """
    group = GroupService.get_group(db, group_id)
    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )

    membership = GroupService.get_membership(db, group_id, current_user.id)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this group"
        )

    return GroupAccess(group=group, user=current_user, membership=membership)
