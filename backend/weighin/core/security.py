"""
Security Utilities
Password hashing for profile credentials.

Passwords are hashed with bcrypt through passlib before a profile row is
written; the plain password never reaches the database.
"""

from passlib.context import CryptContext


# bcrypt context; "deprecated=auto" lets passlib flag hashes that need upgrading
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password.

    Args:
        password: Plain text password from the registration form

    Returns:
        bcrypt hash string, e.g. "$2b$12$..."
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True when plain_password matches the stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)
