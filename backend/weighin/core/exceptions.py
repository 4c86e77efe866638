"""
Domain Exceptions
Errors raised by the service layer and translated to HTTP responses by the API.

Services never raise HTTPException directly; endpoints map these classes to
status codes (see weighin.api.v1.deps.raise_http).
"""


class WeighInError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(WeighInError, ValueError):
    """Input rejected before any computation (non-positive weight, bad unit, ...)."""
    pass


class NotFoundError(WeighInError):
    """Referenced group, team, entry or user does not exist."""
    pass


class PermissionDeniedError(WeighInError, PermissionError):
    """Caller is not allowed to perform the operation."""
    pass


class ConflictError(WeighInError):
    """Operation conflicts with existing state (e.g. already a member)."""
    pass
