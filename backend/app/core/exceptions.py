"""
Typed domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the API layer renders them
into the standard ``{"status": "error", "message": ...}`` envelope.
"""

from typing import Any, Optional

from fastapi import status


class DomainException(Exception):
    """Base class for all errors the services surface to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.__class__.__name__


class ValidationException(DomainException):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedException(DomainException):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundException(DomainException):
    """Entity absent, or deliberately hidden as absent."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    status_code = status.HTTP_409_CONFLICT


class CapacityExceededException(ConflictException):
    def __init__(self, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(
            f"Booking failed: only {remaining} slots remaining.",
            details={"remaining": remaining},
        )


class AlreadyCancelledException(ConflictException):
    def __init__(self) -> None:
        super().__init__("Booking is already cancelled.")


class CannotCancelCompletedException(ConflictException):
    def __init__(self) -> None:
        super().__init__("Completed bookings cannot be cancelled.")


class InvalidTransitionException(ConflictException):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"Booking cannot move from '{current}' to '{target}'.",
            details={"current": current, "target": target},
        )


class InternalException(DomainException):
    """Storage failure or inconsistent state. The message is safe to show."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
