"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "internal_error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "authentication_failed"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "forbidden"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    code = "rate_limited"

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)


# ==================== BOOKING LIFECYCLE ====================
#
# A status change ends in an updated booking or one of the four errors below.
# ValidationError is raised on top of these when a request to enter
# `assigned` carries no staff member (or one is sent for another target);
# it concerns the request body, not the state machine or the role table.


class BookingNotFound(NotFoundError):
    """Booking identifier does not resolve."""

    code = "booking_not_found"

    def __init__(self, booking_id: Any) -> None:
        self.booking_id = booking_id
        super().__init__("Booking", str(booking_id))


class InvalidTransition(AppException):
    """Target status is not reachable from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid booking transition: {current} → {target}",
        )


class TransitionForbidden(AuthorizationError):
    """Actor role may not perform this particular transition."""

    code = "transition_forbidden"

    def __init__(self, role: str, current: str, target: str) -> None:
        self.role = role
        self.current = current
        self.target = target
        super().__init__(f"Role '{role}' may not move a booking from {current} to {target}")


class ConcurrentModification(AppException):
    """Booking status changed between read and write."""

    code = "concurrent_modification"

    def __init__(self, booking_id: Any, expected: str) -> None:
        self.booking_id = booking_id
        self.expected = expected
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Booking '{booking_id}' is no longer in status {expected}; "
                "reload it and try again"
            ),
        )
