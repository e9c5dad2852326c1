

class BoothBookingError(Exception):
    """
    Base exception for all domain-level errors
    inside the booth booking service.

    Each subclass carries the HTTP status the API answers with.
    """

    status_code = 400

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__.strip()
        super().__init__(self.message)


class ValidationError(BoothBookingError):
    """Request data is invalid."""

    status_code = 400


class NotFoundError(BoothBookingError):
    """Resource not found."""

    status_code = 404


class AuthenticationError(BoothBookingError):
    """Authentication failed."""

    status_code = 401


class PermissionDeniedError(BoothBookingError):
    """Not allowed to perform this action."""

    status_code = 403


class ConflictError(BoothBookingError):
    """Request conflicts with the current state of the resource."""

    status_code = 409


class BoothUnavailableError(BoothBookingError):
    """Raised when a booth cannot be reserved."""

    status_code = 400


class InvalidStateTransitionError(ConflictError):
    """
    Raised when an illegal booking state transition is attempted.
    """

    def __init__(self, from_state: str, to_state: str, allowed: list[str] | None = None):
        self.from_state = from_state
        self.to_state = to_state
        self.allowed = allowed or []

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state} "
            f"(allowed: {', '.join(self.allowed) or 'none'})"
        )
        super().__init__(message)
