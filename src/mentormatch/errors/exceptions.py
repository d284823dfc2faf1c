"""Exception taxonomy for MentorMatch.

Every guard in the mentorship state machine raises one of these; the API layer
renders them into the standard error envelope.
"""


class MentorMatchError(Exception):
    """Base exception for MentorMatch."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(MentorMatchError):
    """Missing or malformed input."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class NotFoundError(MentorMatchError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class AuthenticationError(MentorMatchError):
    """Authentication required or token invalid."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__("AUTHENTICATION_ERROR", message, status_code=401)


class AuthorizationError(MentorMatchError):
    """Acting identity fails an ownership or role check."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__("AUTHORIZATION_ERROR", message, status_code=403)


class InvalidStatusError(MentorMatchError):
    """Requested status is not in the allowed set."""

    def __init__(self, message: str, details=None):
        super().__init__("INVALID_STATUS", message, details, status_code=400)


class ConflictError(MentorMatchError):
    """Resource state conflict."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)


class CapacityExceededError(MentorMatchError):
    """Mentor intake limit reached."""

    def __init__(self, max_students: int):
        super().__init__(
            "CAPACITY_EXCEEDED",
            f"Intake limit reached. You can only guide up to {max_students} students.",
            {"max_students": max_students},
            status_code=409,
        )
        self.max_students = max_students
