"""Domain exceptions raised by the services layer.

Each exception carries the HTTP status code the API layer renders it with,
so handlers in ``main.py`` only need to copy ``status_code`` and ``message``.
"""


class ForumError(Exception):
    """Base exception for all forum domain errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        """Initialize the exception.

        Args:
            message: Human readable message. Falls back to the class default.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ForumError):
    """Raised when a request is missing fields or carries malformed values."""

    status_code = 400
    default_message = "Invalid input"


class ConflictError(ForumError):
    """Raised when a uniqueness rule would be violated.

    Rendered as 400 to match the existing client contract.
    """

    status_code = 400
    default_message = "Resource already exists"


class UnauthorizedError(ForumError):
    """Raised when no valid session identity is present."""

    status_code = 401
    default_message = "Not authenticated"


class InvalidCredentialsError(ForumError):
    """Raised on failed login. The message never says which field was wrong."""

    status_code = 401
    default_message = "Invalid username or password"


class ForbiddenError(ForumError):
    """Raised when the caller is authenticated but lacks permission."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(ForumError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    default_message = "Not found"
