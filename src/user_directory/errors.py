"""Domain errors raised by the user service and its repositories.

Services raise these; handlers translate them into HTTP responses.
"""


class UserServiceError(Exception):
    """Base class for expected, user-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthenticatedError(UserServiceError):
    """No caller identity is attached to the request."""


class ForbiddenError(UserServiceError):
    """The caller is authenticated but not allowed to perform the operation."""


class NotFoundError(UserServiceError):
    """The target account does not exist."""


class ConflictError(UserServiceError):
    """A uniqueness rule would be violated."""


class InvalidInputError(UserServiceError):
    """A field value is malformed or out of range."""


class DuplicateValueError(Exception):
    """Raised by a store when a unique constraint rejects a write.

    Attributes:
        field: Name of the offending column ("username" or "email")
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"Duplicate value for {field}")
        self.field = field
