class AppException(Exception):
    """Base application exception."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(AppException):
    """Malformed or missing input."""

    status_code = 400


class AuthError(AppException):
    """Missing or invalid credentials."""

    status_code = 401


class ForbiddenError(AppException):
    """Authenticated but not allowed."""

    status_code = 403


class NotFoundError(AppException):
    """Resource not found exception."""

    status_code = 404


class ConflictError(AppException):
    """The resource is not in a state that allows the operation.

    Raised for already-settled orders and payments, so retries of a
    settlement never succeed twice.
    """

    status_code = 400


class InternalError(AppException):
    """Unexpected database or transaction failure."""

    pass
