"""
Error taxonomy shared by services and API handlers.
"""

from typing import Optional


class PortfolioError(Exception):
    """Base error carrying the HTTP status it maps to"""
    status_code = 500
    error = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.error
        super().__init__(self.message)


class ValidationError(PortfolioError):
    """Raised when input fields are missing or malformed"""
    status_code = 400
    error = "Validation error"


class AuthorizationError(PortfolioError):
    """Raised when the session is missing or invalid"""
    status_code = 401
    error = "Unauthorized"


class ForbiddenError(PortfolioError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(PortfolioError):
    """Raised when a resource id does not resolve"""
    status_code = 404
    error = "Not found"


class ConflictError(PortfolioError):
    """Raised when a unique field already exists"""
    status_code = 409
    error = "Conflict"


class StorageError(PortfolioError):
    """Raised when the persistence layer fails"""
    status_code = 500
    error = "Storage error"
