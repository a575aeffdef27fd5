"""
Domain errors raised by services and translated to JSON at the route boundary.
"""


class MarketplaceError(Exception):
    status_code = 500
    default_message = "An unexpected error occurred. Please try again later."

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Unauthenticated(MarketplaceError):
    status_code = 401
    default_message = "Unauthorized - Please log in"


class Forbidden(MarketplaceError):
    status_code = 403
    default_message = "Forbidden"


class ValidationError(MarketplaceError):
    status_code = 400
    default_message = "Invalid request data"


class ConflictError(MarketplaceError):
    # Surfaced as a plain 400 to clients
    status_code = 400
    default_message = "Conflict"


class DuplicateAccountError(ConflictError):
    status_code = 409
    default_message = "User already exists with this email address"


class ConfigurationError(MarketplaceError):
    status_code = 400
    default_message = "No district assigned to regional admin"


class NotFound(MarketplaceError):
    """Record is absent or outside the caller's scope; the two are not distinguished."""

    status_code = 404
    default_message = "Not found"


class InternalError(MarketplaceError):
    status_code = 500


__all__ = [
    "MarketplaceError",
    "Unauthenticated",
    "Forbidden",
    "ValidationError",
    "ConflictError",
    "DuplicateAccountError",
    "ConfigurationError",
    "NotFound",
    "InternalError",
]
