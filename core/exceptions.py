"""Error taxonomy for the contact message pipeline.

Every error carries the HTTP status it maps to and a short message that is
safe to show to the caller. Handlers in ``main.py`` render them as
``{"error": message}``.
"""

from typing import Optional


class PortfolioError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortfolioError):
    """Missing or malformed input on a write path."""
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(PortfolioError):
    """Update or delete targeted an id that does not exist."""
    status_code = 404
    default_message = "Message not found"


class AuthorizationError(PortfolioError):
    """Missing or incorrect admin credential."""
    status_code = 401
    default_message = "Unauthorized"


class StorageError(PortfolioError):
    """The store was unreachable or a write failed.

    The underlying exception is logged where it is caught; only the generic
    message is ever returned to the client.
    """
    status_code = 500
    default_message = "Internal server error"
