"""Domain error taxonomy.

Services raise these; the HTTP layer in ``main.py`` turns them into
responses using ``status_code``. Nothing here knows about FastAPI.
"""


class MarketplaceError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(MarketplaceError):
    """Credentials missing or invalid. Never says which."""

    status_code = 401
    default_message = "Invalid credentials"


class AccountNotActiveError(AuthenticationError):
    """Credentials were correct but the account may not sign in."""

    status_code = 403
    default_message = "Account is not active"


class AuthorizationError(MarketplaceError):
    status_code = 403
    default_message = "Unauthorized access"


class ValidationError(MarketplaceError):
    status_code = 422
    default_message = "Invalid input"


class NotFoundError(MarketplaceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(MarketplaceError):
    """Illegal state transition, lost update, or uniqueness violation."""

    status_code = 409
    default_message = "Conflict"


class InternalError(MarketplaceError):
    status_code = 500
