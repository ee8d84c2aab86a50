"""Error taxonomy shared by the slot registry and the swap coordinator.

Every error carries the HTTP status code the API answers with. Services
raise these; the application renders them as ``{"detail": message}``.
"""


class SlotSwapperError(Exception):
    """Base exception for expected, caller-facing failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SlotSwapperError):
    """Malformed or missing input, or an invalid enum value."""

    status_code = 400
    default_message = "Invalid request"


class UnauthenticatedError(SlotSwapperError):
    """No identity, or an identity that could not be verified."""

    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(SlotSwapperError):
    """Authenticated, but not allowed to act on this record."""

    status_code = 403
    default_message = "Not authorized"


class NotFoundError(SlotSwapperError):
    """Record absent, or not owned by the caller (never distinguished)."""

    status_code = 404
    default_message = "Not found"


class ConflictError(SlotSwapperError):
    """State-machine precondition violated."""

    status_code = 409
    default_message = "Conflict"
