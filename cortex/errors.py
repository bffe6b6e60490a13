"""Error taxonomy for the Cortex backend.

Every error carries the HTTP status it maps to; ``main.py`` renders them as
``{"error": message}``.
"""

from fastapi import status


class CortexError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(CortexError):
    """Missing or invalid bearer credential."""

    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(CortexError):
    """APPLY attempted while the user's persona is PAUSED."""

    status_code = status.HTTP_403_FORBIDDEN


class StoreTimeout(CortexError):
    """A Store call did not complete within the configured timeout."""


class AuditWriteFailed(CortexError):
    """The audit row could not be persisted; nothing was applied."""


class ApplyFailed(CortexError):
    """The Store rejected the mutation after the audit row was written."""


class SuggestionUnavailable(CortexError):
    """The suggestion generator was unreachable or timed out."""


class ImportFailed(CortexError):
    """Content import from an external source failed."""
