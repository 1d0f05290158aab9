"""Error types raised while capturing and reviewing inspections."""
from __future__ import annotations


class ClassificationError(RuntimeError):
    """Raised when a bed photo could not be classified."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingCredentialsError(ClassificationError):
    """No classifier API key is configured for this process."""


class AuthenticationError(ClassificationError):
    """The classifier service rejected the configured API key."""


class RateLimitedError(ClassificationError):
    """The classifier service refused the call because of quota or rate limits."""


class ServiceUnavailableError(ClassificationError):
    """The classifier service could not be reached or failed internally."""


class ResponseSchemaError(ClassificationError):
    """The classifier answered with a body that does not match the result schema."""


class DuplicateSubmissionError(RuntimeError):
    """The same photo is already being classified for the same room."""


class InvalidSubmissionError(ValueError):
    """The submitted photo or its metadata is missing or unreadable."""
