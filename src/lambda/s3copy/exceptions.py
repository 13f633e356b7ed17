"""Exception hierarchy for server-side copy operations.

Backend failures (botocore ``ClientError``) are not part of this hierarchy:
they propagate to the caller unchanged.
"""


class CopyError(Exception):
    """Base exception for all copy orchestration errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NonRetryableError(CopyError):
    """Errors that will fail again if the same call is repeated."""
    pass


class InvalidArgumentError(NonRetryableError, ValueError):
    """Source/target descriptor or option has an unsupported shape or value."""
    pass


class SizeTooSmallError(NonRetryableError):
    """Multipart copy requested for an object under the minimum part size."""
    pass


class ObjectTooLargeError(NonRetryableError):
    """Object exceeds what a multipart upload can assemble."""
    pass


class NotFoundError(NonRetryableError):
    """Source object does not exist."""
    pass


class SessionStateError(NonRetryableError):
    """Multipart session was driven past a terminal state."""
    pass
