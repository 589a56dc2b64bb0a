"""Custom exception hierarchy for Lexicast application."""

from fastapi import HTTPException
from starlette import status


class LexicastError(Exception):
    """Base exception for all Lexicast errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(LexicastError):
    """Validation error."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code=status_code)


class ServiceError(LexicastError):
    """Service layer error."""


class InvalidMediaFileError(ValidationError):
    """Uploaded media file does not meet type or size constraints."""

    def __init__(self, reason: str, media_type: str = "audio") -> None:
        """Initialize with reason for validation failure."""
        self.reason = reason
        self.media_type = media_type
        super().__init__(f"Invalid {media_type} file: {reason}")


class QueueUnavailableError(ServiceError):
    """The audio processing queue could not accept a job."""

    def __init__(self, message: str = "Audio processing queue is unavailable") -> None:
        super().__init__(message, status_code=503)


CredentialsException = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)
