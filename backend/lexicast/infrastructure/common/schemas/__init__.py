"""Common infrastructure schemas."""

from lexicast.infrastructure.common.schemas.response_wrappers import ApiResponse

__all__ = ["ApiResponse"]
