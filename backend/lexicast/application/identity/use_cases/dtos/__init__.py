"""DTOs for identity use cases."""

from lexicast.application.identity.use_cases.dtos.auth_dtos import (
    AuthResult,
    Identity,
    ProviderLogin,
    StudySessionInput,
    SyncPayload,
)

__all__ = ["AuthResult", "Identity", "ProviderLogin", "StudySessionInput", "SyncPayload"]
