from .session_store import SessionStore
from .token_issuer import TokenIssuer

__all__ = ["SessionStore", "TokenIssuer"]
