"""Issues access/refresh token pairs."""

from uuid import uuid4

from lexicast.application.identity.protocols.token_service import TokenServiceProtocol
from lexicast.application.identity.services.session_store import SessionStore
from lexicast.application.identity.use_cases.dtos import AuthResult
from lexicast.domain.identity.entities.anonymous_user import AnonymousUser
from lexicast.domain.identity.entities.refresh_token import RefreshToken
from lexicast.domain.identity.entities.user import User


class TokenIssuer:
    """The single place where tokens are minted for clients."""

    def __init__(self, token_service: TokenServiceProtocol, session_store: SessionStore) -> None:
        self.token_service = token_service
        self.session_store = session_store

    def issue_for_user(self, user: User, device_id: str | None = None) -> AuthResult:
        """Issue an access token plus a freshly stored refresh token."""
        jwt_id = str(uuid4())
        access_token = self.token_service.issue_user_token(user, jwt_id)
        record = self.session_store.issue(user.id, jwt_id, device_id)
        return AuthResult(
            access_token=access_token,
            refresh_token=record.token,
            expires_at=self.token_service.expiry_of(access_token),
            user=user,
        )

    def rotate_for_user(self, user: User, presented: RefreshToken) -> AuthResult:
        """Issue a new pair, consuming the presented refresh token."""
        jwt_id = str(uuid4())
        access_token = self.token_service.issue_user_token(user, jwt_id)
        record = self.session_store.rotate(presented, jwt_id)
        return AuthResult(
            access_token=access_token,
            refresh_token=record.token,
            expires_at=self.token_service.expiry_of(access_token),
            user=user,
        )

    def issue_for_anonymous(self, anonymous_user: AnonymousUser) -> AuthResult:
        """Anonymous sessions get a long-lived access token and no refresh token."""
        access_token = self.token_service.issue_anonymous_token(anonymous_user.device_id)
        return AuthResult(
            access_token=access_token,
            expires_at=self.token_service.expiry_of(access_token),
            anonymous_user=anonymous_user,
        )
