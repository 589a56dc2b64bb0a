"""Token creation and verification service."""

import base64
import secrets
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from lexicast.config import Settings
from lexicast.domain.common.exceptions import AuthenticationError
from lexicast.domain.identity.entities.anonymous_user import ANONYMOUS_ROLE
from lexicast.domain.identity.entities.user import User
from lexicast.domain.identity.value_objects.principal import Principal
from lexicast.utils import utc_now

ALGORITHM = "HS256"
ANONYMOUS_USER_TYPE = "anonymous"
REFRESH_TOKEN_BYTES = 32
PROVIDER_CLAIM_PREFIX = "provider_"
EPOCH_MIN = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class AccessTokenClaims:
    """Claims carried by an access token."""

    jti: str
    issuer: str
    audience: str
    issued_at: datetime
    expires_at: datetime
    subject: str | None = None
    email: str | None = None
    name: str | None = None
    subscription: str | None = None
    role: str | None = None
    device_id: str | None = None
    user_type: str | None = None
    providers: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "jti": self.jti,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }
        optional = {
            "sub": self.subject,
            "email": self.email,
            "name": self.name,
            "subscription": self.subscription,
            "role": self.role,
            "device_id": self.device_id,
            "user_type": self.user_type,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        for provider_name, provider_id in self.providers.items():
            payload[f"{PROVIDER_CLAIM_PREFIX}{provider_name}"] = provider_id
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AccessTokenClaims":
        providers = {
            key.removeprefix(PROVIDER_CLAIM_PREFIX): str(value)
            for key, value in payload.items()
            if key.startswith(PROVIDER_CLAIM_PREFIX)
        }
        audience = payload.get("aud", "")
        if isinstance(audience, list):
            audience = audience[0] if audience else ""
        return cls(
            jti=str(payload.get("jti", "")),
            issuer=str(payload.get("iss", "")),
            audience=str(audience),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
            subject=payload.get("sub"),
            email=payload.get("email"),
            name=payload.get("name"),
            subscription=payload.get("subscription"),
            role=payload.get("role"),
            device_id=payload.get("device_id"),
            user_type=payload.get("user_type"),
            providers=providers,
        )

    @property
    def is_anonymous(self) -> bool:
        return bool(self.device_id)


class JwtTokenService:
    """
    Issue and introspect HS256 access tokens.

    Expiry is checked against the injected clock with zero leeway, so tests
    can move time forward without sleeping. The extract_* helpers never raise;
    they return None, False or the minimum datetime on any parse failure.
    """

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = utc_now) -> None:
        self.secret_key = settings.SECRET_KEY
        self.issuer = settings.JWT_ISSUER
        self.audience = settings.JWT_AUDIENCE
        self.user_token_lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.anonymous_token_lifetime = timedelta(
            minutes=settings.anonymous_token_expire_minutes
        )
        self.clock = clock

    def issue_user_token(self, user: User, jwt_id: str | None = None) -> str:
        now = self.clock()
        claims = AccessTokenClaims(
            jti=jwt_id or str(uuid.uuid4()),
            issuer=self.issuer,
            audience=self.audience,
            issued_at=now,
            expires_at=now + self.user_token_lifetime,
            subject=str(user.id.value),
            email=user.email,
            name=user.display_name,
            subscription=user.current_subscription_plan,
            role=user.role,
            providers={p.provider_name: p.provider_id for p in user.active_providers()},
        )
        return self._encode(claims)

    def issue_anonymous_token(self, device_id: str) -> str:
        now = self.clock()
        claims = AccessTokenClaims(
            jti=str(uuid.uuid4()),
            issuer=self.issuer,
            audience=self.audience,
            issued_at=now,
            expires_at=now + self.anonymous_token_lifetime,
            device_id=device_id,
            user_type=ANONYMOUS_USER_TYPE,
            role=ANONYMOUS_ROLE,
        )
        return self._encode(claims)

    def issue_refresh_token(self) -> str:
        """Opaque refresh token; looked up server-side, never decoded."""
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def validate(self, token: str) -> bool:
        return self.verify(token) is not None

    def verify(self, token: str) -> AccessTokenClaims | None:
        """
        Verify signature, issuer, audience and expiry.

        Returns:
            The token's claims, or None if any check fails
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require": ["exp", "iat", "iss", "aud"],
                    # Time checks use the injected clock below
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
            claims = AccessTokenClaims.from_payload(payload)
        except (InvalidTokenError, KeyError, TypeError, ValueError, OverflowError, OSError):
            return None

        if self.clock() >= claims.expires_at:
            return None
        return claims

    def resolve_principal(self, token: str) -> Principal | None:
        """Build the caller's principal from a valid token."""
        claims = self.verify(token)
        if claims is None:
            return None
        try:
            if claims.is_anonymous:
                return Principal(device_id=claims.device_id, role=claims.role, jwt_id=claims.jti)
            if claims.subject is None:
                return None
            return Principal(user_id=int(claims.subject), role=claims.role, jwt_id=claims.jti)
        except (AuthenticationError, ValueError):
            return None

    def extract_user_id(self, token: str) -> int | None:
        claims = self._read_unverified(token)
        if claims is None or claims.subject is None:
            return None
        try:
            return int(claims.subject)
        except ValueError:
            return None

    def extract_device_id(self, token: str) -> str | None:
        claims = self._read_unverified(token)
        return claims.device_id if claims else None

    def extract_jwt_id(self, token: str) -> str | None:
        claims = self._read_unverified(token)
        return claims.jti if claims and claims.jti else None

    def is_anonymous(self, token: str) -> bool:
        claims = self._read_unverified(token)
        return bool(claims and claims.is_anonymous)

    def expiry_of(self, token: str) -> datetime:
        claims = self._read_unverified(token)
        return claims.expires_at if claims else EPOCH_MIN

    def _encode(self, claims: AccessTokenClaims) -> str:
        return jwt.encode(claims.to_payload(), self.secret_key, algorithm=ALGORITHM)

    def _read_unverified(self, token: str) -> AccessTokenClaims | None:
        try:
            payload = jwt.decode(
                token,
                options={"verify_signature": False},
                algorithms=[ALGORITHM],
            )
            return AccessTokenClaims.from_payload(payload)
        except (InvalidTokenError, KeyError, TypeError, ValueError, OverflowError, OSError):
            return None
