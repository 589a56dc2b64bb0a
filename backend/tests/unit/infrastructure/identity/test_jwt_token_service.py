"""Tests for JwtTokenService."""

from datetime import UTC, datetime, timedelta

import jwt

from lexicast.config import get_settings
from lexicast.domain.common.value_objects.ids import UserId
from lexicast.domain.identity.entities.user import ROLE_ADMIN, User
from lexicast.infrastructure.identity.auth.token_service import EPOCH_MIN, JwtTokenService


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def _service(clock: FakeClock) -> JwtTokenService:
    return JwtTokenService(get_settings(), clock=clock)


def _user(role: str = "User") -> User:
    return User.create_with_id(
        UserId(7), "ada@example.com", first_name="Ada", last_name="Lovelace", role=role
    )


class TestIssueAndVerify:
    def test_user_token_claims(self) -> None:
        clock = FakeClock(datetime(2026, 5, 1, 12, 0, tzinfo=UTC))
        service = _service(clock)

        token = service.issue_user_token(_user(), jwt_id="jti-1")
        claims = service.verify(token)

        assert claims is not None
        assert claims.subject == "7"
        assert claims.email == "ada@example.com"
        assert claims.name == "Ada Lovelace"
        assert claims.role == "User"
        assert claims.jti == "jti-1"
        assert claims.issuer == get_settings().JWT_ISSUER
        assert claims.audience == get_settings().JWT_AUDIENCE
        assert claims.expires_at == clock.now + timedelta(
            minutes=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES
        )
        assert claims.is_anonymous is False

    def test_token_expires_exactly_at_lifetime(self) -> None:
        clock = FakeClock(datetime(2026, 5, 1, 12, 0, tzinfo=UTC))
        service = _service(clock)
        token = service.issue_user_token(_user())
        lifetime = timedelta(minutes=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES)

        clock.advance(lifetime - timedelta(seconds=1))
        assert service.validate(token) is True

        clock.advance(timedelta(seconds=1))
        assert service.validate(token) is False
        assert service.resolve_principal(token) is None

    def test_anonymous_token_lives_longer(self) -> None:
        clock = FakeClock(datetime(2026, 5, 1, 12, 0, tzinfo=UTC))
        service = _service(clock)
        token = service.issue_anonymous_token("device-9")

        clock.advance(timedelta(minutes=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES + 1))

        claims = service.verify(token)
        assert claims is not None
        assert claims.is_anonymous is True
        assert claims.role == "Anonymous"
        assert claims.user_type == "anonymous"
        assert claims.subject is None

    def test_tampered_signature_rejected(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))
        token = service.issue_user_token(_user())
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        assert service.verify(tampered) is None

    def test_foreign_secret_rejected(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))
        payload = {
            "sub": "7",
            "iss": get_settings().JWT_ISSUER,
            "aud": get_settings().JWT_AUDIENCE,
            "iat": int(datetime.now(UTC).timestamp()),
            "exp": int((datetime.now(UTC) + timedelta(hours=1)).timestamp()),
        }
        forged = jwt.encode(payload, "another-secret-that-is-long-enough-for-hs256", "HS256")

        assert service.verify(forged) is None

    def test_wrong_audience_rejected(self) -> None:
        now = datetime.now(UTC)
        service = _service(FakeClock(now))
        payload = {
            "sub": "7",
            "iss": get_settings().JWT_ISSUER,
            "aud": "SomeoneElse",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=1)).timestamp()),
        }
        token = jwt.encode(payload, get_settings().SECRET_KEY, "HS256")

        assert service.verify(token) is None

    def test_refresh_tokens_are_unique(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))

        tokens = {service.issue_refresh_token() for _ in range(20)}

        assert len(tokens) == 20


class TestResolvePrincipal:
    def test_user_principal(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))

        principal = service.resolve_principal(service.issue_user_token(_user(ROLE_ADMIN)))

        assert principal is not None
        assert principal.user_id == 7
        assert principal.is_admin is True
        assert principal.owner_key == "7"

    def test_anonymous_principal(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))

        principal = service.resolve_principal(service.issue_anonymous_token("device-9"))

        assert principal is not None
        assert principal.is_anonymous is True
        assert principal.is_admin is False
        assert principal.owner_key == "device-9"

    def test_token_without_identity(self) -> None:
        now = datetime.now(UTC)
        service = _service(FakeClock(now))
        payload = {
            "iss": get_settings().JWT_ISSUER,
            "aud": get_settings().JWT_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=1)).timestamp()),
        }
        token = jwt.encode(payload, get_settings().SECRET_KEY, "HS256")

        assert service.resolve_principal(token) is None


class TestExtractHelpers:
    def test_extract_from_user_token(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))
        token = service.issue_user_token(_user(), jwt_id="abc")

        assert service.extract_user_id(token) == 7
        assert service.extract_device_id(token) is None
        assert service.extract_jwt_id(token) == "abc"
        assert service.is_anonymous(token) is False

    def test_extract_ignores_expiry(self) -> None:
        clock = FakeClock(datetime(2026, 1, 1, tzinfo=UTC))
        service = _service(clock)
        token = service.issue_anonymous_token("device-3")
        clock.advance(timedelta(days=365))

        assert service.extract_device_id(token) == "device-3"
        assert service.is_anonymous(token) is True
        assert service.expiry_of(token) > datetime(2026, 1, 1, tzinfo=UTC)

    def test_extract_from_garbage(self) -> None:
        service = _service(FakeClock(datetime.now(UTC)))

        assert service.extract_user_id("not a token") is None
        assert service.extract_device_id("not a token") is None
        assert service.extract_jwt_id("") is None
        assert service.is_anonymous("x.y.z") is False
        assert service.expiry_of("x.y.z") == EPOCH_MIN
