"""FastAPI dependencies for identity and authentication."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from lexicast.core import container
from lexicast.domain.common.exceptions import AuthorizationError
from lexicast.domain.identity.value_objects.principal import Principal
from lexicast.exceptions import CredentialsException

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/Auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/Auth/login", auto_error=False)


def _resolve(token: str) -> Principal | None:
    token_service = container.token_service()
    return token_service.resolve_principal(token)


async def get_current_principal(token: Annotated[str, Depends(oauth2_scheme)]) -> Principal:
    """
    Resolve the caller from the bearer token.

    Raises:
        CredentialsException: If the token is missing, invalid or expired
    """
    principal = _resolve(token)
    if principal is None:
        raise CredentialsException
    return principal


async def get_optional_principal(
    token: Annotated[str | None, Depends(optional_oauth2_scheme)],
) -> Principal | None:
    """Resolve the caller if a bearer token was sent; invalid tokens still fail."""
    if token is None:
        return None
    principal = _resolve(token)
    if principal is None:
        raise CredentialsException
    return principal


async def get_anonymous_principal(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    if not principal.is_anonymous:
        raise AuthorizationError("This operation is only available to anonymous devices")
    return principal


async def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    if not principal.is_admin:
        raise AuthorizationError("Administrator role required")
    return principal


def get_client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]
AnonymousPrincipal = Annotated[Principal, Depends(get_anonymous_principal)]
AdminPrincipal = Annotated[Principal, Depends(require_admin)]
ClientIp = Annotated[str | None, Depends(get_client_ip)]
