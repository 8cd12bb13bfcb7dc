"""
Bearer-token authentication.

Resolves the caller's user id from ``Authorization: Bearer <token>``
against ``settings.auth_tokens``. When no tokens are configured (local
development), every request acts as ``settings.default_user_id``. The
resolved ``UserContext`` is passed explicitly to whatever persists data.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header

from src.core.config import Settings, get_settings
from src.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class UserContext:
    """Identity of the authenticated caller."""

    user_id: str


def resolve_user(authorization: str | None, settings: Settings) -> UserContext:
    """Map an Authorization header value to a user.

    Raises:
        AuthenticationError: If tokens are configured and the header is
            missing, malformed, or carries an unknown token.
    """
    if not settings.auth_tokens:
        return UserContext(user_id=settings.default_user_id)

    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError()
    token = authorization[len("Bearer ") :].strip()
    user_id = settings.auth_tokens.get(token)
    if user_id is None:
        raise AuthenticationError()
    return UserContext(user_id=user_id)


def get_current_user(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> UserContext:
    """FastAPI dependency returning the authenticated caller."""
    return resolve_user(authorization, settings)


CurrentUser = Annotated[UserContext, Depends(get_current_user)]
