"""Caller identity resolution from bearer tokens.

Tokens are issued elsewhere (login service); this module only verifies
them and extracts the caller's id and privilege reference.
"""

import logging
from typing import Annotated

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from user_directory.config import Settings, settings
from user_directory.entities import CallerIdentity

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def decode_caller(token: str, config: Settings) -> CallerIdentity | None:
    """Verify a JWT and build the caller identity from its claims.

    Args:
        token: The encoded JWT
        config: Settings holding the signing secret and algorithm

    Returns:
        The caller identity, or None if the token is invalid or lacks an id
    """
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected bearer token: %s", e)
        return None

    try:
        caller_id = int(claims["id"])
        privilege_id = claims.get("privilege_id")
        return CallerIdentity(
            id=caller_id,
            privilege_id=int(privilege_id) if privilege_id is not None else None,
        )
    except (KeyError, TypeError, ValueError):
        logger.debug("Bearer token is missing a usable id claim")
        return None


async def get_caller(request: Request) -> CallerIdentity | None:
    """Dependency resolving the caller from the Authorization header.

    Returns None when no valid token is present; the service decides
    whether anonymous access is acceptable.
    """
    credentials: HTTPAuthorizationCredentials | None = await _bearer(request)
    if credentials is None:
        return None
    config: Settings = getattr(request.app.state, "settings", settings)
    return decode_caller(credentials.credentials, config)


CallerDep = Annotated[CallerIdentity | None, Depends(get_caller)]
