"""Bearer token authentication for API routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

import jwt
from fastapi import Header, HTTPException, Request, status

from food_catalog.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from food_catalog.containers import AppContainer

_logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "error": "UNAUTHORIZED"},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> UserRecord:
    """Resolve the user from a Bearer JWT or reject the request."""
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("No token provided, authorization denied")
    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise _unauthorized("No token provided, authorization denied")

    container: AppContainer = request.app.state.container
    settings = container.settings
    try:
        claims = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.PyJWTError as exc:
        _logger.warning("Token verification failed: %s", exc)
        raise _unauthorized("Token is not valid") from exc

    raw_id = claims.get("id") or claims.get("sub")
    try:
        user_id = UUID(str(raw_id))
    except ValueError as exc:
        raise _unauthorized("Token is not valid") from exc

    user = container.user_service.get_active_user(user_id)
    if user is None:
        raise _unauthorized("Token is not valid - user not found")
    return user
