"""User profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from food_catalog.api.auth import require_user
from food_catalog.domain.models import UserRecord  # noqa: TC001
from food_catalog.domain.user_profile import UserProfile  # noqa: TC001

if TYPE_CHECKING:
    from food_catalog.containers import AppContainer

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
async def get_profile(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return the user's profile, or null when none is stored."""
    container: AppContainer = request.app.state.container
    record = container.user_profile_service.get_profile(user.id)
    return {
        "success": True,
        "message": "Profile retrieved successfully",
        "profile": record.to_dict() if record else None,
    }


@router.put("")
async def update_profile(
    payload: UserProfile,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Create or update the user's profile."""
    container: AppContainer = request.app.state.container
    record = container.user_profile_service.update_profile(user.id, payload)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "profile": record.to_dict(),
    }
