"""Health profile endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from food_catalog.api.auth import require_user
from food_catalog.domain.health_profile import HealthProfile  # noqa: TC001
from food_catalog.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from food_catalog.containers import AppContainer

router = APIRouter(prefix="/api/health-profile", tags=["health-profile"])
_logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "Health profile not found", "error": "PROFILE_NOT_FOUND"},
    )


@router.post("")
async def save_health_profile(
    payload: HealthProfile,
    request: Request,
    response: Response,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Create the health profile, or replace it when one exists."""
    container: AppContainer = request.app.state.container
    record, created = container.health_profile_service.save_profile(user.id, payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return {
        "success": True,
        "message": (
            "Health profile created successfully"
            if created
            else "Health profile updated successfully"
        ),
        "profile": record.to_dict(),
    }


@router.get("")
async def get_health_profile(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return the user's health profile."""
    container: AppContainer = request.app.state.container
    record = container.health_profile_service.get_profile(user.id)
    if record is None:
        raise _not_found()
    return {
        "success": True,
        "message": "Health profile retrieved successfully",
        "profile": record.to_dict(),
    }


@router.put("")
async def update_health_profile(
    payload: HealthProfile,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Update only the sections included in the request."""
    container: AppContainer = request.app.state.container
    record = container.health_profile_service.update_profile(user.id, payload)
    if record is None:
        raise _not_found()
    return {
        "success": True,
        "message": "Health profile updated successfully",
        "profile": record.to_dict(),
    }


@router.delete("")
async def delete_health_profile(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Delete the user's health profile."""
    container: AppContainer = request.app.state.container
    if not container.health_profile_service.delete_profile(user.id):
        raise _not_found()
    return {"success": True, "message": "Health profile deleted successfully"}


@router.get("/summary")
async def health_profile_summary(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return profile tags used for personalization."""
    container: AppContainer = request.app.state.container
    summary = container.health_profile_service.get_summary(user.id)
    if summary is None:
        raise _not_found()
    _logger.info(
        "Health profile summary created: user_id=%s conditions=%s allergies=%s",
        user.id,
        len(summary.conditions),
        len(summary.allergies),
    )
    return {
        "success": True,
        "message": "Health profile summary retrieved successfully",
        "summary": summary.to_dict(),
    }
