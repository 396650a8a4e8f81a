"""Food search endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from food_catalog.api.auth import require_user
from food_catalog.api.models import FeedbackRequest, SearchRequest  # noqa: TC001
from food_catalog.domain.models import UserRecord  # noqa: TC001
from food_catalog.domain.search import SearchFeedback, SearchMetadata

if TYPE_CHECKING:
    from food_catalog.containers import AppContainer

router = APIRouter(prefix="/api/search", tags=["search"])


@router.post("")
async def search(
    payload: SearchRequest,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Analyze a food and record it in the user's history."""
    container: AppContainer = request.app.state.container
    result = await container.search_service.search(
        user_id=user.id,
        search_query=payload.search_query,
        search_type=payload.search_type,
        barcode=payload.barcode,
        product_name=payload.product_name,
        metadata=SearchMetadata(
            user_agent=request.headers.get("user-agent"),
            ip_address=request.client.host if request.client else None,
            session_id=request.headers.get("x-session-id"),
        ),
    )
    return {
        "success": True,
        "message": "Search completed successfully",
        "searchResult": result.to_dict(),
    }


@router.get("/history")
async def search_history(
    request: Request,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return the user's search history, newest first."""
    container: AppContainer = request.app.state.container
    entries = container.search_service.get_history(user.id, limit=limit, offset=offset)
    return {
        "success": True,
        "message": "Search history retrieved successfully",
        "history": [entry.to_dict() for entry in entries],
    }


@router.post("/history/{entry_id}/feedback")
async def search_feedback(
    entry_id: UUID,
    payload: FeedbackRequest,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Store feedback on one of the user's searches."""
    container: AppContainer = request.app.state.container
    entry = container.search_service.submit_feedback(
        user.id,
        entry_id,
        SearchFeedback(
            rating=payload.rating,
            helpful=payload.helpful,
            comments=payload.comments,
        ),
    )
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Search not found", "error": "SEARCH_NOT_FOUND"},
        )
    return {
        "success": True,
        "message": "Feedback saved successfully",
        "entry": entry.to_dict(),
    }


@router.get("/analytics")
async def search_analytics(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return search analytics for the user."""
    container: AppContainer = request.app.state.container
    analytics = container.search_service.get_analytics(user.id)
    return {
        "success": True,
        "message": "Search analytics retrieved successfully",
        "analytics": analytics.to_dict(),
    }


@router.get("/trending")
async def trending_searches(request: Request) -> dict[str, object]:
    """Return the most popular searches."""
    container: AppContainer = request.app.state.container
    return {
        "success": True,
        "message": "Trending searches",
        "trending": container.search_service.get_trending(),
    }
