"""Food search, history and analytics."""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from food_catalog.domain.analysis import HealthImpact, SearchType
from food_catalog.domain.health_profile import HealthProfileSummary
from food_catalog.domain.search import (
    NewSearchEntry,
    SearchAnalytics,
    SearchFeedback,
    SearchHistoryRecord,
    SearchMetadata,
)
from food_catalog.services.analysis import AnalysisService
from food_catalog.services.health_profiles import (
    HealthProfileService,
    summarize_profile,
)

DEFAULT_TRENDING = [
    "organic apples",
    "quinoa salad",
    "greek yogurt",
    "avocado toast",
    "green smoothie",
]

_logger = logging.getLogger(__name__)


class SearchHistoryRepository(Protocol):
    """Persistence interface for search history."""

    def create_entry(self, entry: NewSearchEntry) -> SearchHistoryRecord:
        """Persist a search and return the stored record."""

    def get_entry(self, entry_id: UUID) -> SearchHistoryRecord | None:
        """Return a search history entry by id."""

    def list_entries(
        self, user_id: UUID, limit: int, offset: int = 0
    ) -> list[SearchHistoryRecord]:
        """Return a user's searches, newest first."""

    def count_entries(self, user_id: UUID) -> int:
        """Return how many searches a user has made."""

    def list_recent_queries(self, limit: int) -> list[str]:
        """Return recent search queries across all users."""

    def set_feedback(self, entry_id: UUID, feedback: SearchFeedback) -> None:
        """Store feedback on a search entry."""


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a search request."""

    entry: SearchHistoryRecord
    personalization: HealthProfileSummary | None

    def to_dict(self) -> dict[str, object]:
        """Return the API representation."""
        return {
            "id": str(self.entry.id),
            "query": self.entry.search_query,
            "type": self.entry.search_type.value,
            "analysis": self.entry.analysis.to_dict(),
            "personalization": (
                self.personalization.to_dict() if self.personalization else None
            ),
            "timestamp": self.entry.created_at.isoformat(),
            "isPersonalized": self.personalization is not None,
            "isFallback": self.entry.analysis.is_fallback,
        }


@dataclass
class SearchService:
    """Runs analyses for searches and records them in history."""

    analysis_service: AnalysisService
    health_profile_service: HealthProfileService
    repository: SearchHistoryRepository
    analytics_window: int = 500
    trending_window: int = 200

    async def search(  # noqa: PLR0913
        self,
        user_id: UUID,
        search_query: str,
        search_type: SearchType,
        barcode: str | None = None,
        product_name: str | None = None,
        metadata: SearchMetadata | None = None,
    ) -> SearchResult:
        """Analyze a query with the user's health context and save it."""
        record = self.health_profile_service.get_profile(user_id)
        profile = record.profile if record else None
        analysis = await self.analysis_service.analyze(
            search_query, search_type, profile
        )
        personalization = summarize_profile(profile) if profile else None
        entry = self.repository.create_entry(
            NewSearchEntry(
                user_id=user_id,
                search_type=search_type,
                search_query=search_query,
                analysis=analysis,
                barcode=barcode,
                product_name=product_name,
                user_context=(
                    {"profile": personalization.to_dict()} if personalization else {}
                ),
                metadata=metadata or SearchMetadata(),
            )
        )
        _logger.info(
            "Search saved: user_id=%s entry_id=%s fallback=%s",
            user_id,
            entry.id,
            analysis.is_fallback,
        )
        return SearchResult(entry=entry, personalization=personalization)

    def get_history(
        self, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> list[SearchHistoryRecord]:
        """Return a page of the user's search history."""
        return self.repository.list_entries(user_id, limit=limit, offset=offset)

    def submit_feedback(
        self, user_id: UUID, entry_id: UUID, feedback: SearchFeedback
    ) -> SearchHistoryRecord | None:
        """Attach feedback to one of the user's searches."""
        entry = self.repository.get_entry(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        stamped = SearchFeedback(
            rating=feedback.rating,
            helpful=feedback.helpful,
            comments=feedback.comments.strip() if feedback.comments else None,
            submitted_at=feedback.submitted_at or datetime.now(tz=UTC),
        )
        self.repository.set_feedback(entry_id, stamped)
        return self.repository.get_entry(entry_id)

    def get_analytics(self, user_id: UUID) -> SearchAnalytics:
        """Return search totals and impact distribution for a user."""
        entries = self.repository.list_entries(user_id, limit=self.analytics_window)
        distribution = {impact.value: 0 for impact in HealthImpact}
        for entry in entries:
            distribution[entry.analysis.health_impact.value] += 1
        return SearchAnalytics(
            total_searches=self.repository.count_entries(user_id),
            trending_searches=_top_queries(
                [entry.search_query for entry in entries], limit=5
            ),
            health_impact_distribution=distribution,
        )

    def get_trending(self, limit: int = 5) -> list[str]:
        """Return the most searched queries, or defaults when there are none."""
        queries = self.repository.list_recent_queries(self.trending_window)
        return _top_queries(queries, limit=limit) or DEFAULT_TRENDING[:limit]


def _top_queries(queries: list[str], limit: int) -> list[str]:
    counts = Counter(query.strip().lower() for query in queries if query.strip())
    return [query for query, _ in counts.most_common(limit)]
