"""Domain models for searches and search history."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from food_catalog.domain.analysis import SearchAnalysis, SearchType


@dataclass(frozen=True)
class SearchMetadata:
    """Request details captured with a search."""

    user_agent: str | None = None
    ip_address: str | None = None
    session_id: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "userAgent": self.user_agent,
            "ipAddress": self.ip_address,
            "sessionId": self.session_id,
        }


@dataclass(frozen=True)
class SearchFeedback:
    """User feedback on a search result."""

    rating: int | None = None
    helpful: bool | None = None
    comments: str | None = None
    submitted_at: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "rating": self.rating,
            "helpful": self.helpful,
            "comments": self.comments,
            "submittedAt": (
                self.submitted_at.isoformat() if self.submitted_at else None
            ),
        }


@dataclass(frozen=True)
class NewSearchEntry:
    """Search history entry prior to persistence."""

    user_id: UUID
    search_type: SearchType
    search_query: str
    analysis: SearchAnalysis
    barcode: str | None = None
    product_name: str | None = None
    user_context: dict[str, object] = field(default_factory=dict)
    metadata: SearchMetadata = field(default_factory=SearchMetadata)


@dataclass(frozen=True)
class SearchHistoryRecord:
    """Persisted search history entry."""

    id: UUID
    user_id: UUID
    search_type: SearchType
    search_query: str
    analysis: SearchAnalysis
    created_at: datetime
    barcode: str | None = None
    product_name: str | None = None
    user_context: dict[str, object] = field(default_factory=dict)
    metadata: SearchMetadata = field(default_factory=SearchMetadata)
    feedback: SearchFeedback | None = None

    def to_dict(self) -> dict[str, object]:
        """Return the API representation."""
        return {
            "id": str(self.id),
            "searchType": self.search_type.value,
            "searchQuery": self.search_query,
            "barcode": self.barcode,
            "productName": self.product_name,
            "nutritionalAnalysis": self.analysis.to_dict(),
            "searchMetadata": self.metadata.to_dict(),
            "feedback": self.feedback.to_dict() if self.feedback else None,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class SearchAnalytics:
    """Aggregated search statistics for a user."""

    total_searches: int
    trending_searches: list[str]
    health_impact_distribution: dict[str, int]

    def to_dict(self) -> dict[str, object]:
        return {
            "totalSearches": self.total_searches,
            "trendingSearches": list(self.trending_searches),
            "healthImpactDistribution": dict(self.health_impact_distribution),
        }
