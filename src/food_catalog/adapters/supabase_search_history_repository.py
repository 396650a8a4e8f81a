"""Supabase repository for search history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from food_catalog.domain.analysis import SearchAnalysis, SearchType
from food_catalog.domain.search import (
    NewSearchEntry,
    SearchFeedback,
    SearchHistoryRecord,
    SearchMetadata,
)
from food_catalog.services.search import SearchHistoryRepository

_COLUMNS = (
    "id, user_id, search_type, search_query, barcode, product_name, "
    "analysis_json, user_context_json, metadata_json, feedback_json, created_at"
)


@dataclass
class SupabaseSearchHistoryRepository(SearchHistoryRepository):
    """Supabase implementation for search history."""

    client: Client

    def create_entry(self, entry: NewSearchEntry) -> SearchHistoryRecord:
        """Insert a search history row."""
        response = (
            self.client.table("search_history")
            .insert(
                {
                    "user_id": str(entry.user_id),
                    "search_type": entry.search_type.value,
                    "search_query": entry.search_query.strip(),
                    "barcode": entry.barcode,
                    "product_name": entry.product_name,
                    "analysis_json": entry.analysis.to_dict(),
                    "user_context_json": entry.user_context,
                    "metadata_json": entry.metadata.to_dict(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create search history entry")
        return _parse_entry(response.data[0])

    def get_entry(self, entry_id: UUID) -> SearchHistoryRecord | None:
        """Return a search history entry by id."""
        response = (
            self.client.table("search_history")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_entries(
        self, user_id: UUID, limit: int, offset: int = 0
    ) -> list[SearchHistoryRecord]:
        """Return a user's searches, newest first."""
        response = (
            self.client.table("search_history")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def count_entries(self, user_id: UUID) -> int:
        """Return the number of searches for a user."""
        response = (
            self.client.table("search_history")
            .select("id", count="exact")
            .eq("user_id", str(user_id))
            .execute()
        )
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])

    def list_recent_queries(self, limit: int) -> list[str]:
        """Return recent queries across all users."""
        response = (
            self.client.table("search_history")
            .select("search_query")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [str(row.get("search_query", "")) for row in response.data or []]

    def set_feedback(self, entry_id: UUID, feedback: SearchFeedback) -> None:
        """Store feedback on a search entry."""
        self.client.table("search_history").update(
            {"feedback_json": feedback.to_dict()}
        ).eq("id", str(entry_id)).execute()


def _parse_entry(row: dict[str, object]) -> SearchHistoryRecord:
    metadata = row.get("metadata_json") or {}
    feedback = row.get("feedback_json")
    return SearchHistoryRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        search_type=SearchType(row["search_type"]),
        search_query=str(row.get("search_query", "")),
        analysis=SearchAnalysis.from_dict(row.get("analysis_json") or {}),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        barcode=row.get("barcode"),
        product_name=row.get("product_name"),
        user_context=row.get("user_context_json") or {},
        metadata=SearchMetadata(
            user_agent=metadata.get("userAgent"),
            ip_address=metadata.get("ipAddress"),
            session_id=metadata.get("sessionId"),
        ),
        feedback=_parse_feedback(feedback) if feedback else None,
    )


def _parse_feedback(data: dict[str, object]) -> SearchFeedback:
    submitted_at = data.get("submittedAt")
    return SearchFeedback(
        rating=data.get("rating"),
        helpful=data.get("helpful"),
        comments=data.get("comments"),
        submitted_at=datetime.fromisoformat(submitted_at) if submitted_at else None,
    )
