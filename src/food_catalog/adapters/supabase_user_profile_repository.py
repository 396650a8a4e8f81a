"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from food_catalog.domain.user_profile import UserProfile, UserProfileRecord
from food_catalog.services.user_profiles import UserProfileRepository


@dataclass
class SupabaseUserProfileRepository(UserProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfileRecord | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("user_profiles")
            .select("user_id, profile_json, is_complete, updated_at")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(
        self, user_id: UUID, profile: UserProfile, is_complete: bool
    ) -> UserProfileRecord:
        """Create or replace a user's profile row."""
        response = (
            self.client.table("user_profiles")
            .upsert(
                {
                    "user_id": str(user_id),
                    "profile_json": profile.to_document(),
                    "is_complete": is_complete,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save user profile")
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfileRecord:
    updated_at = row.get("updated_at")
    return UserProfileRecord(
        user_id=UUID(str(row["user_id"])),
        profile=UserProfile.model_validate(row.get("profile_json") or {}),
        is_complete=bool(row.get("is_complete", False)),
        updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
    )
