"""Supabase repository for health profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from food_catalog.domain.health_profile import HealthProfile, HealthProfileRecord
from food_catalog.services.health_profiles import HealthProfileRepository

_COLUMNS = "id, user_id, profile_json, version, created_at, updated_at"


@dataclass
class SupabaseHealthProfileRepository(HealthProfileRepository):
    """Supabase implementation for health profiles."""

    client: Client

    def get_by_user(self, user_id: UUID) -> HealthProfileRecord | None:
        """Return the user's health profile, if present."""
        response = (
            self.client.table("health_profiles")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def create_profile(
        self, user_id: UUID, profile: HealthProfile
    ) -> HealthProfileRecord:
        """Insert a new profile row at version 1."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("health_profiles")
            .insert(
                {
                    "user_id": str(user_id),
                    "profile_json": profile.to_document(),
                    "version": 1,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create health profile")
        return _parse_record(response.data[0])

    def update_profile(
        self, profile_id: UUID, profile: HealthProfile, version: int
    ) -> HealthProfileRecord:
        """Replace a profile document and bump its version."""
        response = (
            self.client.table("health_profiles")
            .update(
                {
                    "profile_json": profile.to_document(),
                    "version": version,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(profile_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update health profile")
        return _parse_record(response.data[0])

    def delete_by_user(self, user_id: UUID) -> bool:
        """Delete the user's profile row."""
        response = (
            self.client.table("health_profiles")
            .delete()
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_record(row: dict[str, object]) -> HealthProfileRecord:
    return HealthProfileRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        profile=HealthProfile.model_validate(row.get("profile_json") or {}),
        version=int(row.get("version", 1)),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
