"""User profile service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_catalog.domain.user_profile import UserProfile, UserProfileRecord


class UserProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfileRecord | None:
        """Return the stored profile for a user."""

    def upsert_profile(
        self, user_id: UUID, profile: UserProfile, is_complete: bool
    ) -> UserProfileRecord:
        """Create or replace a user's profile."""


@dataclass
class UserProfileService:
    """Service for the basic account profile."""

    repository: UserProfileRepository

    def get_profile(self, user_id: UUID) -> UserProfileRecord | None:
        """Return the user's profile, if any."""
        return self.repository.get_profile(user_id)

    def update_profile(self, user_id: UUID, updates: UserProfile) -> UserProfileRecord:
        """Merge provided sections into the stored profile."""
        existing = self.repository.get_profile(user_id)
        current = existing.profile if existing else UserProfile()
        changed = {name: getattr(updates, name) for name in updates.model_fields_set}
        merged = current.model_copy(update=changed)
        return self.repository.upsert_profile(
            user_id, merged, is_complete=merged.is_complete()
        )
