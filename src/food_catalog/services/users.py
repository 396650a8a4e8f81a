"""User-related business logic."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_catalog.domain.models import UserRecord


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last active timestamp for the user."""


@dataclass
class UserService:
    """Application service for authenticated users."""

    repository: UserRepository

    def get_active_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user and record activity, or None if unknown."""
        user = self.repository.get_by_id(user_id)
        if user is None:
            return None
        self.repository.touch_last_active(user.id)
        return user
