"""User profile models."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from food_catalog.domain.health_profile import CamelModel


class PersonalInfo(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    age: int | None = Field(default=None, ge=1, le=120)
    height: float | None = Field(default=None, ge=50, le=300)
    weight: float | None = Field(default=None, ge=20, le=500)
    gender: Literal["male", "female", "other"] | None = None
    activity_level: (
        Literal[
            "sedentary",
            "lightly_active",
            "moderately_active",
            "very_active",
            "extremely_active",
        ]
        | None
    ) = None


class HealthInfo(CamelModel):
    allergies: list[str] = Field(default_factory=list)
    medical_conditions: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)


class Goals(CamelModel):
    primary_goal: (
        Literal[
            "weight_loss",
            "weight_gain",
            "muscle_building",
            "health_improvement",
            "maintenance",
        ]
        | None
    ) = None
    target_weight: float | None = Field(default=None, ge=20, le=500)
    target_date: date | None = None
    specific_goals: list[str] = Field(default_factory=list)


class Preferences(CamelModel):
    cuisine_types: list[str] = Field(default_factory=list)
    cooking_skill: Literal["beginner", "intermediate", "advanced", "expert"] | None = (
        None
    )
    budget: Literal["low", "medium", "high", "premium"] | None = None
    meal_frequency: int | None = Field(default=None, ge=1, le=10)
    preferred_meal_times: list[str] = Field(default_factory=list)


class UserProfile(CamelModel):
    """Basic account profile: personal info, health notes, goals."""

    personal_info: PersonalInfo | None = None
    health_info: HealthInfo | None = None
    goals: Goals | None = None
    preferences: Preferences | None = None

    def to_document(self) -> dict[str, object]:
        """Return the camelCase JSON document for storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def is_complete(self) -> bool:
        """Return True when personal info and a primary goal are filled in."""
        if self.personal_info is None or self.goals is None:
            return False
        info = self.personal_info
        return bool(
            info.age and info.height and info.weight and self.goals.primary_goal
        )


@dataclass(frozen=True)
class UserProfileRecord:
    """Persisted user profile."""

    user_id: UUID
    profile: UserProfile
    is_complete: bool
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        """Return the API representation."""
        return {
            "userId": str(self.user_id),
            **self.profile.to_document(),
            "isComplete": self.is_complete,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
