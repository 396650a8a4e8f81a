"""Health profile management and personalization summaries."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic.alias_generators import to_camel

from food_catalog.domain.health_profile import (
    HealthProfile,
    HealthProfileRecord,
    HealthProfileSummary,
)

_logger = logging.getLogger(__name__)


class HealthProfileRepository(Protocol):
    """Persistence interface for health profiles."""

    def get_by_user(self, user_id: UUID) -> HealthProfileRecord | None:
        """Return the user's health profile, if present."""

    def create_profile(
        self, user_id: UUID, profile: HealthProfile
    ) -> HealthProfileRecord:
        """Create and return a version 1 profile."""

    def update_profile(
        self, profile_id: UUID, profile: HealthProfile, version: int
    ) -> HealthProfileRecord:
        """Replace the stored profile document and version."""

    def delete_by_user(self, user_id: UUID) -> bool:
        """Delete the user's profile; return False when none existed."""


@dataclass
class HealthProfileService:
    """Service for health profile CRUD."""

    repository: HealthProfileRepository

    def save_profile(
        self, user_id: UUID, profile: HealthProfile
    ) -> tuple[HealthProfileRecord, bool]:
        """Create or replace a profile. Returns the record and a created flag."""
        existing = self.repository.get_by_user(user_id)
        if existing is None:
            record = self.repository.create_profile(user_id, profile)
            _logger.info(
                "Health profile created: user_id=%s profile_id=%s", user_id, record.id
            )
            return record, True
        record = self.repository.update_profile(
            existing.id, profile, existing.version + 1
        )
        _logger.info(
            "Health profile replaced: user_id=%s version=%s", user_id, record.version
        )
        return record, False

    def get_profile(self, user_id: UUID) -> HealthProfileRecord | None:
        """Return the stored profile for a user."""
        return self.repository.get_by_user(user_id)

    def update_profile(
        self, user_id: UUID, updates: HealthProfile
    ) -> HealthProfileRecord | None:
        """Replace only the sections present in the update payload."""
        existing = self.repository.get_by_user(user_id)
        if existing is None:
            return None
        changed = {name: getattr(updates, name) for name in updates.model_fields_set}
        merged = existing.profile.model_copy(update=changed)
        record = self.repository.update_profile(
            existing.id, merged, existing.version + 1
        )
        _logger.info(
            "Health profile updated: user_id=%s version=%s fields=%s",
            user_id,
            record.version,
            sorted(changed),
        )
        return record

    def delete_profile(self, user_id: UUID) -> bool:
        """Delete the user's profile."""
        deleted = self.repository.delete_by_user(user_id)
        if deleted:
            _logger.info("Health profile deleted: user_id=%s", user_id)
        return deleted

    def get_summary(self, user_id: UUID) -> HealthProfileSummary | None:
        """Return a personalization summary for a user's profile."""
        record = self.repository.get_by_user(user_id)
        if record is None:
            return None
        return summarize_profile(record.profile)


def summarize_profile(profile: HealthProfile) -> HealthProfileSummary:
    """Flatten a health profile into tags for personalization."""
    conditions: list[str] = []
    health = profile.health_conditions
    if health:
        if health.diabetes and health.diabetes.type:
            conditions.append(f"diabetes_{health.diabetes.type}")
        if health.hypertension and health.hypertension.severity:
            conditions.append(f"hypertension_{health.hypertension.severity}")
        if health.heart_disease and health.heart_disease.type:
            conditions.append(f"heart_disease_{health.heart_disease.type}")
        if health.kidney_disease and health.kidney_disease.stage:
            conditions.append(f"kidney_disease_stage_{health.kidney_disease.stage}")

    allergies = []
    if profile.allergies:
        allergies = [
            f"{allergy.allergen}_{allergy.severity or 'unknown'}"
            for allergy in profile.allergies.food
        ]

    restrictions: list[str] = []
    if profile.dietary_restrictions:
        restrictions = [
            to_camel(name)
            for name, value in profile.dietary_restrictions
            if value is True
        ]

    goals: list[str] = []
    health_goals = profile.health_goals
    if health_goals:
        if health_goals.weight_management and health_goals.weight_management.goal:
            goals.append(f"weight_{health_goals.weight_management.goal}")
        if health_goals.blood_sugar and health_goals.blood_sugar.goal:
            goals.append(f"blood_sugar_{health_goals.blood_sugar.goal}")
        if health_goals.blood_pressure and health_goals.blood_pressure.goal:
            goals.append(f"blood_pressure_{health_goals.blood_pressure.goal}")

    medications = [
        f"{med.name}_{med.purpose or 'other'}" for med in profile.medications
    ]
    activity = profile.activity_level
    activity_level = activity.current if activity and activity.current else None
    return HealthProfileSummary(
        conditions=conditions,
        allergies=allergies,
        restrictions=restrictions,
        goals=goals,
        medications=medications,
        activity_level=activity_level or "unknown",
    )
