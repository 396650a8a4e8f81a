"""Health profile models used to personalize analysis."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["mild", "moderate", "severe"]
AllergySeverity = Literal["mild", "moderate", "severe", "life_threatening"]
Frequency = Literal["once_daily", "twice_daily", "three_times_daily", "as_needed"]


class CamelModel(BaseModel):
    """Base model accepting camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TargetBloodSugar(CamelModel):
    fasting: float | None = None
    post_meal: float | None = None


class Diabetes(CamelModel):
    type: Literal["type1", "type2", "gestational", "prediabetes"] | None = None
    severity: Severity | None = None
    diagnosed_date: date | None = None
    medications: list[str] = Field(default_factory=list)
    target_blood_sugar: TargetBloodSugar | None = None


class Hypertension(CamelModel):
    severity: Severity | None = None
    systolic: int | None = Field(default=None, ge=70, le=250)
    diastolic: int | None = Field(default=None, ge=40, le=150)
    medications: list[str] = Field(default_factory=list)


class HeartDisease(CamelModel):
    type: Literal["coronary", "arrhythmia", "heart_failure"] | None = None
    severity: Severity | None = None
    last_event: date | None = None


class KidneyDisease(CamelModel):
    stage: Literal["1", "2", "3a", "3b", "4", "5"] | None = None
    egfr: float | None = None
    dialysis: bool = False


class DigestiveIssues(CamelModel):
    ibs: bool = False
    crohns: bool = False
    colitis: bool = False
    celiac: bool = False
    lactose_intolerant: bool = False


class Autoimmune(CamelModel):
    rheumatoid_arthritis: bool = False
    lupus: bool = False
    hashimotos: bool = False
    graves: bool = False


class HealthConditions(CamelModel):
    """Diagnosed conditions."""

    diabetes: Diabetes | None = None
    hypertension: Hypertension | None = None
    heart_disease: HeartDisease | None = None
    kidney_disease: KidneyDisease | None = None
    digestive_issues: DigestiveIssues | None = None
    autoimmune: Autoimmune | None = None


class FoodAllergy(CamelModel):
    allergen: str
    severity: AllergySeverity | None = None
    reaction: Literal["hives", "swelling", "anaphylaxis", "rash", "nausea"] | None = (
        None
    )
    last_reaction: date | None = None


class MedicationAllergy(CamelModel):
    allergen: str
    severity: AllergySeverity | None = None
    reaction: str | None = None


class Allergies(CamelModel):
    food: list[FoodAllergy] = Field(default_factory=list)
    medication: list[MedicationAllergy] = Field(default_factory=list)


class ReligiousRestrictions(CamelModel):
    halal: bool = False
    kosher: bool = False
    hindu: bool = False


class DietaryRestrictions(CamelModel):
    """Boolean diet flags."""

    vegetarian: bool = False
    vegan: bool = False
    keto: bool = False
    paleo: bool = False
    low_carb: bool = False
    low_sodium: bool = False
    low_sugar: bool = False
    gluten_free: bool = False
    dairy_free: bool = False
    religious: ReligiousRestrictions | None = None


class WeightManagement(CamelModel):
    goal: Literal["lose", "maintain", "gain"] | None = None
    target_weight: float | None = None
    current_weight: float | None = None
    timeframe: Literal["1_month", "3_months", "6_months", "1_year"] | None = None


class BloodSugarGoal(CamelModel):
    goal: Literal["control", "prevent", "reverse"] | None = None
    target_hba1c: float | None = Field(default=None, alias="targetHbA1c")
    current_hba1c: float | None = Field(default=None, alias="currentHbA1c")


class BloodPressureGoal(CamelModel):
    goal: Literal["lower", "maintain"] | None = None
    target_systolic: int | None = None
    target_diastolic: int | None = None


class CholesterolGoal(CamelModel):
    goal: Literal["lower", "maintain"] | None = None
    target_ldl: float | None = Field(default=None, alias="targetLDL")
    current_ldl: float | None = Field(default=None, alias="currentLDL")


class EnergyGoal(CamelModel):
    goal: Literal["increase", "maintain"] | None = None
    current_level: Literal["low", "moderate", "high"] | None = None


class SleepGoal(CamelModel):
    goal: Literal["improve", "maintain"] | None = None
    current_hours: float | None = None
    target_hours: float | None = None


class HealthGoals(CamelModel):
    """Targets the user is working towards."""

    weight_management: WeightManagement | None = None
    blood_sugar: BloodSugarGoal | None = None
    blood_pressure: BloodPressureGoal | None = None
    cholesterol: CholesterolGoal | None = None
    energy: EnergyGoal | None = None
    sleep: SleepGoal | None = None


class Injury(CamelModel):
    type: str | None = None
    severity: Severity | None = None
    affects_exercise: bool | None = None


class ActivityLevel(CamelModel):
    current: (
        Literal[
            "sedentary",
            "lightly_active",
            "moderately_active",
            "very_active",
            "extremely_active",
        ]
        | None
    ) = None
    exercise_frequency: Literal["none", "1-2", "3-4", "5-6", "daily"] | None = None
    exercise_type: list[str] = Field(default_factory=list)
    injuries: list[Injury] = Field(default_factory=list)


class Medication(CamelModel):
    name: str
    dosage: str | None = None
    frequency: Frequency | None = None
    purpose: (
        Literal[
            "diabetes",
            "blood_pressure",
            "heart_disease",
            "cholesterol",
            "pain",
            "other",
        ]
        | None
    ) = None
    interactions: list[str] = Field(default_factory=list)


class Supplement(CamelModel):
    name: str
    dosage: str | None = None
    frequency: Frequency | None = None
    purpose: str | None = None


class TimeConstraints(CamelModel):
    meal_prep: bool | None = None
    quick_meals: bool | None = None
    cooking_time: (
        Literal["15_minutes", "30_minutes", "45_minutes", "1_hour", "flexible"] | None
    ) = None


class Accessibility(CamelModel):
    grocery_stores: list[str] = Field(default_factory=list)
    online_shopping: bool | None = None
    delivery: bool | None = None


class FoodPreferences(CamelModel):
    cuisine: list[str] = Field(default_factory=list)
    cooking_skill: Literal["beginner", "intermediate", "advanced"] | None = None
    time_constraints: TimeConstraints | None = None
    budget: Literal["low", "medium", "high"] | None = None
    accessibility: Accessibility | None = None


class HealthProfile(CamelModel):
    """A user's health context. Every section is optional."""

    health_conditions: HealthConditions | None = None
    allergies: Allergies | None = None
    dietary_restrictions: DietaryRestrictions | None = None
    health_goals: HealthGoals | None = None
    activity_level: ActivityLevel | None = None
    medications: list[Medication] = Field(default_factory=list)
    supplements: list[Supplement] = Field(default_factory=list)
    preferences: FoodPreferences | None = None

    def to_document(self) -> dict[str, object]:
        """Return the camelCase JSON document for storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class HealthProfileRecord:
    """Persisted health profile with versioning metadata."""

    id: UUID
    user_id: UUID
    profile: HealthProfile
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        """Return the API representation."""
        return {
            "id": str(self.id),
            "userId": str(self.user_id),
            **self.profile.to_document(),
            "version": self.version,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class HealthProfileSummary:
    """Flattened profile tags used for personalization."""

    conditions: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    medications: list[str] = field(default_factory=list)
    activity_level: str = "unknown"

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase JSON shape."""
        return {
            "conditions": list(self.conditions),
            "allergies": list(self.allergies),
            "restrictions": list(self.restrictions),
            "goals": list(self.goals),
            "medications": list(self.medications),
            "activityLevel": self.activity_level,
        }
