"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import jwt
import pytest

from food_catalog.config import Settings
from food_catalog.containers import AppContainer
from food_catalog.domain.health_profile import HealthProfile, HealthProfileRecord
from food_catalog.domain.models import UserRecord
from food_catalog.domain.search import (
    NewSearchEntry,
    SearchFeedback,
    SearchHistoryRecord,
)
from food_catalog.domain.user_profile import UserProfile, UserProfileRecord
from food_catalog.services.analysis import AnalysisService, GenerativeClient
from food_catalog.services.health_profiles import (
    HealthProfileRepository,
    HealthProfileService,
)
from food_catalog.services.search import SearchHistoryRepository, SearchService
from food_catalog.services.user_profiles import (
    UserProfileRepository,
    UserProfileService,
)
from food_catalog.services.users import UserRepository, UserService

GREEK_YOGURT_JSON = (
    '{"healthImpact":"positive","score":82,'
    '"analysis":"Greek yogurt is a good protein source.",'
    '"recommendations":["Pair with fruit"],"warnings":[],'
    '"benefits":["High in protein"],'
    '"nutritionalFacts":{"calories":"About 120 per serving",'
    '"macros":"Mostly protein","keyNutrients":["Calcium","Protein"]},'
    '"simpleSummary":"A healthy protein-rich snack."}'
)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)
    touched: list[UUID] = field(default_factory=list)

    def add_user(self, email: str | None = "user@example.com") -> UserRecord:
        user = UserRecord(id=uuid4(), email=email)
        self.users[user.id] = user
        return user

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    def touch_last_active(self, user_id: UUID) -> None:
        self.touched.append(user_id)


@dataclass
class InMemoryUserProfileRepository(UserProfileRepository):
    """In-memory user profile repository for tests."""

    profiles: dict[UUID, UserProfileRecord] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfileRecord | None:
        return self.profiles.get(user_id)

    def upsert_profile(
        self, user_id: UUID, profile: UserProfile, is_complete: bool
    ) -> UserProfileRecord:
        record = UserProfileRecord(
            user_id=user_id,
            profile=profile,
            is_complete=is_complete,
            updated_at=datetime.now(tz=UTC),
        )
        self.profiles[user_id] = record
        return record


@dataclass
class InMemoryHealthProfileRepository(HealthProfileRepository):
    """In-memory health profile repository for tests."""

    records: dict[UUID, HealthProfileRecord] = field(default_factory=dict)

    def get_by_user(self, user_id: UUID) -> HealthProfileRecord | None:
        return self.records.get(user_id)

    def create_profile(
        self, user_id: UUID, profile: HealthProfile
    ) -> HealthProfileRecord:
        now = datetime.now(tz=UTC)
        record = HealthProfileRecord(
            id=uuid4(),
            user_id=user_id,
            profile=profile,
            version=1,
            created_at=now,
            updated_at=now,
        )
        self.records[user_id] = record
        return record

    def update_profile(
        self, profile_id: UUID, profile: HealthProfile, version: int
    ) -> HealthProfileRecord:
        current = next(
            record for record in self.records.values() if record.id == profile_id
        )
        record = HealthProfileRecord(
            id=current.id,
            user_id=current.user_id,
            profile=profile,
            version=version,
            created_at=current.created_at,
            updated_at=datetime.now(tz=UTC),
        )
        self.records[current.user_id] = record
        return record

    def delete_by_user(self, user_id: UUID) -> bool:
        return self.records.pop(user_id, None) is not None


@dataclass
class InMemorySearchHistoryRepository(SearchHistoryRepository):
    """In-memory search history repository for tests."""

    entries: list[SearchHistoryRecord] = field(default_factory=list)
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    def create_entry(self, entry: NewSearchEntry) -> SearchHistoryRecord:
        # Keep insertion order strictly increasing in time.
        created_at = self.clock() + timedelta(microseconds=len(self.entries))
        record = SearchHistoryRecord(
            id=uuid4(),
            user_id=entry.user_id,
            search_type=entry.search_type,
            search_query=entry.search_query,
            analysis=entry.analysis,
            created_at=created_at,
            barcode=entry.barcode,
            product_name=entry.product_name,
            user_context=entry.user_context,
            metadata=entry.metadata,
        )
        self.entries.append(record)
        return record

    def get_entry(self, entry_id: UUID) -> SearchHistoryRecord | None:
        return next((entry for entry in self.entries if entry.id == entry_id), None)

    def list_entries(
        self, user_id: UUID, limit: int, offset: int = 0
    ) -> list[SearchHistoryRecord]:
        owned = [entry for entry in self.entries if entry.user_id == user_id]
        owned.sort(key=lambda entry: entry.created_at, reverse=True)
        return owned[offset : offset + limit]

    def count_entries(self, user_id: UUID) -> int:
        return sum(1 for entry in self.entries if entry.user_id == user_id)

    def list_recent_queries(self, limit: int) -> list[str]:
        ordered = sorted(self.entries, key=lambda entry: entry.created_at, reverse=True)
        return [entry.search_query for entry in ordered[:limit]]

    def set_feedback(self, entry_id: UUID, feedback: SearchFeedback) -> None:
        for index, entry in enumerate(self.entries):
            if entry.id == entry_id:
                self.entries[index] = SearchHistoryRecord(
                    id=entry.id,
                    user_id=entry.user_id,
                    search_type=entry.search_type,
                    search_query=entry.search_query,
                    analysis=entry.analysis,
                    created_at=entry.created_at,
                    barcode=entry.barcode,
                    product_name=entry.product_name,
                    user_context=entry.user_context,
                    metadata=entry.metadata,
                    feedback=feedback,
                )


@dataclass
class FakeGenerativeClient(GenerativeClient):
    """Fake model client returning fixed text or raising an error."""

    text: str = GREEK_YOGURT_JSON
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def make_token(
    settings: Settings, user_id: UUID, claim: str = "id", **extra: object
) -> str:
    """Sign a bearer token for the given user id."""
    payload = {claim: str(user_id), **extra}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def auth_headers(settings: Settings, user: UserRecord) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(settings, user.id)}"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        jwt_secret="test-secret-with-enough-length-for-hs256",
        gemini_api_key="gemini-key",
        environment="test",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def generative_client() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def search_repository() -> InMemorySearchHistoryRepository:
    return InMemorySearchHistoryRepository()


@pytest.fixture
def container(
    settings: Settings,
    user_repository: InMemoryUserRepository,
    generative_client: FakeGenerativeClient,
    search_repository: InMemorySearchHistoryRepository,
) -> AppContainer:
    health_profile_service = HealthProfileService(InMemoryHealthProfileRepository())
    analysis_service = AnalysisService(client=generative_client, timeout_seconds=5)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=UserService(user_repository),
        user_profile_service=UserProfileService(InMemoryUserProfileRepository()),
        health_profile_service=health_profile_service,
        analysis_service=analysis_service,
        search_service=SearchService(
            analysis_service=analysis_service,
            health_profile_service=health_profile_service,
            repository=search_repository,
        ),
        close_resources=close_resources,
    )
