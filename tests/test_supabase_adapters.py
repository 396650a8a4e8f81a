"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from food_catalog.adapters.supabase_health_profile_repository import (
    SupabaseHealthProfileRepository,
)
from food_catalog.adapters.supabase_search_history_repository import (
    SupabaseSearchHistoryRepository,
)
from food_catalog.adapters.supabase_user_profile_repository import (
    SupabaseUserProfileRepository,
)
from food_catalog.adapters.supabase_user_repository import SupabaseUserRepository
from food_catalog.domain.analysis import HealthImpact, SearchType
from food_catalog.domain.health_profile import HealthProfile
from food_catalog.domain.search import NewSearchEntry, SearchFeedback
from food_catalog.domain.user_profile import UserProfile
from food_catalog.services.analysis import fallback_analysis


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None
    count: int | None = None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_range: tuple[int, int] | None = None
    last_on_conflict: str | None = None
    count: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args: str, count: str | None = None) -> "FakeTable":
        self._action = "select"
        self._count_requested = count is not None
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload: object, on_conflict: str = "") -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def range(self, start: int, end: int) -> "FakeTable":
        self.last_range = (start, end)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        if action == "select" and getattr(self, "_count_requested", False):
            return FakeResponse(data=data, count=self.count)
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _history_row(user_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": user_id,
        "search_type": "ingredient",
        "search_query": "kale",
        "barcode": None,
        "product_name": None,
        "analysis_json": fallback_analysis("kale").to_dict(),
        "user_context_json": {},
        "metadata_json": {"userAgent": "pytest", "ipAddress": "1.2.3.4"},
        "feedback_json": None,
        "created_at": datetime.now(tz=UTC).isoformat(),
    }
    row.update(overrides)
    return row


def test_supabase_user_repository_lookup() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = str(uuid4())
    users_table.queue("select", [{"id": user_id, "email": "a@example.com"}])

    repository = SupabaseUserRepository(client)
    fetched = repository.get_by_id(uuid4())
    missing = repository.get_by_id(uuid4())
    repository.touch_last_active(uuid4())

    assert fetched is not None
    assert str(fetched.id) == user_id
    assert fetched.email == "a@example.com"
    assert missing is None
    assert isinstance(users_table.last_payload, dict)
    assert "last_active_at" in users_table.last_payload


def test_supabase_user_profile_repository_upsert() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_profiles")
    user_id = str(uuid4())
    table.queue(
        "upsert",
        [
            {
                "user_id": user_id,
                "profile_json": {"personalInfo": {"age": 30}},
                "is_complete": False,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ],
    )

    repository = SupabaseUserProfileRepository(client)
    profile = UserProfile.model_validate({"personalInfo": {"age": 30}})
    record = repository.upsert_profile(uuid4(), profile, is_complete=False)

    assert table.last_on_conflict == "user_id"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["profile_json"] == {"personalInfo": {"age": 30}}
    assert record.profile.personal_info is not None
    assert record.profile.personal_info.age == 30
    assert repository.get_profile(uuid4()) is None


def test_supabase_health_profile_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("health_profiles")
    profile_id = str(uuid4())
    user_id = str(uuid4())
    row = {
        "id": profile_id,
        "user_id": user_id,
        "profile_json": {"dietaryRestrictions": {"vegan": True}},
        "version": 1,
        "created_at": datetime.now(tz=UTC).isoformat(),
        "updated_at": datetime.now(tz=UTC).isoformat(),
    }
    table.queue("insert", [row])
    table.queue("update", [{**row, "version": 2}])
    table.queue("delete", [row])

    repository = SupabaseHealthProfileRepository(client)
    profile = HealthProfile.model_validate({"dietaryRestrictions": {"vegan": True}})
    created = repository.create_profile(uuid4(), profile)
    updated = repository.update_profile(created.id, profile, version=2)

    assert created.version == 1
    assert created.profile.dietary_restrictions is not None
    assert created.profile.dietary_restrictions.vegan is True
    assert updated.version == 2
    assert ("id", profile_id) in table.last_filters
    assert repository.delete_by_user(created.user_id) is True
    assert repository.delete_by_user(created.user_id) is False


def test_supabase_search_history_repository_create_and_list() -> None:
    client = FakeSupabaseClient()
    table = client.table("search_history")
    user_id = uuid4()
    row = _history_row(str(user_id))
    table.queue("insert", [row])
    table.queue("select", [row, _history_row(str(user_id), search_query="rice")])

    repository = SupabaseSearchHistoryRepository(client)
    created = repository.create_entry(
        NewSearchEntry(
            user_id=user_id,
            search_type=SearchType.INGREDIENT,
            search_query="  kale ",
            analysis=fallback_analysis("kale"),
        )
    )
    listed = repository.list_entries(user_id, limit=10, offset=20)

    assert isinstance(table.last_payload, dict)
    assert table.last_payload["search_query"] == "kale"
    assert table.last_payload["analysis_json"]["isFallback"] is True
    assert created.analysis.health_impact is HealthImpact.NEUTRAL
    assert created.metadata.user_agent == "pytest"
    assert [entry.search_query for entry in listed] == ["kale", "rice"]
    assert table.last_range == (20, 29)


def test_supabase_search_history_repository_count_and_feedback() -> None:
    client = FakeSupabaseClient()
    table = client.table("search_history")
    table.count = 7
    submitted_at = datetime.now(tz=UTC)
    row = _history_row(
        str(uuid4()),
        feedback_json={
            "rating": 4,
            "helpful": True,
            "comments": "nice",
            "submittedAt": submitted_at.isoformat(),
        },
    )
    table.queue("select", [{"id": row["id"]}])
    table.queue("select", [row])
    table.queue("select", [{"search_query": "kale"}, {"search_query": "Rice"}])

    repository = SupabaseSearchHistoryRepository(client)

    assert repository.count_entries(uuid4()) == 7
    entry = repository.get_entry(uuid4())
    assert entry is not None
    assert entry.feedback is not None
    assert entry.feedback.rating == 4
    assert entry.feedback.submitted_at == submitted_at
    assert repository.list_recent_queries(10) == ["kale", "Rice"]

    repository.set_feedback(entry.id, SearchFeedback(rating=5))
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["feedback_json"]["rating"] == 5
