"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from nutrisnap.config import Settings
from nutrisnap.containers import AppContainer, wire_container
from nutrisnap.domain.session import AppState
from nutrisnap.services.estimation import EstimationClient, EstimationService
from nutrisnap.services.ledger import GuestHistory, MealLedger
from nutrisnap.services.reconciliation import MealReconciliationEngine
from nutrisnap.services.storage import InMemoryKeyValueStore

FIXED_NOW = datetime(2024, 5, 10, 14, 30, tzinfo=UTC)


def meal_payload() -> dict[str, object]:
    return {
        "totalCalories": 300,
        "proteinGrams": 18,
        "carbsGrams": 24,
        "fatGrams": 14,
        "foodItems": [
            {
                "name": "eggs",
                "quantity": "2 large",
                "calories": 150,
                "proteinGrams": 12,
                "carbsGrams": 2,
                "fatGrams": 10,
            },
            {
                "name": "toast",
                "quantity": "1 slice",
                "calories": 150,
                "proteinGrams": 6,
                "carbsGrams": 22,
                "fatGrams": 4,
            },
        ],
        "healthTip": "Add some fruit for fiber.",
    }


def item_payload(
    name: str = "orange juice",
    quantity: str = "1 glass",
    calories: int = 110,
    protein: int = 2,
    carbs: int = 26,
    fat: int = 0,
) -> dict[str, object]:
    return {
        "name": name,
        "quantity": quantity,
        "calories": calories,
        "proteinGrams": protein,
        "carbsGrams": carbs,
        "fatGrams": fat,
    }


@dataclass
class FakeEstimationClient(EstimationClient):
    """Fake estimation client returning canned payloads."""

    meal: dict[str, object] = field(default_factory=meal_payload)
    items: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        self.calls.append((schema_name, prompt))
        if self.error is not None:
            raise self.error
        if schema_name == "meal_estimate":
            return self.meal
        if self.items:
            return self.items.pop(0)
        return item_payload()


def make_service(client: EstimationClient) -> EstimationService:
    return EstimationService(
        client=client, model="gpt-5.2", reasoning_effort="low", store=False
    )


def make_engine(
    client: EstimationClient | None = None,
    store: InMemoryKeyValueStore | None = None,
    state: AppState | None = None,
    clock: Callable[[], datetime] = lambda: FIXED_NOW,
) -> MealReconciliationEngine:
    resolved_store = store if store is not None else InMemoryKeyValueStore()
    return MealReconciliationEngine(
        state=state or AppState(),
        estimation_service=make_service(client or FakeEstimationClient()),
        ledger=MealLedger(resolved_store),
        guest_history=GuestHistory(resolved_store),
        clock=clock,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        storage_backend="memory",
        password_iterations=1000,
        environment="test",
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def estimation_client() -> FakeEstimationClient:
    return FakeEstimationClient()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryKeyValueStore,
    estimation_client: FakeEstimationClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return wire_container(
        settings, store, make_service(estimation_client), close_resources
    )
