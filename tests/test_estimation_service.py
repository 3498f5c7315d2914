"""Tests for the estimation service."""

import asyncio

import pytest

from nutrisnap.domain.errors import ParseError
from nutrisnap.services.estimation import FOOD_ITEM_SCHEMA, MEAL_SCHEMA, SYSTEM_PROMPT
from tests.conftest import FakeEstimationClient, item_payload, make_service


def test_estimate_meal_returns_structured_meal() -> None:
    client = FakeEstimationClient()
    service = make_service(client)

    result = asyncio.run(service.estimate_meal("2 eggs and toast"))

    assert result.total_calories == 300
    assert [item.name for item in result.food_items] == ["eggs", "toast"]
    assert result.food_items[0].protein_grams == 12
    schema_name, prompt = client.calls[0]
    assert schema_name == "meal_estimate"
    assert '"2 eggs and toast"' in prompt


def test_estimate_item_returns_single_item() -> None:
    client = FakeEstimationClient(items=[item_payload("apple", "1 medium", 95)])
    service = make_service(client)

    result = asyncio.run(service.estimate_item("apple", "1 medium"))

    assert result.calories == 95
    assert result.quantity == "1 medium"


def test_non_food_zero_response_is_valid() -> None:
    client = FakeEstimationClient(
        meal={
            "totalCalories": 0,
            "proteinGrams": 0,
            "carbsGrams": 0,
            "fatGrams": 0,
            "foodItems": [],
            "healthTip": "That doesn't sound like food.",
        }
    )
    service = make_service(client)

    result = asyncio.run(service.estimate_meal("a bicycle"))

    assert result.total_calories == 0
    assert result.food_items == []


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "apple"},
        {"name": "apple", "quantity": "1", "calories": -5},
        {"name": "apple", "quantity": "1", "calories": "many"},
        {"name": "apple", "quantity": "1", "calories": "300"},
    ],
)
def test_estimate_item_rejects_malformed_payload(payload: dict[str, object]) -> None:
    service = make_service(FakeEstimationClient(items=[payload]))

    with pytest.raises(ParseError):
        asyncio.run(service.estimate_item("apple", "1"))


def test_schemas_require_every_property() -> None:
    for schema in (MEAL_SCHEMA, FOOD_ITEM_SCHEMA):
        assert set(schema["required"]) == set(schema["properties"])  # type: ignore[arg-type]
        assert schema["additionalProperties"] is False
    assert "not food" in SYSTEM_PROMPT
