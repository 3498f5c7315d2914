"""Nutrition estimation service using LLMs."""

from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import ValidationError

from nutrisnap.domain.errors import ParseError
from nutrisnap.domain.estimation import FoodItemEstimate, MealEstimate

_ModelT = TypeVar("_ModelT", MealEstimate, FoodItemEstimate)

SYSTEM_PROMPT = (
    "You are an expert nutritionist. Your goal is to provide accurate calorie "
    "and macronutrient estimates based on vague or detailed user descriptions. "
    "If the input is nonsense or not food, return 0 for all values and a polite "
    "message in the healthTip."
)

FOOD_ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "quantity": {
            "type": "string",
            "description": "e.g., '2 patties', '100g', '1 slice'",
        },
        "calories": {"type": "integer", "minimum": 0},
        "proteinGrams": {"type": "integer", "minimum": 0},
        "carbsGrams": {"type": "integer", "minimum": 0},
        "fatGrams": {"type": "integer", "minimum": 0},
    },
    "required": [
        "name",
        "quantity",
        "calories",
        "proteinGrams",
        "carbsGrams",
        "fatGrams",
    ],
    "additionalProperties": False,
}

MEAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "totalCalories": {
            "type": "integer",
            "minimum": 0,
            "description": "Total estimated calories for the entire meal",
        },
        "proteinGrams": {"type": "integer", "minimum": 0},
        "carbsGrams": {"type": "integer", "minimum": 0},
        "fatGrams": {"type": "integer", "minimum": 0},
        "foodItems": {
            "type": "array",
            "description": "Breakdown of individual food items identified",
            "items": FOOD_ITEM_SCHEMA,
        },
        "healthTip": {
            "type": "string",
            "description": "A short, actionable health tip (max 20 words).",
        },
    },
    "required": [
        "totalCalories",
        "proteinGrams",
        "carbsGrams",
        "fatGrams",
        "foodItems",
        "healthTip",
    ],
    "additionalProperties": False,
}


class EstimationClient(Protocol):
    """Interface for LLM structured estimation."""

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
        """Return structured estimation data."""


@dataclass
class EstimationService:
    """Service that prepares estimation prompts and validates results."""

    client: EstimationClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def estimate_meal(self, text: str) -> MealEstimate:
        """Estimate calories and macros for a free-text meal description."""
        prompt = (
            "Analyze the following meal description and estimate the nutritional "
            "content. Make reasonable assumptions for portion sizes if not "
            f'specified.\nInput: "{text}"'
        )
        raw = await self._estimate(prompt, MEAL_SCHEMA, "meal_estimate")
        return _validate(MealEstimate, raw)

    async def estimate_item(self, name: str, quantity: str) -> FoodItemEstimate:
        """Estimate calories and macros for one food item and quantity."""
        prompt = (
            "Estimate the nutritional content of this single food item.\n"
            f'Food: "{name}"\nQuantity: "{quantity}"\n'
            "Return the food name and the quantity as given."
        )
        raw = await self._estimate(prompt, FOOD_ITEM_SCHEMA, "food_item_estimate")
        return _validate(FoodItemEstimate, raw)

    async def _estimate(
        self, prompt: str, schema: dict[str, object], schema_name: str
    ) -> dict[str, object]:
        return await self.client.estimate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            system_prompt=SYSTEM_PROMPT,
            prompt=prompt,
            schema=schema,
            schema_name=schema_name,
        )


def _validate(model: type[_ModelT], raw: object) -> _ModelT:
    """Validate a raw payload, mapping schema mismatches to ParseError."""
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise ParseError from exc
