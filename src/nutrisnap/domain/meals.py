"""Domain models for meal analyses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodItem:
    """Single food line of a meal with its estimated macros."""

    name: str
    quantity: str
    calories: int
    protein_grams: int = 0
    carbs_grams: int = 0
    fat_grams: int = 0


@dataclass(frozen=True)
class MacroTotals:
    """Aggregate calories and macros."""

    calories: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int


@dataclass(frozen=True)
class MealAnalysis:
    """A logged meal: the user's text, its itemized foods and totals."""

    id: str
    timestamp: int
    original_input: str
    total_calories: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int
    food_items: tuple[FoodItem, ...]
    health_tip: str

