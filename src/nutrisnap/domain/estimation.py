"""Models for LLM nutrition estimates."""

from pydantic import BaseModel, ConfigDict, Field


class FoodItemEstimate(BaseModel):
    """Estimated nutrition for one food item."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    name: str
    quantity: str
    calories: int = Field(ge=0)
    protein_grams: int = Field(default=0, ge=0, alias="proteinGrams")
    carbs_grams: int = Field(default=0, ge=0, alias="carbsGrams")
    fat_grams: int = Field(default=0, ge=0, alias="fatGrams")


class MealEstimate(BaseModel):
    """Structured output for a whole-meal estimate."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    total_calories: int = Field(ge=0, alias="totalCalories")
    protein_grams: int = Field(ge=0, alias="proteinGrams")
    carbs_grams: int = Field(ge=0, alias="carbsGrams")
    fat_grams: int = Field(ge=0, alias="fatGrams")
    food_items: list[FoodItemEstimate] = Field(alias="foodItems")
    health_tip: str = Field(alias="healthTip")
