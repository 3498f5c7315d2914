"""Durable meal storage on top of the key-value store."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import uuid4

from nutrisnap.domain.errors import StorageCorruptionError
from nutrisnap.domain.meals import FoodItem, MealAnalysis
from nutrisnap.services.storage import KeyValueStore

SCHEMA_VERSION = 1
GUEST_HISTORY_KEY = "nutrisnap_history"

_logger = logging.getLogger(__name__)

_MACRO_KEYS = ("proteinGrams", "carbsGrams", "fatGrams")


def ledger_key(username: str) -> str:
    """Return the storage key holding a user's meals."""
    return f"nutrisnap_data_{username.lower()}"


@dataclass
class MealLedger:
    """Per-user meal records, one serialized blob per user."""

    store: KeyValueStore

    def fetch(self, username: str) -> list[MealAnalysis]:
        """Return the user's meals, or an empty list if missing or corrupt."""
        return _load_blob(self.store, ledger_key(username))

    def upsert(self, username: str, meal: MealAnalysis) -> None:
        """Replace the meal in place if its id is stored, else prepend it."""
        meals = self.fetch(username)
        for index, existing in enumerate(meals):
            if existing.id == meal.id:
                meals[index] = meal
                break
        else:
            meals.insert(0, meal)
        _save_blob(self.store, ledger_key(username), meals)

    def remove(self, username: str, meal_id: str) -> None:
        """Drop a meal from the user's ledger."""
        meals = [meal for meal in self.fetch(username) if meal.id != meal_id]
        _save_blob(self.store, ledger_key(username), meals)


@dataclass
class GuestHistory:
    """History kept for a visitor who is not logged in."""

    store: KeyValueStore

    def load(self) -> list[MealAnalysis]:
        """Return the stored guest history."""
        return _load_blob(self.store, GUEST_HISTORY_KEY)

    def save(self, meals: list[MealAnalysis]) -> None:
        """Overwrite the stored guest history."""
        _save_blob(self.store, GUEST_HISTORY_KEY, meals)


def meal_to_dict(meal: MealAnalysis) -> dict[str, object]:
    """Serialize a meal using the front end's field names."""
    return {
        "id": meal.id,
        "timestamp": meal.timestamp,
        "originalInput": meal.original_input,
        "totalCalories": meal.total_calories,
        "proteinGrams": meal.protein_grams,
        "carbsGrams": meal.carbs_grams,
        "fatGrams": meal.fat_grams,
        "foodItems": [_item_to_dict(item) for item in meal.food_items],
        "healthTip": meal.health_tip,
    }


def meal_from_dict(row: dict[str, object]) -> MealAnalysis:
    """Parse a serialized meal, raising StorageCorruptionError on bad data."""
    try:
        items = row.get("foodItems") or []
        if not isinstance(items, list):
            raise TypeError("foodItems must be a list")
        return MealAnalysis(
            id=str(row["id"]),
            timestamp=int(row["timestamp"]),
            original_input=str(row.get("originalInput", "")),
            total_calories=int(row.get("totalCalories", 0)),
            protein_grams=int(row.get("proteinGrams", 0)),
            carbs_grams=int(row.get("carbsGrams", 0)),
            fat_grams=int(row.get("fatGrams", 0)),
            food_items=tuple(_item_from_dict(item) for item in items),
            health_tip=str(row.get("healthTip", "")),
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        raise StorageCorruptionError(f"Invalid meal record: {exc}") from exc


def decode_meals(raw: str) -> tuple[list[MealAnalysis], bool]:
    """Decode a stored blob, applying forward migrations.

    Returns the meals and whether any migration changed the stored form.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise StorageCorruptionError("Stored meals are not valid JSON") from exc

    if isinstance(payload, list):
        version, rows = 0, payload
    elif isinstance(payload, dict) and isinstance(payload.get("meals"), list):
        version, rows = payload.get("version", 0), payload["meals"]
    else:
        raise StorageCorruptionError("Stored meals have an unknown layout")
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise StorageCorruptionError(f"Unsupported meals version: {version}")

    migrated = version < SCHEMA_VERSION
    for step in _MIGRATIONS[version:]:
        rows = step(rows)
    return [meal_from_dict(row) for row in rows], migrated


def encode_meals(meals: list[MealAnalysis]) -> str:
    """Serialize meals with the current schema version tag."""
    return json.dumps(
        {"version": SCHEMA_VERSION, "meals": [meal_to_dict(meal) for meal in meals]}
    )


def _load_blob(store: KeyValueStore, key: str) -> list[MealAnalysis]:
    raw = store.get(key)
    if raw is None:
        return []
    try:
        meals, migrated = decode_meals(raw)
    except StorageCorruptionError:
        _logger.warning("Ignoring corrupt meal data", extra={"key": key}, exc_info=True)
        return []
    if migrated:
        _logger.info("Migrated stored meals to version %s", SCHEMA_VERSION)
        _save_blob(store, key, meals)
    return meals


def _save_blob(store: KeyValueStore, key: str, meals: list[MealAnalysis]) -> None:
    store.set(key, encode_meals(meals))


def _item_to_dict(item: FoodItem) -> dict[str, object]:
    return {
        "name": item.name,
        "quantity": item.quantity,
        "calories": item.calories,
        "proteinGrams": item.protein_grams,
        "carbsGrams": item.carbs_grams,
        "fatGrams": item.fat_grams,
    }


def _item_from_dict(row: dict[str, object]) -> FoodItem:
    return FoodItem(
        name=str(row["name"]),
        quantity=str(row.get("quantity", "")),
        calories=int(row.get("calories", 0)),
        protein_grams=int(row.get("proteinGrams", 0)),
        carbs_grams=int(row.get("carbsGrams", 0)),
        fat_grams=int(row.get("fatGrams", 0)),
    )


def _migrate_v0_to_v1(rows: list[dict[str, object]]) -> list[dict[str, object]]:
    """Assign ids to records saved without one and default missing macros."""
    migrated: list[dict[str, object]] = []
    for row in rows:
        if not isinstance(row, dict):
            raise StorageCorruptionError("Meal record is not an object")
        updated = dict(row)
        if not updated.get("id"):
            updated["id"] = str(uuid4())
        for key in _MACRO_KEYS:
            updated.setdefault(key, 0)
        items = updated.get("foodItems") or []
        if isinstance(items, list):
            updated["foodItems"] = [
                {**{key: 0 for key in _MACRO_KEYS}, **item}
                if isinstance(item, dict)
                else item
                for item in items
            ]
        migrated.append(updated)
    return migrated


_MIGRATIONS: list[Callable[[list[dict[str, object]]], list[dict[str, object]]]] = [
    _migrate_v0_to_v1,
]
