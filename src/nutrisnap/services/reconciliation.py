"""Meal reconciliation: current analysis, session history and the ledger."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

from nutrisnap.domain.errors import InvalidItemIndexError
from nutrisnap.domain.estimation import FoodItemEstimate
from nutrisnap.domain.meals import FoodItem, MacroTotals, MealAnalysis
from nutrisnap.domain.session import AppState
from nutrisnap.services.estimation import EstimationService
from nutrisnap.services.ledger import GuestHistory, MealLedger

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MealReconciliationEngine:
    """Owns meal mutations and keeps memory and storage consistent.

    Every mutation builds a new immutable record and swaps it into
    ``state.history`` and ``state.current`` without awaiting in between, so
    readers never see new items paired with stale totals. Item-level edits
    of one meal are serialized; each edit re-reads the record once it holds
    the meal's lock.
    """

    state: AppState
    estimation_service: EstimationService
    ledger: MealLedger
    guest_history: GuestHistory
    timezone: str = "UTC"
    clock: Callable[[], datetime] = _utc_now
    _locks: dict[str, asyncio.Lock] = field(
        default_factory=dict, init=False, repr=False
    )

    async def create(
        self, text: str, selected_date: date | None = None
    ) -> MealAnalysis:
        """Estimate a meal description and log it as the current analysis."""
        estimate = await self.estimation_service.estimate_meal(text)
        meal = MealAnalysis(
            id=str(uuid4()),
            timestamp=self._timestamp_for(selected_date),
            original_input=text,
            total_calories=estimate.total_calories,
            protein_grams=estimate.protein_grams,
            carbs_grams=estimate.carbs_grams,
            fat_grams=estimate.fat_grams,
            food_items=tuple(_to_food_item(item) for item in estimate.food_items),
            health_tip=estimate.health_tip,
        )
        self.state.history = [meal, *self.state.history]
        self.state.current = meal
        self._persist_upsert(meal)
        _logger.info("Logged meal %s (%s kcal)", meal.id, meal.total_calories)
        return meal

    async def update_item(
        self, meal_id: str, item_index: int, quantity: str
    ) -> MealAnalysis | None:
        """Re-estimate one item for a new quantity and refresh totals."""
        async with self._meal_lock(meal_id):
            meal = self.find(meal_id)
            if meal is None:
                return None
            _check_index(meal, item_index)
            existing = meal.food_items[item_index]
            estimate = await self.estimation_service.estimate_item(
                existing.name, quantity
            )
            meal = self.find(meal_id)
            if meal is None:
                return None
            _check_index(meal, item_index)
            items = list(meal.food_items)
            items[item_index] = _to_food_item(estimate)
            return self._apply(with_items(meal, items))

    async def add_item(
        self, meal_id: str, name: str, quantity: str
    ) -> MealAnalysis | None:
        """Estimate a new item, append it and refresh totals."""
        async with self._meal_lock(meal_id):
            if self.find(meal_id) is None:
                return None
            estimate = await self.estimation_service.estimate_item(name, quantity)
            meal = self.find(meal_id)
            if meal is None:
                return None
            items = [*meal.food_items, _to_food_item(estimate)]
            return self._apply(with_items(meal, items))

    async def delete_item(self, meal_id: str, item_index: int) -> MealAnalysis | None:
        """Remove one item and refresh totals."""
        async with self._meal_lock(meal_id):
            meal = self.find(meal_id)
            if meal is None:
                return None
            _check_index(meal, item_index)
            items = [
                item
                for index, item in enumerate(meal.food_items)
                if index != item_index
            ]
            return self._apply(with_items(meal, items))

    def delete_meal(self, meal_id: str) -> bool:
        """Remove a meal from history, the current slot and storage."""
        remaining = [meal for meal in self.state.history if meal.id != meal_id]
        removed = len(remaining) != len(self.state.history)
        if self.state.current is not None and self.state.current.id == meal_id:
            self.state.current = None
            removed = True
        if not removed:
            return False
        self.state.history = remaining
        self._locks.pop(meal_id, None)
        username = self.state.authenticated_user
        if username:
            self.ledger.remove(username, meal_id)
        else:
            self.guest_history.save(self.state.history)
        _logger.info("Deleted meal %s", meal_id)
        return True

    def find(self, meal_id: str) -> MealAnalysis | None:
        """Look a meal up in history, falling back to the current analysis."""
        for meal in self.state.history:
            if meal.id == meal_id:
                return meal
        current = self.state.current
        if current is not None and current.id == meal_id:
            return current
        return None

    def select(self, meal_id: str) -> MealAnalysis | None:
        """Show a history entry as the current analysis."""
        for meal in self.state.history:
            if meal.id == meal_id:
                self.state.current = meal
                return meal
        return None

    def load(self, meals: list[MealAnalysis]) -> None:
        """Replace in-memory meals, e.g. with a user's ledger after login."""
        self.state.history = list(meals)
        self.state.current = None
        self._locks.clear()

    def clear(self) -> None:
        """Drop all in-memory meals."""
        self.load([])

    def _apply(self, updated: MealAnalysis) -> MealAnalysis | None:
        history = [
            updated if meal.id == updated.id else meal for meal in self.state.history
        ]
        in_history = any(meal.id == updated.id for meal in self.state.history)
        is_current = (
            self.state.current is not None and self.state.current.id == updated.id
        )
        if not in_history and not is_current:
            return None
        self.state.history = history
        if is_current:
            self.state.current = updated
        self._persist_upsert(updated)
        return updated

    def _persist_upsert(self, meal: MealAnalysis) -> None:
        username = self.state.authenticated_user
        if username:
            self.ledger.upsert(username, meal)
        else:
            self.guest_history.save(self.state.history)

    def _timestamp_for(self, selected_date: date | None) -> int:
        tz = ZoneInfo(self.timezone)
        arrived = self.clock().astimezone(tz)
        day = selected_date or arrived.date()
        logged_at = datetime.combine(day, arrived.time(), tzinfo=tz)
        return int(logged_at.timestamp() * 1000)

    @asynccontextmanager
    async def _meal_lock(self, meal_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(meal_id, asyncio.Lock())
        async with lock:
            yield


def sum_totals(items: list[FoodItem] | tuple[FoodItem, ...]) -> MacroTotals:
    """Sum calories and macros over a full item list."""
    return MacroTotals(
        calories=sum(item.calories for item in items),
        protein_grams=sum(item.protein_grams or 0 for item in items),
        carbs_grams=sum(item.carbs_grams or 0 for item in items),
        fat_grams=sum(item.fat_grams or 0 for item in items),
    )


def with_items(meal: MealAnalysis, items: list[FoodItem]) -> MealAnalysis:
    """Return a copy of the meal with new items and re-summed totals."""
    totals = sum_totals(items)
    return replace(
        meal,
        food_items=tuple(items),
        total_calories=totals.calories,
        protein_grams=totals.protein_grams,
        carbs_grams=totals.carbs_grams,
        fat_grams=totals.fat_grams,
    )


def _check_index(meal: MealAnalysis, item_index: int) -> None:
    if not 0 <= item_index < len(meal.food_items):
        raise InvalidItemIndexError(meal.id, item_index)


def _to_food_item(estimate: FoodItemEstimate) -> FoodItem:
    return FoodItem(
        name=estimate.name,
        quantity=estimate.quantity,
        calories=estimate.calories,
        protein_grams=estimate.protein_grams,
        carbs_grams=estimate.carbs_grams,
        fat_grams=estimate.fat_grams,
    )
