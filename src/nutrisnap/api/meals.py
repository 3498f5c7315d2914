"""Meal analysis and history endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from nutrisnap.api.models import AnalyzeRequest, ItemCreateRequest, ItemUpdateRequest
from nutrisnap.api.payloads import day_group_payload, meal_payload
from nutrisnap.domain.errors import EstimationError, InvalidItemIndexError
from nutrisnap.services.history import group_by_day, recent

if TYPE_CHECKING:
    from nutrisnap.containers import AppContainer
    from nutrisnap.domain.meals import MealAnalysis

router = APIRouter(prefix="/meals", tags=["meals"])

_logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED)
async def analyze_meal(body: AnalyzeRequest, request: Request) -> dict[str, object]:
    """Estimate a meal description and log it."""
    container: AppContainer = request.app.state.container
    try:
        meal = await container.meal_engine.create(body.text, body.selected_date)
    except EstimationError as exc:
        _logger.exception("Meal analysis failed")
        raise _estimation_failed(
            container, exc, "Failed to analyze meal. Please try again."
        ) from exc
    return meal_payload(meal)


@router.get("/current")
async def current_meal(request: Request) -> dict[str, object]:
    """Return the analysis currently on screen."""
    container: AppContainer = request.app.state.container
    current = container.state.current
    return {"meal": meal_payload(current) if current else None}


@router.get("/recent")
async def recent_meals(request: Request) -> dict[str, object]:
    """Return the newest meals for the recent history widget."""
    container: AppContainer = request.app.state.container
    meals = recent(container.state.history, container.settings.recent_history_limit)
    return {"meals": [meal_payload(meal) for meal in meals]}


@router.get("/history")
async def meal_history(request: Request) -> dict[str, object]:
    """Return all meals grouped by day with daily totals."""
    container: AppContainer = request.app.state.container
    history = container.state.history
    groups = group_by_day(history, container.settings.timezone)
    return {
        "totalLogs": len(history),
        "days": [day_group_payload(group) for group in groups],
    }


@router.post("/{meal_id}/select")
async def select_meal(meal_id: str, request: Request) -> dict[str, object]:
    """Show a history entry as the current analysis."""
    container: AppContainer = request.app.state.container
    return meal_payload(_found(container.meal_engine.select(meal_id)))


@router.delete("/{meal_id}")
async def delete_meal(meal_id: str, request: Request) -> dict[str, str]:
    """Delete a meal everywhere it is stored."""
    container: AppContainer = request.app.state.container
    if not container.meal_engine.delete_meal(meal_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.post("/{meal_id}/items", status_code=status.HTTP_201_CREATED)
async def add_item(
    meal_id: str, body: ItemCreateRequest, request: Request
) -> dict[str, object]:
    """Estimate and append a food item."""
    container: AppContainer = request.app.state.container
    try:
        meal = await container.meal_engine.add_item(meal_id, body.name, body.quantity)
    except EstimationError as exc:
        _logger.exception("Adding item failed", extra={"meal_id": meal_id})
        raise _estimation_failed(container, exc, "Couldn't add that item.") from exc
    return meal_payload(_found(meal))


@router.patch("/{meal_id}/items/{item_index}")
async def update_item(
    meal_id: str, item_index: int, body: ItemUpdateRequest, request: Request
) -> dict[str, object]:
    """Re-estimate a food item for a new quantity."""
    container: AppContainer = request.app.state.container
    try:
        meal = await container.meal_engine.update_item(
            meal_id, item_index, body.quantity
        )
    except InvalidItemIndexError as exc:
        raise _invalid_index(exc) from exc
    except EstimationError as exc:
        _logger.exception("Updating item failed", extra={"meal_id": meal_id})
        raise _estimation_failed(container, exc, "Couldn't update that item.") from exc
    return meal_payload(_found(meal))


@router.delete("/{meal_id}/items/{item_index}")
async def delete_item(
    meal_id: str, item_index: int, request: Request
) -> dict[str, object]:
    """Remove a food item."""
    container: AppContainer = request.app.state.container
    try:
        meal = await container.meal_engine.delete_item(meal_id, item_index)
    except InvalidItemIndexError as exc:
        raise _invalid_index(exc) from exc
    return meal_payload(_found(meal))


def _found(meal: MealAnalysis | None) -> MealAnalysis:
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return meal


def _invalid_index(exc: InvalidItemIndexError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


def _estimation_failed(
    container: AppContainer, exc: Exception, fallback: str
) -> HTTPException:
    """Return a 502 with a user-facing message and local debug info."""
    detail = str(exc) or fallback
    if container.settings.environment == "local":
        debug = f"{type(exc).__name__}: {exc}".strip()
        detail = f"{fallback} (debug: {debug})"
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
