"""Tests for the session controller."""

import asyncio
import json

import pytest

from nutrisnap.containers import AppContainer
from nutrisnap.domain.errors import InvalidCredentialsError
from nutrisnap.domain.session import View
from nutrisnap.services.ledger import GUEST_HISTORY_KEY, ledger_key
from nutrisnap.services.session import AUTH_FLAG_KEY, USERNAME_KEY
from nutrisnap.services.storage import InMemoryKeyValueStore


def test_login_replaces_guest_history_with_ledger(container: AppContainer) -> None:
    controller = container.session_controller
    asyncio.run(controller.register("Alice", "s3cret"))
    asyncio.run(container.meal_engine.create("guest snack"))

    asyncio.run(controller.login("alice", "s3cret"))

    assert container.state.logged_in is True
    assert container.state.username == "Alice"
    assert container.state.history == []
    assert container.state.current is None
    assert container.state.current_view == View.HOME


def test_login_mirrors_flags_into_store(
    container: AppContainer, store: InMemoryKeyValueStore
) -> None:
    controller = container.session_controller
    asyncio.run(controller.register("Alice", "s3cret"))

    asyncio.run(controller.login("alice", "s3cret"))

    assert store.get(AUTH_FLAG_KEY) == "true"
    assert store.get(USERNAME_KEY) == "Alice"


def test_failed_login_keeps_guest_session(container: AppContainer) -> None:
    controller = container.session_controller
    meal = asyncio.run(container.meal_engine.create("guest snack"))

    with pytest.raises(InvalidCredentialsError):
        asyncio.run(controller.login("alice", "wrong"))

    assert container.state.logged_in is False
    assert container.state.history == [meal]


def test_login_migrates_legacy_records(
    container: AppContainer, store: InMemoryKeyValueStore
) -> None:
    controller = container.session_controller
    asyncio.run(controller.register("alice", "s3cret"))
    legacy = [
        {
            "timestamp": 1_715_351_400_000,
            "originalInput": "pizza",
            "totalCalories": 570,
            "proteinGrams": 24,
            "carbsGrams": 70,
            "fatGrams": 20,
            "foodItems": [{"name": "pizza", "calories": 570, "quantity": "2"}],
            "healthTip": "",
        }
    ]
    store.set(ledger_key("alice"), json.dumps(legacy))

    asyncio.run(controller.login("alice", "s3cret"))

    meal = container.state.history[0]
    assert meal.id
    deleted = asyncio.run(container.meal_engine.delete_item(meal.id, 0))
    assert deleted is not None
    assert deleted.total_calories == 0
    assert container.ledger.fetch("alice")[0].id == meal.id


def test_logout_discards_meals_but_keeps_ledger(
    container: AppContainer, store: InMemoryKeyValueStore
) -> None:
    controller = container.session_controller
    asyncio.run(controller.register("alice", "s3cret"))
    asyncio.run(controller.login("alice", "s3cret"))
    meal = asyncio.run(container.meal_engine.create("2 eggs and toast"))

    controller.logout()

    assert container.state.logged_in is False
    assert container.state.username is None
    assert container.state.history == []
    assert container.state.current is None
    assert store.get(AUTH_FLAG_KEY) is None
    assert json.loads(store.get(GUEST_HISTORY_KEY) or "")["meals"] == []
    assert [stored.id for stored in container.ledger.fetch("alice")] == [meal.id]


def test_restore_reloads_logged_in_user(
    container: AppContainer, store: InMemoryKeyValueStore
) -> None:
    controller = container.session_controller
    asyncio.run(controller.register("alice", "s3cret"))
    asyncio.run(controller.login("alice", "s3cret"))
    meal = asyncio.run(container.meal_engine.create("2 eggs and toast"))
    container.meal_engine.clear()
    container.state.logged_in = False

    controller.restore()

    assert container.state.logged_in is True
    assert container.state.username == "alice"
    assert [stored.id for stored in container.state.history] == [meal.id]


def test_restore_loads_guest_history(container: AppContainer) -> None:
    meal = asyncio.run(container.meal_engine.create("guest snack"))
    container.meal_engine.clear()

    container.session_controller.restore()

    assert container.state.logged_in is False
    assert container.state.history == [meal]


def test_navigate_switches_view(container: AppContainer) -> None:
    container.session_controller.navigate(View.HISTORY)

    assert container.state.current_view == View.HISTORY
