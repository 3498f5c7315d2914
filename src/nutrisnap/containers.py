"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrisnap.adapters.openai_estimation_client import OpenAIEstimationClient
from nutrisnap.adapters.supabase_kv_store import SupabaseKeyValueStore
from nutrisnap.config import Settings, parse_storage_backend
from nutrisnap.domain.session import AppState
from nutrisnap.services.credentials import CredentialStore
from nutrisnap.services.estimation import EstimationService
from nutrisnap.services.ledger import GuestHistory, MealLedger
from nutrisnap.services.reconciliation import MealReconciliationEngine
from nutrisnap.services.session import SessionController
from nutrisnap.services.storage import InMemoryKeyValueStore, KeyValueStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state: AppState
    store: KeyValueStore
    estimation_service: EstimationService
    credential_store: CredentialStore
    ledger: MealLedger
    guest_history: GuestHistory
    meal_engine: MealReconciliationEngine
    session_controller: SessionController
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value store."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "memory":
        return InMemoryKeyValueStore()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "Supabase storage requires SUPABASE_URL and SUPABASE_SERVICE_KEY"
        )
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return SupabaseKeyValueStore(client, table=settings.supabase_table)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    openai_client = OpenAIEstimationClient.create(resolved_settings.openai_api_key)
    estimation_service = EstimationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await openai_client.client.close()

    return wire_container(resolved_settings, store, estimation_service, close_resources)


def wire_container(
    settings: Settings,
    store: KeyValueStore,
    estimation_service: EstimationService,
    close_resources: Callable[[], Awaitable[None]],
) -> AppContainer:
    """Assemble services around a store and an estimation service."""
    state = AppState()
    ledger = MealLedger(store)
    guest_history = GuestHistory(store)
    credential_store = CredentialStore(
        store,
        iterations=settings.password_iterations,
        delay_seconds=settings.auth_delay_seconds,
    )
    meal_engine = MealReconciliationEngine(
        state=state,
        estimation_service=estimation_service,
        ledger=ledger,
        guest_history=guest_history,
        timezone=settings.timezone,
    )
    session_controller = SessionController(
        state=state,
        store=store,
        credentials=credential_store,
        engine=meal_engine,
        ledger=ledger,
        guest_history=guest_history,
    )
    session_controller.restore()
    return AppContainer(
        settings=settings,
        state=state,
        store=store,
        estimation_service=estimation_service,
        credential_store=credential_store,
        ledger=ledger,
        guest_history=guest_history,
        meal_engine=meal_engine,
        session_controller=session_controller,
        close_resources=close_resources,
    )
