"""Session control: authentication state and view selection."""

import logging
from dataclasses import dataclass

from nutrisnap.domain.session import AppState, View
from nutrisnap.domain.users import UserRecord
from nutrisnap.services.credentials import CredentialStore
from nutrisnap.services.ledger import GuestHistory, MealLedger
from nutrisnap.services.reconciliation import MealReconciliationEngine
from nutrisnap.services.storage import KeyValueStore

AUTH_FLAG_KEY = "nutrisnap_auth"
USERNAME_KEY = "nutrisnap_username"

_logger = logging.getLogger(__name__)


@dataclass
class SessionController:
    """Tracks who is logged in and which view is shown."""

    state: AppState
    store: KeyValueStore
    credentials: CredentialStore
    engine: MealReconciliationEngine
    ledger: MealLedger
    guest_history: GuestHistory

    def restore(self) -> None:
        """Reload the session mirrored into storage by a previous run."""
        username = self.store.get(USERNAME_KEY)
        if self.store.get(AUTH_FLAG_KEY) == "true" and username:
            self.state.logged_in = True
            self.state.username = username
            self.engine.load(self.ledger.fetch(username))
        else:
            self.state.logged_in = False
            self.state.username = None
            self.engine.load(self.guest_history.load())
        self.state.current_view = View.HOME

    async def register(self, username: str, password: str) -> UserRecord:
        """Create an account without logging in."""
        return await self.credentials.register(username, password)

    async def login(self, username: str, password: str) -> UserRecord:
        """Authenticate and swap guest meals for the user's ledger."""
        record = await self.credentials.authenticate(username, password)
        self.state.logged_in = True
        self.state.username = record.username
        self.store.set(AUTH_FLAG_KEY, "true")
        self.store.set(USERNAME_KEY, record.username)
        self.engine.load(self.ledger.fetch(record.username))
        self.state.current_view = View.HOME
        _logger.info("User %s logged in", record.username)
        return record

    def logout(self) -> None:
        """End the session and discard in-memory meals."""
        username = self.state.username
        self.state.logged_in = False
        self.state.username = None
        self.store.remove(AUTH_FLAG_KEY)
        self.store.remove(USERNAME_KEY)
        self.engine.clear()
        self.guest_history.save([])
        self.state.current_view = View.HOME
        if username:
            _logger.info("User %s logged out", username)

    def navigate(self, view: View) -> View:
        """Switch the active view."""
        self.state.current_view = view
        return view
