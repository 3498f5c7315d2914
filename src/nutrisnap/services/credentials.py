"""Username and password registry stored in the key-value store."""

import asyncio
import hashlib
import hmac
import json
import logging
import os
from dataclasses import dataclass

from nutrisnap.domain.errors import DuplicateUserError, InvalidCredentialsError
from nutrisnap.domain.users import UserRecord
from nutrisnap.services.storage import KeyValueStore

USERS_KEY = "nutrisnap_users_db"

_PBKDF2_ALG = "sha256"
_SALT_BYTES = 16
_HASH_BYTES = 32

_logger = logging.getLogger(__name__)


@dataclass
class CredentialStore:
    """Registers users and verifies their passwords."""

    store: KeyValueStore
    iterations: int = 100_000
    delay_seconds: float = 0.0

    async def register(self, username: str, password: str) -> UserRecord:
        """Create a user, failing if the name is taken in any casing."""
        await self._simulate_latency()
        salt = os.urandom(_SALT_BYTES)
        password_hash = await asyncio.to_thread(
            hash_password, password, salt, self.iterations
        )

        # No awaits between the duplicate check and the save.
        users = self._load_users()
        key = username.lower()
        if key in users:
            raise DuplicateUserError(username)
        record = UserRecord(
            username=username, password_hash=password_hash, salt=salt.hex()
        )
        users[key] = record
        self._save_users(users)
        _logger.info("Registered user %s", username)
        return record

    async def authenticate(self, username: str, password: str) -> UserRecord:
        """Return the stored user when the password matches."""
        await self._simulate_latency()
        record = self._load_users().get(username.lower())
        if record is None:
            raise InvalidCredentialsError("not_found")
        try:
            salt = bytes.fromhex(record.salt)
        except ValueError as exc:
            raise InvalidCredentialsError("mismatch") from exc
        attempt = await asyncio.to_thread(
            hash_password, password, salt, self.iterations
        )
        if not hmac.compare_digest(
            attempt.encode("utf-8"), record.password_hash.encode("utf-8")
        ):
            raise InvalidCredentialsError("mismatch")
        return record

    async def _simulate_latency(self) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

    def _load_users(self) -> dict[str, UserRecord]:
        raw = self.store.get(USERS_KEY)
        if raw is None:
            return {}
        try:
            payload = json.loads(raw)
            return {
                key: UserRecord(
                    username=str(row["username"]),
                    password_hash=str(row["passwordHash"]),
                    salt=str(row["salt"]),
                )
                for key, row in payload.items()
            }
        except (
            json.JSONDecodeError,
            RecursionError,
            AttributeError,
            KeyError,
            TypeError,
        ):
            _logger.warning("Users database corruption detected", exc_info=True)
            return {}

    def _save_users(self, users: dict[str, UserRecord]) -> None:
        payload = {
            key: {
                "username": record.username,
                "passwordHash": record.password_hash,
                "salt": record.salt,
            }
            for key, record in users.items()
        }
        self.store.set(USERS_KEY, json.dumps(payload))


def hash_password(password: str, salt: bytes, iterations: int) -> str:
    """Return the hex PBKDF2-HMAC-SHA256 digest of a password."""
    derived = hashlib.pbkdf2_hmac(
        _PBKDF2_ALG, password.encode("utf-8"), salt, iterations, dklen=_HASH_BYTES
    )
    return derived.hex()
