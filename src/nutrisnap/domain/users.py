"""Domain models for registered users."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRecord:
    """Credentials for a registered user."""

    username: str
    password_hash: str
    salt: str
