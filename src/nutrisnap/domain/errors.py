"""Error types raised by NutriSnap services."""


class EstimationError(Exception):
    """The nutrition estimate could not be obtained."""


class NoResponseError(EstimationError):
    """The upstream model returned no content."""

    def __init__(self, message: str = "No response received from AI") -> None:
        super().__init__(message)


class ParseError(EstimationError):
    """The upstream payload was not well-formed nutrition data."""

    def __init__(self, message: str = "Failed to process nutrition data.") -> None:
        super().__init__(message)


class AuthError(Exception):
    """Registration or login was rejected."""


class DuplicateUserError(AuthError):
    """A user with the same (case-insensitive) name already exists."""

    def __init__(self, username: str) -> None:
        super().__init__("Username already taken.")
        self.username = username


INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


class InvalidCredentialsError(AuthError):
    """Login failed; the message never reveals which check failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(INVALID_CREDENTIALS_MESSAGE)
        self.reason = reason


class StorageCorruptionError(Exception):
    """A persisted blob could not be decoded."""


class InvalidItemIndexError(ValueError):
    """An item index does not address an item of the meal."""

    def __init__(self, meal_id: str, index: int) -> None:
        super().__init__(f"Meal {meal_id} has no item at index {index}")
        self.meal_id = meal_id
        self.index = index
