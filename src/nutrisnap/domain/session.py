"""Application state shared by the session controller and the meal engine."""

from dataclasses import dataclass, field
from enum import Enum

from nutrisnap.domain.meals import MealAnalysis


class View(str, Enum):
    """Pages of the single-page front end."""

    HOME = "home"
    HISTORY = "history"
    LOGIN = "login"


@dataclass
class AppState:
    """Mutable state of the running application."""

    history: list[MealAnalysis] = field(default_factory=list)
    current: MealAnalysis | None = None
    logged_in: bool = False
    username: str | None = None
    current_view: View = View.HOME

    @property
    def authenticated_user(self) -> str | None:
        """Return the username when a user is logged in."""
        if self.logged_in and self.username:
            return self.username
        return None
