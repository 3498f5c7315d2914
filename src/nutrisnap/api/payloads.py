"""JSON payload builders for API responses."""

from nutrisnap.domain.history import DayGroup
from nutrisnap.domain.meals import MacroTotals, MealAnalysis
from nutrisnap.domain.session import AppState
from nutrisnap.services.history import macro_breakdown
from nutrisnap.services.ledger import meal_to_dict


def session_payload(state: AppState) -> dict[str, object]:
    """Describe the session for the front end."""
    return {
        "loggedIn": state.logged_in,
        "username": state.username,
        "currentView": state.current_view.value,
    }


def meal_payload(meal: MealAnalysis) -> dict[str, object]:
    """Serialize a meal with its macro breakdown."""
    payload = meal_to_dict(meal)
    breakdown = macro_breakdown(meal)
    payload["macros"] = {
        "totalGrams": breakdown.total_grams,
        "proteinPct": breakdown.protein_pct,
        "carbsPct": breakdown.carbs_pct,
        "fatPct": breakdown.fat_pct,
    }
    return payload


def totals_payload(totals: MacroTotals) -> dict[str, int]:
    """Serialize aggregate totals."""
    return {
        "calories": totals.calories,
        "protein": totals.protein_grams,
        "carbs": totals.carbs_grams,
        "fat": totals.fat_grams,
    }


def day_group_payload(group: DayGroup) -> dict[str, object]:
    """Serialize one day of the full history view."""
    return {
        "date": group.day.isoformat(),
        "label": group.label,
        "totals": totals_payload(group.totals),
        "meals": [meal_payload(meal) for meal in group.meals],
    }
