"""History views: recent meals, day grouping and macro shares."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from nutrisnap.domain.history import DayGroup, MacroBreakdown
from nutrisnap.domain.meals import MacroTotals, MealAnalysis

RECENT_LIMIT = 6


def recent(
    history: list[MealAnalysis], limit: int = RECENT_LIMIT
) -> list[MealAnalysis]:
    """Return the newest entries shown in the recent history widget."""
    return history[: max(limit, 0)]


def group_by_day(
    history: list[MealAnalysis], timezone_name: str, today: date | None = None
) -> list[DayGroup]:
    """Group meals by calendar day with per-day totals, newest day first."""
    tz = ZoneInfo(timezone_name)
    today = today or datetime.now(tz=tz).date()
    buckets: dict[date, list[MealAnalysis]] = {}
    for meal in history:
        buckets.setdefault(meal_day(meal, tz), []).append(meal)

    groups = []
    for day in sorted(buckets, reverse=True):
        meals = sorted(buckets[day], key=lambda meal: meal.timestamp, reverse=True)
        groups.append(
            DayGroup(
                day=day,
                label=day_label(day, today),
                meals=meals,
                totals=_sum_meals(meals),
            )
        )
    return groups


def meal_day(meal: MealAnalysis, tz: ZoneInfo) -> date:
    """Return the calendar day a meal was logged on."""
    return datetime.fromtimestamp(meal.timestamp / 1000, tz=UTC).astimezone(tz).date()


def day_label(day: date, today: date) -> str:
    """Return "Today", "Yesterday" or a long weekday label."""
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day.strftime('%A, %B')} {day.day}"


def macro_breakdown(meal: MealAnalysis) -> MacroBreakdown:
    """Return macro grams and their percentage of total macro mass."""
    total = meal.protein_grams + meal.carbs_grams + meal.fat_grams
    return MacroBreakdown(
        protein_grams=meal.protein_grams,
        carbs_grams=meal.carbs_grams,
        fat_grams=meal.fat_grams,
        total_grams=total,
        protein_pct=_share(meal.protein_grams, total),
        carbs_pct=_share(meal.carbs_grams, total),
        fat_pct=_share(meal.fat_grams, total),
    )


def _share(part: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(part * 100 / total, 1)


def _sum_meals(meals: list[MealAnalysis]) -> MacroTotals:
    total = MacroTotals(calories=0, protein_grams=0, carbs_grams=0, fat_grams=0)
    for meal in meals:
        total = MacroTotals(
            calories=total.calories + meal.total_calories,
            protein_grams=total.protein_grams + meal.protein_grams,
            carbs_grams=total.carbs_grams + meal.carbs_grams,
            fat_grams=total.fat_grams + meal.fat_grams,
        )
    return total
