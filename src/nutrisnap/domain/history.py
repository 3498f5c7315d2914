"""View models for meal history screens."""

from dataclasses import dataclass
from datetime import date

from nutrisnap.domain.meals import MacroTotals, MealAnalysis


@dataclass(frozen=True)
class DayGroup:
    """Meals logged on one calendar day with the day's totals."""

    day: date
    label: str
    meals: list[MealAnalysis]
    totals: MacroTotals


@dataclass(frozen=True)
class MacroBreakdown:
    """Macro grams and their share of total macro mass."""

    protein_grams: int
    carbs_grams: int
    fat_grams: int
    total_grams: int
    protein_pct: float
    carbs_pct: float
    fat_pct: float
