"""Pure macro arithmetic.

Functions here return unrounded floats; rounding is applied only by
``round_for_display`` so errors don't compound across aggregation.
"""

from collections.abc import Iterable

from fitcoach.domain.nutrition import FoodItem, InvalidReferenceData, MacroTotals

CALORIES_PER_GRAM = {
    "protein_g": 4,
    "carbs_g": 4,
    "fat_g": 9,
}


def compute_item_macros(food: FoodItem, quantity: float) -> MacroTotals:
    """Return macros for a quantity of a food given its per-serving profile."""
    if food.serving_size <= 0:
        raise InvalidReferenceData(food.id, food.name, food.serving_size)
    factor = quantity / food.serving_size
    return MacroTotals(
        calories=food.calories * factor,
        protein_g=food.protein_g * factor,
        carbs_g=food.carbs_g * factor,
        fat_g=food.fat_g * factor,
        fiber_g=food.fiber_g * factor,
    )


def sum_macros(items: Iterable[MacroTotals]) -> MacroTotals:
    """Sum macro totals element-wise."""
    total = MacroTotals()
    for item in items:
        total = total + item
    return total


def calories_from_macros(protein_g: float, carbs_g: float, fat_g: float) -> float:
    """Estimate calories from macronutrient grams (4/4/9 kcal per gram)."""
    return (
        protein_g * CALORIES_PER_GRAM["protein_g"]
        + carbs_g * CALORIES_PER_GRAM["carbs_g"]
        + fat_g * CALORIES_PER_GRAM["fat_g"]
    )


def calorie_split(totals: MacroTotals) -> dict[str, float]:
    """Return the share of macro-derived calories per macro, in percent."""
    energy = {
        macro: totals.value(macro) * per_gram
        for macro, per_gram in CALORIES_PER_GRAM.items()
    }
    total_energy = sum(energy.values())
    if total_energy <= 0:
        return {macro: 0.0 for macro in energy}
    return {macro: value / total_energy * 100 for macro, value in energy.items()}


def round_for_display(totals: MacroTotals) -> dict[str, float]:
    """Round calories to an integer and grams to one decimal place."""
    return {
        "calories": round(totals.calories),
        "protein_g": round(totals.protein_g, 1),
        "carbs_g": round(totals.carbs_g, 1),
        "fat_g": round(totals.fat_g, 1),
        "fiber_g": round(totals.fiber_g, 1),
    }
