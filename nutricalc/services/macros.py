"""
Macro Allocation Service
=========================
Splits the daily calorie target into protein, fat and carbohydrate grams,
then distributes the day across five fixed meal slots.

DAILY MACROS:
  effective_mass = lean mass if known, else body weight
  protein_g      = effective_mass × protein multiplier (by goal)
  fat_g          = max(0.8, weight × fat_per_kg)
  carbs_g        = max(0, (target_kcal - protein_g × 4 - fat_g × 9) / 4)

  Carbohydrate is the remainder, so protein + fat + carb kcal add back up to
  the target whenever the remainder is not negative.

MEAL SLOTS:
  breakfast 25%, snack1 10%, lunch 30%, snack2 15%, dinner 20%

  Every field of a slot (calories, protein, carbs, fats) is scaled by the
  same ratio.

Example:
  target 2000 kcal, weight 70 kg, maintain (1.8 g/kg), fat 0.9 g/kg:
    protein = 126 g (504 kcal), fat = 63 g (567 kcal)
    carbs   = (2000 - 504 - 567) / 4 = 232.25 g
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from nutricalc.schemas import Goal, MealSlot, MealSlotAllocation, NutritionPreferences
from nutricalc.services.normalizer import Numeric, round_decimal, round_kcal, to_decimal_or_none

logger = logging.getLogger(__name__)

PROTEIN_KCAL_PER_G = Decimal("4")
CARBS_KCAL_PER_G = Decimal("4")
FAT_KCAL_PER_G = Decimal("9")
MIN_FAT_G = Decimal("0.8")

MEAL_SLOT_RATIOS: dict[MealSlot, Decimal] = {
    MealSlot.BREAKFAST: Decimal("0.25"),
    MealSlot.SNACK_1: Decimal("0.10"),
    MealSlot.LUNCH: Decimal("0.30"),
    MealSlot.SNACK_2: Decimal("0.15"),
    MealSlot.DINNER: Decimal("0.20"),
}


class DailyMacros(NamedTuple):
    protein_g: Decimal
    carbs_g: Decimal
    fat_g: Decimal


def calculate_daily_macros(
    target_calories: Numeric,
    weight_kg: Numeric,
    lean_mass_kg: Numeric,
    goal: Goal,
    preferences: NutritionPreferences | None = None,
) -> DailyMacros | None:
    """
    Daily protein, carbohydrate and fat grams for a calorie target.

    Returns None without a target or a body weight.
    """
    target = to_decimal_or_none(target_calories)
    weight = to_decimal_or_none(weight_kg)
    if target is None or weight is None:
        return None

    prefs = preferences or NutritionPreferences()
    lean_mass = to_decimal_or_none(lean_mass_kg)
    effective_mass = lean_mass if lean_mass is not None else weight

    protein_g = effective_mass * prefs.protein_multiplier(goal)
    fat_g = max(MIN_FAT_G, weight * prefs.fat_per_kg)

    remaining_kcal = target - protein_g * PROTEIN_KCAL_PER_G - fat_g * FAT_KCAL_PER_G
    carbs_g = max(Decimal(0), remaining_kcal / CARBS_KCAL_PER_G)

    logger.debug(
        f"Macros: target={target} kcal, effective_mass={effective_mass:.2f}kg, goal={goal.value} -> "
        f"protein={protein_g:.2f}g, fat={fat_g:.2f}g, carbs={carbs_g:.2f}g"
    )
    return DailyMacros(protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g)


def build_meal_plan(
    target_calories: Decimal,
    macros: DailyMacros,
) -> dict[MealSlot, MealSlotAllocation]:
    """
    Distribute the daily targets across the five meal slots.

    Calories are rounded to whole kcal and grams to 2 decimals, each slot
    independently.
    """
    plan: dict[MealSlot, MealSlotAllocation] = {}
    for slot, ratio in MEAL_SLOT_RATIOS.items():
        plan[slot] = MealSlotAllocation(
            calories=round_kcal(target_calories * ratio),
            protein=round_decimal(macros.protein_g * ratio),
            carbs=round_decimal(macros.carbs_g * ratio),
            fats=round_decimal(macros.fat_g * ratio),
        )
    return plan
