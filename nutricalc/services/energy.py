"""
Energy Model
=============
Basal metabolic rate, maintenance calories and the goal-adjusted target.

BMR:
  Katch-McArdle (preferred, needs lean mass):
    BMR = 370 + 21.6 × lean_mass_kg
  Mifflin-St Jeor (fallback):
    BMR = 10 × weight_kg + 6.25 × height_cm - 5 × age + k
    k = +5 (male), -161 (female), -78 (unspecified)

  The unspecified-sex constant is the arithmetic midpoint of the male and
  female constants. It has no clinical derivation of its own.

MAINTENANCE:
  maintenance = BMR × activity multiplier

TARGET:
  target = round(maintenance × goal factor), never below 900 kcal/day
  lose 0.85, maintain 1.00, gain 1.10
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from nutricalc.schemas import BmrFormula, Goal, Sex
from nutricalc.services.normalizer import Numeric, round_kcal, to_decimal_or_none

logger = logging.getLogger(__name__)

KATCH_MCARDLE_INTERCEPT = Decimal("370")
KATCH_MCARDLE_SLOPE = Decimal("21.6")

MIFFLIN_SEX_CONSTANTS: dict[Sex, Decimal] = {
    Sex.MALE: Decimal("5"),
    Sex.FEMALE: Decimal("-161"),
    Sex.UNSPECIFIED: Decimal("-78"),
}

GOAL_CALORIE_FACTORS: dict[Goal, Decimal] = {
    Goal.LOSE: Decimal("0.85"),
    Goal.MAINTAIN: Decimal("1.00"),
    Goal.GAIN: Decimal("1.10"),
}

MIN_TARGET_CALORIES = Decimal("900")


class BmrEstimate(NamedTuple):
    value: Decimal
    formula: BmrFormula


def calculate_bmr_katch_mcardle(lean_mass_kg: Decimal) -> Decimal:
    """Katch-McArdle BMR (kcal/day) from lean body mass."""
    return KATCH_MCARDLE_INTERCEPT + KATCH_MCARDLE_SLOPE * lean_mass_kg


def calculate_bmr_mifflin_st_jeor(
    weight_kg: Decimal,
    height_cm: Decimal,
    age_years: int,
    sex: Sex,
) -> Decimal:
    """
    Mifflin-St Jeor BMR (kcal/day).

    Formula: BMR = (10 × weight_kg) + (6.25 × height_cm) - (5 × age) + sex_constant
    """
    sex_constant = MIFFLIN_SEX_CONSTANTS[sex]
    return 10 * weight_kg + Decimal("6.25") * height_cm - 5 * age_years + sex_constant


def calculate_bmr(
    lean_mass_kg: Numeric,
    weight_kg: Numeric,
    height_cm: Numeric,
    age_years: int | None,
    sex: Sex,
) -> BmrEstimate | None:
    """
    Pick the best available BMR formula.

    Katch-McArdle when lean mass is known, otherwise Mifflin-St Jeor when
    weight, height and age are all known. None if neither is possible.
    """
    lean_mass = to_decimal_or_none(lean_mass_kg)
    if lean_mass is not None:
        bmr = calculate_bmr_katch_mcardle(lean_mass)
        logger.debug(f"BMR (Katch-McArdle): lean_mass={lean_mass:.3f}kg -> {bmr:.2f} kcal/day")
        return BmrEstimate(bmr, BmrFormula.KATCH_MCARDLE)

    weight = to_decimal_or_none(weight_kg)
    height = to_decimal_or_none(height_cm)
    if weight is None or height is None or age_years is None:
        return None

    bmr = calculate_bmr_mifflin_st_jeor(weight, height, age_years, sex)
    logger.debug(
        f"BMR (Mifflin-St Jeor): weight={weight}kg, height={height}cm, "
        f"age={age_years}, sex={sex.value} -> {bmr:.2f} kcal/day"
    )
    return BmrEstimate(bmr, BmrFormula.MIFFLIN_ST_JEOR)


def calculate_maintenance_calories(bmr: Decimal, activity_multiplier: Decimal) -> Decimal:
    """Total daily energy expenditure: BMR × activity multiplier."""
    return bmr * activity_multiplier


def calculate_target_calories(maintenance_calories: Numeric, goal: Goal) -> Decimal | None:
    """
    Daily calorie target for a goal, in whole kcal.

    The result is never below MIN_TARGET_CALORIES.
    """
    maintenance = to_decimal_or_none(maintenance_calories)
    if maintenance is None:
        return None

    target = round_kcal(maintenance * GOAL_CALORIE_FACTORS[goal])
    target = max(target, MIN_TARGET_CALORIES)

    logger.debug(
        f"Target calories: maintenance={maintenance:.2f}, goal={goal.value}, "
        f"factor={GOAL_CALORIE_FACTORS[goal]} -> target={target} kcal/day"
    )
    return target
