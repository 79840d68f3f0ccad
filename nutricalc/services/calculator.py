"""
Measurement Calculation Pipeline
==================================
Runs every calculation stage for one measurement and merges whatever each
stage could produce into a single CalculationResult.

STAGES (dependency order):
  1. BMI + classification           needs weight, height
  2. Sum of 4 / sum of 6 skinfolds  needs the complete site set
  3. Body density + body fat %      needs sum of 4, age, sex
  4. Lean mass                      needs weight, body fat %
  5. Waist-hip ratio                needs waist, hip
  6. BMR                            lean mass, else weight + height + age
  7. Activity multiplier            always (sedentary baseline)
  8. Maintenance + target calories  needs BMR
  9. Daily macros + meal plan       needs target calories, weight
 10. Reference Z-scores             needs weight / height (one table for both sexes)

A stage that lacks inputs is skipped and its fields stay None. Values are
carried between stages at full precision and rounded only as they are
written into the result.
"""

import logging

from nutricalc.schemas import (
    CalculationResult,
    MeasurementInput,
    NutritionPreferences,
    PatientContext,
)
from nutricalc.services.activity import infer_activity_multiplier
from nutricalc.services.body_fat import calculate_body_fat_from_skinfolds
from nutricalc.services.body_size import calculate_bmi, classify_bmi
from nutricalc.services.composition import calculate_lean_mass, calculate_waist_hip_ratio
from nutricalc.services.energy import (
    calculate_bmr,
    calculate_maintenance_calories,
    calculate_target_calories,
)
from nutricalc.services.macros import build_meal_plan, calculate_daily_macros
from nutricalc.services.normalizer import round_decimal, round_kcal
from nutricalc.services.reference import z_score_for
from nutricalc.services.skinfolds import (
    calculate_sum_of_4_skinfolds,
    calculate_sum_of_6_skinfolds,
)

logger = logging.getLogger(__name__)


def calculate_all(
    measurement: MeasurementInput,
    context: PatientContext,
    preferences: NutritionPreferences | None = None,
) -> CalculationResult:
    """
    Compute every derived indicator available for a measurement.

    Args:
        measurement: Raw measurements (any subset may be present)
        context: Age, sex, goal and activity of the patient at measurement time
        preferences: Practice macro multipliers (defaults when omitted)

    Returns:
        CalculationResult with only the fields whose inputs were complete.
    """
    result = CalculationResult()
    weight = measurement.weight_kg
    height = measurement.height_cm

    # 1. BMI
    bmi = calculate_bmi(weight, height)
    if bmi is not None:
        result.bmi = round_decimal(bmi)
        result.bmi_classification = classify_bmi(bmi)

    # 2. Skinfold sums
    sum_of_4 = calculate_sum_of_4_skinfolds(measurement)
    result.sum_of_4_skinfolds = round_decimal(sum_of_4)
    result.sum_of_6_skinfolds = round_decimal(calculate_sum_of_6_skinfolds(measurement))

    # 3-4. Body fat and lean mass
    lean_mass = None
    body_fat = calculate_body_fat_from_skinfolds(sum_of_4, context.age, context.sex)
    if body_fat is not None:
        result.body_density = round_decimal(body_fat.body_density, 4)
        result.body_fat_percentage = round_decimal(body_fat.body_fat_percent)

        lean_mass = calculate_lean_mass(weight, body_fat.body_fat_percent)
        result.lean_mass_kg = round_decimal(lean_mass)

    # 5. Waist-hip ratio
    result.waist_hip_ratio = round_decimal(
        calculate_waist_hip_ratio(measurement.circ_waist, measurement.circ_hip), 3
    )

    # 6-8. Energy
    bmr = calculate_bmr(lean_mass, weight, height, context.age, context.sex)
    if bmr is not None:
        multiplier = infer_activity_multiplier(context.activity_profile)
        maintenance = calculate_maintenance_calories(bmr.value, multiplier)
        target = calculate_target_calories(maintenance, context.goal)

        result.basal_metabolic_rate = round_decimal(bmr.value)
        result.bmr_formula = bmr.formula
        result.activity_multiplier = round_decimal(multiplier, 3)
        result.maintenance_calories = round_kcal(maintenance)
        result.target_calories = target
        result.calorie_objective = context.goal

        # 9. Macros, from the rounded target so the budget adds up
        macros = calculate_daily_macros(target, weight, lean_mass, context.goal, preferences)
        if macros is not None:
            result.protein_per_day = round_decimal(macros.protein_g)
            result.carbs_per_day = round_decimal(macros.carbs_g)
            result.fats_per_day = round_decimal(macros.fat_g)
            result.per_meal_plan = build_meal_plan(target, macros)

    # 10. Reference comparisons; the table is not sex-specific
    result.weight_z_score = round_decimal(z_score_for("weight", weight))
    result.height_z_score = round_decimal(z_score_for("height", height))

    logger.debug(
        "Calculated fields: "
        + ", ".join(name for name, value in result if value is not None)
    )
    return result
