"""
Tests for the Energy Model and the Macro Allocation Service
=============================================================
Test matrix:
  1. BMR formulas and formula selection (Katch-McArdle preferred)
  2. Maintenance and goal-adjusted target calories (900 kcal floor)
  3. Daily macros: effective mass, preferences, carb remainder, floors
  4. Meal slots: fixed ratios, budget and slot conservation
"""

from decimal import Decimal

import pytest

from nutricalc.schemas import BmrFormula, Goal, MealSlot, NutritionPreferences, Sex
from nutricalc.services.energy import (
    calculate_bmr,
    calculate_bmr_katch_mcardle,
    calculate_bmr_mifflin_st_jeor,
    calculate_maintenance_calories,
    calculate_target_calories,
)
from nutricalc.services.macros import (
    CARBS_KCAL_PER_G,
    FAT_KCAL_PER_G,
    PROTEIN_KCAL_PER_G,
    build_meal_plan,
    calculate_daily_macros,
)
from nutricalc.services.normalizer import round_decimal


# ── BMR ─────────────────────────────────────────────────────────

class TestBMR:

    def test_katch_mcardle(self):
        """370 + 21.6 × 60 = 1666."""
        assert calculate_bmr_katch_mcardle(Decimal("60")) == Decimal("1666.0")

    @pytest.mark.parametrize(
        "sex, expected",
        [
            (Sex.MALE, "1648.75"),
            (Sex.FEMALE, "1482.75"),
            (Sex.UNSPECIFIED, "1565.75"),
        ],
    )
    def test_mifflin_st_jeor(self, sex, expected):
        """10 × 70 + 6.25 × 175 - 5 × 30 + k."""
        bmr = calculate_bmr_mifflin_st_jeor(Decimal("70"), Decimal("175"), 30, sex)
        assert bmr == Decimal(expected)

    def test_prefers_katch_mcardle_when_lean_mass_known(self):
        estimate = calculate_bmr("60", "70", "175", 30, Sex.MALE)
        assert estimate.formula == BmrFormula.KATCH_MCARDLE
        assert estimate.value == Decimal("1666.0")

    def test_falls_back_to_mifflin(self):
        estimate = calculate_bmr(None, "70", "175", 30, Sex.MALE)
        assert estimate.formula == BmrFormula.MIFFLIN_ST_JEOR
        assert estimate.value == Decimal("1648.75")

    @pytest.mark.parametrize(
        "weight, height, age",
        [(None, "175", 30), ("70", None, 30), ("70", "175", None)],
    )
    def test_no_formula_possible(self, weight, height, age):
        assert calculate_bmr(None, weight, height, age, Sex.MALE) is None


# ── Calories ────────────────────────────────────────────────────

class TestCalories:

    def test_maintenance(self):
        assert calculate_maintenance_calories(Decimal("1500"), Decimal("1.55")) == Decimal("2325")

    @pytest.mark.parametrize(
        "goal, expected",
        [(Goal.LOSE, "1700"), (Goal.MAINTAIN, "2000"), (Goal.GAIN, "2200")],
    )
    def test_goal_factors(self, goal, expected):
        assert calculate_target_calories(Decimal("2000"), goal) == Decimal(expected)

    def test_rounds_to_whole_kcal(self):
        # 1843.7 × 0.85 = 1567.145
        assert calculate_target_calories(Decimal("1843.7"), Goal.LOSE) == Decimal("1567")

    def test_floor_at_900(self):
        # 1000 × 0.85 = 850 -> 900
        assert calculate_target_calories(Decimal("1000"), Goal.LOSE) == Decimal("900")

    def test_missing_maintenance(self):
        assert calculate_target_calories(None, Goal.LOSE) is None


# ── Daily macros ────────────────────────────────────────────────

class TestDailyMacros:

    def test_reference_example(self):
        """2000 kcal, 70 kg, maintain: protein 126 g, fat 63 g, carbs 232.25 g."""
        macros = calculate_daily_macros(Decimal("2000"), Decimal("70"), None, Goal.MAINTAIN)
        assert macros.protein_g == Decimal("126.0")
        assert macros.fat_g == Decimal("63.0")
        assert macros.carbs_g == Decimal("232.25")

    def test_lean_mass_drives_protein(self):
        macros = calculate_daily_macros(Decimal("2500"), Decimal("70"), Decimal("60"), Goal.GAIN)
        assert macros.protein_g == Decimal("120.0")
        # Fat still uses total weight
        assert macros.fat_g == Decimal("63.0")

    def test_custom_preferences(self):
        prefs = NutritionPreferences(protein_multiplier_loss=Decimal("2.2"), fat_per_kg=Decimal("1.0"))
        macros = calculate_daily_macros(Decimal("1800"), Decimal("80"), None, Goal.LOSE, prefs)
        assert macros.protein_g == Decimal("176.0")
        assert macros.fat_g == Decimal("80.0")

    def test_carbs_never_negative(self):
        """Protein alone exceeds the target -> carbs 0, not negative."""
        macros = calculate_daily_macros(Decimal("900"), Decimal("150"), None, Goal.GAIN)
        assert macros.carbs_g == Decimal("0")

    def test_fat_minimum(self):
        macros = calculate_daily_macros(Decimal("900"), Decimal("0.5"), None, Goal.MAINTAIN)
        assert macros.fat_g == Decimal("0.8")

    @pytest.mark.parametrize("target, weight", [(None, "70"), ("2000", None)])
    def test_missing_inputs(self, target, weight):
        assert calculate_daily_macros(target, weight, None, Goal.MAINTAIN) is None

    @pytest.mark.parametrize(
        "target, weight, lean, goal",
        [
            ("2165", "72", "58.95", Goal.LOSE),
            ("1700", "61.3", None, Goal.MAINTAIN),
            ("3120", "94.8", "77.1", Goal.GAIN),
            ("2401", "55.55", None, Goal.GAIN),
        ],
    )
    def test_budget_conservation(self, target, weight, lean, goal):
        """Rounded protein + fat + carb kcal reproduce the target within 1 kcal."""
        macros = calculate_daily_macros(Decimal(target), Decimal(weight), lean, goal)
        total_kcal = (
            round_decimal(macros.protein_g) * PROTEIN_KCAL_PER_G
            + round_decimal(macros.fat_g) * FAT_KCAL_PER_G
            + round_decimal(macros.carbs_g) * CARBS_KCAL_PER_G
        )
        assert abs(total_kcal - Decimal(target)) <= 1


# ── Meal plan ───────────────────────────────────────────────────

class TestMealPlan:

    def test_slot_ratios(self):
        macros = calculate_daily_macros(Decimal("2000"), Decimal("70"), None, Goal.MAINTAIN)
        plan = build_meal_plan(Decimal("2000"), macros)

        assert list(plan) == [
            MealSlot.BREAKFAST, MealSlot.SNACK_1, MealSlot.LUNCH, MealSlot.SNACK_2, MealSlot.DINNER,
        ]
        assert plan[MealSlot.BREAKFAST].calories == Decimal("500")
        assert plan[MealSlot.SNACK_1].calories == Decimal("200")
        assert plan[MealSlot.LUNCH].calories == Decimal("600")
        assert plan[MealSlot.SNACK_2].calories == Decimal("300")
        assert plan[MealSlot.DINNER].calories == Decimal("400")

        breakfast = plan[MealSlot.BREAKFAST]
        assert breakfast.protein == Decimal("31.50")
        assert breakfast.fats == Decimal("15.75")
        assert breakfast.carbs == Decimal("58.06")

    @pytest.mark.parametrize("target", ["1234", "1700", "2165", "2999", "3517"])
    def test_slot_conservation(self, target):
        """Independently rounded slots add back to the target within 5 kcal."""
        macros = calculate_daily_macros(Decimal(target), Decimal("72"), None, Goal.MAINTAIN)
        plan = build_meal_plan(Decimal(target), macros)
        total = sum((slot.calories for slot in plan.values()), Decimal(0))
        assert abs(total - Decimal(target)) <= 5
