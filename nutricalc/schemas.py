"""
Pydantic V2 Schemas
====================
Typed inputs and outputs of the calculation engine.

  - MeasurementInput     : raw anthropometric measurements (all optional)
  - ActivityProfile      : training habits, free text or structured
  - PatientContext       : age, sex, goal and activity for one calculation
  - NutritionPreferences : practice-level macro multipliers
  - CalculationResult    : sparse output, every field independently optional

All numeric values are Decimal. In JSON they serialize as strings, which
keeps the fixed-precision representation used by the storage layer.
"""

import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from nutricalc.services.normalizer import parse_measurement_value


# ============================================================
# ENUMS
# ============================================================

class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNSPECIFIED = "unspecified"


class Goal(str, Enum):
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class ActivityLevel(str, Enum):
    """Structured activity level; bypasses the free-text heuristic."""
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class BmiClassification(str, Enum):
    UNDERWEIGHT = "underweight"
    NORMAL_WEIGHT = "normal weight"
    OVERWEIGHT = "overweight"
    OBESITY_I = "obesity class I"
    OBESITY_II = "obesity class II"
    OBESITY_III = "obesity class III"


class BmrFormula(str, Enum):
    KATCH_MCARDLE = "katch_mcardle"
    MIFFLIN_ST_JEOR = "mifflin_st_jeor"


class MealSlot(str, Enum):
    BREAKFAST = "breakfast"
    SNACK_1 = "snack1"
    LUNCH = "lunch"
    SNACK_2 = "snack2"
    DINNER = "dinner"


# ============================================================
# MEASUREMENT INPUT
# ============================================================

# Upper bounds, well above any human measurement
MAX_WEIGHT_KG = Decimal("700")
MAX_LENGTH_CM = Decimal("300")
MAX_SKINFOLD_MM = Decimal("100")


def _measurement_field(description: str, le: Decimal = MAX_LENGTH_CM):
    # Non-negative, bounded, at most 2 fractional digits, or absent
    return Field(default=None, ge=0, le=le, decimal_places=2, description=description)


class MeasurementInput(BaseModel):
    """
    One anthropometric measurement session.

    Every field is optional. A stage of the pipeline only runs when the
    fields it needs are all present; see services/calculator.py.
    """
    # Basic
    weight_kg: Decimal | None = _measurement_field("Body weight (kg)", le=MAX_WEIGHT_KG)
    height_cm: Decimal | None = _measurement_field("Standing height (cm)")
    seated_height_cm: Decimal | None = _measurement_field("Seated height (cm)")

    # Circumferences in centimeters
    circ_head: Decimal | None = _measurement_field("Head circumference (cm)")
    circ_arm_relaxed: Decimal | None = _measurement_field("Relaxed arm (cm)")
    circ_arm_flexed: Decimal | None = _measurement_field("Flexed and tensed arm (cm)")
    circ_forearm: Decimal | None = _measurement_field("Forearm (cm)")
    circ_thorax: Decimal | None = _measurement_field("Mesosternale chest (cm)")
    circ_waist: Decimal | None = _measurement_field("Waist (cm)")
    circ_hip: Decimal | None = _measurement_field("Hip / gluteal (cm)")
    circ_thigh_superior: Decimal | None = _measurement_field("Thigh, 1 cm below gluteal fold (cm)")
    circ_thigh_medial: Decimal | None = _measurement_field("Mid-thigh (cm)")
    circ_calf: Decimal | None = _measurement_field("Maximum calf (cm)")

    # Skinfolds in millimeters
    skinfold_triceps: Decimal | None = _measurement_field("Triceps skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_biceps: Decimal | None = _measurement_field("Biceps skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_subscapular: Decimal | None = _measurement_field("Subscapular skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_suprailiac: Decimal | None = _measurement_field("Iliac crest skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_supraspinal: Decimal | None = _measurement_field("Supraspinale skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_abdominal: Decimal | None = _measurement_field("Abdominal skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_thigh: Decimal | None = _measurement_field("Front thigh skinfold (mm)", le=MAX_SKINFOLD_MM)
    skinfold_calf: Decimal | None = _measurement_field("Medial calf skinfold (mm)", le=MAX_SKINFOLD_MM)

    @field_validator("*", mode="before")
    @classmethod
    def parse_decimal_text(cls, value):
        """Reject malformed numbers before they reach any formula."""
        return parse_measurement_value(value)


# ============================================================
# PATIENT CONTEXT & PREFERENCES
# ============================================================

class ActivityProfile(BaseModel):
    """
    Training habits as entered on the patient profile.

    The free-text fields feed the heuristic in services/activity.py.
    Callers that need exact control can set `training_days_per_week`
    (replaces the day-text parse) or `level` (replaces the whole heuristic).
    """
    trains: bool = Field(default=False, description="Does the patient train regularly?")
    training_days: str | None = Field(
        default=None, max_length=255,
        description="Free text, e.g. 'Lunes, Miércoles, Viernes' or 'mon-fri'"
    )
    schedule: str | None = Field(
        default=None, max_length=255, description="Free text, e.g. '07:00-08:30, 18:00-19:30'"
    )
    sport: str | None = Field(default=None, max_length=255, description="Sport or discipline")

    training_days_per_week: int | None = Field(default=None, ge=0, le=7)
    level: ActivityLevel | None = None


class PatientContext(BaseModel):
    """Per-call patient context. Age is computed by the caller."""
    age: int | None = Field(default=None, ge=0, le=130, description="Age in whole years")
    sex: Sex = Sex.UNSPECIFIED
    goal: Goal = Goal.MAINTAIN
    activity_profile: ActivityProfile = Field(default_factory=ActivityProfile)


class NutritionPreferences(BaseModel):
    """Practice-level macro multipliers (g per kg per day)."""
    protein_multiplier_loss: Decimal = Field(default=Decimal("1.8"), ge=Decimal("0.5"), le=Decimal("5"))
    protein_multiplier_maintain: Decimal = Field(default=Decimal("1.8"), ge=Decimal("0.5"), le=Decimal("5"))
    protein_multiplier_gain: Decimal = Field(default=Decimal("2.0"), ge=Decimal("0.5"), le=Decimal("5"))
    fat_per_kg: Decimal = Field(default=Decimal("0.9"), ge=Decimal("0.1"), le=Decimal("5"))

    def protein_multiplier(self, goal: Goal) -> Decimal:
        """Protein g/kg for the given goal."""
        if goal == Goal.LOSE:
            return self.protein_multiplier_loss
        if goal == Goal.GAIN:
            return self.protein_multiplier_gain
        return self.protein_multiplier_maintain


# ============================================================
# CALCULATION RESULT
# ============================================================

class MealSlotAllocation(BaseModel):
    """Share of the daily targets assigned to one meal slot."""
    calories: Decimal
    protein: Decimal
    carbs: Decimal
    fats: Decimal


class CalculationResult(BaseModel):
    """
    Sparse engine output.

    A field is present only if its prerequisite inputs were complete.
    Consumers must not infer one field from the presence of another.

    Precision: 2 decimals, except calories (whole kcal), the activity
    multiplier and waist-hip ratio (3 decimals) and body density (4).
    """
    # Body size
    bmi: Decimal | None = None
    bmi_classification: BmiClassification | None = None

    # Skinfolds and composition
    sum_of_4_skinfolds: Decimal | None = None
    sum_of_6_skinfolds: Decimal | None = None
    body_density: Decimal | None = None
    body_fat_percentage: Decimal | None = None
    lean_mass_kg: Decimal | None = None
    waist_hip_ratio: Decimal | None = None

    # Energy
    basal_metabolic_rate: Decimal | None = None
    bmr_formula: BmrFormula | None = None
    activity_multiplier: Decimal | None = None
    maintenance_calories: Decimal | None = None
    target_calories: Decimal | None = None
    calorie_objective: Goal | None = None

    # Macros
    protein_per_day: Decimal | None = None
    carbs_per_day: Decimal | None = None
    fats_per_day: Decimal | None = None
    per_meal_plan: dict[MealSlot, MealSlotAllocation] | None = None

    # Reference comparisons, against one adult table for both sexes
    weight_z_score: Decimal | None = None
    height_z_score: Decimal | None = None


# ============================================================
# HTTP REQUEST SCHEMAS
# ============================================================

class PatientPayload(BaseModel):
    """
    Patient data as sent by the route layer.

    Either `age` or `birth_date` may be given. With `birth_date`, the age is
    computed at the measurement date.
    """
    age: int | None = Field(default=None, ge=0, le=130)
    birth_date: datetime.date | None = None
    sex: Sex = Sex.UNSPECIFIED
    goal: Goal = Goal.MAINTAIN
    activity_profile: ActivityProfile = Field(default_factory=ActivityProfile)


class CalculationRequest(BaseModel):
    """Body of POST /calculations."""
    measurement: MeasurementInput
    patient: PatientPayload = Field(default_factory=PatientPayload)
    measured_on: datetime.date | None = Field(
        default=None, description="Measurement date; required when only birth_date is known"
    )
    preferences: NutritionPreferences | None = None

    @model_validator(mode="after")
    def check_age_source(self) -> "CalculationRequest":
        """birth_date without a measurement date cannot yield an age."""
        if self.patient.age is None and self.patient.birth_date is not None and self.measured_on is None:
            raise ValueError("measured_on is required when age is derived from birth_date")
        return self


class ReferenceValue(BaseModel):
    mean: Decimal
    sd: Decimal


class ReferenceTablesResponse(BaseModel):
    """Static ISAK reference constants."""
    etm: dict[str, Decimal]
    reference_values: dict[str, ReferenceValue]
    adjustment_factor: Decimal
