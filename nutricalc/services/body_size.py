"""
Body-Size Indicators
=====================
Body Mass Index and its WHO classification band.

FORMULA:
  BMI = weight (kg) / height (m)²

BANDS (inclusive lower bound, exclusive upper bound):
  < 18.5        underweight
  18.5 – 25     normal weight
  25   – 30     overweight
  30   – 35     obesity class I
  35   – 40     obesity class II
  >= 40         obesity class III
"""

import logging
from decimal import Decimal

from nutricalc.schemas import BmiClassification
from nutricalc.services.normalizer import Numeric, to_decimal_or_none

logger = logging.getLogger(__name__)

# Upper bounds of each band, in ascending order
BMI_BANDS: tuple[tuple[Decimal, BmiClassification], ...] = (
    (Decimal("18.5"), BmiClassification.UNDERWEIGHT),
    (Decimal("25"), BmiClassification.NORMAL_WEIGHT),
    (Decimal("30"), BmiClassification.OVERWEIGHT),
    (Decimal("35"), BmiClassification.OBESITY_I),
    (Decimal("40"), BmiClassification.OBESITY_II),
)


def calculate_bmi(weight_kg: Numeric, height_cm: Numeric) -> Decimal | None:
    """
    Calculate BMI from weight (kg) and height (cm).

    Returns None (not zero) when either value is missing or height is not
    positive.
    """
    weight = to_decimal_or_none(weight_kg)
    height = to_decimal_or_none(height_cm)
    if weight is None or height is None or height <= 0:
        return None

    height_m = height / 100
    bmi = weight / (height_m * height_m)

    logger.debug(f"BMI calculation: weight={weight}kg, height={height}cm -> bmi={bmi:.4f}")
    return bmi


def classify_bmi(bmi: Decimal) -> BmiClassification:
    """Map a BMI value to its classification band."""
    for upper_bound, classification in BMI_BANDS:
        if bmi < upper_bound:
            return classification
    return BmiClassification.OBESITY_III
