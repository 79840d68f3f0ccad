"""
Lean mass and waist-hip ratio.

  Lean mass (kg)  = weight × (1 - body fat % / 100)
  Waist-hip ratio = waist / hip

The two are independent: the ratio does not need any skinfold data.
"""

import logging
from decimal import Decimal

from nutricalc.services.normalizer import Numeric, to_decimal_or_none

logger = logging.getLogger(__name__)


def calculate_lean_mass(weight_kg: Numeric, body_fat_percent: Numeric) -> Decimal | None:
    """Fat-free mass in kg, or None without both weight and body fat %."""
    weight = to_decimal_or_none(weight_kg)
    fat_percent = to_decimal_or_none(body_fat_percent)
    if weight is None or fat_percent is None:
        return None

    lean_mass = weight * (1 - fat_percent / 100)
    logger.debug(f"Lean mass: weight={weight}kg, fat={fat_percent:.2f}% -> {lean_mass:.3f}kg")
    return lean_mass


def calculate_waist_hip_ratio(waist_cm: Numeric, hip_cm: Numeric) -> Decimal | None:
    """Waist / hip, or None when either is missing or hip is zero."""
    waist = to_decimal_or_none(waist_cm)
    hip = to_decimal_or_none(hip_cm)
    if waist is None or hip is None or hip == 0:
        return None
    return waist / hip
