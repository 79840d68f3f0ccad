"""
Skinfold Aggregator
====================
Sums of caliper skinfolds, in millimeters.

  - Sum of 4 (Durnin & Womersley): triceps, biceps, subscapular, suprailiac
  - Sum of 6 (ISAK):               triceps, subscapular, supraspinal,
                                   abdominal, front thigh, medial calf

Both sums are all-or-nothing. The equations that consume them are
calibrated against the complete site set, so a partial sum is never
reported.
"""

import logging
from decimal import Decimal

from nutricalc.schemas import MeasurementInput
from nutricalc.services.normalizer import Numeric, to_decimal_or_none

logger = logging.getLogger(__name__)

SUM_OF_4_SITES = (
    "skinfold_triceps",
    "skinfold_biceps",
    "skinfold_subscapular",
    "skinfold_suprailiac",
)

SUM_OF_6_SITES = (
    "skinfold_triceps",
    "skinfold_subscapular",
    "skinfold_supraspinal",
    "skinfold_abdominal",
    "skinfold_thigh",
    "skinfold_calf",
)


def sum_complete(values: list[Numeric]) -> Decimal | None:
    """
    Sum the values if every one of them is a usable number.

    A single missing or unparsable value makes the whole sum None.
    """
    numbers = [to_decimal_or_none(v) for v in values]
    if any(n is None for n in numbers):
        return None
    return sum(numbers, Decimal(0))


def calculate_sum_of_4_skinfolds(measurement: MeasurementInput) -> Decimal | None:
    """Durnin–Womersley 4-site sum, or None if any site is missing."""
    total = sum_complete([getattr(measurement, site) for site in SUM_OF_4_SITES])
    logger.debug(f"Sum of 4 skinfolds: {total}")
    return total


def calculate_sum_of_6_skinfolds(measurement: MeasurementInput) -> Decimal | None:
    """ISAK 6-site sum, or None if any site is missing."""
    total = sum_complete([getattr(measurement, site) for site in SUM_OF_6_SITES])
    logger.debug(f"Sum of 6 skinfolds: {total}")
    return total
