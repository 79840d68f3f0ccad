"""
ISAK Reference Values
======================
Static constants used to compare a measurement against a reference
population:

  - ETM_VALUES: technical error of measurement per field (same unit as the
    field). Used to judge whether a change between sessions is real.
  - REFERENCE_VALUES: mean and standard deviation per field, for Z-scores.

  Z = (value - mean) / sd

The reference population is a single adult table, not split by sex. A
female patient is compared against the same mean and sd as a male one, so
her Z-scores read as distance from that mixed reference, not from a
female norm.

These tables are versioned with the code, never with patient data.
"""

import logging
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

from nutricalc.services.normalizer import Numeric, to_decimal_or_none

logger = logging.getLogger(__name__)

ADJUSTMENT_FACTOR = Decimal("0.935")


class MeasureKind(str, Enum):
    SKINFOLD = "skinfold"
    PERIMETER = "perimeter"
    DIAMETER = "diameter"
    BASIC = "basic"


class ReferenceStats(NamedTuple):
    mean: Decimal
    sd: Decimal


def _d(value: str) -> Decimal:
    return Decimal(value)


ETM_VALUES: Mapping[str, Decimal] = MappingProxyType({
    "weight": _d("0.05"),
    "height": _d("0.11"),
    "seated_height": _d("0.23"),
    "biacromial": _d("0.39"),
    "thorax_transverse": _d("0.61"),
    "thorax_anteroposterior": _d("0.68"),
    "biiliocristal": _d("0.64"),
    "humeral": _d("0.40"),
    "femoral": _d("0.30"),
    "head": _d("0.16"),
    "arm_relaxed": _d("0.63"),
    "arm_flexed": _d("0.69"),
    "forearm": _d("0.48"),
    "thorax_circ": _d("0.35"),
    "waist": _d("0.54"),
    "hip": _d("0.21"),
    "thigh_superior": _d("0.32"),
    "thigh_medial": _d("0.33"),
    "calf": _d("0.28"),
    "triceps": _d("1.55"),
    "subscapular": _d("1.59"),
    "supraspinal": _d("2.19"),
    "abdominal": _d("1.69"),
    "thigh_skinfold": _d("1.54"),
    "calf_skinfold": _d("1.62"),
})

REFERENCE_VALUES: Mapping[str, ReferenceStats] = MappingProxyType({
    "weight": ReferenceStats(_d("74.6"), _d("9.8")),
    "height": ReferenceStats(_d("179.5"), _d("7.2")),
    "seated_height": ReferenceStats(_d("93.5"), _d("3.8")),
    "biacromial": ReferenceStats(_d("40.8"), _d("2.1")),
    "thorax_transverse": ReferenceStats(_d("28.5"), _d("1.9")),
    "thorax_anteroposterior": ReferenceStats(_d("19.3"), _d("1.5")),
    "biiliocristal": ReferenceStats(_d("30.8"), _d("2.2")),
    "humeral": ReferenceStats(_d("7.0"), _d("0.4")),
    "femoral": ReferenceStats(_d("9.9"), _d("0.5")),
    "head": ReferenceStats(_d("58.2"), _d("1.7")),
    "arm_relaxed": ReferenceStats(_d("29.5"), _d("2.4")),
    "arm_flexed": ReferenceStats(_d("31.8"), _d("2.5")),
    "forearm": ReferenceStats(_d("27.1"), _d("1.5")),
    "thorax_circ": ReferenceStats(_d("94.2"), _d("6.8")),
    "waist": ReferenceStats(_d("76.9"), _d("6.4")),
    "hip": ReferenceStats(_d("100.8"), _d("5.2")),
    "thigh_superior": ReferenceStats(_d("59.5"), _d("4.1")),
    "thigh_medial": ReferenceStats(_d("53.2"), _d("3.7")),
    "calf": ReferenceStats(_d("37.6"), _d("2.2")),
    "triceps": ReferenceStats(_d("9.8"), _d("4.2")),
    "subscapular": ReferenceStats(_d("11.2"), _d("4.5")),
    "supraspinal": ReferenceStats(_d("9.8"), _d("4.2")),
    "abdominal": ReferenceStats(_d("17.5"), _d("6.8")),
    "thigh_skinfold": ReferenceStats(_d("14.8"), _d("5.9")),
    "calf_skinfold": ReferenceStats(_d("11.5"), _d("4.5")),
})

_UNKNOWN_REFERENCE = ReferenceStats(Decimal(0), Decimal(1))


def get_etm(field: str) -> Decimal:
    """Technical error of measurement for a field (0 if unknown)."""
    return ETM_VALUES.get(field, Decimal(0))


def get_reference_values(field: str) -> ReferenceStats:
    """Reference mean/SD for a field (mean 0, sd 1 if unknown)."""
    return REFERENCE_VALUES.get(field, _UNKNOWN_REFERENCE)


def calculate_z_score(value: Decimal, mean: Decimal, sd: Decimal) -> Decimal:
    """(value - mean) / sd; 0 when sd is 0."""
    if sd == 0:
        return Decimal(0)
    return (value - mean) / sd


def z_score_for(field: str, value: Numeric) -> Decimal | None:
    """Z-score of a raw value against the reference table, or None if absent."""
    number = to_decimal_or_none(value)
    if number is None:
        return None
    stats = get_reference_values(field)
    return calculate_z_score(number, stats.mean, stats.sd)


def calculate_adjusted_value(raw_value: Decimal, kind: MeasureKind) -> Decimal:
    """Scale skinfolds, perimeters and diameters by the adjustment factor."""
    if kind == MeasureKind.BASIC:
        return raw_value
    return raw_value * ADJUSTMENT_FACTOR
