"""
Body Fat Calculation Service
==============================
Implements the Durnin & Womersley 4-skinfold method for estimating body fat
percentage.

Durnin & Womersley regress body density on the log of the sum of four
skinfolds (biceps, triceps, subscapular, suprailiac), with separate
constants for each sex and age band. Body density is then converted to
body fat percentage using the Siri equation.

FORMULA (Durnin & Womersley, 1974):
  Body Density = C - M × log10(S)

  Where S = sum of 4 skinfolds (in mm) and (C, M) depend on sex and age:

  Age      Male C   Male M   Female C  Female M
  < 17     1.1533   0.0643   1.1369    0.0598
  17-19    1.1620   0.0630   1.1549    0.0678
  20-29    1.1631   0.0632   1.1599    0.0717
  30-39    1.1422   0.0544   1.1423    0.0632
  40-49    1.1620   0.0700   1.1333    0.0612
  50+      1.1715   0.0779   1.1339    0.0645

  Unspecified sex uses the young-adult average (C = 1.1615, M = 0.0675).

SIRI EQUATION (1961):
  Body Fat % = ((4.95 / Body Density) - 4.50) × 100

PLAUSIBILITY:
  Results outside 3% - 50% are discarded, not clamped. A value outside that
  range almost always means a data-entry error upstream.
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from nutricalc.schemas import Sex
from nutricalc.services.normalizer import Numeric, to_decimal_or_none

logger = logging.getLogger(__name__)

MIN_BODY_FAT_PERCENT = Decimal("3")
MAX_BODY_FAT_PERCENT = Decimal("50")


class DensityConstants(NamedTuple):
    c: Decimal
    m: Decimal


# (upper age bound exclusive, constants); the last band is open-ended
_MALE_BANDS: tuple[tuple[int | None, DensityConstants], ...] = (
    (17, DensityConstants(Decimal("1.1533"), Decimal("0.0643"))),
    (20, DensityConstants(Decimal("1.1620"), Decimal("0.0630"))),
    (30, DensityConstants(Decimal("1.1631"), Decimal("0.0632"))),
    (40, DensityConstants(Decimal("1.1422"), Decimal("0.0544"))),
    (50, DensityConstants(Decimal("1.1620"), Decimal("0.0700"))),
    (None, DensityConstants(Decimal("1.1715"), Decimal("0.0779"))),
)

_FEMALE_BANDS: tuple[tuple[int | None, DensityConstants], ...] = (
    (17, DensityConstants(Decimal("1.1369"), Decimal("0.0598"))),
    (20, DensityConstants(Decimal("1.1549"), Decimal("0.0678"))),
    (30, DensityConstants(Decimal("1.1599"), Decimal("0.0717"))),
    (40, DensityConstants(Decimal("1.1423"), Decimal("0.0632"))),
    (50, DensityConstants(Decimal("1.1333"), Decimal("0.0612"))),
    (None, DensityConstants(Decimal("1.1339"), Decimal("0.0645"))),
)

UNSPECIFIED_SEX_CONSTANTS = DensityConstants(Decimal("1.1615"), Decimal("0.0675"))


class BodyFatEstimate(NamedTuple):
    body_density: Decimal
    body_fat_percent: Decimal


def get_density_constants(sex: Sex, age_years: int) -> DensityConstants:
    """
    Select the Durnin & Womersley (C, M) pair for a sex and age.

    Reference:
        Durnin, J.V.G.A. & Womersley, J. (1974). Body fat assessed from total
        body density and its estimation from skinfold thickness. British
        Journal of Nutrition, 32, 77-97.
    """
    if sex == Sex.MALE:
        bands = _MALE_BANDS
    elif sex == Sex.FEMALE:
        bands = _FEMALE_BANDS
    else:
        return UNSPECIFIED_SEX_CONSTANTS

    for upper_age, constants in bands:
        if upper_age is None or age_years < upper_age:
            return constants
    # unreachable: the last band is open-ended
    return bands[-1][1]


def calculate_body_density_durnin_womersley(
    sum_of_4_skinfolds_mm: Decimal,
    age_years: int,
    sex: Sex,
) -> Decimal:
    """
    Calculate body density (g/cm³) from the 4-site skinfold sum.

    The sum must be positive; log10 is undefined otherwise.
    """
    constants = get_density_constants(sex, age_years)
    body_density = constants.c - constants.m * sum_of_4_skinfolds_mm.log10()

    logger.debug(
        f"Durnin-Womersley calculation: "
        f"sum_skinfolds={sum_of_4_skinfolds_mm}mm, age={age_years}, sex={sex.value}, "
        f"C={constants.c}, M={constants.m}, body_density={body_density:.6f} g/cm³"
    )

    return body_density


def body_density_to_fat_percent(body_density: Decimal) -> Decimal | None:
    """
    Convert body density to body fat percentage using the Siri equation.

    Formula:
        Body Fat % = ((4.95 / Body Density) - 4.50) × 100

    Returns:
        Body fat percentage, or None if the density is not positive or the
        result falls outside the plausible 3% - 50% range.

    Reference:
        Siri, W.E. (1961). Body composition from fluid spaces and density:
        Analysis of methods. In J. Brozek & A. Henschel (Eds.), Techniques for
        Measuring Body Composition (pp. 223-224). Washington, DC: National
        Academy of Sciences.
    """
    if body_density <= 0:
        logger.debug(f"Invalid body density: {body_density}. Discarding.")
        return None

    fat_percent = (Decimal("4.95") / body_density - Decimal("4.50")) * 100

    if fat_percent < MIN_BODY_FAT_PERCENT or fat_percent > MAX_BODY_FAT_PERCENT:
        logger.debug(
            f"Siri result {fat_percent:.2f}% outside "
            f"[{MIN_BODY_FAT_PERCENT}, {MAX_BODY_FAT_PERCENT}]. Discarding."
        )
        return None

    logger.debug(f"Siri equation: density={body_density:.6f} -> fat={fat_percent:.2f}%")
    return fat_percent


def calculate_body_fat_from_skinfolds(
    sum_of_4_skinfolds: Numeric,
    age_years: int | None,
    sex: Sex | None,
) -> BodyFatEstimate | None:
    """
    Complete body fat estimate from the 4-site skinfold sum.

    Returns None when the sum, age or sex is missing, when the sum is not
    positive, or when the result is implausible.
    """
    total = to_decimal_or_none(sum_of_4_skinfolds)
    if total is None or age_years is None or sex is None:
        return None
    if total <= 0:
        return None

    body_density = calculate_body_density_durnin_womersley(total, age_years, sex)
    body_fat_percent = body_density_to_fat_percent(body_density)
    if body_fat_percent is None:
        return None

    return BodyFatEstimate(body_density=body_density, body_fat_percent=body_fat_percent)
