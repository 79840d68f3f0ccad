"""
Calculations Router
====================
Stateless endpoints over the calculation engine. Nothing is stored; the
caller persists the returned values.

Endpoints:
  POST /calculations/                   - Run the full pipeline for one measurement
  GET  /calculations/reference-values   - ISAK reference tables (ETM, mean/SD)
"""

import datetime
import logging

from fastapi import APIRouter, HTTPException

from nutricalc.schemas import (
    CalculationRequest,
    CalculationResult,
    PatientContext,
    ReferenceTablesResponse,
    ReferenceValue,
)
from nutricalc.services.calculator import calculate_all
from nutricalc.services.reference import ADJUSTMENT_FACTOR, ETM_VALUES, REFERENCE_VALUES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculations", tags=["Calculations"])


@router.post("/", response_model=CalculationResult)
async def calculate_measurement(request: CalculationRequest):
    """
    Calculate every derived indicator for a measurement.

    The patient's age may be sent directly or as `birth_date`, in which case
    it is computed at `measured_on`. Fields that cannot be computed from the
    data provided are returned as null.
    """
    try:
        context = _build_context(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = calculate_all(request.measurement, context, request.preferences)

    logger.info(
        f"Calculated measurement: age={context.age}, sex={context.sex.value}, "
        f"goal={context.goal.value}, bmi={result.bmi}, "
        f"body_fat={result.body_fat_percentage}, target_calories={result.target_calories}"
    )
    return result


@router.get("/reference-values", response_model=ReferenceTablesResponse)
async def get_reference_tables():
    """Return the static ISAK reference tables used for Z-scores."""
    return ReferenceTablesResponse(
        etm=dict(ETM_VALUES),
        reference_values={
            field: ReferenceValue(mean=stats.mean, sd=stats.sd)
            for field, stats in REFERENCE_VALUES.items()
        },
        adjustment_factor=ADJUSTMENT_FACTOR,
    )


# ----- Helper Functions -----

def calculate_age(birth_date: datetime.date, on_date: datetime.date) -> int:
    """
    Age in whole years at `on_date`.

    Raises:
        ValueError: If the birth date is after `on_date`.
    """
    if birth_date > on_date:
        raise ValueError(
            f"Birth date {birth_date} is after the measurement date {on_date}."
        )
    age = on_date.year - birth_date.year
    if (on_date.month, on_date.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def _build_context(request: CalculationRequest) -> PatientContext:
    """Build the engine context, deriving age from birth date if needed."""
    patient = request.patient
    age = patient.age
    if age is None and patient.birth_date is not None:
        age = calculate_age(patient.birth_date, request.measured_on)  # type: ignore[arg-type]

    return PatientContext(
        age=age,
        sex=patient.sex,
        goal=patient.goal,
        activity_profile=patient.activity_profile,
    )
