"""
Activity Multiplier Heuristic
==============================
Infers a TDEE activity multiplier from the training habits written on a
patient profile. This is a heuristic, not a formula, and it is kept apart
from the numeric core so it can be tested (or bypassed) on its own.

RULES:
  1. Baseline 1.2 (sedentary).
  2. If the patient trains, tier by training days per week:
       <= 2 -> 1.375   <= 4 -> 1.55   <= 5 -> 1.725   else -> 1.9
     An unreadable day count is treated as <= 2.
  3. +0.05 if the schedule suggests two sessions a day.
  4. +0.05 if the sport is on the high-demand list.
  5. Clamp to [1.1, 2.2].

BYPASS:
  - profile.level                  -> fixed multiplier, no text parsing
  - profile.training_days_per_week -> replaces the day-text parse only

Day texts are usually Spanish or English, e.g.:
  "Lunes, Miércoles, Viernes"  -> 3
  "Lunes a Sábado"             -> 6
  "mon-fri"                    -> 5
  "todos los días"             -> 7
  "3 veces por semana"         -> 3
"""

import logging
import re
import unicodedata
from decimal import Decimal
from typing import NamedTuple

from nutricalc.schemas import ActivityLevel, ActivityProfile

logger = logging.getLogger(__name__)

SEDENTARY_MULTIPLIER = Decimal("1.2")
TWO_A_DAY_BONUS = Decimal("0.05")
HIGH_DEMAND_SPORT_BONUS = Decimal("0.05")
MIN_MULTIPLIER = Decimal("1.1")
MAX_MULTIPLIER = Decimal("2.2")

ACTIVITY_LEVEL_MULTIPLIERS: dict[ActivityLevel, Decimal] = {
    ActivityLevel.SEDENTARY: Decimal("1.2"),
    ActivityLevel.LIGHT: Decimal("1.375"),
    ActivityLevel.MODERATE: Decimal("1.55"),
    ActivityLevel.ACTIVE: Decimal("1.725"),
    ActivityLevel.VERY_ACTIVE: Decimal("1.9"),
}

# (max days per week inclusive, multiplier); anything above uses the last
_TRAINING_DAY_TIERS: tuple[tuple[int, Decimal], ...] = (
    (2, Decimal("1.375")),
    (4, Decimal("1.55")),
    (5, Decimal("1.725")),
)
_MAX_TIER_MULTIPLIER = Decimal("1.9")

# Day words (accent-free, lowercase) -> weekday index, Monday = 0
_DAY_WORDS: dict[str, int] = {
    "lunes": 0, "lun": 0, "monday": 0, "mon": 0,
    "martes": 1, "mar": 1, "tuesday": 1, "tues": 1, "tue": 1,
    "miercoles": 2, "mie": 2, "mier": 2, "wednesday": 2, "wed": 2,
    "jueves": 3, "jue": 3, "thursday": 3, "thurs": 3, "thur": 3, "thu": 3,
    "viernes": 4, "vie": 4, "friday": 4, "fri": 4,
    "sabado": 5, "sab": 5, "saturday": 5, "sat": 5,
    "domingo": 6, "dom": 6, "sunday": 6, "sun": 6,
}

_DAY_PATTERN = "|".join(sorted(_DAY_WORDS, key=len, reverse=True))
_DAY_RE = re.compile(rf"\b({_DAY_PATTERN})\b")
_DAY_RANGE_RE = re.compile(
    rf"\b({_DAY_PATTERN})\b\s*(?:-|–|a|al|to|through|thru|hasta)\s*\b({_DAY_PATTERN})\b"
)
# Three or more days joined by hyphens ("lun-mie-vie") form a list, not a range
_HYPHEN_LIST_RE = re.compile(
    rf"\b(?:{_DAY_PATTERN})\b(?:\s*[-–]\s*\b(?:{_DAY_PATTERN})\b){{2,}}"
)
_EVERY_DAY_RE = re.compile(
    r"\b(todos los dias|toda la semana|diario|diariamente|every ?day|daily|7/7)\b"
)
_DAY_COUNT_RE = re.compile(
    r"\b([0-7])\s*(?:x\b|veces|dias|dia\b|days|day\b|times|d\b|/7|por semana|a la semana|per week)"
)
_BARE_COUNT_RE = re.compile(r"^\s*([0-7])\s*$")

_CLOCK_TIME_RE = re.compile(r"\b\d{1,2}:\d{2}\b")
_TWO_A_DAY_PHRASES = (
    "doble turno",
    "doble sesion",
    "doble entrenamiento",
    "dos veces al dia",
    "2 veces al dia",
    "manana y tarde",
    "manana y noche",
    "am y pm",
    "two-a-day",
    "two a day",
    "twice a day",
    "twice daily",
    "double session",
    "am and pm",
    "morning and evening",
    "morning and afternoon",
)

HIGH_DEMAND_SPORT_KEYWORDS = (
    "triatlon", "triatlones", "triathlon", "triathlons", "ironman",
    "maraton", "maratones", "marathon", "marathons",
    "ultra", "ultras", "ultramaraton", "ultramarathon", "ultratrail", "trail",
    "crossfit", "hyrox",
    "ciclismo", "cycling",
    "natacion", "swimming",
    "remo", "rowing",
    "rugby",
    "futbol", "soccer", "football",
    "basquet", "baloncesto", "basketball",
    "hockey",
    "boxeo", "boxing", "mma", "artes marciales", "martial arts", "judo",
    "lucha", "wrestling",
    "halterofilia", "weightlifting", "powerlifting",
    "atletismo", "athletics",
    "alto rendimiento", "elite",
)
_HIGH_DEMAND_RE = re.compile(
    r"\b(" + "|".join(re.escape(k) for k in HIGH_DEMAND_SPORT_KEYWORDS) + r")\b"
)


class ActivityAssessment(NamedTuple):
    multiplier: Decimal
    training_days: int | None
    two_a_day: bool
    high_demand_sport: bool


def normalize_text(text: str | None) -> str:
    """Lowercase and strip accents ("Miércoles" -> "miercoles")."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


def parse_training_days(text: str | None) -> int | None:
    """
    Count training days per week from free text.

    Returns None when nothing recognizable is found.
    """
    normalized = normalize_text(text)
    if not normalized:
        return None

    if _EVERY_DAY_RE.search(normalized):
        return 7

    normalized = _HYPHEN_LIST_RE.sub(lambda m: re.sub(r"[-–]", ",", m.group(0)), normalized)

    days: set[int] = set()

    # Ranges first ("lunes a viernes", "mon-fri"); they may wrap the week
    for start_word, end_word in _DAY_RANGE_RE.findall(normalized):
        start, end = _DAY_WORDS[start_word], _DAY_WORDS[end_word]
        span = (end - start) % 7
        days.update((start + offset) % 7 for offset in range(span + 1))
    remainder = _DAY_RANGE_RE.sub(" ", normalized)

    for word in _DAY_RE.findall(remainder):
        days.add(_DAY_WORDS[word])

    if days:
        return len(days)

    match = _DAY_COUNT_RE.search(normalized) or _BARE_COUNT_RE.match(normalized)
    if match:
        return int(match.group(1))

    return None


def suggests_two_a_day(schedule: str | None) -> bool:
    """True if the schedule text describes two sessions in one day."""
    normalized = normalize_text(schedule)
    if not normalized:
        return False
    if any(phrase in normalized for phrase in _TWO_A_DAY_PHRASES):
        return True
    # One session is a single "07:00-08:30" range; a second range adds times
    return len(_CLOCK_TIME_RE.findall(normalized)) >= 3


def is_high_demand_sport(sport: str | None) -> bool:
    """True if the sport text matches a high-demand keyword."""
    normalized = normalize_text(sport)
    return bool(normalized) and _HIGH_DEMAND_RE.search(normalized) is not None


def multiplier_for_training_days(training_days: int | None) -> Decimal:
    """Tier multiplier for someone who trains the given days per week."""
    days = training_days if training_days is not None else 0
    for max_days, multiplier in _TRAINING_DAY_TIERS:
        if days <= max_days:
            return multiplier
    return _MAX_TIER_MULTIPLIER


def clamp_multiplier(multiplier: Decimal) -> Decimal:
    """Keep the multiplier inside [1.1, 2.2]."""
    return max(MIN_MULTIPLIER, min(multiplier, MAX_MULTIPLIER))


def assess_activity(profile: ActivityProfile | None) -> ActivityAssessment:
    """Run the heuristic and report what it found."""
    if profile is None:
        return ActivityAssessment(SEDENTARY_MULTIPLIER, None, False, False)

    if profile.level is not None:
        multiplier = clamp_multiplier(ACTIVITY_LEVEL_MULTIPLIERS[profile.level])
        return ActivityAssessment(multiplier, profile.training_days_per_week, False, False)

    if not profile.trains:
        return ActivityAssessment(SEDENTARY_MULTIPLIER, None, False, False)

    if profile.training_days_per_week is not None:
        training_days = profile.training_days_per_week
    else:
        training_days = parse_training_days(profile.training_days)

    multiplier = multiplier_for_training_days(training_days)

    two_a_day = suggests_two_a_day(profile.schedule)
    if two_a_day:
        multiplier += TWO_A_DAY_BONUS

    high_demand = is_high_demand_sport(profile.sport)
    if high_demand:
        multiplier += HIGH_DEMAND_SPORT_BONUS

    multiplier = clamp_multiplier(multiplier)

    logger.debug(
        f"Activity heuristic: days={training_days}, two_a_day={two_a_day}, "
        f"high_demand_sport={high_demand} -> multiplier={multiplier}"
    )
    return ActivityAssessment(multiplier, training_days, two_a_day, high_demand)


def infer_activity_multiplier(profile: ActivityProfile | None) -> Decimal:
    """Activity multiplier for a profile (1.2 when there is no profile)."""
    return assess_activity(profile).multiplier
