"""
volume_progression
------------------
Weekly distance progression with safety caps and deload weeks.

- Starting / maximum weekly km by race distance and experience
- 8% weekly increase, rising to 9.6% after a plateau of steady increases
- Hard 10% ceiling between consecutive non-deload weeks (after rounding)
- Deload weeks drop 20-30% below the working volume
"""

from __future__ import annotations

from math import floor
from typing import Dict, List, Optional, Tuple

from loguru import logger

from plan_models import StageReport, WeeklyVolume
from training_constants import DIFFICULTY_LEVELS, RACE_DISTANCES


BASE_WEEKLY_DISTANCE: Dict[str, Dict[str, int]] = {
    "5K": {"beginner": 24, "intermediate": 32, "advanced": 40},
    "10K": {"beginner": 32, "intermediate": 40, "advanced": 48},
    "Half Marathon": {"beginner": 40, "intermediate": 48, "advanced": 64},
    "Marathon": {"beginner": 48, "intermediate": 64, "advanced": 80},
}

MAX_WEEKLY_DISTANCE: Dict[str, Dict[str, int]] = {
    "5K": {"beginner": 56, "intermediate": 72, "advanced": 88},
    "10K": {"beginner": 72, "intermediate": 88, "advanced": 104},
    "Half Marathon": {"beginner": 88, "intermediate": 104, "advanced": 128},
    "Marathon": {"beginner": 104, "intermediate": 128, "advanced": 160},
}

SAFE_WEEKLY_INCREASE = 0.08
MAX_WEEKLY_INCREASE = 0.10
PLATEAU_INCREASE = min(MAX_WEEKLY_INCREASE, SAFE_WEEKLY_INCREASE * 1.2)
AGGRESSIVE_THRESHOLD = 0.095
PLATEAU_WEEKS = 2
DELOAD_REDUCTION_MIN = 0.20
DELOAD_REDUCTION_MAX = 0.30
MIN_DELOAD_RATIO = 0.15

# 경험이 적을수록 회복 주간을 더 깊게
DELOAD_REDUCTION_BY_EXPERIENCE: Dict[str, float] = {
    "beginner": 0.30,
    "intermediate": 0.25,
    "advanced": 0.20,
}

_EPSILON = 1e-9


def round_half_up(value: float) -> int:
    return int(floor(value + 0.5))


def calculate_starting_distance(race_distance: str, user_experience: str = "intermediate") -> int:
    return BASE_WEEKLY_DISTANCE[race_distance][user_experience]


def get_max_weekly_distance(race_distance: str, user_experience: str = "intermediate") -> int:
    return MAX_WEEKLY_DISTANCE[race_distance][user_experience]


def is_deload_week_number(week_number: int, deload_frequency: int) -> bool:
    if week_number <= 1:
        return False
    return week_number % deload_frequency == 0


def deload_reduction_for(user_experience: str) -> float:
    return DELOAD_REDUCTION_BY_EXPERIENCE.get(user_experience, DELOAD_REDUCTION_BY_EXPERIENCE["intermediate"])


def _starting_volume(race_distance: str, user_experience: str, difficulty: Optional[str]) -> int:
    start = calculate_starting_distance(race_distance, user_experience)
    if difficulty is None:
        return start
    adjustment = DIFFICULTY_LEVELS[difficulty]["volume_adjustment"]
    return min(round_half_up(start * adjustment), get_max_weekly_distance(race_distance, user_experience))


def calculate_weekly_volumes(
    race_distance: str,
    program_length: int,
    deload_frequency: int,
    user_experience: str = "intermediate",
    difficulty: Optional[str] = None,
) -> Tuple[WeeklyVolume, ...]:
    if race_distance not in BASE_WEEKLY_DISTANCE:
        raise ValueError(f"Unsupported race distance: {race_distance}")
    if user_experience not in BASE_WEEKLY_DISTANCE[race_distance]:
        raise ValueError(f"Unsupported experience level: {user_experience}")

    max_distance = get_max_weekly_distance(race_distance, user_experience)
    working = _starting_volume(race_distance, user_experience, difficulty)
    consecutive_increases = 0
    volumes: List[WeeklyVolume] = []

    for week in range(1, program_length + 1):
        if is_deload_week_number(week, deload_frequency):
            reduction = deload_reduction_for(user_experience)
            volumes.append(
                WeeklyVolume(
                    week_number=week,
                    base_volume=working,
                    adjusted_volume=round_half_up(working * (1 - reduction)),
                    is_deload_week=True,
                    progression_rate=-reduction,
                    notes=(f"Deload week: {round_half_up(reduction * 100)}% volume reduction for recovery",),
                )
            )
            consecutive_increases = 0
            continue

        notes: List[str] = []
        rate = 0.0
        previous = volumes[-1] if volumes else None

        if previous is None or previous.is_deload_week:
            # week 1, or back to the pre-deload working volume
            adjusted = working
        else:
            prior = previous.adjusted_volume
            rate = PLATEAU_INCREASE if consecutive_increases >= PLATEAU_WEEKS else SAFE_WEEKLY_INCREASE
            target = prior * (1 + rate)
            if target > max_distance:
                target = max_distance
                rate = (max_distance - prior) / prior
                notes.append(f"Volume capped at {max_distance} km for safety")
            adjusted = min(round_half_up(target), floor(prior * (1 + MAX_WEEKLY_INCREASE)))
            consecutive_increases += 1

        volumes.append(
            WeeklyVolume(
                week_number=week,
                base_volume=working,
                adjusted_volume=adjusted,
                is_deload_week=False,
                progression_rate=rate,
                notes=tuple(notes),
            )
        )
        working = adjusted

    logger.trace("Weekly volumes for {} ({}): {}", race_distance, user_experience, [v.adjusted_volume for v in volumes])
    return tuple(volumes)


def calculate_deload_volume(base_volume: float, reduction: Optional[float] = None) -> int:
    if reduction is None:
        reduction = (DELOAD_REDUCTION_MIN + DELOAD_REDUCTION_MAX) / 2
    return round_half_up(base_volume * (1 - reduction))


def validate_progression(volumes: Tuple[WeeklyVolume, ...]) -> StageReport:
    """Check a volume sequence; only an increase over the 10% ceiling is blocking."""
    warnings: List[str] = []
    adjustments: List[str] = []
    is_valid = True

    plateau_weeks = 0
    for previous, current in zip(volumes, volumes[1:]):
        if previous.is_deload_week or current.is_deload_week:
            continue
        increase = (current.adjusted_volume - previous.adjusted_volume) / previous.adjusted_volume
        if increase > MAX_WEEKLY_INCREASE + _EPSILON:
            warnings.append(
                f"Week {current.week_number}: {round_half_up(increase * 100)}% increase exceeds 10% safety limit"
            )
            is_valid = False
        elif increase > AGGRESSIVE_THRESHOLD:
            warnings.append(
                f"Week {current.week_number}: {round_half_up(increase * 100)}% increase is aggressive "
                "- monitor recovery"
            )
        if abs(current.adjusted_volume - previous.adjusted_volume) < 1:
            plateau_weeks += 1

    if volumes:
        deload_ratio = sum(1 for v in volumes if v.is_deload_week) / len(volumes)
        if deload_ratio < MIN_DELOAD_RATIO:
            warnings.append("Consider more frequent deload weeks for better recovery")
        if plateau_weeks > len(volumes) * 0.3:
            adjustments.append("Consider more progressive volume increases for continued adaptation")

    return StageReport(is_valid=is_valid, warnings=tuple(warnings), recommendations=tuple(adjustments))


def adjust_aggressive_progression(
    target_volume: float, previous_volume: float, max_safe_volume: float
) -> Tuple[int, List[str]]:
    notes: List[str] = []
    adjusted = target_volume

    if (target_volume - previous_volume) / previous_volume > MAX_WEEKLY_INCREASE:
        adjusted = previous_volume * (1 + MAX_WEEKLY_INCREASE)
        notes.append(f"Progression capped at {round_half_up(MAX_WEEKLY_INCREASE * 100)}% for injury prevention")
    if adjusted > max_safe_volume:
        adjusted = max_safe_volume
        notes.append(f"Volume capped at {max_safe_volume} km maximum for experience level")
    return round_half_up(adjusted), notes


def get_progression_recommendations(race_distance: str) -> Dict[str, object]:
    race = RACE_DISTANCES[race_distance]
    return {
        "min_weeks": race["min_weeks"],
        "recommended_weeks": race["recommended_weeks"],
        "max_weeks": race["max_weeks"],
        "starting_distance": dict(BASE_WEEKLY_DISTANCE[race_distance]),
        "max_distance": dict(MAX_WEEKLY_DISTANCE[race_distance]),
        "recommended_deload_frequency": 3 if race_distance == "Marathon" else 4,
        "safe_progression_rate": SAFE_WEEKLY_INCREASE,
        "max_progression_rate": MAX_WEEKLY_INCREASE,
    }
