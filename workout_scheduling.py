"""
workout_scheduling
------------------
Places a week's workout bag onto weekdays.

- Five-week quality rotation: tempo → threshold → intervals → hills → fartlek
- Long run pinned to the configured day, rest days never worked
- Quality sessions kept at least 48 hours from the long run where possible
- Easy runs fill the remaining days in weekday order
- Final validation reports day-count, rest-day and recovery violations
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from plan_models import (
    DailyWorkout,
    PlanConfiguration,
    QualityWorkoutRotation,
    ScheduledWeek,
    SchedulingConstraints,
    Workout,
)
from config_validation import has_consecutive_rest_days
from training_constants import DAYS_OF_WEEK
from workout_distribution import pace_source_suffix


QUALITY_WORKOUT_CYCLE: Tuple[str, ...] = ("tempo", "threshold", "intervals", "hills", "fartlek")

QUALITY_WORKOUT_DEFINITIONS: Dict[str, Dict[str, object]] = {
    "tempo": {
        "name": "Tempo Run",
        "description": "Comfortably hard sustained effort",
        "intensity": "zone3",
        "recovery_hours": 48,
        "purpose": "Lactate threshold development",
    },
    "threshold": {
        "name": "Threshold Intervals",
        "description": "Broken lactate threshold efforts with short recoveries",
        "intensity": "zone3",
        "recovery_hours": 42,
        "purpose": "Lactate threshold power and buffering",
    },
    "intervals": {
        "name": "Interval Training",
        "description": "High-intensity intervals with recovery",
        "intensity": "zone4",
        "recovery_hours": 48,
        "purpose": "VO2 max and speed development",
    },
    "hills": {
        "name": "Hill Repeats",
        "description": "Uphill intervals for strength and power",
        "intensity": "zone4",
        "recovery_hours": 48,
        "purpose": "Strength, power, and running economy",
    },
    "fartlek": {
        "name": "Fartlek Training",
        "description": "Unstructured speed play with varied pace",
        "intensity": "zone3",
        "recovery_hours": 36,
        "purpose": "Speed development and mental adaptability",
    },
}

PHASE_SPECIFIC_DESCRIPTIONS: Dict[str, Dict[str, str]] = {
    "tempo": {
        "base": "Steady tempo effort to build lactate threshold",
        "build": "Progressive tempo run with race pace segments",
        "peak": "Race pace tempo with goal pace practice",
        "taper": "Short tempo segments to maintain sharpness",
    },
    "threshold": {
        "base": "Broken threshold efforts to develop lactate buffering",
        "build": "Progressive threshold intervals with race pace focus",
        "peak": "Race-specific threshold intervals for power",
        "taper": "Short threshold segments for neuromuscular activation",
    },
    "intervals": {
        "base": "Short intervals to introduce speed work",
        "build": "VO2 max intervals at 5K-10K pace",
        "peak": "Race-specific interval training",
        "taper": "Short, sharp intervals for race preparation",
    },
    "hills": {
        "base": "Hill repeats for strength and form development",
        "build": "Progressive hill intervals for power",
        "peak": "Hill training for race-specific strength",
        "taper": "Short hill strides for activation",
    },
    "fartlek": {
        "base": "Playful speed changes to develop pace variety",
        "build": "Structured fartlek with race pace surges",
        "peak": "Race simulation fartlek with tactical surges",
        "taper": "Short, fun pickups to maintain leg speed",
    },
}

PHASE_SPECIFIC_PACE_GUIDANCE: Dict[str, Dict[str, str]] = {
    "tempo": {
        "base": "Comfortably hard - sustainable for 20-30 minutes",
        "build": "Lactate threshold pace - hard but controlled",
        "peak": "Goal race pace for race-specific adaptation",
        "taper": "Moderate effort - focus on feel rather than pace",
    },
    "threshold": {
        "base": "Threshold pace with short recoveries - comfortably hard",
        "build": "Lactate threshold pace - maintain across all intervals",
        "peak": "Goal race pace with race-specific recovery periods",
        "taper": "Threshold effort but shorter duration - feel-based",
    },
    "intervals": {
        "base": "10K pace with full recovery between repeats",
        "build": "5K pace with moderate recovery intervals",
        "peak": "Goal race pace with race-specific recovery",
        "taper": "Slightly faster than race pace, short duration",
    },
    "hills": {
        "base": "Moderate effort uphill - focus on form",
        "build": "Hard effort uphill - 5K effort level",
        "peak": "Strong uphill effort with quick turnover",
        "taper": "Controlled effort - activation rather than stress",
    },
    "fartlek": {
        "base": "Vary effort by feel - mix easy with moderate surges",
        "build": "Include 5K-10K pace surges with easy recovery",
        "peak": "Practice race tactics with goal pace pickups",
        "taper": "Light, playful surges - focus on leg turnover",
    },
}

MIN_RECOVERY_DAYS = 2
RECOVERY_VIOLATION = "Insufficient recovery between quality workouts (less than 48 hours)"


@dataclass(frozen=True)
class ConstraintCheck:
    is_valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SchedulingResult:
    success: bool
    scheduled_week: Optional[ScheduledWeek]
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


# -----------------------------
# Rotation helpers
# -----------------------------


def get_quality_workout_rotation(week_number: int) -> QualityWorkoutRotation:
    index = (week_number - 1) % len(QUALITY_WORKOUT_CYCLE)
    quality_type = QUALITY_WORKOUT_CYCLE[index]
    definition = QUALITY_WORKOUT_DEFINITIONS[quality_type]
    return QualityWorkoutRotation(
        week_number=week_number,
        quality_type=quality_type,
        description=f"{definition['name']}: {definition['description']} ({definition['purpose']})",
        next_rotation=QUALITY_WORKOUT_CYCLE[(index + 1) % len(QUALITY_WORKOUT_CYCLE)],
    )


def get_next_quality_workout_type(current_week: int) -> str:
    return get_quality_workout_rotation(current_week + 1).quality_type


def get_quality_workout_schedule(start_week: int, number_of_weeks: int) -> List[QualityWorkoutRotation]:
    return [get_quality_workout_rotation(week) for week in range(start_week, start_week + number_of_weeks)]


def calculate_days_between(day1_index: int, day2_index: int) -> int:
    """Circular day distance between two Monday-based indices, always 0 to 3."""
    forward = (day2_index - day1_index) % 7
    backward = (day1_index - day2_index) % 7
    return min(forward, backward)


def days_between(day1: str, day2: str) -> int:
    return calculate_days_between(DAYS_OF_WEEK.index(day1), DAYS_OF_WEEK.index(day2))


# -----------------------------
# Constraints
# -----------------------------


def create_scheduling_constraints(config: PlanConfiguration) -> SchedulingConstraints:
    return SchedulingConstraints(
        rest_days=tuple(config.rest_days),
        long_run_day=config.long_run_day,
        training_days_per_week=config.training_days_per_week,
        minimum_recovery_hours=48,
    )


def validate_scheduling_constraints(constraints: SchedulingConstraints) -> ConstraintCheck:
    errors: List[str] = []
    warnings: List[str] = []

    available = 7 - len(constraints.rest_days)
    if available < constraints.training_days_per_week:
        errors.append(
            f"Not enough available days: {available} available, "
            f"{constraints.training_days_per_week} required"
        )
    if constraints.long_run_day in constraints.rest_days:
        errors.append(f"Long run day ({constraints.long_run_day}) conflicts with rest day preference")

    if has_consecutive_rest_days(constraints.rest_days):
        warnings.append("Consecutive rest days may disrupt training rhythm")
    if constraints.training_days_per_week > 6:
        warnings.append("Training 7 days per week increases injury risk - consider at least one rest day")

    return ConstraintCheck(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


# -----------------------------
# Placement
# -----------------------------


def enhance_quality_workout(workout: Workout, quality_type: str, phase: str) -> Workout:
    definition = QUALITY_WORKOUT_DEFINITIONS[quality_type]
    return replace(
        workout,
        type="quality",
        intensity=definition["intensity"],
        description=(
            f"{definition['name']} - {workout.distance_km:g} km - "
            f"{PHASE_SPECIFIC_DESCRIPTIONS[quality_type][phase]}"
        ),
        pace_guidance=PHASE_SPECIFIC_PACE_GUIDANCE[quality_type][phase] + pace_source_suffix(workout.pace_guidance),
        recovery_hours=definition["recovery_hours"],
        quality_type=quality_type,
    )


def find_optimal_quality_day(
    constraints: SchedulingConstraints,
    long_run_index: Optional[int],
    occupied: Dict[int, Workout],
    quality_indices: Sequence[int] = (),
) -> Optional[int]:
    available = [
        index
        for index, day in enumerate(DAYS_OF_WEEK)
        if day not in constraints.rest_days and index not in occupied and index != long_run_index
    ]
    if not available:
        return None

    anchors = list(quality_indices)
    if long_run_index is not None:
        anchors.append(long_run_index)
    for index in available:
        if all(calculate_days_between(index, anchor) >= MIN_RECOVERY_DAYS for anchor in anchors):
            return index
    return available[0]


def validate_final_schedule(
    daily_workouts: Sequence[DailyWorkout], constraints: SchedulingConstraints
) -> List[str]:
    violations: List[str] = []

    scheduled = sum(1 for day in daily_workouts if day.is_training_day)
    if scheduled != constraints.training_days_per_week:
        violations.append(
            f"Scheduled {scheduled} training days, expected {constraints.training_days_per_week}"
        )

    for day in daily_workouts:
        if day.day_of_week in constraints.rest_days and day.workout is not None:
            violations.append(f"Rest day violation: {day.day_of_week} has a scheduled workout")

    quality_indices = [
        index
        for index, day in enumerate(daily_workouts)
        if day.workout is not None and day.workout.type == "quality"
    ]
    for position, first in enumerate(quality_indices):
        for second in quality_indices[position + 1:]:
            if calculate_days_between(first, second) < MIN_RECOVERY_DAYS:
                violations.append(
                    f"{RECOVERY_VIOLATION}: {DAYS_OF_WEEK[first]} and {DAYS_OF_WEEK[second]}"
                )
    return violations


def check_cross_week_recovery(previous: ScheduledWeek, current: ScheduledWeek) -> List[str]:
    """Flag quality sessions less than 48 hours apart across a week boundary."""
    violations: List[str] = []
    last_quality = [
        index for index, day in enumerate(previous.daily_workouts)
        if day.workout is not None and day.workout.type == "quality"
    ]
    first_quality = [
        index for index, day in enumerate(current.daily_workouts)
        if day.workout is not None and day.workout.type == "quality"
    ]
    for earlier in last_quality:
        for later in first_quality:
            if (7 - earlier) + later < MIN_RECOVERY_DAYS:
                violations.append(
                    f"{RECOVERY_VIOLATION}: week {previous.week_number} {DAYS_OF_WEEK[earlier]} "
                    f"and week {current.week_number} {DAYS_OF_WEEK[later]}"
                )
    return violations


def schedule_weekly_workouts(
    week_number: int,
    constraints: SchedulingConstraints,
    workouts: Sequence[Workout],
    phase: str = "base",
) -> SchedulingResult:
    check = validate_scheduling_constraints(constraints)
    if not check.is_valid:
        logger.warning("Week {} cannot be scheduled: {}", week_number, "; ".join(check.errors))
        return SchedulingResult(success=False, scheduled_week=None, errors=check.errors, warnings=check.warnings)

    warnings: List[str] = list(check.warnings)
    notes: List[str] = []
    occupied: Dict[int, Workout] = {}
    rotation = get_quality_workout_rotation(week_number)

    # 1. long run
    long_run_index = DAYS_OF_WEEK.index(constraints.long_run_day)
    long_runs = [workout for workout in workouts if workout.type == "long"]
    if long_runs:
        occupied[long_run_index] = long_runs[0]
        notes.append(f"Long run scheduled on {constraints.long_run_day}")

    # 2. quality sessions, rotating sub-type for any extras
    quality_indices: List[int] = []
    quality_workouts = [workout for workout in workouts if workout.type == "quality"]
    for offset, workout in enumerate(quality_workouts):
        quality_type = QUALITY_WORKOUT_CYCLE[
            (QUALITY_WORKOUT_CYCLE.index(rotation.quality_type) + offset) % len(QUALITY_WORKOUT_CYCLE)
        ]
        index = find_optimal_quality_day(constraints, long_run_index, occupied, quality_indices)
        if index is None:
            warnings.append("Could not find optimal day for quality workout with adequate recovery")
            continue
        occupied[index] = enhance_quality_workout(workout, quality_type, phase)
        quality_indices.append(index)
        notes.append(f"{quality_type} workout scheduled on {DAYS_OF_WEEK[index]}")

    # 3. easy runs in weekday order
    easy_workouts = [workout for workout in workouts if workout.type == "easy"]
    free_days = [
        index
        for index, day in enumerate(DAYS_OF_WEEK)
        if day not in constraints.rest_days and index not in occupied
    ]
    needed = max(constraints.training_days_per_week - len(occupied), 0)
    to_schedule = min(len(easy_workouts), len(free_days), needed)
    for index, workout in zip(free_days[:to_schedule], easy_workouts):
        occupied[index] = workout
        notes.append(f"Easy run scheduled on {DAYS_OF_WEEK[index]}")
    if len(easy_workouts) > to_schedule:
        notes.append(
            f"Note: {len(easy_workouts) - to_schedule} easy workouts not scheduled due to training day limits"
        )

    daily_workouts = tuple(
        DailyWorkout(day_of_week=day, is_rest_day=False, workout=occupied[index])
        if index in occupied
        else DailyWorkout(
            day_of_week=day,
            is_rest_day=True,
            notes="" if day in constraints.rest_days else "No workout scheduled",
        )
        for index, day in enumerate(DAYS_OF_WEEK)
    )

    violations = validate_final_schedule(daily_workouts, constraints)
    scheduled_week = ScheduledWeek(
        week_number=week_number,
        daily_workouts=daily_workouts,
        quality_rotation=rotation,
        scheduling_notes=tuple(notes),
        constraint_violations=tuple(violations),
    )
    logger.trace(
        "Week {} scheduled: {}",
        week_number,
        {day.day_of_week: day.workout.type for day in daily_workouts if day.workout is not None},
    )
    return SchedulingResult(
        success=not violations,
        scheduled_week=scheduled_week,
        errors=tuple(violations),
        warnings=tuple(warnings),
    )
