"""
workout_distribution
--------------------
Turns one week's distance budget into an unscheduled bag of workouts.

- Fixed easy/quality/long templates for 3-7 training days
- Race-specific distance multipliers with per-category minimums
- Duration from fixed per-category paces, phase-specific quality text
- Optional pace-source annotation on every workout's guidance
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from plan_models import (
    PlanConfiguration,
    StageReport,
    WeeklyWorkoutDistribution,
    Workout,
    WorkoutCounts,
)
from phase_periodization import get_phase_characteristics
from training_constants import PACE_INPUT_METHODS, WORKOUT_TYPES


WORKOUT_DISTRIBUTION_TEMPLATES: Dict[int, Tuple[str, ...]] = {
    3: ("easy", "quality", "long"),
    4: ("easy", "quality", "easy", "long"),
    5: ("easy", "quality", "easy", "easy", "long"),
    6: ("easy", "quality", "easy", "easy", "easy", "long"),
    7: ("easy", "quality", "easy", "easy", "easy", "easy", "long"),
}

RACE_DISTANCE_SCALING: Dict[str, Dict[str, float]] = {
    "5K": {"easy": 1.0, "long": 2.0, "quality": 0.8},
    "10K": {"easy": 1.2, "long": 2.2, "quality": 1.0},
    "Half Marathon": {"easy": 1.5, "long": 2.5, "quality": 1.2},
    "Marathon": {"easy": 2.0, "long": 3.0, "quality": 1.5},
}

MINIMUM_WORKOUT_DISTANCE: Dict[str, float] = {"easy": 3.0, "long": 8.0, "quality": 4.0}

# min/km
TYPICAL_PACES: Dict[str, float] = {"easy": 6.0, "long": 6.5, "quality": 5.0, "rest": 0.0}

PACE_SOURCE_SEPARATOR = " | Pace source: "


# -----------------------------
# Pace-source annotation
# -----------------------------


def strip_pace_source(guidance: str) -> str:
    return guidance.split(PACE_SOURCE_SEPARATOR, 1)[0]


def pace_source_suffix(guidance: str) -> str:
    base = strip_pace_source(guidance)
    return guidance[len(base):]


def annotate_pace_guidance(guidance: str, pace_method: Optional[str]) -> str:
    base = strip_pace_source(guidance)
    if pace_method is None:
        return base
    label = PACE_INPUT_METHODS[pace_method]["label"]
    return f"{base}{PACE_SOURCE_SEPARATOR}{label}"


# -----------------------------
# Distances & text
# -----------------------------


def get_distribution_template(training_days: int) -> Tuple[str, ...]:
    if training_days not in WORKOUT_DISTRIBUTION_TEMPLATES:
        raise ValueError(f"Invalid training days per week: {training_days}. Must be between 3-7.")
    return WORKOUT_DISTRIBUTION_TEMPLATES[training_days]


def calculate_workout_distances(race_distance: str, weekly_km: float, training_days: int) -> Dict[str, float]:
    get_distribution_template(training_days)
    scaling = RACE_DISTANCE_SCALING[race_distance]
    per_day = weekly_km / training_days

    distances = {
        category: max(round(per_day * scaling[category], 1), MINIMUM_WORKOUT_DISTANCE[category])
        for category in ("easy", "long", "quality")
    }
    distances["rest"] = 0.0
    return distances


def calculate_workout_duration(workout_type: str, distance_km: float) -> int:
    return int(round(distance_km * TYPICAL_PACES[workout_type]))


def _km(distance: float) -> str:
    return f"{distance:g} km"


def quality_description(distance: float, phase: str) -> str:
    adaptation = get_phase_characteristics(phase).primary_adaptations[0]
    if phase == "base":
        return f"Tempo run - {_km(distance)} at comfortably hard pace ({adaptation})"
    if phase == "build":
        return f"Interval workout - {_km(distance)} total with speed intervals ({adaptation})"
    if phase == "peak":
        return f"Race pace workout - {_km(distance)} at goal race pace ({adaptation})"
    return f"Sharpening workout - {_km(distance)} with short, fast intervals ({adaptation})"


def quality_pace_guidance(phase: str) -> str:
    metric = get_phase_characteristics(phase).key_metrics[0]
    if phase == "base":
        return f"Comfortably hard - sustainable for 20-40 minutes (Focus: {metric})"
    if phase == "build":
        return f"Hard effort - 5K to 10K race pace with recovery intervals (Focus: {metric})"
    if phase == "peak":
        return f"Goal race pace - practice your target race effort (Focus: {metric})"
    return f"Short, sharp efforts - faster than race pace but brief (Focus: {metric})"


def get_workout_description(workout_type: str, distance: float, phase: str) -> str:
    if workout_type == "easy":
        return f"Easy run - {_km(distance)} at conversational pace"
    if workout_type == "long":
        return f"Long run - {_km(distance)} at steady, comfortable effort"
    if workout_type == "quality":
        return quality_description(distance, phase)
    return "Rest day - complete rest or light cross-training"


def get_workout_pace_guidance(workout_type: str, phase: str) -> str:
    if workout_type == "easy":
        return "Conversational pace - you should be able to speak in full sentences"
    if workout_type == "long":
        return "Steady effort - start easy and can build to moderate effort in later miles"
    if workout_type == "quality":
        return quality_pace_guidance(phase)
    return "Complete rest or very light activity"


def create_workout(workout_type: str, distance: float, phase: str, pace_method: Optional[str] = None) -> Workout:
    definition = WORKOUT_TYPES[workout_type]
    return Workout(
        type=workout_type,
        distance_km=distance,
        duration_min=calculate_workout_duration(workout_type, distance),
        intensity=definition["intensity"],
        description=get_workout_description(workout_type, distance, phase),
        pace_guidance=annotate_pace_guidance(get_workout_pace_guidance(workout_type, phase), pace_method),
        recovery_hours=definition["recovery_hours"],
    )


# -----------------------------
# Weekly bag
# -----------------------------


def create_weekly_distribution(
    config: PlanConfiguration, weekly_km: float, phase: str = "base"
) -> WeeklyWorkoutDistribution:
    template = get_distribution_template(config.training_days_per_week)
    distances = calculate_workout_distances(config.race_distance, weekly_km, config.training_days_per_week)

    workouts = tuple(
        create_workout(workout_type, distances[workout_type], phase, config.pace_method)
        for workout_type in template
    )
    counts = WorkoutCounts(
        easy=template.count("easy"),
        long=template.count("long"),
        quality=template.count("quality"),
        rest=7 - len(template),
    )
    return WeeklyWorkoutDistribution(total_workouts=len(template), workout_counts=counts, workouts=workouts)


def validate_workout_distribution(distribution: WeeklyWorkoutDistribution) -> StageReport:
    warnings: List[str] = []
    recommendations: List[str] = []
    is_valid = True
    counts = distribution.workout_counts

    if distribution.total_workouts < 3:
        warnings.append("Less than 3 training days per week may limit training effectiveness")
        is_valid = False

    # 80/20 근사치: 훈련일의 60% 이상은 easy
    if distribution.total_workouts and counts.easy / distribution.total_workouts < 0.6:
        warnings.append("Consider more easy runs to follow the 80/20 training principle")

    if counts.quality > 2:
        warnings.append("More than 2 quality workouts per week may increase injury risk")
        recommendations.append("Limit quality workouts to 1-2 per week for optimal recovery")

    if counts.long == 0:
        warnings.append("No long run scheduled - important for endurance development")
        is_valid = False

    if counts.rest == 0:
        warnings.append("No rest days scheduled - recovery is essential for adaptation")
        recommendations.append("Include at least 1 rest day per week")

    return StageReport(is_valid=is_valid, warnings=tuple(warnings), recommendations=tuple(recommendations))


def get_phase_workout_recommendations(phase: str) -> Dict[str, object]:
    characteristics = get_phase_characteristics(phase)
    return {
        "emphasis": list(characteristics.primary_adaptations),
        "workout_types": list(characteristics.workout_types),
        "intensity_guidance": f"{characteristics.intensity_emphasis} intensity emphasis",
        "volume_guidance": f"{characteristics.volume_emphasis} volume emphasis",
    }
