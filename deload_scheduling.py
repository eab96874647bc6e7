"""
deload_scheduling
-----------------
Program-wide deload week placement and per-workout deload modification.

- Deload weeks follow the progressor's cadence rule
- Phase guidance: base/build allow deloads, peak/taper reject them
- Critical build weeks are flagged but still deloaded
- Quality sessions may be skipped; the only random choice, via an injected rng
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from plan_models import (
    DailyWorkout,
    DeloadWeekConfiguration,
    DeloadWorkoutModification,
    PhaseConflict,
    PhasePeriodization,
    PlanConfiguration,
    WeeklyPlan,
    Workout,
)
from phase_periodization import calculate_phase_periodization, get_phase_configuration, get_phase_for_week
from training_constants import KM_TO_MILES, ZONE_ORDER
from volume_progression import is_deload_week_number, round_half_up
from workout_distribution import pace_source_suffix, strip_pace_source


DELOAD_MODIFICATION_RULES: Dict[str, Dict[str, object]] = {
    "easy": {
        "volume_reduction": 0.25,
        "intensity_adjustment": 0.0,
        "duration_reduction": 0.20,
        "skip_probability": 0.0,
        "rationale": "Maintain easy pace but reduce volume for recovery",
    },
    "long": {
        "volume_reduction": 0.30,
        "intensity_adjustment": 0.0,
        "duration_reduction": 0.25,
        "skip_probability": 0.0,
        "rationale": "Significant volume reduction while maintaining aerobic stimulus",
    },
    "quality": {
        "volume_reduction": 0.40,
        "intensity_adjustment": -0.1,
        "duration_reduction": 0.35,
        "skip_probability": 0.30,
        "rationale": "Major reduction in quality work to promote recovery",
    },
    "rest": {
        "volume_reduction": 0.0,
        "intensity_adjustment": 0.0,
        "duration_reduction": 0.0,
        "skip_probability": 0.0,
        "rationale": "Rest days remain unchanged during deload",
    },
}

PHASE_DELOAD_GUIDELINES: Dict[str, Dict[str, object]] = {
    "base": {
        "allow_deload": True,
        "volume_reduction_range": (0.20, 0.30),
        "critical_weeks": (),
        "notes": "Deload weeks are beneficial during base building for adaptation",
    },
    "build": {
        "allow_deload": True,
        "volume_reduction_range": (0.15, 0.25),
        "critical_weeks": (1, 2),
        "notes": "Careful deload timing to not disrupt lactate threshold development",
    },
    "peak": {
        "allow_deload": False,
        "volume_reduction_range": (0.10, 0.15),
        "critical_weeks": (1, 2, 3),
        "notes": "Avoid deloads during peak phase unless absolutely necessary",
    },
    "taper": {
        "allow_deload": False,
        "volume_reduction_range": (0.0, 0.0),
        "critical_weeks": (1, 2),
        "notes": "Taper phase already provides volume reduction - no additional deload needed",
    },
}

DELOAD_FOCUS = "Deload Week - Recovery and Adaptation"
SKIP_RATIONALE = "Quality workout skipped during deload for enhanced recovery"


@dataclass(frozen=True)
class DeloadSchedulingResult:
    success: bool
    deload_weeks: Tuple[DeloadWeekConfiguration, ...]
    phase_conflicts: Tuple[PhaseConflict, ...]
    warnings: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    @property
    def total_deload_weeks(self) -> int:
        return len(self.deload_weeks)

    def high_conflict_weeks(self) -> Tuple[int, ...]:
        return tuple(c.week_number for c in self.phase_conflicts if c.severity == "high")

    def applicable_weeks(self) -> Tuple[DeloadWeekConfiguration, ...]:
        blocked = set(self.high_conflict_weeks())
        return tuple(week for week in self.deload_weeks if week.week_number not in blocked)


# -----------------------------
# Scheduling
# -----------------------------


def create_deload_week_configuration(week_number: int, phase: str) -> DeloadWeekConfiguration:
    guidelines = PHASE_DELOAD_GUIDELINES[phase]
    low, high = guidelines["volume_reduction_range"]
    conflicts: Tuple[str, ...] = ()
    if not guidelines["allow_deload"]:
        conflicts = (f"Deload week conflicts with {phase} phase - consider rescheduling",)
    return DeloadWeekConfiguration(
        week_number=week_number,
        phase=phase,
        is_deload_week=True,
        volume_reduction=low + (high - low) * 0.5,
        phase_conflicts=conflicts,
        scheduling_notes=(guidelines["notes"],),
    )


def check_phase_conflict(
    week_number: int, phase: str, periodization: PhasePeriodization
) -> Optional[PhaseConflict]:
    guidelines = PHASE_DELOAD_GUIDELINES[phase]
    phase_config = get_phase_configuration(phase, periodization)
    if phase_config is None:
        return None

    if not guidelines["allow_deload"]:
        return PhaseConflict(
            week_number=week_number,
            phase=phase,
            conflict_type="peak_preparation" if phase == "peak" else "taper_disruption",
            severity="high",
            recommendation=f"Consider moving deload to week {week_number - 1} or {week_number + 1} if possible",
        )

    week_in_phase = week_number - phase_config.start_week + 1
    if week_in_phase in guidelines["critical_weeks"]:
        return PhaseConflict(
            week_number=week_number,
            phase=phase,
            conflict_type="critical_build",
            severity="medium",
            recommendation=(
                f"Week {week_number} is critical for {phase} phase development - monitor recovery carefully"
            ),
        )
    return None


def validate_deload_scheduling(
    deload_weeks: Sequence[DeloadWeekConfiguration],
    conflicts: Sequence[PhaseConflict],
    config: PlanConfiguration,
) -> Tuple[List[str], List[str]]:
    warnings: List[str] = []
    recommendations: List[str] = []

    ratio = len(deload_weeks) / config.program_length
    if ratio < 0.15:
        warnings.append("Low deload frequency may not provide adequate recovery")
        recommendations.append("Consider more frequent deload weeks for better adaptation")
    if ratio > 0.30:
        warnings.append("High deload frequency may limit training stimulus")
        recommendations.append("Consider reducing deload frequency to maintain training load")

    for current, following in zip(deload_weeks, deload_weeks[1:]):
        if following.week_number - current.week_number == 1:
            warnings.append(f"Consecutive deload weeks ({current.week_number}-{following.week_number}) detected")
            recommendations.append("Avoid consecutive deload weeks to maintain training rhythm")

    high = [conflict for conflict in conflicts if conflict.severity == "high"]
    if high:
        warnings.append(f"{len(high)} high-priority phase conflicts detected")
        recommendations.append(
            "Consider adjusting deload frequency or program length to avoid critical phase disruption"
        )

    if config.race_distance == "Marathon" and config.deload_frequency == 4:
        recommendations.append(
            "Consider 3-week deload frequency for marathon training due to higher volume stress"
        )
    if config.race_distance == "5K" and config.deload_frequency == 3:
        recommendations.append("4-week deload frequency may be sufficient for 5K training")

    return warnings, recommendations


def schedule_deload_weeks(
    config: PlanConfiguration, periodization: Optional[PhasePeriodization] = None
) -> DeloadSchedulingResult:
    if periodization is None:
        periodization = calculate_phase_periodization(config.program_length, config.race_distance)

    deload_weeks: List[DeloadWeekConfiguration] = []
    conflicts: List[PhaseConflict] = []
    warnings: List[str] = []

    for week in range(1, config.program_length + 1):
        if not is_deload_week_number(week, config.deload_frequency):
            continue
        phase = get_phase_for_week(week, periodization)
        deload_weeks.append(create_deload_week_configuration(week, phase))

        conflict = check_phase_conflict(week, phase, periodization)
        if conflict is not None:
            conflicts.append(conflict)
            if conflict.severity == "high":
                warnings.append(f"Week {week}: Deload conflicts with critical {phase} phase training")

    extra_warnings, recommendations = validate_deload_scheduling(deload_weeks, conflicts, config)
    warnings.extend(extra_warnings)

    logger.trace(
        "Deload candidates {} with conflicts {}",
        [week.week_number for week in deload_weeks],
        [(c.week_number, c.severity) for c in conflicts],
    )
    return DeloadSchedulingResult(
        success=not any(c.severity == "high" for c in conflicts),
        deload_weeks=tuple(deload_weeks),
        phase_conflicts=tuple(conflicts),
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
    )


# -----------------------------
# Workout modification
# -----------------------------


def _easier_zone(zone: str) -> str:
    index = ZONE_ORDER.index(zone)
    return ZONE_ORDER[max(index - 1, 0)]


def _skipped(workout: Workout) -> Workout:
    return replace(
        workout,
        type="rest",
        distance_km=0.0,
        duration_min=0,
        intensity="zone1",
        description="Rest day - quality workout skipped for deload recovery",
        recovery_hours=0,
    )


def modify_workouts_for_deload(
    workouts: Sequence[Workout],
    volume_reduction: float,
    rng: Optional[random.Random] = None,
) -> Tuple[DeloadWorkoutModification, ...]:
    """Apply category rules to each workout; a quality session may become rest."""
    if rng is None:
        rng = random.Random()

    modifications: List[DeloadWorkoutModification] = []
    for workout in workouts:
        rules = DELOAD_MODIFICATION_RULES[workout.type]

        if workout.type == "rest":
            modifications.append(
                DeloadWorkoutModification(workout, workout, "volume", 0.0, rules["rationale"])
            )
            continue

        if rules["skip_probability"] > 0 and rng.random() < rules["skip_probability"]:
            modifications.append(
                DeloadWorkoutModification(workout, _skipped(workout), "skip", 1.0, SKIP_RATIONALE)
            )
            continue

        distance_cut = max(volume_reduction, rules["volume_reduction"])
        duration_cut = max(volume_reduction * 0.8, rules["duration_reduction"])
        description = workout.description
        pace_guidance = workout.pace_guidance
        intensity = workout.intensity
        if rules["intensity_adjustment"] < 0:
            intensity = _easier_zone(intensity)
            description = f"{description} (reduced intensity for deload)"
            pace_guidance = (
                f"{strip_pace_source(pace_guidance)} - aim for easier end of range"
                f"{pace_source_suffix(pace_guidance)}"
            )

        modified = replace(
            workout,
            distance_km=round(workout.distance_km * (1 - distance_cut), 1),
            duration_min=round_half_up(workout.duration_min * (1 - duration_cut)),
            intensity=intensity,
            description=f"DELOAD: {description}",
            pace_guidance=pace_guidance,
        )
        modifications.append(
            DeloadWorkoutModification(
                workout,
                modified,
                "volume" if workout.distance_km else "duration",
                distance_cut,
                rules["rationale"],
            )
        )
    return tuple(modifications)


def _apply_modifications(
    days: Sequence[DailyWorkout], modifications: Sequence[DeloadWorkoutModification]
) -> Tuple[DailyWorkout, ...]:
    remaining = list(modifications)
    result: List[DailyWorkout] = []
    for day in days:
        if day.workout is None:
            result.append(day)
            continue
        match = next((m for m in remaining if m.original_workout == day.workout), None)
        if match is None:
            result.append(day)
            continue
        remaining.remove(match)
        if match.modification_type == "skip":
            result.append(
                DailyWorkout(day_of_week=day.day_of_week, is_rest_day=True, workout=None, notes=match.rationale)
            )
        else:
            result.append(replace(day, workout=match.modified_workout))
    return tuple(result)


def apply_deload_to_weekly_plan(plan: WeeklyPlan, deload_config: DeloadWeekConfiguration) -> WeeklyPlan:
    """Scale the week's totals and swap in modified workouts without rescheduling."""
    reduction = deload_config.volume_reduction
    days = _apply_modifications(plan.days, deload_config.workout_modifications)
    distance_km = round(plan.weekly_distance_km * (1 - reduction), 1)
    training = [day for day in days if day.is_training_day]

    return replace(
        plan,
        is_deload_week=True,
        days=days,
        weekly_distance_km=distance_km,
        weekly_distance_miles=round(distance_km * KM_TO_MILES, 1),
        weekly_duration_min=round_half_up(plan.weekly_duration_min * (1 - reduction)),
        workout_count=len(training),
        quality_workout_count=sum(1 for day in training if day.workout.type == "quality"),
        weekly_focus=DELOAD_FOCUS,
        notes=(
            f"Volume reduced by {round_half_up(reduction * 100)}% for recovery. "
            f"{' '.join(deload_config.scheduling_notes)}"
        ),
    )


def get_deload_recommendations(config: PlanConfiguration) -> Dict[str, object]:
    expected = [
        week for week in range(1, config.program_length + 1)
        if is_deload_week_number(week, config.deload_frequency)
    ]
    return {
        "optimal_frequency": 3 if config.race_distance == "Marathon" else 4,
        "expected_deload_weeks": expected,
        "phase_considerations": [
            "Base phase: Deload weeks support aerobic adaptation",
            "Build phase: Time deloads carefully to not disrupt lactate threshold development",
            "Peak phase: Avoid deloads during race-specific preparation",
            "Taper phase: No additional deloads needed - taper provides volume reduction",
        ],
        "volume_reduction_guidance": (
            "Reduce volume by 20-30% while maintaining workout variety and intensity zones"
        ),
    }
