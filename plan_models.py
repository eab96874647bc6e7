"""
plan_models
-----------
Immutable value types passed between the planning stages.

Every stage returns new values instead of mutating its inputs; variants
are built with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple


# -----------------------------
# Configuration
# -----------------------------


@dataclass(frozen=True)
class PlanConfiguration:
    race_distance: str
    program_length: int
    training_days_per_week: int
    rest_days: Tuple[str, ...]
    long_run_day: str
    deload_frequency: int = 4
    user_experience: str = "intermediate"
    difficulty: Optional[str] = None
    pace_method: Optional[str] = None

    def __post_init__(self) -> None:
        # 리스트로 넘어와도 비교/해시가 되도록 튜플로 고정
        rest_days = (self.rest_days,) if isinstance(self.rest_days, str) else self.rest_days
        object.__setattr__(self, "rest_days", tuple(rest_days))

    @property
    def available_days(self) -> int:
        return 7 - len(self.rest_days)


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    code: str
    severity: Optional[str] = None  # None for errors, low/medium/high for warnings


@dataclass(frozen=True)
class ConfigurationValidation:
    is_valid: bool
    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()

    @property
    def error_messages(self) -> Tuple[str, ...]:
        return tuple(issue.message for issue in self.errors)

    @property
    def warning_messages(self) -> Tuple[str, ...]:
        return tuple(issue.message for issue in self.warnings)


# -----------------------------
# Periodization & volume
# -----------------------------


@dataclass(frozen=True)
class PhaseConfiguration:
    phase: str
    start_week: int
    end_week: int
    duration_weeks: int
    percentage: float
    focus: str
    characteristics: Tuple[str, ...]
    workout_emphasis: Tuple[str, ...]

    def contains(self, week_number: int) -> bool:
        return self.start_week <= week_number <= self.end_week


@dataclass(frozen=True)
class PhaseTransition:
    from_phase: str
    to_phase: str
    transition_week: int
    adjustments: Tuple[str, ...]
    warnings: Tuple[str, ...]


@dataclass(frozen=True)
class PhasePeriodization:
    total_weeks: int
    race_distance: str
    phases: Tuple[PhaseConfiguration, ...]
    transitions: Tuple[PhaseTransition, ...]

    def durations(self) -> Dict[str, int]:
        return {phase.phase: phase.duration_weeks for phase in self.phases}


@dataclass(frozen=True)
class WeeklyVolume:
    week_number: int
    base_volume: float
    adjusted_volume: int
    is_deload_week: bool
    progression_rate: float
    notes: Tuple[str, ...] = ()


# -----------------------------
# Workouts & schedules
# -----------------------------


@dataclass(frozen=True)
class Workout:
    type: str
    distance_km: float
    duration_min: int
    intensity: str
    description: str
    pace_guidance: str
    recovery_hours: int
    quality_type: Optional[str] = None

    def formatted(self) -> str:
        return (
            f"{self.type} | {self.distance_km:.1f} km | {self.duration_min} min | "
            f"{self.intensity} | {self.description}"
        )


@dataclass(frozen=True)
class DailyWorkout:
    day_of_week: str
    is_rest_day: bool
    workout: Optional[Workout] = None
    notes: str = ""

    @property
    def is_training_day(self) -> bool:
        return not self.is_rest_day and self.workout is not None

    def formatted(self) -> str:
        if not self.is_training_day:
            return f"{self.day_of_week} | rest"
        return f"{self.day_of_week} | {self.workout.formatted()}"


@dataclass(frozen=True)
class WorkoutCounts:
    easy: int = 0
    long: int = 0
    quality: int = 0
    rest: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"easy": self.easy, "long": self.long, "quality": self.quality, "rest": self.rest}


@dataclass(frozen=True)
class WeeklyWorkoutDistribution:
    total_workouts: int
    workout_counts: WorkoutCounts
    workouts: Tuple[Workout, ...]


@dataclass(frozen=True)
class QualityWorkoutRotation:
    week_number: int
    quality_type: str
    description: str
    next_rotation: str


@dataclass(frozen=True)
class SchedulingConstraints:
    rest_days: Tuple[str, ...]
    long_run_day: str
    training_days_per_week: int
    minimum_recovery_hours: int = 48


@dataclass(frozen=True)
class ScheduledWeek:
    week_number: int
    daily_workouts: Tuple[DailyWorkout, ...]
    quality_rotation: QualityWorkoutRotation
    scheduling_notes: Tuple[str, ...] = ()
    constraint_violations: Tuple[str, ...] = ()


# -----------------------------
# Deload
# -----------------------------


@dataclass(frozen=True)
class DeloadWorkoutModification:
    original_workout: Workout
    modified_workout: Workout
    modification_type: str  # volume / duration / skip
    reduction_amount: float
    rationale: str


@dataclass(frozen=True)
class PhaseConflict:
    week_number: int
    phase: str
    conflict_type: str  # critical_build / peak_preparation / taper_disruption
    severity: str
    recommendation: str


@dataclass(frozen=True)
class DeloadWeekConfiguration:
    week_number: int
    phase: str
    is_deload_week: bool
    volume_reduction: float
    workout_modifications: Tuple[DeloadWorkoutModification, ...] = ()
    phase_conflicts: Tuple[str, ...] = ()
    scheduling_notes: Tuple[str, ...] = ()


# -----------------------------
# Final plan
# -----------------------------


@dataclass(frozen=True)
class WeeklyPlan:
    week_number: int
    phase: str
    is_deload_week: bool
    days: Tuple[DailyWorkout, ...]
    weekly_distance_km: float
    weekly_distance_miles: float
    weekly_duration_min: int
    workout_count: int
    quality_workout_count: int
    weekly_focus: str
    notes: str = ""
    target_distance_km: int = 0

    @property
    def training_day_count(self) -> int:
        return sum(1 for day in self.days if not day.is_rest_day)

    def day(self, name: str) -> DailyWorkout:
        for entry in self.days:
            if entry.day_of_week == name:
                return entry
        raise ValueError(f"Week {self.week_number} has no entry for {name}")


@dataclass(frozen=True)
class PlanMetadata:
    total_kilometers: float
    total_miles: float
    total_workouts: int
    total_training_days: int
    total_rest_days: int
    workout_type_distribution: WorkoutCounts
    phase_distribution: Dict[str, int]
    estimated_time_commitment: int  # average minutes per week
    created_at: datetime
    last_modified: datetime
    version: str = "1.0.0"


@dataclass(frozen=True)
class TrainingPlan:
    id: str
    configuration: PlanConfiguration
    weeks: Tuple[WeeklyPlan, ...]
    metadata: PlanMetadata

    def week(self, week_number: int) -> WeeklyPlan:
        for entry in self.weeks:
            if entry.week_number == week_number:
                return entry
        raise ValueError(f"Plan has no week {week_number}")

    @property
    def deload_weeks(self) -> Tuple[int, ...]:
        return tuple(week.week_number for week in self.weeks if week.is_deload_week)


@dataclass(frozen=True)
class StageReport:
    """Outcome of an advisory check: validity plus messages."""

    is_valid: bool
    warnings: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
