"""
plan_generator
--------------
Runs the full pipeline and assembles a multi-week TrainingPlan.

- validate -> periodize -> volumes -> distribute/schedule -> deload -> assemble
- Hard failures: configuration errors, infeasible weeks, progression over the ceiling
- Every other finding is collected as a warning on the result
- Injected random.Random keeps deload skips reproducible
"""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from config_validation import validate_configuration, validate_plan_configuration
from deload_scheduling import (
    apply_deload_to_weekly_plan,
    modify_workouts_for_deload,
    schedule_deload_weeks,
)
from phase_periodization import (
    calculate_phase_periodization,
    get_phase_configuration,
    get_phase_for_week,
)
from plan_models import (
    ConfigurationValidation,
    PhasePeriodization,
    PlanConfiguration,
    PlanMetadata,
    ScheduledWeek,
    TrainingPlan,
    WeeklyPlan,
    WeeklyVolume,
    WorkoutCounts,
)
from training_constants import KM_TO_MILES
from volume_progression import calculate_weekly_volumes, round_half_up, validate_progression
from workout_distribution import create_weekly_distribution, validate_workout_distribution
from workout_scheduling import (
    check_cross_week_recovery,
    create_scheduling_constraints,
    schedule_weekly_workouts,
)


PLAN_PROGRESSION_TOLERANCE = 0.12
MAX_QUALITY_SHARE = 0.25


@dataclass(frozen=True)
class PlanGenerationOptions:
    validate_only: bool = False
    skip_deload_weeks: bool = False
    seed: Optional[int] = None
    rng: Optional[random.Random] = None


@dataclass(frozen=True)
class PlanGenerationResult:
    success: bool
    plan: Optional[TrainingPlan] = None
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    validation_result: Optional[ConfigurationValidation] = None


class PlanGenerationError(Exception):
    """A blocking pipeline failure carrying user-facing messages."""

    def __init__(self, errors: Sequence[str]):
        super().__init__("; ".join(errors))
        self.errors = tuple(errors)


def _unique(messages: Sequence[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(messages))


# -----------------------------
# Plan-level validation
# -----------------------------


def validate_complete_plan(plan: TrainingPlan) -> Tuple[List[str], List[str]]:
    errors: List[str] = []
    warnings: List[str] = []
    config = plan.configuration

    if len(plan.weeks) != config.program_length:
        errors.append(f"Plan has {len(plan.weeks)} weeks but configuration specifies {config.program_length}")

    for week in plan.weeks:
        if len(week.days) != 7:
            errors.append(f"Week {week.week_number} does not have 7 days")
        if week.training_day_count != config.training_days_per_week:
            warnings.append(
                f"Week {week.week_number} has {week.training_day_count} training days, "
                f"expected {config.training_days_per_week}"
            )

    for previous, current in zip(plan.weeks, plan.weeks[1:]):
        if previous.is_deload_week or current.is_deload_week or not previous.weekly_distance_km:
            continue
        increase = (current.weekly_distance_km - previous.weekly_distance_km) / previous.weekly_distance_km
        if increase > PLAN_PROGRESSION_TOLERANCE:
            warnings.append(
                f"Week {current.week_number}: {round_half_up(increase * 100)}% volume increase "
                "exceeds safe progression"
            )

    counts = plan.metadata.workout_type_distribution
    if plan.metadata.total_workouts and counts.quality / plan.metadata.total_workouts > MAX_QUALITY_SHARE:
        share = round_half_up(counts.quality / plan.metadata.total_workouts * 100)
        warnings.append(f"Quality workouts represent {share}% of total workouts, exceeding recommended 20%")

    return errors, warnings


# -----------------------------
# Generator
# -----------------------------


class PlanGenerator:
    def __init__(self, config: PlanConfiguration, options: Optional[PlanGenerationOptions] = None):
        self.config = config
        self.options = options or PlanGenerationOptions()
        # 전역 random 상태는 건드리지 않는다
        self.rng = self.options.rng or random.Random(self.options.seed)
        self.warnings: List[str] = []

    def determine_phases(self) -> PhasePeriodization:
        periodization = calculate_phase_periodization(self.config.program_length, self.config.race_distance)
        base = get_phase_configuration("base", periodization)
        taper = get_phase_configuration("taper", periodization)
        if base is not None and base.percentage < 25:
            self.warnings.append("Base phase may be too short for adequate aerobic development")
        if taper is not None and taper.duration_weeks < 2:
            self.warnings.append("Taper phase may be too short for adequate recovery")
        return periodization

    def calculate_volumes(self) -> Tuple[WeeklyVolume, ...]:
        volumes = calculate_weekly_volumes(
            self.config.race_distance,
            self.config.program_length,
            self.config.deload_frequency,
            self.config.user_experience,
            self.config.difficulty,
        )
        report = validate_progression(volumes)
        self.warnings.extend(report.warnings)
        self.warnings.extend(report.recommendations)
        if not report.is_valid:
            raise PlanGenerationError(["Progression validation failed"])
        return volumes

    def _weekly_plan(self, volume: WeeklyVolume, phase: str, scheduled: ScheduledWeek, focus: str) -> WeeklyPlan:
        training = [day for day in scheduled.daily_workouts if day.is_training_day]
        distance_km = round(sum(day.workout.distance_km for day in training), 1)
        return WeeklyPlan(
            week_number=volume.week_number,
            phase=phase,
            is_deload_week=False,
            days=scheduled.daily_workouts,
            weekly_distance_km=distance_km,
            weekly_distance_miles=round(distance_km * KM_TO_MILES, 1),
            weekly_duration_min=sum(day.workout.duration_min for day in training),
            workout_count=len(training),
            quality_workout_count=sum(1 for day in training if day.workout.type == "quality"),
            weekly_focus=focus,
            notes=" ".join(volume.notes),
            target_distance_km=volume.adjusted_volume,
        )

    def build_weeks(
        self, periodization: PhasePeriodization, volumes: Sequence[WeeklyVolume]
    ) -> List[WeeklyPlan]:
        constraints = create_scheduling_constraints(self.config)
        errors: List[str] = []
        weeks: List[WeeklyPlan] = []
        previous: Optional[ScheduledWeek] = None

        for volume in volumes:
            week = volume.week_number
            phase = get_phase_for_week(week, periodization)
            distribution = create_weekly_distribution(self.config, volume.adjusted_volume, phase)

            report = validate_workout_distribution(distribution)
            if not report.is_valid:
                self.warnings.append(f"Week {week}: {', '.join(report.warnings)}")
            self.warnings.extend(report.recommendations)

            result = schedule_weekly_workouts(week, constraints, distribution.workouts, phase)
            if result.scheduled_week is None:
                errors.extend(f"Week {week}: {error}" for error in result.errors)
                continue
            if result.errors:
                self.warnings.append(f"Week {week}: {', '.join(result.errors)}")
            self.warnings.extend(result.warnings)
            if previous is not None:
                self.warnings.extend(check_cross_week_recovery(previous, result.scheduled_week))
            previous = result.scheduled_week

            focus = get_phase_configuration(phase, periodization).focus
            weeks.append(self._weekly_plan(volume, phase, result.scheduled_week, focus))

        if errors:
            raise PlanGenerationError(errors)
        return weeks

    def apply_deloads(self, periodization: PhasePeriodization, weeks: List[WeeklyPlan]) -> List[WeeklyPlan]:
        result = schedule_deload_weeks(self.config, periodization)
        self.warnings.extend(result.warnings)
        by_week = {deload.week_number: deload for deload in result.applicable_weeks()}

        updated: List[WeeklyPlan] = []
        for week in weeks:
            deload = by_week.get(week.week_number)
            if deload is None:
                updated.append(week)
                continue
            workouts = [day.workout for day in week.days if day.workout is not None]
            modifications = modify_workouts_for_deload(workouts, deload.volume_reduction, self.rng)
            updated.append(apply_deload_to_weekly_plan(week, replace(deload, workout_modifications=modifications)))
        return updated

    def assemble(self, periodization: PhasePeriodization, weeks: Sequence[WeeklyPlan]) -> TrainingPlan:
        total_km = round(sum(week.weekly_distance_km for week in weeks), 1)
        training_days = sum(week.training_day_count for week in weeks)
        type_counts: Dict[str, int] = {"easy": 0, "long": 0, "quality": 0, "rest": 0}
        for week in weeks:
            for day in week.days:
                key = day.workout.type if day.is_training_day else "rest"
                type_counts[key] += 1

        now = datetime.now()
        metadata = PlanMetadata(
            total_kilometers=total_km,
            total_miles=round(total_km * KM_TO_MILES, 1),
            total_workouts=sum(week.workout_count for week in weeks),
            total_training_days=training_days,
            total_rest_days=7 * len(weeks) - training_days,
            workout_type_distribution=WorkoutCounts(**type_counts),
            phase_distribution=periodization.durations(),
            estimated_time_commitment=(
                round_half_up(sum(week.weekly_duration_min for week in weeks) / len(weeks)) if weeks else 0
            ),
            created_at=now,
            last_modified=now,
        )
        return TrainingPlan(id=uuid.uuid4().hex, configuration=self.config, weeks=tuple(weeks), metadata=metadata)

    def run(self) -> PlanGenerationResult:
        logger.info(
            "Generating {}-week {} plan ({} days/week)",
            self.config.program_length,
            self.config.race_distance,
            self.config.training_days_per_week,
        )
        validation = validate_plan_configuration(self.config)
        if not validation.is_valid:
            logger.warning("Configuration rejected: {}", "; ".join(validation.error_messages))
            return PlanGenerationResult(
                success=False,
                errors=validation.error_messages,
                warnings=validation.warning_messages,
                validation_result=validation,
            )
        self.warnings.extend(validation.warning_messages)
        if self.options.validate_only:
            return PlanGenerationResult(
                success=True, warnings=_unique(self.warnings), validation_result=validation
            )

        try:
            periodization = self.determine_phases()
            volumes = self.calculate_volumes()
            weeks = self.build_weeks(periodization, volumes)
            if not self.options.skip_deload_weeks:
                weeks = self.apply_deloads(periodization, weeks)
            plan = self.assemble(periodization, weeks)

            errors, warnings = validate_complete_plan(plan)
            self.warnings.extend(warnings)
            if errors:
                raise PlanGenerationError(errors)
        except PlanGenerationError as exc:
            logger.warning("Plan generation stopped: {}", exc)
            return PlanGenerationResult(
                success=False,
                errors=exc.errors,
                warnings=_unique(self.warnings),
                validation_result=validation,
            )
        except Exception as exc:
            logger.exception("Unexpected failure while generating plan")
            return PlanGenerationResult(
                success=False,
                errors=(f"Plan generation failed: {exc}",),
                warnings=_unique(self.warnings),
                validation_result=validation,
            )

        logger.info(
            "Plan {} generated: {} weeks, deloads {}, {} warnings",
            plan.id,
            len(plan.weeks),
            list(plan.deload_weeks),
            len(self.warnings),
        )
        return PlanGenerationResult(
            success=True, plan=plan, warnings=_unique(self.warnings), validation_result=validation
        )


def generate_plan(config: PlanConfiguration, options: Optional[PlanGenerationOptions] = None) -> PlanGenerationResult:
    return PlanGenerator(config, options).run()
