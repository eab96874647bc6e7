"""
plan_regeneration
-----------------
Rebuilds an existing plan after its configuration changes.

- Field-by-field configuration diff with low / medium / high impact
- Strategy: minimal (pace text only), incremental (keep identity), full
- Day-level comparison between two plans
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from config_validation import validate_plan_configuration
from plan_generator import PlanGenerationOptions, generate_plan
from plan_models import DailyWorkout, PlanConfiguration, TrainingPlan, Workout
from workout_distribution import annotate_pace_guidance

CONFIGURATION_FIELDS: Tuple[str, ...] = (
    "race_distance",
    "program_length",
    "training_days_per_week",
    "rest_days",
    "long_run_day",
    "deload_frequency",
    "user_experience",
    "difficulty",
    "pace_method",
)

HIGH_IMPACT_FIELDS = frozenset({"race_distance", "program_length"})
MEDIUM_IMPACT_FIELDS = frozenset({"rest_days", "long_run_day", "deload_frequency"})
SIGNIFICANT_DISTANCE_CHANGE = 2.0

MINIMAL_UPDATE_WARNING = "Minimal update applied - only pace guidance updated"
FULL_REGENERATION_WARNING = "Plan fully regenerated due to significant configuration changes"


@dataclass(frozen=True)
class ConfigurationChange:
    field: str
    old_value: object
    new_value: object
    impact: str


@dataclass(frozen=True)
class PlanChange:
    type: str  # configuration / workout / week
    field: str
    old_value: object
    new_value: object
    impact: str
    description: str
    week_number: Optional[int] = None
    day_of_week: Optional[str] = None


@dataclass(frozen=True)
class PlanComparison:
    original_plan: TrainingPlan
    modified_plan: TrainingPlan
    changes: Tuple[PlanChange, ...]
    impact_assessment: str

    @property
    def configuration_changes(self) -> Tuple[PlanChange, ...]:
        return tuple(change for change in self.changes if change.type == "configuration")

    @property
    def workout_changes(self) -> Tuple[PlanChange, ...]:
        return tuple(change for change in self.changes if change.type != "configuration")


@dataclass(frozen=True)
class RegenerationOptions:
    force_full_regeneration: bool = False
    generation: Optional[PlanGenerationOptions] = None


@dataclass(frozen=True)
class RegenerationResult:
    success: bool
    new_plan: Optional[TrainingPlan]
    comparison: Optional[PlanComparison]
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    strategy_used: str = "full"


# -----------------------------
# Configuration diff
# -----------------------------


def _same_value(field: str, old: object, new: object) -> bool:
    if field == "rest_days":
        return sorted(old) == sorted(new)
    return old == new


def assess_change_impact(field: str, old_value: object, new_value: object) -> str:
    if field in HIGH_IMPACT_FIELDS:
        return "high"
    if field == "training_days_per_week":
        return "medium" if abs(new_value - old_value) > 1 else "low"
    if field in MEDIUM_IMPACT_FIELDS:
        return "medium"
    return "low"


def analyze_configuration_changes(
    old: PlanConfiguration, new: PlanConfiguration
) -> Tuple[ConfigurationChange, ...]:
    changes: List[ConfigurationChange] = []
    for field in CONFIGURATION_FIELDS:
        old_value = getattr(old, field)
        new_value = getattr(new, field)
        if _same_value(field, old_value, new_value):
            continue
        changes.append(
            ConfigurationChange(field, old_value, new_value, assess_change_impact(field, old_value, new_value))
        )
    return tuple(changes)


def determine_regeneration_strategy(
    changes: Sequence[ConfigurationChange], force_full: bool = False
) -> Tuple[str, str]:
    """Return (strategy, reason)."""
    if force_full:
        return "full", "Full regeneration requested"
    if not changes:
        return "minimal", "No configuration changes detected"
    if any(change.impact == "high" for change in changes):
        return "full", "High-impact changes require full regeneration"
    if sum(1 for change in changes if change.impact == "medium") >= 3:
        return "full", "Multiple medium-impact changes require full regeneration"
    if all(change.field == "pace_method" for change in changes):
        return "minimal", "Only pace guidance needs updating"
    return "incremental", "Changes can be applied by regenerating affected weeks"


def _format_value(value: object) -> str:
    if isinstance(value, tuple):
        return ", ".join(str(item) for item in value) or "none"
    if value is None:
        return "none"
    return str(value)


def generate_change_description(change: ConfigurationChange) -> str:
    old = _format_value(change.old_value)
    new = _format_value(change.new_value)
    if change.field == "race_distance":
        return f"Race distance changed from {old} to {new}"
    if change.field == "program_length":
        return f"Program length changed from {old} to {new} weeks"
    if change.field == "training_days_per_week":
        return f"Training days changed from {old} to {new} per week"
    if change.field == "rest_days":
        return f"Rest days changed from {old} to {new}"
    if change.field == "long_run_day":
        return f"Long run day changed from {old} to {new}"
    if change.field == "deload_frequency":
        return f"Deload frequency changed from every {old} weeks to every {new} weeks"
    return f"{change.field.replace('_', ' ').capitalize()} changed from {old} to {new}"


# -----------------------------
# Plan comparison
# -----------------------------


def assess_workout_change_impact(old: Optional[Workout], new: Optional[Workout]) -> str:
    if old is None and new is None:
        return "low"
    if old is None or new is None:
        return "medium"
    if old.type != new.type:
        return "high"
    if abs(old.distance_km - new.distance_km) > SIGNIFICANT_DISTANCE_CHANGE:
        return "medium"
    return "low"


def _workout_change_description(week_number: int, old: DailyWorkout, new: DailyWorkout) -> str:
    prefix = f"Week {week_number} {new.day_of_week}"
    if old.workout is None and new.workout is not None:
        return f"{prefix}: Added {new.workout.type}"
    if old.workout is not None and new.workout is None:
        return f"{prefix}: Removed {old.workout.type}"
    if old.workout is not None and new.workout is not None and old.workout.type != new.workout.type:
        return f"{prefix}: Changed from {old.workout.type} to {new.workout.type}"
    return f"{prefix}: Workout modified"


def _week_changes(original: TrainingPlan, modified: TrainingPlan) -> List[PlanChange]:
    changes: List[PlanChange] = []
    original_weeks = {week.week_number: week for week in original.weeks}
    modified_weeks = {week.week_number: week for week in modified.weeks}

    for number in sorted(set(original_weeks) | set(modified_weeks)):
        old_week = original_weeks.get(number)
        new_week = modified_weeks.get(number)
        if old_week is None:
            changes.append(PlanChange("week", "weeks", None, number, "medium", f"Week {number} added to plan", number))
            continue
        if new_week is None:
            changes.append(
                PlanChange("week", "weeks", number, None, "medium", f"Week {number} removed from plan", number)
            )
            continue
        for old_day, new_day in zip(old_week.days, new_week.days):
            if old_day == new_day:
                continue
            changes.append(
                PlanChange(
                    type="workout",
                    field="workout",
                    old_value=old_day.workout,
                    new_value=new_day.workout,
                    impact=assess_workout_change_impact(old_day.workout, new_day.workout),
                    description=_workout_change_description(number, old_day, new_day),
                    week_number=number,
                    day_of_week=new_day.day_of_week,
                )
            )
    return changes


def generate_impact_assessment(changes: Sequence[PlanChange]) -> str:
    if not changes:
        return "No changes detected between plans."
    high = sum(1 for change in changes if change.impact == "high")
    medium = sum(1 for change in changes if change.impact == "medium")
    if high:
        return f"Significant changes detected ({high} high-impact). Review the updated plan carefully."
    if medium:
        return f"Moderate changes detected ({medium} medium-impact). Plan structure adjusted."
    return "Minor changes detected. Plan structure remains largely unchanged."


def compare_plans(original: TrainingPlan, modified: TrainingPlan) -> PlanComparison:
    changes: List[PlanChange] = [
        PlanChange(
            type="configuration",
            field=change.field,
            old_value=change.old_value,
            new_value=change.new_value,
            impact=change.impact,
            description=generate_change_description(change),
        )
        for change in analyze_configuration_changes(original.configuration, modified.configuration)
    ]
    changes.extend(_week_changes(original, modified))
    return PlanComparison(
        original_plan=original,
        modified_plan=modified,
        changes=tuple(changes),
        impact_assessment=generate_impact_assessment(changes),
    )


# -----------------------------
# Regeneration
# -----------------------------


def apply_minimal_update(existing: TrainingPlan, new_config: PlanConfiguration) -> TrainingPlan:
    """Re-annotate pace guidance only; placements and distances stay as they are."""
    weeks = []
    for week in existing.weeks:
        days = tuple(
            replace(
                day,
                workout=replace(
                    day.workout,
                    pace_guidance=annotate_pace_guidance(day.workout.pace_guidance, new_config.pace_method),
                ),
            )
            if day.workout is not None
            else day
            for day in week.days
        )
        weeks.append(replace(week, days=days))
    metadata = replace(existing.metadata, last_modified=datetime.now())
    return replace(existing, configuration=new_config, weeks=tuple(weeks), metadata=metadata)


def regenerate_plan(
    existing: TrainingPlan,
    new_config: PlanConfiguration,
    options: Optional[RegenerationOptions] = None,
) -> RegenerationResult:
    options = options or RegenerationOptions()
    changes = analyze_configuration_changes(existing.configuration, new_config)
    strategy, reason = determine_regeneration_strategy(changes, options.force_full_regeneration)
    logger.info(
        "Regenerating plan {} with {} strategy ({}): {}",
        existing.id,
        strategy,
        reason,
        [change.field for change in changes],
    )

    if strategy == "minimal":
        validation = validate_plan_configuration(new_config)
        if not validation.is_valid:
            return RegenerationResult(
                success=False,
                new_plan=None,
                comparison=None,
                errors=validation.error_messages,
                warnings=validation.warning_messages,
                strategy_used=strategy,
            )
        new_plan = apply_minimal_update(existing, new_config)
        return RegenerationResult(
            success=True,
            new_plan=new_plan,
            comparison=compare_plans(existing, new_plan),
            warnings=validation.warning_messages + (MINIMAL_UPDATE_WARNING,),
            strategy_used=strategy,
        )

    generated = generate_plan(new_config, options.generation)
    if not generated.success:
        return RegenerationResult(
            success=False,
            new_plan=None,
            comparison=None,
            errors=generated.errors,
            warnings=generated.warnings,
            strategy_used=strategy,
        )

    new_plan = generated.plan
    if strategy == "incremental":
        new_plan = replace(
            new_plan,
            id=existing.id,
            metadata=replace(new_plan.metadata, created_at=existing.metadata.created_at),
        )
        note = f"Plan incrementally regenerated for: {', '.join(change.field for change in changes)}"
    else:
        note = FULL_REGENERATION_WARNING

    return RegenerationResult(
        success=True,
        new_plan=new_plan,
        comparison=compare_plans(existing, new_plan),
        warnings=generated.warnings + (note,),
        strategy_used=strategy,
    )
