"""
config_validation
-----------------
Checks a PlanConfiguration before any planning work happens.

- Each check runs independently and every issue is reported
- Errors block generation, warnings carry a low/medium/high severity
- Default configurations and improvement suggestions per race distance
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from loguru import logger

from plan_models import ConfigurationValidation, PlanConfiguration, ValidationIssue
from training_constants import (
    CONFIGURATION_CONSTRAINTS,
    DAYS_OF_WEEK,
    DIFFICULTY_LEVELS,
    EXPERIENCE_LEVELS,
    PACE_INPUT_METHODS,
    RACE_DISTANCES,
    WEEKEND_DAYS,
)


Issues = Tuple[List[ValidationIssue], List[ValidationIssue]]


def _error(field: str, message: str, code: str) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, code=code)


def _warning(field: str, message: str, code: str, severity: str) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, code=code, severity=severity)


def validate_race_distance(race_distance: str) -> Issues:
    errors: List[ValidationIssue] = []
    if race_distance not in RACE_DISTANCES:
        errors.append(
            _error(
                "race_distance",
                "Invalid race distance. Must be 5K, 10K, Half Marathon, or Marathon.",
                "INVALID_RACE_DISTANCE",
            )
        )
    return errors, []


def validate_program_length(program_length: int, race_distance: str) -> Issues:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    bounds = CONFIGURATION_CONSTRAINTS["program_length"]

    if program_length < bounds["min"]:
        errors.append(
            _error(
                "program_length",
                f"Program length must be at least {bounds['min']} weeks.",
                "PROGRAM_TOO_SHORT",
            )
        )
    if program_length > bounds["max"]:
        errors.append(
            _error(
                "program_length",
                f"Program length cannot exceed {bounds['max']} weeks.",
                "PROGRAM_TOO_LONG",
            )
        )

    recommended = bounds["recommended"].get(race_distance)
    if recommended is None:
        # unknown race distance is already reported by validate_race_distance
        return errors, warnings

    if bounds["min"] <= program_length < recommended["min"]:
        warnings.append(
            _warning(
                "program_length",
                f"For {race_distance}, we recommend at least {recommended['min']} weeks "
                "for optimal preparation.",
                "SUBOPTIMAL_PROGRAM_LENGTH",
                "high",
            )
        )
    if program_length != recommended["optimal"]:
        warnings.append(
            _warning(
                "program_length",
                f"For {race_distance}, the optimal program length is {recommended['optimal']} weeks.",
                "NON_OPTIMAL_LENGTH",
                "low",
            )
        )
    return errors, warnings


def validate_training_days(training_days: int) -> Issues:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    bounds = CONFIGURATION_CONSTRAINTS["training_days"]

    if training_days < bounds["min"]:
        errors.append(
            _error(
                "training_days_per_week",
                f"Training days per week must be at least {bounds['min']}.",
                "TOO_FEW_TRAINING_DAYS",
            )
        )
    if training_days > bounds["max"]:
        errors.append(
            _error(
                "training_days_per_week",
                f"Training days per week cannot exceed {bounds['max']}.",
                "TOO_MANY_TRAINING_DAYS",
            )
        )
    if training_days == 3:
        warnings.append(
            _warning(
                "training_days_per_week",
                "Training only 3 days per week may limit your progress. "
                "Consider 4-5 days for better results.",
                "LIMITED_TRAINING_FREQUENCY",
                "medium",
            )
        )
    if training_days >= 6:
        warnings.append(
            _warning(
                "training_days_per_week",
                "Training 6+ days per week increases injury risk. Ensure adequate recovery.",
                "HIGH_TRAINING_FREQUENCY",
                "high",
            )
        )
    return errors, warnings


def has_consecutive_rest_days(rest_days: Iterable[str]) -> bool:
    """True when two rest days touch, including the Sunday to Monday wrap."""
    indices = sorted({DAYS_OF_WEEK.index(day) for day in rest_days if day in DAYS_OF_WEEK})
    for current, following in zip(indices, indices[1:]):
        if following - current == 1:
            return True
    return 0 in indices and 6 in indices


def validate_rest_days(rest_days: Sequence[str], training_days: int) -> Issues:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    expected = 7 - training_days

    if len(rest_days) != expected:
        errors.append(
            _error(
                "rest_days",
                f"Expected {expected} rest days for {training_days} training days per week, "
                f"but got {len(rest_days)}.",
                "INCORRECT_REST_DAYS_COUNT",
            )
        )

    invalid = [day for day in rest_days if day not in DAYS_OF_WEEK]
    if invalid:
        errors.append(
            _error(
                "rest_days",
                f"Invalid day names: {', '.join(invalid)}. Must be valid day names.",
                "INVALID_DAY_NAMES",
            )
        )

    if len(set(rest_days)) != len(rest_days):
        errors.append(_error("rest_days", "Rest days cannot contain duplicates.", "DUPLICATE_REST_DAYS"))

    available = 7 - len(set(rest_days))
    if available < training_days:
        errors.append(
            _error(
                "rest_days",
                f"Not enough available days: {available} available, {training_days} required.",
                "NOT_ENOUGH_AVAILABLE_DAYS",
            )
        )

    if has_consecutive_rest_days(rest_days):
        warnings.append(
            _warning(
                "rest_days",
                "Consecutive rest days may disrupt training rhythm. Consider spreading them out.",
                "CONSECUTIVE_REST_DAYS",
                "medium",
            )
        )
    return errors, warnings


def validate_long_run_day(long_run_day: str, rest_days: Sequence[str]) -> Issues:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    if long_run_day not in DAYS_OF_WEEK:
        errors.append(
            _error(
                "long_run_day",
                "Invalid long run day. Must be a valid day of the week.",
                "INVALID_LONG_RUN_DAY",
            )
        )
    if long_run_day in rest_days:
        errors.append(_error("long_run_day", "Long run day cannot be a rest day.", "LONG_RUN_ON_REST_DAY"))
    if long_run_day not in WEEKEND_DAYS:
        warnings.append(
            _warning(
                "long_run_day",
                "Long runs are typically scheduled on weekends for better recovery.",
                "NON_WEEKEND_LONG_RUN",
                "low",
            )
        )
    return errors, warnings


def validate_deload_frequency(deload_frequency: int, program_length: int) -> Issues:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    if deload_frequency not in CONFIGURATION_CONSTRAINTS["deload_frequency"]["options"]:
        errors.append(
            _error(
                "deload_frequency",
                "Deload frequency must be either 3 or 4 weeks.",
                "INVALID_DELOAD_FREQUENCY",
            )
        )
    # one full deload cycle plus a buffer week on each side
    if program_length < deload_frequency + 2:
        warnings.append(
            _warning(
                "deload_frequency",
                "Program may be too short for effective deload scheduling with "
                f"{deload_frequency}-week frequency.",
                "SHORT_PROGRAM_DELOAD",
                "low",
            )
        )
    return errors, warnings


def validate_modifiers(config: PlanConfiguration) -> Issues:
    errors: List[ValidationIssue] = []
    if config.user_experience not in EXPERIENCE_LEVELS:
        errors.append(
            _error(
                "user_experience",
                f"Invalid experience level: {config.user_experience}. "
                "Must be beginner, intermediate, or advanced.",
                "INVALID_EXPERIENCE_LEVEL",
            )
        )
    if config.difficulty is not None and config.difficulty not in DIFFICULTY_LEVELS:
        errors.append(
            _error("difficulty", f"Invalid difficulty level: {config.difficulty}.", "INVALID_DIFFICULTY")
        )
    if config.pace_method is not None and config.pace_method not in PACE_INPUT_METHODS:
        errors.append(
            _error("pace_method", f"Invalid pace input method: {config.pace_method}.", "INVALID_PACE_METHOD")
        )
    return errors, []


def cross_validate(config: PlanConfiguration) -> Issues:
    warnings: List[ValidationIssue] = []

    if config.race_distance == "Marathon" and config.program_length < 12:
        warnings.append(
            _warning(
                "program_length",
                "Marathon training with less than 12 weeks significantly increases injury risk.",
                "RISKY_MARATHON_PREPARATION",
                "high",
            )
        )
    if config.training_days_per_week >= 6 and config.program_length < 8:
        warnings.append(
            _warning(
                "training_days_per_week",
                "High training frequency with short program duration may lead to overtraining.",
                "HIGH_INTENSITY_SHORT_PROGRAM",
                "high",
            )
        )
    if config.race_distance == "5K" and config.program_length > 16:
        warnings.append(
            _warning(
                "program_length",
                "5K training programs longer than 16 weeks may lead to staleness.",
                "EXCESSIVE_5K_PROGRAM",
                "medium",
            )
        )
    return [], warnings


def validate_plan_configuration(config: PlanConfiguration) -> ConfigurationValidation:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    checks = [
        validate_race_distance(config.race_distance),
        validate_program_length(config.program_length, config.race_distance),
        validate_training_days(config.training_days_per_week),
        validate_rest_days(config.rest_days, config.training_days_per_week),
        validate_long_run_day(config.long_run_day, config.rest_days),
        validate_deload_frequency(config.deload_frequency, config.program_length),
        validate_modifiers(config),
        cross_validate(config),
    ]
    for check_errors, check_warnings in checks:
        errors.extend(check_errors)
        warnings.extend(check_warnings)

    if errors:
        logger.trace("Configuration rejected with codes {}", [issue.code for issue in errors])
    return ConfigurationValidation(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


# Public alias used by callers that only want the validation boundary.
validate_configuration = validate_plan_configuration


def create_default_configuration(race_distance: str) -> PlanConfiguration:
    recommended = CONFIGURATION_CONSTRAINTS["program_length"]["recommended"].get(race_distance)
    if recommended is None:
        raise ValueError(f"Unsupported race distance: {race_distance}")
    return PlanConfiguration(
        race_distance=race_distance,
        program_length=recommended["optimal"],
        training_days_per_week=4,
        rest_days=("Monday", "Wednesday", "Friday"),
        long_run_day="Sunday",
        deload_frequency=4,
    )


def suggest_configuration_improvements(config: PlanConfiguration) -> List[str]:
    validation = validate_plan_configuration(config)
    suggestions = [issue.message for issue in validation.warnings if issue.severity == "high"]

    if config.training_days_per_week == 3:
        suggestions.append("Consider increasing to 4-5 training days per week for better fitness gains.")
    if config.long_run_day not in WEEKEND_DAYS:
        suggestions.append("Schedule long runs on weekends for better recovery and time availability.")

    recommended = CONFIGURATION_CONSTRAINTS["program_length"]["recommended"].get(config.race_distance)
    if recommended and config.program_length < recommended["optimal"]:
        suggestions.append(
            f"Consider extending to {recommended['optimal']} weeks for optimal "
            f"{config.race_distance} preparation."
        )
    return suggestions
