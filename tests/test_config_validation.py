from dataclasses import replace
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config_validation import (
    create_default_configuration,
    has_consecutive_rest_days,
    suggest_configuration_improvements,
    validate_configuration,
    validate_plan_configuration,
)
from plan_models import PlanConfiguration


def build_config(**overrides) -> PlanConfiguration:
    config = PlanConfiguration(
        race_distance="10K",
        program_length=8,
        training_days_per_week=4,
        rest_days=("Monday", "Wednesday", "Friday"),
        long_run_day="Sunday",
        deload_frequency=4,
    )
    return replace(config, **overrides)


def error_codes(config: PlanConfiguration) -> set:
    return {issue.code for issue in validate_plan_configuration(config).errors}


def warning_codes(config: PlanConfiguration) -> set:
    return {issue.code for issue in validate_plan_configuration(config).warnings}


@pytest.mark.parametrize("race", ["5K", "10K", "Half Marathon", "Marathon"])
def test_default_configuration_is_valid(race: str) -> None:
    config = create_default_configuration(race)
    result = validate_plan_configuration(config)

    assert result.is_valid
    assert result.errors == ()
    assert config.training_days_per_week == 4
    assert config.long_run_day == "Sunday"


def test_default_configuration_uses_optimal_length() -> None:
    assert create_default_configuration("Marathon").program_length == 16
    assert create_default_configuration("5K").program_length == 8


def test_default_configuration_rejects_unknown_race() -> None:
    with pytest.raises(ValueError):
        create_default_configuration("Ultra")


def test_validate_configuration_alias() -> None:
    assert validate_configuration is validate_plan_configuration


def test_example_configuration_only_warns_about_length() -> None:
    result = validate_plan_configuration(build_config())

    assert result.is_valid
    assert [issue.code for issue in result.warnings] == ["NON_OPTIMAL_LENGTH"]
    assert result.warnings[0].severity == "low"


def test_five_rest_days_with_six_training_days_fails() -> None:
    config = build_config(
        training_days_per_week=6,
        rest_days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"),
    )
    result = validate_plan_configuration(config)

    assert not result.is_valid
    assert any(message.startswith("Not enough available days") for message in result.error_messages)
    assert "INCORRECT_REST_DAYS_COUNT" in error_codes(config)


def test_long_run_on_rest_day_is_error() -> None:
    config = build_config(long_run_day="Monday")

    assert "LONG_RUN_ON_REST_DAY" in error_codes(config)
    assert "NON_WEEKEND_LONG_RUN" in warning_codes(config)


def test_invalid_race_and_day_names_reported_together() -> None:
    config = build_config(race_distance="Ultra", rest_days=("Monday", "Funday", "Friday"))
    codes = error_codes(config)

    assert {"INVALID_RACE_DISTANCE", "INVALID_DAY_NAMES"} <= codes


def test_duplicate_rest_days_rejected() -> None:
    config = build_config(rest_days=("Monday", "Monday", "Friday"))

    assert "DUPLICATE_REST_DAYS" in error_codes(config)


@pytest.mark.parametrize("days", [2, 8])
def test_training_days_out_of_range(days: int) -> None:
    config = build_config(training_days_per_week=days)

    assert error_codes(config) & {"TOO_FEW_TRAINING_DAYS", "TOO_MANY_TRAINING_DAYS"}


def test_program_length_bounds() -> None:
    assert "PROGRAM_TOO_SHORT" in error_codes(build_config(program_length=5))
    assert "PROGRAM_TOO_LONG" in error_codes(build_config(program_length=25))


def test_invalid_deload_frequency() -> None:
    assert "INVALID_DELOAD_FREQUENCY" in error_codes(build_config(deload_frequency=5))


def test_invalid_modifiers() -> None:
    config = build_config(user_experience="elite", difficulty="brutal", pace_method="guess")

    assert {"INVALID_EXPERIENCE_LEVEL", "INVALID_DIFFICULTY", "INVALID_PACE_METHOD"} <= error_codes(config)


def test_known_modifiers_are_accepted() -> None:
    config = build_config(user_experience="advanced", difficulty="hard", pace_method="recentRace")

    assert validate_plan_configuration(config).is_valid


def test_short_marathon_carries_high_severity_warnings() -> None:
    config = build_config(race_distance="Marathon", program_length=8)
    result = validate_plan_configuration(config)
    severities = {issue.code: issue.severity for issue in result.warnings}

    assert result.is_valid
    assert severities["SUBOPTIMAL_PROGRAM_LENGTH"] == "high"
    assert severities["RISKY_MARATHON_PREPARATION"] == "high"


def test_consecutive_rest_days_warning() -> None:
    config = build_config(rest_days=("Monday", "Tuesday", "Friday"))

    assert "CONSECUTIVE_REST_DAYS" in warning_codes(config)


def test_has_consecutive_rest_days_wraps_week() -> None:
    assert has_consecutive_rest_days(["Sunday", "Monday"])
    assert has_consecutive_rest_days(["Tuesday", "Wednesday"])
    assert not has_consecutive_rest_days(["Monday", "Wednesday", "Friday"])


def test_suggestions_for_three_day_weekday_long_run() -> None:
    config = build_config(
        training_days_per_week=3,
        rest_days=("Monday", "Wednesday", "Friday", "Sunday"),
        long_run_day="Saturday",
        program_length=8,
    )
    suggestions = suggest_configuration_improvements(config)

    assert "Consider increasing to 4-5 training days per week for better fitness gains." in suggestions
    assert any("extending to 10 weeks" in suggestion for suggestion in suggestions)


def warning_severities(config: PlanConfiguration) -> dict:
    return {issue.code: issue.severity for issue in validate_plan_configuration(config).warnings}


@pytest.mark.parametrize(
    "overrides, code, severity",
    [
        (
            {"training_days_per_week": 3, "rest_days": ("Monday", "Wednesday", "Friday", "Sunday"), "long_run_day": "Saturday"},
            "LIMITED_TRAINING_FREQUENCY",
            "medium",
        ),
        ({"training_days_per_week": 6, "rest_days": ("Monday",)}, "HIGH_TRAINING_FREQUENCY", "high"),
        ({"program_length": 5}, "SHORT_PROGRAM_DELOAD", "low"),
        (
            {"race_distance": "5K", "program_length": 6, "training_days_per_week": 6, "rest_days": ("Monday",)},
            "HIGH_INTENSITY_SHORT_PROGRAM",
            "high",
        ),
        ({"race_distance": "5K", "program_length": 18}, "EXCESSIVE_5K_PROGRAM", "medium"),
    ],
)
def test_warning_codes_and_severities(overrides: dict, code: str, severity: str) -> None:
    assert warning_severities(build_config(**overrides))[code] == severity


def test_short_program_deload_is_only_a_warning() -> None:
    config = build_config(program_length=5)

    assert "SHORT_PROGRAM_DELOAD" not in error_codes(config)
    assert "SHORT_PROGRAM_DELOAD" in warning_codes(config)


def test_single_rest_day_string_is_wrapped() -> None:
    config = build_config(training_days_per_week=6, rest_days="Monday")

    assert config.rest_days == ("Monday",)
    assert validate_plan_configuration(config).is_valid
