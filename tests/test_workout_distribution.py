from dataclasses import replace
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from plan_models import PlanConfiguration, WeeklyWorkoutDistribution, WorkoutCounts
from training_constants import DAYS_OF_WEEK
from workout_distribution import (
    PACE_SOURCE_SEPARATOR,
    annotate_pace_guidance,
    calculate_workout_distances,
    calculate_workout_duration,
    create_weekly_distribution,
    create_workout,
    get_distribution_template,
    get_phase_workout_recommendations,
    strip_pace_source,
    validate_workout_distribution,
)


def build_config(**overrides) -> PlanConfiguration:
    config = PlanConfiguration(
        race_distance="10K",
        program_length=8,
        training_days_per_week=4,
        rest_days=("Monday", "Wednesday", "Friday"),
        long_run_day="Sunday",
    )
    return replace(config, **overrides)


def config_for_days(days: int) -> PlanConfiguration:
    rest = tuple(DAYS_OF_WEEK[: 7 - days])
    return build_config(training_days_per_week=days, rest_days=rest)


@pytest.mark.parametrize("days", [3, 4, 5, 6, 7])
def test_distribution_counts_follow_template(days: int) -> None:
    distribution = create_weekly_distribution(config_for_days(days), 50)
    counts = distribution.workout_counts

    assert distribution.total_workouts == days
    assert len(distribution.workouts) == days
    assert counts.long == 1
    assert counts.quality == 1
    assert counts.easy == days - 2
    assert counts.rest == 7 - days


def test_unknown_template_raises() -> None:
    with pytest.raises(ValueError):
        get_distribution_template(2)
    with pytest.raises(ValueError):
        calculate_workout_distances("10K", 40, 8)


def test_distances_use_race_scaling() -> None:
    distances = calculate_workout_distances("10K", 40, 4)

    assert distances["easy"] == pytest.approx(12.0)
    assert distances["long"] == pytest.approx(22.0)
    assert distances["quality"] == pytest.approx(10.0)
    assert distances["rest"] == 0.0


def test_minimum_distances_apply() -> None:
    distances = calculate_workout_distances("5K", 10, 7)

    assert distances["easy"] == pytest.approx(3.0)
    assert distances["long"] == pytest.approx(8.0)
    assert distances["quality"] == pytest.approx(4.0)


def test_duration_from_typical_pace() -> None:
    assert calculate_workout_duration("easy", 10.0) == 60
    assert calculate_workout_duration("long", 20.0) == 130
    assert calculate_workout_duration("quality", 8.0) == 40


def test_quality_workout_text_depends_on_phase() -> None:
    base = create_workout("quality", 10.0, "base")
    peak = create_workout("quality", 10.0, "peak")

    assert base.description.startswith("Tempo run - 10 km")
    assert peak.description.startswith("Race pace workout - 10 km")
    assert base.intensity == "zone4"
    assert base.recovery_hours == 48


def test_pace_method_annotates_guidance() -> None:
    workout = create_workout("easy", 8.0, "base", pace_method="recentRace")

    assert workout.pace_guidance.endswith(f"{PACE_SOURCE_SEPARATOR}Recent Race Time")
    assert strip_pace_source(workout.pace_guidance).startswith("Conversational pace")


def test_annotation_replaces_previous_source() -> None:
    guidance = annotate_pace_guidance("Easy effort", "recentRace")
    updated = annotate_pace_guidance(guidance, "goal")

    assert updated == f"Easy effort{PACE_SOURCE_SEPARATOR}Goal Race Time"
    assert annotate_pace_guidance(updated, None) == "Easy effort"


def test_four_day_week_is_valid_but_warns_about_easy_share() -> None:
    report = validate_workout_distribution(create_weekly_distribution(build_config(), 40))

    assert report.is_valid
    assert "Consider more easy runs to follow the 80/20 training principle" in report.warnings


def test_seven_day_week_recommends_rest() -> None:
    report = validate_workout_distribution(create_weekly_distribution(config_for_days(7), 60))

    assert "Include at least 1 rest day per week" in report.recommendations


def test_missing_long_run_is_invalid() -> None:
    distribution = WeeklyWorkoutDistribution(
        total_workouts=3,
        workout_counts=WorkoutCounts(easy=2, long=0, quality=1, rest=4),
        workouts=(),
    )
    report = validate_workout_distribution(distribution)

    assert not report.is_valid
    assert "No long run scheduled - important for endurance development" in report.warnings


def test_phase_workout_recommendations() -> None:
    recommendations = get_phase_workout_recommendations("taper")

    assert recommendations["emphasis"]
    assert recommendations["volume_guidance"].endswith("volume emphasis")
