from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from plan_models import DailyWorkout, ScheduledWeek, SchedulingConstraints
from training_constants import DAYS_OF_WEEK
from workout_distribution import PACE_SOURCE_SEPARATOR, create_workout
from workout_scheduling import (
    QUALITY_WORKOUT_CYCLE,
    RECOVERY_VIOLATION,
    calculate_days_between,
    check_cross_week_recovery,
    days_between,
    enhance_quality_workout,
    get_next_quality_workout_type,
    get_quality_workout_rotation,
    get_quality_workout_schedule,
    schedule_weekly_workouts,
    validate_scheduling_constraints,
)


def example_constraints(**overrides) -> SchedulingConstraints:
    values = dict(
        rest_days=("Monday", "Wednesday", "Friday"),
        long_run_day="Sunday",
        training_days_per_week=4,
    )
    values.update(overrides)
    return SchedulingConstraints(**values)


def week_workouts(*types: str):
    distances = {"easy": 12.0, "long": 22.0, "quality": 10.0}
    return [create_workout(kind, distances[kind], "base") for kind in types]


def placement(days) -> dict:
    return {day.day_of_week: day.workout.type for day in days if day.workout is not None}


def quality_week(week_number: int, day: str) -> ScheduledWeek:
    workout = create_workout("quality", 10.0, "build")
    days = tuple(
        DailyWorkout(day_of_week=name, is_rest_day=False, workout=workout)
        if name == day
        else DailyWorkout(day_of_week=name, is_rest_day=True)
        for name in DAYS_OF_WEEK
    )
    return ScheduledWeek(
        week_number=week_number,
        daily_workouts=days,
        quality_rotation=get_quality_workout_rotation(week_number),
    )


def test_example_week_placement() -> None:
    result = schedule_weekly_workouts(1, example_constraints(), week_workouts("easy", "quality", "easy", "long"))

    assert result.success
    assert result.errors == ()
    assert placement(result.scheduled_week.daily_workouts) == {
        "Tuesday": "quality",
        "Thursday": "easy",
        "Saturday": "easy",
        "Sunday": "long",
    }
    tuesday = result.scheduled_week.daily_workouts[1].workout
    assert tuesday.quality_type == "tempo"
    assert tuesday.description.startswith("Tempo Run - 10 km")


def test_scheduled_week_respects_constraints() -> None:
    constraints = example_constraints()
    result = schedule_weekly_workouts(3, constraints, week_workouts("easy", "quality", "easy", "long"))
    days = result.scheduled_week.daily_workouts

    assert [day.day_of_week for day in days] == DAYS_OF_WEEK
    assert days[DAYS_OF_WEEK.index("Sunday")].workout.type == "long"
    assert all(day.workout is None for day in days if day.day_of_week in constraints.rest_days)
    assert sum(1 for day in days if day.is_training_day) == constraints.training_days_per_week


def test_infeasible_constraints_return_no_week() -> None:
    constraints = example_constraints(
        rest_days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"),
        training_days_per_week=6,
    )
    result = schedule_weekly_workouts(1, constraints, week_workouts("quality", "long"))

    assert not result.success
    assert result.scheduled_week is None
    assert "Not enough available days: 2 available, 6 required" in result.errors


def test_crowded_quality_sessions_are_reported() -> None:
    constraints = example_constraints(
        rest_days=("Monday", "Tuesday", "Wednesday", "Thursday"),
        training_days_per_week=3,
    )
    result = schedule_weekly_workouts(1, constraints, week_workouts("quality", "quality", "long"))

    assert not result.success
    assert result.scheduled_week is not None
    assert f"{RECOVERY_VIOLATION}: Friday and Saturday" in result.errors
    assert "Consecutive rest days may disrupt training rhythm" in result.warnings


def test_extra_quality_session_takes_next_rotation_type() -> None:
    constraints = example_constraints(rest_days=("Monday", "Friday"), training_days_per_week=5)
    result = schedule_weekly_workouts(1, constraints, week_workouts("quality", "quality", "easy", "long", "easy"))
    quality_types = [
        day.workout.quality_type
        for day in result.scheduled_week.daily_workouts
        if day.workout is not None and day.workout.type == "quality"
    ]

    assert sorted(quality_types) == ["tempo", "threshold"]


def test_surplus_easy_runs_noted() -> None:
    result = schedule_weekly_workouts(
        1, example_constraints(), week_workouts("easy", "quality", "easy", "long", "easy", "easy")
    )

    assert result.success
    assert "Note: 2 easy workouts not scheduled due to training day limits" in result.scheduled_week.scheduling_notes


def test_unfilled_training_days_become_rest_with_note() -> None:
    constraints = example_constraints(rest_days=("Monday", "Wednesday"), training_days_per_week=5)
    result = schedule_weekly_workouts(1, constraints, week_workouts("quality", "long", "easy"))
    days = result.scheduled_week.daily_workouts

    assert not result.success
    assert "Scheduled 3 training days, expected 5" in result.errors
    assert any(day.notes == "No workout scheduled" for day in days)


def test_rotation_has_period_five() -> None:
    for week in range(1, 21):
        rotation = get_quality_workout_rotation(week)
        assert rotation.quality_type == QUALITY_WORKOUT_CYCLE[(week - 1) % 5]
        assert rotation.quality_type == get_quality_workout_rotation(week + 5).quality_type
        assert rotation.next_rotation == get_quality_workout_rotation(week + 1).quality_type
        assert get_next_quality_workout_type(week) == rotation.next_rotation

    assert [r.week_number for r in get_quality_workout_schedule(4, 3)] == [4, 5, 6]


@pytest.mark.parametrize("first", range(7))
@pytest.mark.parametrize("second", range(7))
def test_days_between_is_symmetric_and_circular(first: int, second: int) -> None:
    distance = calculate_days_between(first, second)

    assert distance == calculate_days_between(second, first)
    assert 0 <= distance <= 3
    assert (distance == 0) == (first == second)


def test_days_between_wraps_week() -> None:
    assert days_between("Sunday", "Tuesday") == 2
    assert days_between("Monday", "Sunday") == 1


def test_cross_week_recovery_violation() -> None:
    violations = check_cross_week_recovery(quality_week(1, "Sunday"), quality_week(2, "Monday"))

    assert violations == [f"{RECOVERY_VIOLATION}: week 1 Sunday and week 2 Monday"]
    assert check_cross_week_recovery(quality_week(1, "Saturday"), quality_week(2, "Monday")) == []


def test_constraint_validation_flags_long_run_on_rest_day() -> None:
    check = validate_scheduling_constraints(example_constraints(long_run_day="Monday"))

    assert not check.is_valid
    assert "Long run day (Monday) conflicts with rest day preference" in check.errors


def test_enhance_keeps_pace_source() -> None:
    workout = create_workout("quality", 8.0, "build", pace_method="timeTrial")
    enhanced = enhance_quality_workout(workout, "hills", "build")

    assert enhanced.pace_guidance == f"Hard effort uphill - 5K effort level{PACE_SOURCE_SEPARATOR}Time Trial"
    assert enhanced.intensity == "zone4"
    assert enhanced.quality_type == "hills"


def test_quality_without_free_day_is_dropped_with_warning() -> None:
    constraints = example_constraints(
        rest_days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
        training_days_per_week=1,
    )
    result = schedule_weekly_workouts(1, constraints, week_workouts("long", "quality"))

    assert result.success
    assert "Could not find optimal day for quality workout with adequate recovery" in result.warnings
    assert placement(result.scheduled_week.daily_workouts) == {"Sunday": "long"}
