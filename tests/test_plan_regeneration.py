from dataclasses import replace
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from plan_generator import PlanGenerationOptions, generate_plan
from plan_models import PlanConfiguration, TrainingPlan
from plan_regeneration import (
    FULL_REGENERATION_WARNING,
    MINIMAL_UPDATE_WARNING,
    ConfigurationChange,
    RegenerationOptions,
    analyze_configuration_changes,
    assess_change_impact,
    compare_plans,
    determine_regeneration_strategy,
    generate_change_description,
    regenerate_plan,
)
from workout_distribution import PACE_SOURCE_SEPARATOR


class FixedRandom:
    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


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


def generation_options() -> PlanGenerationOptions:
    return PlanGenerationOptions(rng=FixedRandom(0.99))


def existing_plan() -> TrainingPlan:
    return generate_plan(build_config(), generation_options()).plan


def regeneration_options(**overrides) -> RegenerationOptions:
    return replace(RegenerationOptions(generation=generation_options()), **overrides)


def layout(plan: TrainingPlan) -> list:
    return [
        (week.week_number, day.day_of_week, day.workout.type if day.workout else None,
         day.workout.distance_km if day.workout else 0.0)
        for week in plan.weeks
        for day in week.days
    ]


def test_pace_only_change_keeps_layout() -> None:
    plan = existing_plan()
    result = regenerate_plan(plan, build_config(pace_method="recentRace"), regeneration_options())

    assert result.success
    assert result.strategy_used == "minimal"
    assert result.new_plan.id == plan.id
    assert layout(result.new_plan) == layout(plan)
    assert MINIMAL_UPDATE_WARNING in result.warnings
    for week in result.new_plan.weeks:
        for day in week.days:
            if day.workout is not None:
                assert day.workout.pace_guidance.endswith(f"{PACE_SOURCE_SEPARATOR}Recent Race Time")


def test_pace_only_change_comparison_is_minor() -> None:
    plan = existing_plan()
    comparison = regenerate_plan(plan, build_config(pace_method="goal"), regeneration_options()).comparison

    assert [change.field for change in comparison.configuration_changes] == ["pace_method"]
    assert comparison.workout_changes
    assert all(change.impact == "low" for change in comparison.changes)
    assert comparison.impact_assessment == "Minor changes detected. Plan structure remains largely unchanged."


def test_invalid_pace_method_fails_minimal_update() -> None:
    result = regenerate_plan(existing_plan(), build_config(pace_method="guess"), regeneration_options())

    assert not result.success
    assert result.new_plan is None
    assert "Invalid pace input method: guess." in result.errors


def test_long_run_day_change_is_incremental() -> None:
    plan = existing_plan()
    result = regenerate_plan(plan, build_config(long_run_day="Saturday"), regeneration_options())

    assert result.success
    assert result.strategy_used == "incremental"
    assert result.new_plan.id == plan.id
    assert result.new_plan.metadata.created_at == plan.metadata.created_at
    assert all(week.day("Saturday").workout.type == "long" for week in result.new_plan.weeks)
    assert "Plan incrementally regenerated for: long_run_day" in result.warnings


def test_race_change_is_full_regeneration() -> None:
    plan = existing_plan()
    result = regenerate_plan(plan, build_config(race_distance="Half Marathon", program_length=10), regeneration_options())

    assert result.success
    assert result.strategy_used == "full"
    assert result.new_plan.id != plan.id
    assert FULL_REGENERATION_WARNING in result.warnings
    descriptions = [change.description for change in result.comparison.changes]
    assert "Week 9 added to plan" in descriptions
    assert "Race distance changed from 10K to Half Marathon" in descriptions
    assert result.comparison.impact_assessment.startswith("Significant changes detected")


def test_forced_full_regeneration() -> None:
    plan = existing_plan()
    result = regenerate_plan(plan, build_config(), regeneration_options(force_full_regeneration=True))

    assert result.strategy_used == "full"
    assert result.new_plan.id != plan.id


def test_failed_generation_is_reported() -> None:
    config = build_config(long_run_day="Monday")
    result = regenerate_plan(existing_plan(), config, regeneration_options())

    assert not result.success
    assert result.strategy_used == "incremental"
    assert "Long run day cannot be a rest day." in result.errors


@pytest.mark.parametrize(
    "field, old, new, expected",
    [
        ("race_distance", "10K", "5K", "high"),
        ("program_length", 8, 10, "high"),
        ("training_days_per_week", 4, 5, "low"),
        ("training_days_per_week", 4, 6, "medium"),
        ("rest_days", ("Monday",), ("Tuesday",), "medium"),
        ("long_run_day", "Sunday", "Saturday", "medium"),
        ("deload_frequency", 4, 3, "medium"),
        ("pace_method", None, "goal", "low"),
        ("user_experience", "intermediate", "advanced", "low"),
    ],
)
def test_change_impact(field: str, old, new, expected: str) -> None:
    assert assess_change_impact(field, old, new) == expected


def test_reordered_rest_days_are_not_a_change() -> None:
    changes = analyze_configuration_changes(
        build_config(), build_config(rest_days=("Friday", "Monday", "Wednesday"))
    )

    assert changes == ()


def test_strategy_selection() -> None:
    medium = [
        ConfigurationChange("rest_days", (), (), "medium"),
        ConfigurationChange("long_run_day", "Sunday", "Saturday", "medium"),
        ConfigurationChange("deload_frequency", 4, 3, "medium"),
    ]

    assert determine_regeneration_strategy([])[0] == "minimal"
    assert determine_regeneration_strategy(medium[:2])[0] == "incremental"
    assert determine_regeneration_strategy(medium)[0] == "full"
    assert determine_regeneration_strategy([ConfigurationChange("pace_method", None, "goal", "low")])[0] == "minimal"
    assert determine_regeneration_strategy([ConfigurationChange("difficulty", None, "hard", "low")])[0] == "incremental"
    assert determine_regeneration_strategy([], force_full=True)[0] == "full"


def test_change_descriptions() -> None:
    change = ConfigurationChange("deload_frequency", 4, 3, "medium")

    assert generate_change_description(change) == "Deload frequency changed from every 4 weeks to every 3 weeks"
    assert (
        generate_change_description(ConfigurationChange("pace_method", None, "goal", "low"))
        == "Pace method changed from none to goal"
    )


def test_compare_identical_plans() -> None:
    plan = existing_plan()
    comparison = compare_plans(plan, plan)

    assert comparison.changes == ()
    assert comparison.impact_assessment == "No changes detected between plans."


def test_compare_reports_moved_long_run() -> None:
    original = existing_plan()
    moved = generate_plan(build_config(long_run_day="Saturday"), generation_options()).plan
    comparison = compare_plans(original, moved)
    week_one = [change for change in comparison.workout_changes if change.week_number == 1]

    assert any(change.description == "Week 1 Saturday: Changed from easy to long" for change in week_one)
    assert any(change.impact == "high" for change in week_one)
