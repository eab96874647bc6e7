"""
plan_frames
-----------
pandas views over a generated TrainingPlan for tables, charts and summaries.
"""

from __future__ import annotations

from typing import Dict, List

import pandas as pd

from plan_models import TrainingPlan
from training_constants import ZONE_ORDER

WORKOUT_CATEGORIES = ["easy", "long", "quality", "rest"]

DAY_COLUMNS = [
    "week",
    "phase",
    "deload",
    "day",
    "type",
    "distance_km",
    "duration_min",
    "intensity",
    "description",
    "pace_guidance",
    "notes",
]

WEEK_COLUMNS = [
    "week",
    "phase",
    "deload",
    "target_km",
    "distance_km",
    "distance_miles",
    "duration_min",
    "workouts",
    "quality_workouts",
    "focus",
]

INTENSITY_COLUMNS = ["week", *WORKOUT_CATEGORIES, *ZONE_ORDER]


def plan_to_frame(plan: TrainingPlan) -> pd.DataFrame:
    rows: List[Dict[str, object]] = []
    for week in plan.weeks:
        for day in week.days:
            workout = day.workout if day.is_training_day else None
            rows.append(
                {
                    "week": week.week_number,
                    "phase": week.phase,
                    "deload": week.is_deload_week,
                    "day": day.day_of_week,
                    "type": workout.type if workout else "rest",
                    "distance_km": workout.distance_km if workout else 0.0,
                    "duration_min": workout.duration_min if workout else 0,
                    "intensity": workout.intensity if workout else "",
                    "description": workout.description if workout else "",
                    "pace_guidance": workout.pace_guidance if workout else "",
                    "notes": day.notes,
                }
            )
    return pd.DataFrame(rows, columns=DAY_COLUMNS)


def weekly_summary_frame(plan: TrainingPlan) -> pd.DataFrame:
    rows = [
        {
            "week": week.week_number,
            "phase": week.phase,
            "deload": week.is_deload_week,
            "target_km": week.target_distance_km,
            "distance_km": week.weekly_distance_km,
            "distance_miles": week.weekly_distance_miles,
            "duration_min": week.weekly_duration_min,
            "workouts": week.workout_count,
            "quality_workouts": week.quality_workout_count,
            "focus": week.weekly_focus,
        }
        for week in plan.weeks
    ]
    return pd.DataFrame(rows, columns=WEEK_COLUMNS)


def calculate_plan_statistics(plan: TrainingPlan) -> Dict[str, object]:
    weekly = weekly_summary_frame(plan)
    days = plan_to_frame(plan)
    if weekly.empty:
        return {
            "average_weekly_km": 0.0,
            "peak_weekly_km": 0.0,
            "km_by_type": {},
            "longest_run_km": 0.0,
            "deload_weeks": 0,
            "average_progression_rate": 0.0,
        }

    worked = days[days["type"] != "rest"]
    # 디로드 주간은 증가율 평균에서 제외
    building = weekly[~weekly["deload"]]
    changes = building["distance_km"].pct_change().dropna()

    return {
        "average_weekly_km": round(float(weekly["distance_km"].mean()), 1),
        "peak_weekly_km": float(weekly["distance_km"].max()),
        "km_by_type": {key: round(float(value), 1) for key, value in worked.groupby("type")["distance_km"].sum().items()},
        "longest_run_km": float(worked["distance_km"].max()) if not worked.empty else 0.0,
        "deload_weeks": int(weekly["deload"].sum()),
        "average_progression_rate": round(float(changes.mean()), 3) if not changes.empty else 0.0,
    }


def weekly_intensity_frame(plan: TrainingPlan) -> pd.DataFrame:
    """Per-week workout breakdown and zone share (percent of training days)."""
    days = plan_to_frame(plan)
    if days.empty:
        return pd.DataFrame(columns=INTENSITY_COLUMNS)

    weeks = pd.Index(sorted(days["week"].unique()), name="week")
    breakdown = (
        days.groupby(["week", "type"]).size().unstack(fill_value=0).reindex(index=weeks, columns=WORKOUT_CATEGORIES, fill_value=0)
    )

    worked = days[days["type"] != "rest"]
    if worked.empty:
        zone_counts = pd.DataFrame(0, index=weeks, columns=ZONE_ORDER)
    else:
        zone_counts = (
            worked.groupby(["week", "intensity"]).size().unstack(fill_value=0).reindex(index=weeks, columns=ZONE_ORDER, fill_value=0)
        )
    training_days = breakdown[["easy", "long", "quality"]].sum(axis=1)
    # 훈련일이 없는 주는 0/0 -> NaN 이므로 0으로 채운다
    shares = zone_counts.div(training_days, axis=0).fillna(0.0) * 100
    zones = ((shares + 0.5) // 1).astype(int)

    frame = pd.concat([breakdown, zones], axis=1).reset_index()
    return frame[INTENSITY_COLUMNS]
