from typing import List

import altair as alt
import pandas as pd
import streamlit as st

from config_validation import create_default_configuration
from plan_frames import calculate_plan_statistics, plan_to_frame, weekly_summary_frame
from plan_generator import PlanGenerationOptions, generate_plan
from plan_models import PlanConfiguration, TrainingPlan
from training_constants import (
    CONFIGURATION_CONSTRAINTS,
    DAYS_OF_WEEK,
    DIFFICULTY_LEVELS,
    EXPERIENCE_LEVELS,
    PACE_INPUT_METHODS,
    RACE_DISTANCE_OPTIONS,
)


st.set_page_config(page_title="레이스 훈련 플랜 생성기", layout="wide")
st.title("레이스 훈련 플랜 생성기")
st.caption("Phase · 볼륨 · 디로드 주간을 포함한 멀티 주간 플랜")

with st.sidebar:
    st.header("입력 값")
    race_distance = st.selectbox("레이스 거리", RACE_DISTANCE_OPTIONS, index=1)
    defaults = create_default_configuration(race_distance)
    length_limits = CONFIGURATION_CONSTRAINTS["program_length"]
    program_length = st.slider(
        "프로그램 기간 (주)", min_value=length_limits["min"], max_value=length_limits["max"], value=defaults.program_length
    )
    training_days = st.slider("주간 훈련일", min_value=3, max_value=7, value=defaults.training_days_per_week)
    rest_days = st.multiselect("휴식일", DAYS_OF_WEEK, default=list(defaults.rest_days))
    long_run_day = st.selectbox("롱런 요일", DAYS_OF_WEEK, index=DAYS_OF_WEEK.index(defaults.long_run_day))
    deload_frequency = st.radio(
        "디로드 주기 (주)", CONFIGURATION_CONSTRAINTS["deload_frequency"]["options"], index=1, horizontal=True
    )
    user_experience = st.selectbox("경험 수준", EXPERIENCE_LEVELS, index=1)
    difficulty = st.selectbox("난이도", ["(기본)"] + list(DIFFICULTY_LEVELS))
    pace_method = st.selectbox(
        "페이스 입력 방식",
        ["(없음)"] + list(PACE_INPUT_METHODS),
        format_func=lambda key: PACE_INPUT_METHODS[key]["label"] if key in PACE_INPUT_METHODS else key,
    )
    seed = st.number_input("랜덤 시드", min_value=0, value=0, step=1)
    generate = st.button("플랜 생성")


def render_messages(errors: List[str], warnings: List[str]) -> None:
    for error in errors:
        st.error(error)
    if warnings:
        with st.expander(f"경고 {len(warnings)}건"):
            for warning in warnings:
                st.write(f"- {warning}")


def render_summary(plan: TrainingPlan) -> None:
    stats = calculate_plan_statistics(plan)
    st.subheader("플랜 요약")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("총 거리", f"{plan.metadata.total_kilometers:.1f} km", f"{plan.metadata.total_miles:.1f} mi")
    col2.metric("평균 주간 거리", f"{stats['average_weekly_km']:.1f} km")
    col3.metric("최장 러닝", f"{stats['longest_run_km']:.1f} km")
    col4.metric("디로드 주간", stats["deload_weeks"], ", ".join(str(w) for w in plan.deload_weeks) or "-")


def render_volume_chart(plan: TrainingPlan) -> None:
    weekly = weekly_summary_frame(plan)
    chart_df = pd.concat(
        [
            weekly.assign(유형="목표 km", 거리=weekly["target_km"].astype(float)),
            weekly.assign(유형="계획 km", 거리=weekly["distance_km"].astype(float)),
        ]
    )[["week", "phase", "유형", "거리"]]
    chart = (
        alt.Chart(chart_df)
        .mark_line(point=True)
        .encode(
            x=alt.X("week:Q", axis=alt.Axis(title="주차", tickMinStep=1)),
            y=alt.Y("거리:Q", axis=alt.Axis(title="km")),
            color=alt.Color(
                "유형:N",
                scale=alt.Scale(domain=["목표 km", "계획 km"], range=["#1f77b4", "#ff7f0e"]),
                legend=alt.Legend(title=""),
            ),
            tooltip=["week", "phase", "유형", alt.Tooltip("거리:Q", format=".1f")],
        )
        .properties(height=280)
    )
    st.altair_chart(chart, use_container_width=True)


def render_weeks(plan: TrainingPlan) -> None:
    days = plan_to_frame(plan)
    for week in plan.weeks:
        label = f"{week.week_number}주차 · {week.phase} · {week.weekly_distance_km:.1f} km"
        if week.is_deload_week:
            label += " · DELOAD"
        with st.expander(label):
            st.caption(week.weekly_focus)
            if week.notes:
                st.write(week.notes)
            table = days[days["week"] == week.week_number][
                ["day", "type", "distance_km", "duration_min", "intensity", "description", "pace_guidance"]
            ]
            st.dataframe(table, hide_index=True, use_container_width=True)


if generate:
    config = PlanConfiguration(
        race_distance=race_distance,
        program_length=int(program_length),
        training_days_per_week=int(training_days),
        rest_days=tuple(rest_days),
        long_run_day=long_run_day,
        deload_frequency=int(deload_frequency),
        user_experience=user_experience,
        difficulty=None if difficulty == "(기본)" else difficulty,
        pace_method=None if pace_method == "(없음)" else pace_method,
    )
    result = generate_plan(config, PlanGenerationOptions(seed=int(seed)))
    render_messages(list(result.errors), list(result.warnings))
    if result.success and result.plan is not None:
        render_summary(result.plan)
        render_volume_chart(result.plan)
        render_weeks(result.plan)
else:
    st.info("왼쪽 입력값을 채우고 '플랜 생성' 버튼을 눌러주세요.")
