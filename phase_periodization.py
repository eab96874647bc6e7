"""
phase_periodization
-------------------
Splits a program into contiguous base → build → peak → taper phases.

- Race-specific percentage split (longer races weight base, shorter weight build)
- Phase minimums enforced when the program is long enough for all of them
- Deterministic reconciliation so durations always sum to the program length
- Descriptive focus, characteristics and transition guidance per phase
"""

from __future__ import annotations

from dataclasses import dataclass
from math import floor
from typing import Dict, List, Optional, Tuple

from loguru import logger

from plan_models import PhaseConfiguration, PhasePeriodization, PhaseTransition, StageReport
from training_constants import PHASES


PHASE_DISTRIBUTION_BY_RACE: Dict[str, Dict[str, float]] = {
    "5K": {"base": 0.30, "build": 0.40, "peak": 0.20, "taper": 0.10},
    "10K": {"base": 0.35, "build": 0.35, "peak": 0.20, "taper": 0.10},
    "Half Marathon": {"base": 0.40, "build": 0.30, "peak": 0.20, "taper": 0.10},
    "Marathon": {"base": 0.45, "build": 0.25, "peak": 0.20, "taper": 0.10},
}

MINIMUM_PHASE_DURATIONS: Dict[str, int] = {"base": 3, "build": 3, "peak": 2, "taper": 1}
MINIMUM_PROGRAM_WEEKS = len(PHASES)


@dataclass(frozen=True)
class PhaseCharacteristics:
    volume_emphasis: str
    intensity_emphasis: str
    recovery_emphasis: str
    workout_types: Tuple[str, ...]
    primary_adaptations: Tuple[str, ...]
    key_metrics: Tuple[str, ...]


PHASE_CHARACTERISTICS: Dict[str, PhaseCharacteristics] = {
    "base": PhaseCharacteristics(
        volume_emphasis="high",
        intensity_emphasis="low",
        recovery_emphasis="high",
        workout_types=("easy", "long", "tempo (limited)"),
        primary_adaptations=(
            "Aerobic enzyme development",
            "Capillary density increase",
            "Mitochondrial adaptation",
            "Injury prevention",
            "Movement efficiency",
        ),
        key_metrics=(
            "Weekly volume progression",
            "Aerobic pace improvement",
            "Injury prevention",
            "Consistency",
        ),
    ),
    "build": PhaseCharacteristics(
        volume_emphasis="moderate",
        intensity_emphasis="high",
        recovery_emphasis="moderate",
        workout_types=("tempo", "intervals", "hills", "long runs"),
        primary_adaptations=(
            "Lactate threshold improvement",
            "VO2 max development",
            "Neuromuscular power",
            "Running economy",
            "Metabolic flexibility",
        ),
        key_metrics=(
            "Threshold pace improvement",
            "VO2 max intervals",
            "Hill running strength",
            "Recovery between sessions",
        ),
    ),
    "peak": PhaseCharacteristics(
        volume_emphasis="moderate",
        intensity_emphasis="high",
        recovery_emphasis="moderate",
        workout_types=("race pace", "tune-up races", "specific intervals"),
        primary_adaptations=(
            "Race-specific fitness",
            "Neuromuscular sharpening",
            "Pacing practice",
            "Mental preparation",
            "Peak performance",
        ),
        key_metrics=(
            "Race pace sustainability",
            "Tune-up race performance",
            "Confidence building",
            "Technical refinement",
        ),
    ),
    "taper": PhaseCharacteristics(
        volume_emphasis="low",
        intensity_emphasis="moderate",
        recovery_emphasis="high",
        workout_types=("short intervals", "strides", "easy runs"),
        primary_adaptations=(
            "Fatigue dissipation",
            "Glycogen supercompensation",
            "Neuromuscular freshness",
            "Mental readiness",
            "Peak race form",
        ),
        key_metrics=(
            "Feeling of freshness",
            "Maintained speed",
            "Reduced fatigue",
            "Race readiness",
        ),
    ),
}

PHASE_DESCRIPTIONS: Dict[str, Dict[str, object]] = {
    "base": {
        "focus": "Aerobic Development & Base Building",
        "characteristics": (
            "High volume, low intensity training",
            "Focus on aerobic enzyme development",
            "Injury prevention and movement efficiency",
            "Gradual volume progression",
            "Limited quality work (tempo runs)",
        ),
        "workout_emphasis": ("easy runs", "long runs", "occasional tempo"),
    },
    "build": {
        "focus": "Lactate Threshold & VO2 Max Development",
        "characteristics": (
            "Moderate volume with increased intensity",
            "Lactate threshold development",
            "VO2 max improvement through intervals",
            "Hill training for strength and power",
            "Progressive long run development",
        ),
        "workout_emphasis": ("tempo runs", "intervals", "hill repeats", "long runs"),
    },
    "peak": {
        "focus": "Race-Specific Fitness & Sharpening",
        "characteristics": (
            "Race-specific pace training",
            "Neuromuscular sharpening",
            "Tune-up races and time trials",
            "Mental preparation and confidence building",
            "Peak fitness development",
        ),
        "workout_emphasis": ("race pace intervals", "tune-up races", "specific workouts"),
    },
    "taper": {
        "focus": "Recovery & Race Preparation",
        "characteristics": (
            "Significant volume reduction (20-30%)",
            "Maintained intensity with reduced duration",
            "Enhanced recovery and freshness",
            "Mental preparation and race strategy",
            "Peak race readiness",
        ),
        "workout_emphasis": ("short intervals", "strides", "easy runs", "race prep"),
    },
}

TRANSITION_ADJUSTMENTS: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("base", "build"): (
        "Introduce tempo runs and intervals gradually",
        "Maintain easy run volume while adding quality",
        "Ensure adequate recovery between hard sessions",
        "Monitor for signs of overreaching",
    ),
    ("build", "peak"): (
        "Shift focus to race-specific paces",
        "Reduce overall volume slightly",
        "Increase workout specificity",
        "Add tune-up races or time trials",
    ),
    ("peak", "taper"): (
        "Reduce training volume by 20-30%",
        "Maintain intensity but reduce duration",
        "Increase recovery emphasis",
        "Focus on race preparation and strategy",
    ),
}

TRANSITION_WARNINGS: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("base", "build"): (
        "Avoid sudden intensity increases",
        "Watch for overuse injuries as intensity increases",
        "Maintain consistency in easy running",
    ),
    ("build", "peak"): (
        "Don't sacrifice recovery for extra intensity",
        "Avoid trying new workouts close to race",
        "Monitor fatigue levels carefully",
    ),
    ("peak", "taper"): (
        "Resist urge to maintain high volume",
        "Trust the taper process",
        "Avoid new activities or changes",
    ),
}


# -----------------------------
# Duration allocation
# -----------------------------


def _reconcile(durations: Dict[str, int], total_weeks: int, floors: Dict[str, int]) -> Dict[str, int]:
    """Grow or shrink one week at a time until the phases sum to ``total_weeks``.

    Growth goes to the larger of build/base (build on ties). Shrinking takes
    from the larger of build/base still above its floor, and only falls back
    to peak then taper when neither can give a week.
    """
    result = dict(durations)
    while sum(result.values()) < total_weeks:
        target = "build" if result["build"] >= result["base"] else "base"
        result[target] += 1

    while sum(result.values()) > total_weeks:
        shrinkable = [phase for phase in ("build", "base") if result[phase] > floors[phase]]
        if shrinkable:
            target = max(shrinkable, key=lambda phase: result[phase])
        else:
            fallback = [phase for phase in ("peak", "taper") if result[phase] > floors[phase]]
            if not fallback:
                raise ValueError(f"Cannot fit phases into {total_weeks} weeks")
            target = fallback[0]
        result[target] -= 1
    return result


def calculate_phase_durations(total_weeks: int, race_distance: str) -> Dict[str, int]:
    if race_distance not in PHASE_DISTRIBUTION_BY_RACE:
        raise ValueError(f"Unsupported race distance: {race_distance}")
    if total_weeks < MINIMUM_PROGRAM_WEEKS:
        raise ValueError(f"At least {MINIMUM_PROGRAM_WEEKS} weeks are needed to periodize, got {total_weeks}")

    distribution = PHASE_DISTRIBUTION_BY_RACE[race_distance]
    raw = {phase: floor(total_weeks * distribution[phase]) for phase in PHASES}

    if total_weeks >= sum(MINIMUM_PHASE_DURATIONS.values()):
        floors = dict(MINIMUM_PHASE_DURATIONS)
    else:
        floors = {phase: 1 for phase in PHASES}

    durations = {phase: max(raw[phase], floors[phase]) for phase in PHASES}
    return _reconcile(durations, total_weeks, floors)


def _create_transitions(phases: Tuple[PhaseConfiguration, ...]) -> Tuple[PhaseTransition, ...]:
    transitions: List[PhaseTransition] = []
    for current, following in zip(phases, phases[1:]):
        key = (current.phase, following.phase)
        transitions.append(
            PhaseTransition(
                from_phase=current.phase,
                to_phase=following.phase,
                transition_week=following.start_week,
                adjustments=TRANSITION_ADJUSTMENTS.get(key, ()),
                warnings=TRANSITION_WARNINGS.get(key, ()),
            )
        )
    return tuple(transitions)


def calculate_phase_periodization(total_weeks: int, race_distance: str) -> PhasePeriodization:
    durations = calculate_phase_durations(total_weeks, race_distance)

    phases: List[PhaseConfiguration] = []
    current_week = 1
    for phase in PHASES:
        weeks = durations[phase]
        text = PHASE_DESCRIPTIONS[phase]
        phases.append(
            PhaseConfiguration(
                phase=phase,
                start_week=current_week,
                end_week=current_week + weeks - 1,
                duration_weeks=weeks,
                percentage=weeks / total_weeks * 100,
                focus=text["focus"],
                characteristics=text["characteristics"],
                workout_emphasis=text["workout_emphasis"],
            )
        )
        current_week += weeks

    logger.trace("Periodized {} weeks for {}: {}", total_weeks, race_distance, durations)
    ordered = tuple(phases)
    return PhasePeriodization(
        total_weeks=total_weeks,
        race_distance=race_distance,
        phases=ordered,
        transitions=_create_transitions(ordered),
    )


# -----------------------------
# Lookups
# -----------------------------


def get_phase_for_week(week_number: int, periodization: PhasePeriodization) -> str:
    for phase in periodization.phases:
        if phase.contains(week_number):
            return phase.phase
    raise ValueError(f"Week {week_number} is outside the {periodization.total_weeks}-week program")


def get_phase_configuration(phase: str, periodization: PhasePeriodization) -> Optional[PhaseConfiguration]:
    for entry in periodization.phases:
        if entry.phase == phase:
            return entry
    return None


def get_phase_characteristics(phase: str) -> PhaseCharacteristics:
    try:
        return PHASE_CHARACTERISTICS[phase]
    except KeyError:
        raise ValueError(f"Unknown training phase: {phase}") from None


# -----------------------------
# Advisory checks
# -----------------------------


def validate_phase_periodization(periodization: PhasePeriodization) -> StageReport:
    warnings: List[str] = []
    recommendations: List[str] = []
    is_valid = True

    for phase in periodization.phases:
        minimum = MINIMUM_PHASE_DURATIONS[phase.phase]
        if phase.duration_weeks < minimum:
            warnings.append(
                f"{phase.phase} phase ({phase.duration_weeks} weeks) is shorter than "
                f"recommended minimum ({minimum} weeks)"
            )
            is_valid = False

    base = get_phase_configuration("base", periodization)
    if base is not None and base.percentage < 25:
        warnings.append("Base phase may be too short for adequate aerobic development")
        recommendations.append("Consider extending base phase for better injury prevention")

    if periodization.total_weeks < 8:
        warnings.append("Program may be too short for optimal adaptation")
        recommendations.append("Consider extending program length for better results")

    return StageReport(is_valid=is_valid, warnings=tuple(warnings), recommendations=tuple(recommendations))


def get_phase_recommendations(race_distance: str, total_weeks: int) -> Dict[str, object]:
    recommendations: List[str] = []
    adjustments: List[str] = []
    optimal_weeks = 12

    if race_distance == "5K":
        optimal_weeks = 8
        recommendations.append("5K training benefits from more speed work in build phase")
        if total_weeks < 6:
            adjustments.append("Consider minimal base phase and focus on speed development")
    elif race_distance == "10K":
        optimal_weeks = 10
        recommendations.append("10K requires balanced aerobic and anaerobic development")
        if total_weeks < 8:
            adjustments.append("Compress base phase but maintain build phase duration")
    elif race_distance == "Half Marathon":
        optimal_weeks = 12
        recommendations.append("Half marathon needs substantial aerobic base")
        if total_weeks < 10:
            adjustments.append("Prioritize base building over peak phase")
    elif race_distance == "Marathon":
        optimal_weeks = 16
        recommendations.append("Marathon requires extensive base building phase")
        if total_weeks < 12:
            adjustments.append("Extend base phase at expense of peak phase")
            recommendations.append("Consider longer program for optimal marathon preparation")

    return {
        "recommendations": recommendations,
        "optimal_weeks": optimal_weeks,
        "phase_adjustments": adjustments,
    }
