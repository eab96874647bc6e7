"""
training_constants
------------------
Lookup tables shared by every planning stage.

- Weekday names and the weekend set
- Race distance catalogue with recommended program lengths
- Configuration bounds used by the validator
- Workout type, training zone, difficulty and pace-input catalogues
"""

from __future__ import annotations

from typing import Dict, List


DAYS_OF_WEEK: List[str] = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]
WEEKEND_DAYS = ("Saturday", "Sunday")

PHASES: List[str] = ["base", "build", "peak", "taper"]
EXPERIENCE_LEVELS: List[str] = ["beginner", "intermediate", "advanced"]
WORKOUT_CATEGORIES: List[str] = ["easy", "long", "quality", "rest"]

KM_TO_MILES = 0.621371


RACE_DISTANCES: Dict[str, Dict[str, object]] = {
    "5K": {
        "distance_m": 5000,
        "min_weeks": 6,
        "recommended_weeks": 8,
        "max_weeks": 12,
        "description": "Fast-paced race focusing on speed and VO2 max",
    },
    "10K": {
        "distance_m": 10000,
        "min_weeks": 8,
        "recommended_weeks": 10,
        "max_weeks": 16,
        "description": "Balance of speed and endurance",
    },
    "Half Marathon": {
        "distance_m": 21097,
        "min_weeks": 10,
        "recommended_weeks": 12,
        "max_weeks": 20,
        "description": "Endurance race with lactate threshold focus",
    },
    "Marathon": {
        "distance_m": 42195,
        "min_weeks": 12,
        "recommended_weeks": 16,
        "max_weeks": 24,
        "description": "Ultimate endurance challenge",
    },
}
RACE_DISTANCE_OPTIONS: List[str] = list(RACE_DISTANCES)


CONFIGURATION_CONSTRAINTS: Dict[str, Dict[str, object]] = {
    "program_length": {
        "min": 6,
        "max": 24,
        "recommended": {
            "5K": {"min": 6, "optimal": 8},
            "10K": {"min": 8, "optimal": 10},
            "Half Marathon": {"min": 10, "optimal": 12},
            "Marathon": {"min": 12, "optimal": 16},
        },
    },
    "training_days": {"min": 3, "max": 7},
    "deload_frequency": {"options": (3, 4)},
}


WORKOUT_TYPES: Dict[str, Dict[str, object]] = {
    "easy": {
        "name": "Easy Run",
        "intensity": "zone2",
        "recovery_hours": 0,
        "description": "Conversational pace aerobic run",
    },
    "long": {
        "name": "Long Run",
        "intensity": "zone2",
        "recovery_hours": 24,
        "description": "Extended aerobic endurance run",
    },
    "quality": {
        "name": "Quality Workout",
        "intensity": "zone4",
        "recovery_hours": 48,
        "description": "Structured higher-intensity session",
    },
    "rest": {
        "name": "Rest Day",
        "intensity": "zone1",
        "recovery_hours": 0,
        "description": "Complete rest or light cross-training",
    },
}


TRAINING_ZONES: Dict[str, Dict[str, object]] = {
    "zone1": {"name": "Recovery", "hr_percent": (50, 60), "effort": "Very Easy"},
    "zone2": {"name": "Aerobic Base", "hr_percent": (60, 70), "effort": "Easy"},
    "zone3": {"name": "Aerobic Threshold", "hr_percent": (70, 80), "effort": "Moderate"},
    "zone4": {"name": "Lactate Threshold", "hr_percent": (80, 90), "effort": "Hard"},
    "zone5": {"name": "VO2 Max", "hr_percent": (90, 100), "effort": "Very Hard"},
}
ZONE_ORDER: List[str] = list(TRAINING_ZONES)


DIFFICULTY_LEVELS: Dict[str, Dict[str, object]] = {
    "veryEasy": {
        "label": "Recovery/Base Building",
        "volume_adjustment": 0.7,
        "intensity_adjustment": 0.95,
        "recovery_multiplier": 1.5,
    },
    "easy": {
        "label": "Conservative",
        "volume_adjustment": 0.85,
        "intensity_adjustment": 0.97,
        "recovery_multiplier": 1.25,
    },
    "moderate": {
        "label": "Standard",
        "volume_adjustment": 1.0,
        "intensity_adjustment": 1.0,
        "recovery_multiplier": 1.0,
    },
    "hard": {
        "label": "Aggressive",
        "volume_adjustment": 1.15,
        "intensity_adjustment": 1.02,
        "recovery_multiplier": 0.9,
    },
    "veryHard": {
        "label": "Advanced/Competitive",
        "volume_adjustment": 1.3,
        "intensity_adjustment": 1.03,
        "recovery_multiplier": 0.8,
    },
}


PACE_INPUT_METHODS: Dict[str, Dict[str, object]] = {
    "recentRace": {"label": "Recent Race Time", "priority": 1, "accuracy": "highest"},
    "timeTrial": {"label": "Time Trial", "priority": 2, "accuracy": "high"},
    "currentPace": {"label": "Current Training Pace", "priority": 3, "accuracy": "moderate"},
    "goal": {"label": "Goal Race Time", "priority": 4, "accuracy": "low"},
    "fitnessLevel": {"label": "Fitness Level Assessment", "priority": 5, "accuracy": "estimate"},
}


def day_index(day: str) -> int:
    """Monday-based index of ``day``; raises ValueError for unknown names."""
    try:
        return DAYS_OF_WEEK.index(day)
    except ValueError:
        raise ValueError(f"Unknown day of week: {day}") from None
