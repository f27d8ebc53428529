"""
Spinfood - pairing and course scheduling for rotating-dinner events.

This package contains:
- pairing: Participants to cooking pairs
- grouping: Pairs to cohorts and course-groups, with CP-SAT host assignment
- validation: Pair and group rule checks
- metrics: Performance indicators
- io: CSV input and export
- pipeline: One-shot run over a participant snapshot
"""

from spinfood.decision_log import DecisionLogger
from spinfood.grouping import GroupGenerator, GroupingResult
from spinfood.models import (
    Course,
    FoodPreference,
    Gender,
    Group,
    Kitchen,
    KitchenAvailability,
    Location,
    Pair,
    PairingResult,
    Participant,
)
from spinfood.pairing import PairGenerator
from spinfood.pipeline import PipelineResult, run_pipeline

__all__ = [
    "Course",
    "DecisionLogger",
    "FoodPreference",
    "Gender",
    "GroupGenerator",
    "GroupingResult",
    "Group",
    "Kitchen",
    "KitchenAvailability",
    "Location",
    "Pair",
    "PairGenerator",
    "PairingResult",
    "Participant",
    "PipelineResult",
    "run_pipeline",
]
