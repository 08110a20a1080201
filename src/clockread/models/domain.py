"""Domain models for clockread.

Pure Python dataclasses representing domain entities.
These models are independent of SQLAlchemy and used throughout
the application for clean separation from the database layer.
Booleans stay booleans here; the 0/1 storage form lives in the schema.
Other record values are stored as the client sent them; the hints give
the types the experiment client normally sends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ANONYMOUS_USERNAME = "Anonymous"

ClockType = Literal["digital", "analog"]


# ============================================================================
# Submission Domain
# ============================================================================


@dataclass
class TrialEntity:
    """Domain model for one clock-reading attempt."""

    trial_number: int | None
    clock_type: str | None
    show_numbers: bool
    actual_time: str | None
    user_input: str | None
    correct: bool
    reaction_time: int | None
    typing_time: int | None
    timestamp: str | None


@dataclass
class ExperimentSummaryEntity:
    """Domain model for the caller-computed experiment summary."""

    clock_type_selection: str | None
    show_numbers: bool
    total_trials: int | None
    overall_accuracy: float | None
    avg_reaction_time: float | None
    digital_avg_reaction: float | None
    analog_avg_reaction: float | None
    digital_accuracy: float | None
    analog_accuracy: float | None


@dataclass
class ExperimentEntity:
    """Domain model for a stored experiment."""

    experiment_id: int
    username: str | None
    summary: ExperimentSummaryEntity


# ============================================================================
# Statistics Domain
# ============================================================================


@dataclass
class OverallStats:
    """Totals across every stored experiment."""

    total_experiments: int
    avg_accuracy: float | None
    avg_reaction_time: float | None


@dataclass
class ClockTypeStats:
    """Averages for one clock type over experiments that exercised it."""

    clock_type: ClockType
    avg_reaction: float | None
    avg_accuracy: float | None


@dataclass
class NumbersEffectStats:
    """Analog averages grouped by whether clock numbers were shown."""

    show_numbers: bool
    avg_reaction: float | None
    avg_accuracy: float | None
