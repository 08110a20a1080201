"""Pydantic models for the clockread API.

Field names follow the experiment client's camelCase payload. Every
field inside a record is optional and accepts any JSON scalar: the
server trusts the client's shape and stores what it is given.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# Any JSON scalar. Record values are stored as sent, without coercion.
JsonScalar = Union[bool, int, float, str, None]


class _CamelModel(BaseModel):
    """Accepts both alias and field names."""

    model_config = ConfigDict(populate_by_name=True)


class TrialRecord(_CamelModel):
    """One trial as sent by the experiment client."""

    trial: JsonScalar = None
    clock_type: JsonScalar = Field(default=None, alias="clockType")
    show_numbers: JsonScalar = Field(default=None, alias="showNumbers")
    actual_time: JsonScalar = Field(default=None, alias="actualTime")
    user_input: JsonScalar = Field(default=None, alias="userInput")
    correct: JsonScalar = None
    reaction_time: JsonScalar = Field(default=None, alias="reactionTime")
    typing_time: JsonScalar = Field(default=None, alias="typingTime")
    timestamp: JsonScalar = None


class ExperimentSummary(_CamelModel):
    """Caller-computed summary of a finished experiment."""

    clock_type_selection: JsonScalar = Field(default=None, alias="clockTypeSelection")
    show_numbers: JsonScalar = Field(default=None, alias="showNumbers")
    total_trials: JsonScalar = Field(default=None, alias="totalTrials")
    overall_accuracy: JsonScalar = Field(default=None, alias="overallAccuracy")
    avg_reaction_time: JsonScalar = Field(default=None, alias="avgReactionTime")
    digital_avg_reaction: JsonScalar = Field(default=None, alias="digitalAvgReaction")
    analog_avg_reaction: JsonScalar = Field(default=None, alias="analogAvgReaction")
    digital_accuracy: JsonScalar = Field(default=None, alias="digitalAccuracy")
    analog_accuracy: JsonScalar = Field(default=None, alias="analogAccuracy")


class SaveExperimentRequest(_CamelModel):
    """Body of POST /api/save-experiment.

    experiment_data and summary are optional here so their absence can be
    reported as a 400 rather than a schema validation error.
    """

    username: JsonScalar = None
    experiment_data: list[TrialRecord] | None = Field(default=None, alias="experimentData")
    summary: ExperimentSummary | None = None


class SaveExperimentResponse(_CamelModel):
    """Response for a stored experiment."""

    success: bool = True
    experiment_id: int = Field(alias="experimentId")


class OverallStatsDetail(BaseModel):
    """Overall statistics row."""

    total_experiments: int
    avg_accuracy: float | None
    avg_reaction_time: float | None


class ClockComparisonDetail(BaseModel):
    """Per-clock-type statistics row."""

    clock_type: str
    avg_reaction: float | None
    avg_accuracy: float | None


class NumbersEffectDetail(BaseModel):
    """Numbers-shown effect row."""

    show_numbers: bool
    avg_reaction: float | None
    avg_accuracy: float | None


class StatisticsResponse(_CamelModel):
    """Response for GET /api/statistics."""

    overall: OverallStatsDetail
    clock_comparison: list[ClockComparisonDetail] = Field(alias="clockComparison")
    numbers_effect: list[NumbersEffectDetail] = Field(alias="numbersEffect")


class ErrorResponse(BaseModel):
    """Error envelope shared by all endpoints."""

    error: str
