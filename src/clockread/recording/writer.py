"""Experiment submission storage.

Stores one experiment and all of its trials as a single transaction:
either the user, experiment and trial rows are all written, or none are.
Database operations go through repo.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from clockread.db import repo
from clockread.db.repo import DbSession
from clockread.errors import ExperimentWriteError
from clockread.models.domain import ANONYMOUS_USERNAME, ExperimentSummaryEntity, TrialEntity
from clockread.models.types import ExperimentSummary, JsonScalar, TrialRecord

logger = logging.getLogger(__name__)


def save_experiment(
    session: DbSession,
    username: JsonScalar,
    trials: list[TrialEntity],
    summary: ExperimentSummaryEntity,
) -> int:
    """Store an experiment submission.

    Upserts the user, inserts the experiment row, then inserts every
    trial in one batch tagged with the new experiment id, and commits.

    Args:
        session: Database session.
        username: Submitting user; empty or None is stored as "Anonymous".
        trials: Trials in submission order.
        summary: Caller-computed summary metrics.

    Returns:
        Generated experiment id.

    Raises:
        ExperimentWriteError: If any statement fails. Nothing from this
            call is left in the store.
    """
    username = normalize_username(username)

    try:
        repo.ensure_user(session, username)
        experiment_id = repo.create_experiment(session, username, summary)
        repo.create_trials(session, experiment_id, trials)
        repo.commit(session)
    except SQLAlchemyError as e:
        repo.rollback(session)
        logger.exception(f"Error saving experiment for user {username}; transaction rolled back")
        raise ExperimentWriteError("Failed to save experiment data") from e

    logger.info(f"Experiment {experiment_id} and {len(trials)} trials saved for user: {username}")
    return experiment_id


def normalize_username(username: JsonScalar) -> str:
    """Map an absent or empty username to the anonymous placeholder."""
    if not username:
        return ANONYMOUS_USERNAME
    return str(username)


def trial_from_record(record: TrialRecord) -> TrialEntity:
    """Convert a client trial record to a domain entity.

    Pure function - no database access.
    """
    return TrialEntity(
        trial_number=record.trial,
        clock_type=record.clock_type,
        show_numbers=bool(record.show_numbers),
        actual_time=record.actual_time,
        user_input=record.user_input,
        correct=bool(record.correct),
        reaction_time=record.reaction_time,
        typing_time=record.typing_time,
        timestamp=record.timestamp,
    )


def summary_from_record(record: ExperimentSummary) -> ExperimentSummaryEntity:
    """Convert a client summary to a domain entity.

    Pure function - no database access.
    """
    return ExperimentSummaryEntity(
        clock_type_selection=record.clock_type_selection,
        show_numbers=bool(record.show_numbers),
        total_trials=record.total_trials,
        overall_accuracy=record.overall_accuracy,
        avg_reaction_time=record.avg_reaction_time,
        digital_avg_reaction=record.digital_avg_reaction,
        analog_avg_reaction=record.analog_avg_reaction,
        digital_accuracy=record.digital_accuracy,
        analog_accuracy=record.analog_accuracy,
    )
