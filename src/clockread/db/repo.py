"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries, keeping domain logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, func, literal, select, union_all
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clockread.db.schema import Experiment, Trial, User
from clockread.models.domain import (
    ClockTypeStats,
    ExperimentEntity,
    ExperimentSummaryEntity,
    NumbersEffectStats,
    OverallStats,
    TrialEntity,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

# Clock selections that include analog clocks
ANALOG_SELECTIONS = ("analog", "mixed")


# ============================================================================
# Converters: SQLAlchemy <-> Domain
# ============================================================================


def _experiment_to_entity(exp: Experiment) -> ExperimentEntity:
    """Convert SQLAlchemy Experiment to domain entity."""
    return ExperimentEntity(
        experiment_id=exp.id,
        username=exp.username,
        summary=ExperimentSummaryEntity(
            clock_type_selection=exp.clock_type_selection,
            show_numbers=bool(exp.show_numbers),
            total_trials=exp.total_trials,
            overall_accuracy=exp.overall_accuracy,
            avg_reaction_time=exp.avg_reaction_time,
            digital_avg_reaction=exp.digital_avg_reaction,
            analog_avg_reaction=exp.analog_avg_reaction,
            digital_accuracy=exp.digital_accuracy,
            analog_accuracy=exp.analog_accuracy,
        ),
    )


def _trial_to_entity(trial: Trial) -> TrialEntity:
    """Convert SQLAlchemy Trial to domain entity."""
    return TrialEntity(
        trial_number=trial.trial_number,
        clock_type=trial.clock_type,
        show_numbers=bool(trial.show_numbers),
        actual_time=trial.actual_time,
        user_input=trial.user_input,
        correct=bool(trial.correct),
        reaction_time=trial.reaction_time,
        typing_time=trial.typing_time,
        timestamp=trial.timestamp,
    )


def _trial_from_entity(experiment_id: int, entity: TrialEntity) -> Trial:
    """Build a Trial row tagged with its owning experiment."""
    return Trial(
        experiment_id=experiment_id,
        trial_number=entity.trial_number,
        clock_type=entity.clock_type,
        show_numbers=entity.show_numbers,
        actual_time=entity.actual_time,
        user_input=entity.user_input,
        correct=entity.correct,
        reaction_time=entity.reaction_time,
        typing_time=entity.typing_time,
        timestamp=entity.timestamp,
    )


# ============================================================================
# User Repository
# ============================================================================


def ensure_user(session: DbSession, username: str) -> None:
    """Insert a user row unless one already exists for username.

    Uses the dialect's ON CONFLICT DO NOTHING where available so that
    concurrent submissions under one name never fail on the unique key.
    """
    dialect = session.get_bind().dialect.name

    if dialect == "sqlite":
        stmt = sqlite_insert(User).values(username=username)
    elif dialect == "postgresql":
        stmt = pg_insert(User).values(username=username)
    else:
        _insert_user_in_savepoint(session, username)
        return

    session.execute(stmt.on_conflict_do_nothing(index_elements=["username"]))


def _insert_user_in_savepoint(session: DbSession, username: str) -> None:
    """Insert a user inside a savepoint, ignoring a unique-key conflict.

    Used for dialects without an ON CONFLICT clause. Only the savepoint
    is rolled back on conflict, so the caller's transaction continues.
    """
    try:
        with session.begin_nested():
            session.add(User(username=username))
    except IntegrityError:
        # Row already present, possibly inserted by a concurrent request
        pass


def get_user_count(session: DbSession, username: str | None = None) -> int:
    """Count user rows, optionally for a single username."""
    query = select(func.count()).select_from(User)
    if username is not None:
        query = query.where(User.username == username)
    return session.scalar(query) or 0


# ============================================================================
# Experiment Repository
# ============================================================================


def create_experiment(
    session: DbSession, username: str, summary: ExperimentSummaryEntity
) -> int:
    """Insert an experiment row and return its generated id."""
    exp = Experiment(
        username=username,
        clock_type_selection=summary.clock_type_selection,
        show_numbers=summary.show_numbers,
        total_trials=summary.total_trials,
        overall_accuracy=summary.overall_accuracy,
        avg_reaction_time=summary.avg_reaction_time,
        digital_avg_reaction=summary.digital_avg_reaction,
        analog_avg_reaction=summary.analog_avg_reaction,
        digital_accuracy=summary.digital_accuracy,
        analog_accuracy=summary.analog_accuracy,
    )
    session.add(exp)
    session.flush()
    return exp.id


def get_experiment(session: DbSession, experiment_id: int) -> ExperimentEntity | None:
    """Get experiment by ID."""
    exp = session.get(Experiment, experiment_id)
    return _experiment_to_entity(exp) if exp else None


def delete_experiment(session: DbSession, experiment_id: int) -> bool:
    """Delete an experiment; the store cascades the delete to its trials.

    Returns:
        True if a row was deleted.
    """
    result = session.execute(delete(Experiment).where(Experiment.id == experiment_id))
    return result.rowcount > 0


# ============================================================================
# Trial Repository
# ============================================================================


def create_trials(session: DbSession, experiment_id: int, trials: list[TrialEntity]) -> int:
    """Insert all trials for an experiment in one batched flush.

    Returns:
        Number of trial rows inserted.
    """
    session.add_all([_trial_from_entity(experiment_id, t) for t in trials])
    session.flush()
    return len(trials)


def get_trials_for_experiment(session: DbSession, experiment_id: int) -> list[TrialEntity]:
    """Get all trials for an experiment ordered by trial number."""
    trials = session.scalars(
        select(Trial)
        .where(Trial.experiment_id == experiment_id)
        .order_by(Trial.trial_number, Trial.id)
    ).all()
    return [_trial_to_entity(t) for t in trials]


def get_trial_count(session: DbSession, experiment_id: int | None = None) -> int:
    """Count trial rows, optionally for a single experiment."""
    query = select(func.count()).select_from(Trial)
    if experiment_id is not None:
        query = query.where(Trial.experiment_id == experiment_id)
    return session.scalar(query) or 0


def get_orphan_trial_count(session: DbSession) -> int:
    """Count trials whose experiment no longer exists."""
    query = (
        select(func.count())
        .select_from(Trial)
        .outerjoin(Experiment, Trial.experiment_id == Experiment.id)
        .where(Experiment.id.is_(None))
    )
    return session.scalar(query) or 0


# ============================================================================
# Aggregation Repository
# ============================================================================


def get_overall_stats(session: DbSession) -> OverallStats:
    """Count experiments and average their accuracy and reaction time."""
    row = session.execute(
        select(
            func.count().label("total_experiments"),
            func.avg(Experiment.overall_accuracy).label("avg_accuracy"),
            func.avg(Experiment.avg_reaction_time).label("avg_reaction_time"),
        ).select_from(Experiment)
    ).one()
    return OverallStats(
        total_experiments=row.total_experiments,
        avg_accuracy=row.avg_accuracy,
        avg_reaction_time=row.avg_reaction_time,
    )


def get_clock_comparison(session: DbSession) -> list[ClockTypeStats]:
    """Average reaction and accuracy per clock type.

    Each clock type only counts experiments where its average reaction
    is positive. Always returns digital then analog; a type with no
    qualifying rows reports None averages.
    """
    digital = select(
        literal("digital").label("clock_type"),
        func.avg(Experiment.digital_avg_reaction).label("avg_reaction"),
        func.avg(Experiment.digital_accuracy).label("avg_accuracy"),
    ).where(Experiment.digital_avg_reaction > 0)
    analog = select(
        literal("analog").label("clock_type"),
        func.avg(Experiment.analog_avg_reaction).label("avg_reaction"),
        func.avg(Experiment.analog_accuracy).label("avg_accuracy"),
    ).where(Experiment.analog_avg_reaction > 0)

    rows = {row.clock_type: row for row in session.execute(union_all(digital, analog)).all()}
    return [
        ClockTypeStats(
            clock_type=clock_type,
            avg_reaction=rows[clock_type].avg_reaction,
            avg_accuracy=rows[clock_type].avg_accuracy,
        )
        for clock_type in ("digital", "analog")
    ]


def get_numbers_effect(session: DbSession) -> list[NumbersEffectStats]:
    """Analog averages grouped by show_numbers.

    Restricted to analog or mixed experiments with a positive analog
    reaction average.
    """
    rows = session.execute(
        select(
            Experiment.show_numbers,
            func.avg(Experiment.analog_avg_reaction).label("avg_reaction"),
            func.avg(Experiment.analog_accuracy).label("avg_accuracy"),
        )
        .where(
            Experiment.analog_avg_reaction > 0,
            Experiment.clock_type_selection.in_(ANALOG_SELECTIONS),
        )
        .group_by(Experiment.show_numbers)
        .order_by(Experiment.show_numbers)
    ).all()
    return [
        NumbersEffectStats(
            show_numbers=bool(row.show_numbers),
            avg_reaction=row.avg_reaction,
            avg_accuracy=row.avg_accuracy,
        )
        for row in rows
    ]


# ============================================================================
# Batch Operations
# ============================================================================


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()


def rollback(session: DbSession) -> None:
    """Roll back current transaction."""
    session.rollback()
