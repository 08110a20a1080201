"""Shared pytest fixtures for clockread tests."""

import pytest
from sqlalchemy.orm import sessionmaker

from clockread.db.session import Database
from clockread.models.domain import ExperimentSummaryEntity, TrialEntity


@pytest.fixture
def database():
    """Create an in-memory database with the schema applied."""
    database = Database.from_url("sqlite:///:memory:")
    database.ensure_schema()
    yield database
    database.dispose()


@pytest.fixture
def engine(database):
    """Engine backing the in-memory database."""
    return database.engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


def make_trial(trial_number: int = 1, **overrides) -> TrialEntity:
    """Build a trial entity with realistic defaults."""
    values = dict(
        trial_number=trial_number,
        clock_type="analog",
        show_numbers=True,
        actual_time="3:45",
        user_input="3:45",
        correct=True,
        reaction_time=1520,
        typing_time=830,
        timestamp="2024-03-01T10:00:00.000Z",
    )
    values.update(overrides)
    return TrialEntity(**values)


def make_summary(**overrides) -> ExperimentSummaryEntity:
    """Build an experiment summary entity with realistic defaults."""
    values = dict(
        clock_type_selection="mixed",
        show_numbers=True,
        total_trials=2,
        overall_accuracy=0.75,
        avg_reaction_time=1600.0,
        digital_avg_reaction=1200.0,
        analog_avg_reaction=2000.0,
        digital_accuracy=1.0,
        analog_accuracy=0.5,
    )
    values.update(overrides)
    return ExperimentSummaryEntity(**values)
