"""Database schema for clockread.

Three tables: users, experiments and trials. Trials reference their
experiment with ON DELETE CASCADE so removing an experiment never
leaves orphan trials.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ClientReal(TypeDecorator):
    """REAL column that keeps client values exactly as sent.

    Float would coerce every bound value with float(); summary metrics are
    stored without validation, so a non-numeric value is kept as-is where
    the store allows it.
    """

    impl = Float
    cache_ok = True

    def bind_processor(self, dialect):
        return None

    def result_processor(self, dialect, coltype):
        return None


class User(Base):
    """Participant identified by username.

    Invariant: UNIQUE(username)
    Repeated submissions under one name share a single row.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )


class Experiment(Base):
    """One completed clock-reading session with caller-computed summary metrics.

    `username` is a soft reference to users.username (no foreign key).
    """

    __tablename__ = "experiments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    clock_type_selection: Mapped[str | None] = mapped_column(String(32), nullable=True)
    show_numbers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_trials: Mapped[int | None] = mapped_column(Integer, nullable=True)
    overall_accuracy: Mapped[float | None] = mapped_column(ClientReal, nullable=True)
    avg_reaction_time: Mapped[float | None] = mapped_column(ClientReal, nullable=True)
    digital_avg_reaction: Mapped[float | None] = mapped_column(ClientReal, nullable=True)
    analog_avg_reaction: Mapped[float | None] = mapped_column(ClientReal, nullable=True)
    digital_accuracy: Mapped[float | None] = mapped_column(ClientReal, nullable=True)
    analog_accuracy: Mapped[float | None] = mapped_column(ClientReal, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    trials: Mapped[list["Trial"]] = relationship(
        back_populates="experiment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # AUTOINCREMENT keeps SQLite from reusing ids of deleted experiments
    __table_args__ = {"sqlite_autoincrement": True}


class Trial(Base):
    """A single clock-reading attempt within an experiment."""

    __tablename__ = "trials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    experiment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("experiments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    trial_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    clock_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    show_numbers: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    actual_time: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_input: Mapped[str | None] = mapped_column(Text, nullable=True)
    correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reaction_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    typing_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    timestamp: Mapped[str | None] = mapped_column(String(64), nullable=True)

    experiment: Mapped[Experiment] = relationship(back_populates="trials")

    __table_args__ = {"sqlite_autoincrement": True}
