#!/usr/bin/env python3
"""Seed a demo database with clock-reading experiments.

Creates a handful of experiments covering digital, analog and mixed
selections, with and without clock numbers, so the statistics endpoint
has something to show.

Usage:
    python scripts/seed_demo.py

This script:
1. Initializes the demo database schema
2. Generates trials for each demo participant
3. Stores each experiment through the same writer the API uses
"""

from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from clockread.db.session import Database  # noqa: E402
from clockread.models.domain import ExperimentSummaryEntity, TrialEntity  # noqa: E402
from clockread.recording.writer import save_experiment  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"
TRIALS_PER_EXPERIMENT = 12

# (username, clock selection, numbers shown)
DEMO_PARTICIPANTS = [
    ("ada", "digital", True),
    ("ben", "analog", True),
    ("cleo", "analog", False),
    ("dev", "mixed", True),
    ("eve", "mixed", False),
    (None, "mixed", True),
]


def make_trials(clock_selection: str, show_numbers: bool, rng: random.Random) -> list[TrialEntity]:
    """Generate plausible trials for one participant."""
    start = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    trials = []
    for n in range(1, TRIALS_PER_EXPERIMENT + 1):
        if clock_selection == "mixed":
            clock_type = "digital" if n % 2 else "analog"
        else:
            clock_type = clock_selection

        hour, minute = rng.randint(1, 12), rng.randrange(0, 60, 5)
        actual = f"{hour}:{minute:02d}"
        # Analog clocks are slower and less accurate, more so without numbers
        base = 900 if clock_type == "digital" else (1800 if show_numbers else 2300)
        correct = rng.random() < (0.95 if clock_type == "digital" else 0.8)
        user_input = actual if correct else f"{hour}:{(minute + 5) % 60:02d}"

        trials.append(
            TrialEntity(
                trial_number=n,
                clock_type=clock_type,
                show_numbers=show_numbers,
                actual_time=actual,
                user_input=user_input,
                correct=correct,
                reaction_time=int(rng.gauss(base, base * 0.15)),
                typing_time=int(rng.gauss(700, 120)),
                timestamp=(start + timedelta(seconds=8 * n)).isoformat(),
            )
        )
    return trials


def summarize(
    clock_selection: str, show_numbers: bool, trials: list[TrialEntity]
) -> ExperimentSummaryEntity:
    """Compute the summary the experiment client would send."""

    def averages(subset: list[TrialEntity]) -> tuple[float, float]:
        if not subset:
            return 0.0, 0.0
        reaction = sum(t.reaction_time for t in subset) / len(subset)
        accuracy = sum(t.correct for t in subset) / len(subset)
        return reaction, accuracy

    avg_reaction, accuracy = averages(trials)
    digital_reaction, digital_accuracy = averages([t for t in trials if t.clock_type == "digital"])
    analog_reaction, analog_accuracy = averages([t for t in trials if t.clock_type == "analog"])

    return ExperimentSummaryEntity(
        clock_type_selection=clock_selection,
        show_numbers=show_numbers,
        total_trials=len(trials),
        overall_accuracy=accuracy,
        avg_reaction_time=avg_reaction,
        digital_avg_reaction=digital_reaction,
        analog_avg_reaction=analog_reaction,
        digital_accuracy=digital_accuracy,
        analog_accuracy=analog_accuracy,
    )


def main() -> int:
    """Seed the demo database."""
    print("=" * 60)
    print("Clockread Demo Seeder")
    print("=" * 60)

    if DEMO_DB_PATH.exists():
        print(f"Removing existing database: {DEMO_DB_PATH}")
        DEMO_DB_PATH.unlink()

    database = Database.from_url(f"sqlite:///{DEMO_DB_PATH}")
    database.ensure_schema()
    rng = random.Random(42)

    session = database.get_session()
    try:
        for username, clock_selection, show_numbers in DEMO_PARTICIPANTS:
            trials = make_trials(clock_selection, show_numbers, rng)
            summary = summarize(clock_selection, show_numbers, trials)
            experiment_id = save_experiment(session, username, trials, summary)
            print(f"  Experiment {experiment_id}: {username or 'Anonymous'} ({clock_selection})")
    finally:
        session.close()
        database.dispose()

    print()
    print(f"Seeded {len(DEMO_PARTICIPANTS)} experiments into {DEMO_DB_PATH}")
    print("Run: python scripts/smoke_demo.py")
    return 0


if __name__ == "__main__":
    sys.exit(main())
