#!/usr/bin/env python3
"""Smoke test for the demo database.

Validates that the demo experiments were seeded correctly and that the
statistics endpoint returns sensible numbers for them.

Usage:
    python scripts/smoke_demo.py

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from fastapi.testclient import TestClient  # noqa: E402

from clockread.api.app import create_app  # noqa: E402
from clockread.config import Settings  # noqa: E402
from clockread.db import repo  # noqa: E402
from clockread.db.schema import Experiment  # noqa: E402
from clockread.db.session import Database  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"
DEMO_DB_URL = f"sqlite:///{DEMO_DB_PATH}"


def check_database_exists() -> bool:
    """Check that demo database exists."""
    if not DEMO_DB_PATH.exists():
        print(f"FAIL: Demo database not found: {DEMO_DB_PATH}")
        return False
    print(f"OK: Database exists: {DEMO_DB_PATH}")
    return True


def check_trial_counts(session) -> bool:
    """Check that every experiment has total_trials trial rows."""
    experiments = session.query(Experiment).all()
    if not experiments:
        print("FAIL: No experiments found")
        return False

    ok = True
    for exp in experiments:
        count = repo.get_trial_count(session, exp.id)
        if count != exp.total_trials:
            print(f"FAIL: Experiment {exp.id} has {count} trials, expected {exp.total_trials}")
            ok = False
    if ok:
        print(f"OK: {len(experiments)} experiments with matching trial counts")
    return ok


def check_no_orphans(session) -> bool:
    """Check that no trial points at a missing experiment."""
    orphans = repo.get_orphan_trial_count(session)
    if orphans:
        print(f"FAIL: {orphans} orphan trials")
        return False
    print("OK: No orphan trials")
    return True


def check_statistics(client: TestClient) -> bool:
    """Check the statistics endpoint on the seeded data."""
    response = client.get("/api/statistics")
    if response.status_code != 200:
        print(f"FAIL: /api/statistics returned {response.status_code}")
        return False

    data = response.json()
    overall = data["overall"]
    print(f"    Experiments: {overall['total_experiments']}")
    print(f"    Avg accuracy: {overall['avg_accuracy']:.3f}")
    print(f"    Avg reaction: {overall['avg_reaction_time']:.0f} ms")

    clock_types = [row["clock_type"] for row in data["clockComparison"]]
    if clock_types != ["digital", "analog"]:
        print(f"FAIL: Unexpected clock comparison rows: {clock_types}")
        return False
    for row in data["clockComparison"]:
        reaction, accuracy = row["avg_reaction"], row["avg_accuracy"]
        print(f"    {row['clock_type']:>7}: {reaction:.0f} ms, {accuracy:.3f}")

    groups = [row["show_numbers"] for row in data["numbersEffect"]]
    if groups != [False, True]:
        print(f"FAIL: Expected numbers-effect groups [False, True], got {groups}")
        return False

    print("OK: Statistics endpoint")
    return True


def main() -> int:
    """Run all smoke checks."""
    print("=" * 60)
    print("Clockread Demo Smoke Test")
    print("=" * 60)

    if not check_database_exists():
        return 1

    database = Database.from_url(DEMO_DB_URL)
    settings = Settings(database_url=DEMO_DB_URL, static_dir=PROJECT_ROOT / "public")

    session = database.get_session()
    try:
        results = [check_trial_counts(session), check_no_orphans(session)]
    finally:
        session.close()

    with TestClient(create_app(settings=settings, database=database)) as client:
        results.append(check_statistics(client))

    print()
    if all(results):
        print("All checks passed")
        return 0
    print("Some checks failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
