"""Tests for statistics API endpoint and application wiring."""

from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from clockread.config import Settings
from clockread.db import repo
from clockread.db.schema import Base, Experiment
from clockread.db.session import Database
from clockread.errors import SchemaInitError

TEST_SETTINGS = Settings(database_url="sqlite:///:memory:", static_dir=Path("missing-static"))


def create_test_app_and_client():
    """Create app with test database and return (client, database)."""
    from clockread.api.app import create_app

    database = Database.from_url("sqlite:///:memory:")
    database.ensure_schema()

    app = create_app(settings=TEST_SETTINGS, database=database)
    client = TestClient(app)

    return client, database


def add_experiment(database: Database, **fields) -> int:
    """Insert an experiment row directly. Returns its id."""
    with Session(database.engine) as session:
        exp = Experiment(username="tester", **fields)
        session.add(exp)
        session.commit()
        return exp.id


class TestGetStatisticsEndpoint:
    """Test GET /api/statistics."""

    def test_returns_200_with_three_views(self):
        """Response has overall, clockComparison and numbersEffect."""
        client, _ = create_test_app_and_client()

        response = client.get("/api/statistics")

        assert response.status_code == 200
        assert set(response.json()) == {"overall", "clockComparison", "numbersEffect"}

    def test_empty_store(self):
        """Empty store -> zero experiments and null averages."""
        client, _ = create_test_app_and_client()

        data = client.get("/api/statistics").json()

        assert data["overall"] == {
            "total_experiments": 0,
            "avg_accuracy": None,
            "avg_reaction_time": None,
        }
        assert data["clockComparison"] == [
            {"clock_type": "digital", "avg_reaction": None, "avg_accuracy": None},
            {"clock_type": "analog", "avg_reaction": None, "avg_accuracy": None},
        ]
        assert data["numbersEffect"] == []

    def test_clock_comparison_uses_only_exercised_rows(self):
        """Each clock type averages only rows where it has reaction data."""
        client, database = create_test_app_and_client()
        add_experiment(
            database,
            clock_type_selection="digital",
            overall_accuracy=0.9,
            avg_reaction_time=500.0,
            digital_avg_reaction=500.0,
            digital_accuracy=0.9,
            analog_avg_reaction=0.0,
            analog_accuracy=0.0,
        )
        add_experiment(
            database,
            clock_type_selection="analog",
            overall_accuracy=0.8,
            avg_reaction_time=600.0,
            digital_avg_reaction=0.0,
            digital_accuracy=0.0,
            analog_avg_reaction=600.0,
            analog_accuracy=0.8,
        )

        data = client.get("/api/statistics").json()

        digital, analog = data["clockComparison"]
        assert digital["clock_type"] == "digital"
        assert digital["avg_reaction"] == pytest.approx(500.0)
        assert digital["avg_accuracy"] == pytest.approx(0.9)
        assert analog["clock_type"] == "analog"
        assert analog["avg_reaction"] == pytest.approx(600.0)
        assert analog["avg_accuracy"] == pytest.approx(0.8)
        assert data["overall"]["total_experiments"] == 2
        assert data["overall"]["avg_reaction_time"] == pytest.approx(550.0)

    def test_numbers_effect_groups_by_show_numbers(self):
        """Two analog experiments with and without numbers -> two rows."""
        client, database = create_test_app_and_client()
        add_experiment(
            database,
            clock_type_selection="analog",
            show_numbers=True,
            analog_avg_reaction=700.0,
            analog_accuracy=0.9,
        )
        add_experiment(
            database,
            clock_type_selection="analog",
            show_numbers=False,
            analog_avg_reaction=950.0,
            analog_accuracy=0.7,
        )

        data = client.get("/api/statistics").json()

        without_numbers, with_numbers = data["numbersEffect"]
        assert without_numbers["show_numbers"] is False
        assert without_numbers["avg_reaction"] == pytest.approx(950.0)
        assert without_numbers["avg_accuracy"] == pytest.approx(0.7)
        assert with_numbers["show_numbers"] is True
        assert with_numbers["avg_reaction"] == pytest.approx(700.0)
        assert with_numbers["avg_accuracy"] == pytest.approx(0.9)

    def test_reflects_new_submissions(self):
        """Statistics are recomputed on every call."""
        client, database = create_test_app_and_client()
        assert client.get("/api/statistics").json()["overall"]["total_experiments"] == 0

        add_experiment(database, overall_accuracy=1.0, avg_reaction_time=900.0)

        overall = client.get("/api/statistics").json()["overall"]
        assert overall["total_experiments"] == 1
        assert overall["avg_accuracy"] == pytest.approx(1.0)

    def test_storage_failure_returns_500(self):
        """Query errors -> generic 500 without partial data."""
        client, _ = create_test_app_and_client()
        error = OperationalError("SELECT", {}, Exception("no such table: experiments"))

        with patch("clockread.db.repo.get_numbers_effect", side_effect=error):
            response = client.get("/api/statistics")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch statistics"}


class TestApplicationLifespan:
    """Test startup and shutdown of the application."""

    def test_startup_creates_schema(self):
        """Tables exist once the app has started."""
        from clockread.api.app import create_app

        database = Database.from_url("sqlite:///:memory:")
        app = create_app(settings=TEST_SETTINGS, database=database)

        with TestClient(app) as client:
            response = client.get("/api/statistics")
            with Session(database.engine) as session:
                assert repo.get_user_count(session) == 0

        assert response.status_code == 200

    def test_startup_builds_database_from_settings(self, tmp_path: Path):
        """Without an injected handle the app opens the configured store."""
        from clockread.api.app import create_app

        db_path = tmp_path / "clock.db"
        settings = Settings(database_url=f"sqlite:///{db_path}", static_dir=tmp_path / "none")
        app = create_app(settings=settings)

        with TestClient(app) as client:
            response = client.post(
                "/api/save-experiment",
                json={"username": "carol", "experimentData": [], "summary": {}},
            )

        assert response.status_code == 201
        assert db_path.exists()

    def test_schema_failure_aborts_startup(self):
        """Startup fails instead of serving without a schema."""
        from clockread.api.app import create_app

        database = Database.from_url("sqlite:///:memory:")
        app = create_app(settings=TEST_SETTINGS, database=database)
        error = OperationalError("CREATE TABLE", {}, Exception("unable to open database"))

        with patch.object(Base.metadata, "create_all", side_effect=error):
            with pytest.raises(SchemaInitError):
                with TestClient(app):
                    pass

    def test_health_check(self):
        """Health endpoint responds ok."""
        client, _ = create_test_app_and_client()

        assert client.get("/health").json() == {"status": "ok"}

    def test_unknown_route_uses_error_envelope(self):
        """Router 404s use the same {"error": ...} shape."""
        client, _ = create_test_app_and_client()

        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_serves_static_client(self, tmp_path: Path):
        """Files in the static directory are served at the root."""
        from clockread.api.app import create_app

        (tmp_path / "index.html").write_text("<h1>Clock task</h1>")
        settings = Settings(database_url="sqlite:///:memory:", static_dir=tmp_path)
        database = Database.from_url("sqlite:///:memory:")
        database.ensure_schema()
        client = TestClient(create_app(settings=settings, database=database))

        response = client.get("/")

        assert response.status_code == 200
        assert "Clock task" in response.text
        assert client.get("/api/statistics").status_code == 200
