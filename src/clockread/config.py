"""Process configuration.

Settings are read from the environment. A `.env` file in the working
directory is loaded first so local development does not need exported
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import URL

# Default local database path
DEFAULT_DB_PATH = Path("data/clockread.db")

DEFAULT_DB_NAME = "clockdb"
DEFAULT_DB_DRIVER = "postgresql+psycopg"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    database_url: str
    static_dir: Path = Path("public")
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000


def _build_database_url(env: dict[str, str]) -> str:
    """Resolve the store URL from environment values.

    Precedence: an explicit URL, then a remote host composed from its
    parts, then a local SQLite file.
    """
    explicit = env.get("CLOCKREAD_DATABASE_URL")
    if explicit:
        return explicit

    host = env.get("CLOCKREAD_DB_HOST")
    if host:
        port = env.get("CLOCKREAD_DB_PORT")
        url = URL.create(
            drivername=env.get("CLOCKREAD_DB_DRIVER", DEFAULT_DB_DRIVER),
            username=env.get("CLOCKREAD_DB_USER"),
            password=env.get("CLOCKREAD_DB_PASSWORD"),
            host=host,
            port=int(port) if port else None,
            database=env.get("CLOCKREAD_DB_NAME", DEFAULT_DB_NAME),
        )
        return url.render_as_string(hide_password=False)

    db_path = Path(env.get("CLOCKREAD_DB_PATH", str(DEFAULT_DB_PATH)))
    return f"sqlite:///{db_path}"


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Load settings from the environment.

    Args:
        env: Mapping to read instead of os.environ. When omitted, `.env`
            is loaded into the process environment first.

    Returns:
        Frozen Settings instance.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    origins = [o.strip() for o in env.get("CLOCKREAD_CORS_ORIGINS", "*").split(",") if o.strip()]

    return Settings(
        database_url=_build_database_url(env),
        static_dir=Path(env.get("CLOCKREAD_STATIC_DIR", "public")),
        cors_origins=origins or ["*"],
        log_level=env.get("CLOCKREAD_LOG_LEVEL", "INFO").upper(),
        host=env.get("HOST", "0.0.0.0"),
        port=int(env.get("PORT", "3000")),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
