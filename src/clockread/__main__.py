"""Run the clockread server.

Usage:
    python -m clockread
"""

from __future__ import annotations

import uvicorn

from clockread.api.app import create_app
from clockread.config import configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
