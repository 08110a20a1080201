"""Cross-experiment statistics.

Recomputes three fixed aggregate views from the current store on every
call. Database operations go through repo.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from clockread.db import repo
from clockread.db.repo import DbSession
from clockread.errors import StatisticsError
from clockread.models.types import (
    ClockComparisonDetail,
    NumbersEffectDetail,
    OverallStatsDetail,
    StatisticsResponse,
)

logger = logging.getLogger(__name__)


def get_statistics(session: DbSession) -> StatisticsResponse:
    """Compute overall, per-clock-type and numbers-shown statistics.

    Args:
        session: Database session.

    Returns:
        StatisticsResponse with all three views.

    Raises:
        StatisticsError: If any query fails. No partial result is returned.
    """
    try:
        overall = repo.get_overall_stats(session)
        clock_comparison = repo.get_clock_comparison(session)
        numbers_effect = repo.get_numbers_effect(session)
    except SQLAlchemyError as e:
        logger.exception("Error fetching statistics")
        raise StatisticsError("Failed to fetch statistics") from e

    return StatisticsResponse(
        overall=OverallStatsDetail(
            total_experiments=overall.total_experiments,
            avg_accuracy=overall.avg_accuracy,
            avg_reaction_time=overall.avg_reaction_time,
        ),
        clock_comparison=[
            ClockComparisonDetail(
                clock_type=row.clock_type,
                avg_reaction=row.avg_reaction,
                avg_accuracy=row.avg_accuracy,
            )
            for row in clock_comparison
        ],
        numbers_effect=[
            NumbersEffectDetail(
                show_numbers=row.show_numbers,
                avg_reaction=row.avg_reaction,
                avg_accuracy=row.avg_accuracy,
            )
            for row in numbers_effect
        ],
    )
