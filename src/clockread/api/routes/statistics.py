"""Statistics API endpoint.

GET /api/statistics - Aggregate statistics across all experiments
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from clockread.aggregation.statistics import get_statistics
from clockread.api.deps import get_db_session
from clockread.db.repo import DbSession
from clockread.errors import StatisticsError
from clockread.models.types import ErrorResponse, StatisticsResponse

router = APIRouter()


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    responses={500: {"model": ErrorResponse}},
)
def read_statistics(
    session: DbSession = Depends(get_db_session),
) -> StatisticsResponse:
    """Get overall, clock comparison and numbers-effect statistics.

    Raises:
        HTTPException: 500 if the store cannot be queried.
    """
    try:
        return get_statistics(session)
    except StatisticsError as e:
        raise HTTPException(status_code=500, detail="Failed to fetch statistics") from e
