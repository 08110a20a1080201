"""Experiments API endpoint.

POST /api/save-experiment - Store an experiment and its trials
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from clockread.api.deps import get_db_session
from clockread.db.repo import DbSession
from clockread.errors import ExperimentWriteError
from clockread.models.types import ErrorResponse, SaveExperimentRequest, SaveExperimentResponse
from clockread.recording.writer import save_experiment, summary_from_record, trial_from_record

router = APIRouter()


@router.post(
    "/save-experiment",
    response_model=SaveExperimentResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_experiment(
    body: SaveExperimentRequest | None = None,
    session: DbSession = Depends(get_db_session),
) -> SaveExperimentResponse:
    """Store a finished experiment.

    Args:
        body: Username, trial records and summary from the client.
        session: Database session (injected).

    Returns:
        SaveExperimentResponse with the generated experiment id.

    Raises:
        HTTPException: 400 if experimentData or summary is missing,
            500 if the store rejects the write.
    """
    if body is None or body.experiment_data is None or body.summary is None:
        raise HTTPException(status_code=400, detail="Missing experimentData or summary")

    try:
        experiment_id = save_experiment(
            session=session,
            username=body.username,
            trials=[trial_from_record(t) for t in body.experiment_data],
            summary=summary_from_record(body.summary),
        )
    except ExperimentWriteError as e:
        raise HTTPException(status_code=500, detail="Failed to save experiment data") from e

    return SaveExperimentResponse(success=True, experiment_id=experiment_id)
