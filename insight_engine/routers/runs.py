from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from insight_engine.dependencies import get_run_logger
from insight_engine.services.run_logger import RunLogger, is_valid_run_id

router = APIRouter(prefix="/api/runs", tags=["Runs"])


@router.get("/{run_id}/log", response_class=PlainTextResponse)
async def get_run_log(
    run_id: str,
    run_logger: Annotated[RunLogger, Depends(get_run_logger)],
):
    """Return the audit log of a run."""
    if not is_valid_run_id(run_id):
        raise HTTPException(status_code=400, detail="Malformed run id")

    text = run_logger.read_run_log(run_id)
    if text is None:
        raise HTTPException(status_code=404, detail=f"No log for run {run_id}")
    return PlainTextResponse(text)
