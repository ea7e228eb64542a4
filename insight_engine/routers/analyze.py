import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from insight_engine.config import Settings
from insight_engine.dependencies import get_analysis_service, get_run_logger, get_settings
from insight_engine.exceptions import ExtractionError, UnsupportedTickerError
from insight_engine.schemas.analysis import AnalysisResponse, ErrorResponse
from insight_engine.services.analysis_service import AnalysisService
from insight_engine.services.run_logger import RunLogger, new_run_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analyze", tags=["Analysis"])


def _error(status_code: int, message: str, run_id: Optional[str]) -> JSONResponse:
    body = ErrorResponse(error=message, run_id=run_id)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@router.post(
    "",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_endpoint(
    analysis_service: Annotated[AnalysisService, Depends(get_analysis_service)],
    run_logger: Annotated[RunLogger, Depends(get_run_logger)],
    config: Annotated[Settings, Depends(get_settings)],
    ticker: Annotated[str, Form()] = "",
    files: Annotated[Optional[List[UploadFile]], File()] = None,
):
    """
    Score a company's reports (Trust) and web presence (Growth).

    Every outcome, including failures, carries the runId of the audit log.
    """
    run_id = new_run_id()
    ticker = ticker.strip().upper()

    if not ticker or not files:
        run_logger.append_line(run_id, "Invalid request: missing ticker or PDF files.")
        return _error(400, "ticker + at least 1 PDF file required", run_id)

    if len(files) > config.max_upload_files:
        run_logger.append_line(run_id, f"Invalid request: {len(files)} files uploaded.")
        return _error(400, f"At most {config.max_upload_files} PDF files allowed", run_id)

    try:
        documents = [await f.read() for f in files]
        return await analysis_service.analyze(ticker, documents, run_id=run_id)
    except UnsupportedTickerError:
        return _error(400, "Unsupported ticker", run_id)
    except ExtractionError as e:
        run_logger.append_line(run_id, f"Analysis failed with error: {e}")
        return _error(422, str(e), run_id)
    except Exception as e:
        logger.exception(f"Run {run_id} failed: {e}")
        run_logger.append_line(run_id, f"Analysis failed with error: {e}")
        return _error(500, str(e) or "Internal Server Error", run_id)
