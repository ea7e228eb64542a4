# insight_engine/helpers/summarizer.py
import logging
from typing import Any, List, Optional

from insight_engine.exceptions import InvalidModelOutput, ModelError
from insight_engine.helpers.dimensions import Dimension
from insight_engine.helpers.scorer import parse_llm_json
from insight_engine.schemas.analysis import SummaryResult
from insight_engine.services.run_logger import RunLogger

logger = logging.getLogger(__name__)

DEFAULT_MAX_JUSTIFICATIONS = 10


def _omitted_note(omitted: int) -> str:
    if omitted <= 0:
        return ""
    return f"\n...and {omitted} more observations omitted for brevity."


def _as_text(value: Any, response_text: str) -> str:
    try:
        return str(value)
    except ValueError as e:
        raise InvalidModelOutput(f"Unprintable recommendation: {e}", raw=response_text) from e


def parse_summary(response_text: str) -> SummaryResult:
    """
    Validate a summary reply against the {overallJustification, recommendations} contract.

    Raises:
        InvalidModelOutput: If the reply does not match the contract
    """
    payload = parse_llm_json(response_text)
    if not isinstance(payload, dict):
        raise InvalidModelOutput("Expected a JSON object", raw=response_text)

    justification = payload.get("overallJustification")
    recommendations = payload.get("recommendations")
    if not isinstance(justification, str) or not isinstance(recommendations, list):
        raise InvalidModelOutput(
            f"Unexpected JSON shape for summary: {response_text[:500]}", raw=response_text
        )

    return SummaryResult(
        overall_justification=justification,
        recommendations=[_as_text(r, response_text) for r in recommendations],
    )


def fallback_summary(
    dimension: Dimension, score: int, included: List[str], omitted: int
) -> SummaryResult:
    """Deterministic summary used whenever the model reply cannot be used."""
    observations = " | ".join(included) if included else "none available"
    text = f"{dimension.label} score is {score}/100. Observations: {observations}{_omitted_note(omitted)}"
    return SummaryResult(overall_justification=text, recommendations=[])


async def summarize_insights(
    llm,
    dimension: Dimension,
    score: int,
    justifications: List[str],
    *,
    run_logger: Optional[RunLogger] = None,
    run_id: Optional[str] = None,
    max_justifications: int = DEFAULT_MAX_JUSTIFICATIONS,
) -> SummaryResult:
    """
    Turn an aggregate score and chunk justifications into a summary.

    Falls back to a templated summary on any model or contract failure;
    never raises for those.

    Args:
        llm: Client exposing ``complete(prompt) -> str``
        dimension: Dimension being summarized
        score: Aggregate score
        justifications: Chunk justifications in order
        run_logger: Optional audit log writer
        run_id: Current run id (required for logging)
        max_justifications: How many justifications go into the prompt

    Returns:
        SummaryResult
    """
    included = justifications[:max_justifications]
    omitted = len(justifications) - len(included)
    observations = "\n".join(f"- Chunk {i + 1}: {j}" for i, j in enumerate(included))
    prompt = dimension.summary_prompt(score, observations, _omitted_note(omitted))

    try:
        raw = (await llm.complete(prompt)).strip()
        if run_logger and run_id:
            run_logger.append_line(run_id, f"{dimension.label} summary raw response:\n{raw}")
        return parse_summary(raw)
    except (ModelError, InvalidModelOutput) as e:
        logger.warning(f"Error summarizing {dimension.label} insights: {e}")
        if run_logger and run_id:
            run_logger.append_line(run_id, f"{dimension.label} summary fallback used: {e}")
        return fallback_summary(dimension, score, included, omitted)
