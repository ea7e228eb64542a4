# insight_engine/helpers/aggregator.py
import logging
from typing import Awaitable, Callable, List, Sequence

from insight_engine.exceptions import InvalidModelOutput, ModelError
from insight_engine.helpers.scorer import ScoredChunk, round_half_up
from insight_engine.schemas.analysis import AggregateResult, ChunkScore
from insight_engine.services.run_logger import RunLogger

logger = logging.getLogger(__name__)

ScoreFn = Callable[[str], Awaitable[ScoredChunk]]


async def aggregate_chunk_scores(
    chunks: Sequence[str],
    score_fn: ScoreFn,
    *,
    run_logger: RunLogger,
    run_id: str,
    phase: str,
) -> AggregateResult:
    """
    Score chunks one at a time and average the ones that succeed.

    Each chunk's outcome is written to the run log before the next chunk is
    scored. Model failures and contract violations drop the chunk; any other
    exception propagates.

    Args:
        chunks: Chunks in document order
        score_fn: Coroutine scoring a single chunk
        run_logger: Audit log writer
        run_id: Current run id
        phase: Dimension key used in log records

    Returns:
        AggregateResult with the rounded mean score (0 if nothing succeeded)
        and the justifications of successful chunks in order
    """
    results: List[ChunkScore] = []

    for i, chunk in enumerate(chunks):
        try:
            scored = await score_fn(chunk)
        except (ModelError, InvalidModelOutput) as e:
            raw = getattr(e, "raw", None)
            raw_info = f"Error: {e}" if raw is None else f"Error: {e}\n{raw}"
            run_logger.append_chunk_record(run_id, phase, i, chunk, raw_info, None)
            logger.warning(f"{phase} chunk {i + 1}/{len(chunks)} failed: {e}")
            continue

        run_logger.append_chunk_record(run_id, phase, i, chunk, scored.raw, scored.result)
        results.append(scored.result)

    if not results:
        return AggregateResult(score=0, justifications=[])

    mean = sum(r.score for r in results) / len(results)
    return AggregateResult(
        score=round_half_up(mean),
        justifications=[r.justification for r in results],
    )
