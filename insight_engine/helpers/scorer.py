# insight_engine/helpers/scorer.py

import json
import math
import re
from dataclasses import dataclass
from typing import Any

from insight_engine.exceptions import InvalidModelOutput
from insight_engine.helpers.dimensions import Dimension
from insight_engine.schemas.analysis import ChunkScore

FENCE = "```"
# Language tag glued to a one-line fenced payload, e.g. ```json{...}```
LANGUAGE_TAG = re.compile(r"^[A-Za-z][\w+-]*(?=\s*[\[{])")


def strip_code_fences(raw: str) -> str:
    """
    Remove a Markdown code fence wrapping the whole reply.

    Only strips when the trimmed text both starts and ends with a fence; the
    opening fence may carry a language tag (```json). Anything else is
    returned trimmed but otherwise unchanged.
    """
    text = raw.strip()
    if not (text.startswith(FENCE) and text.endswith(FENCE)) or len(text) < 2 * len(FENCE):
        return text

    lines = text.split("\n")
    if len(lines) == 1:
        inner = text[len(FENCE) : -len(FENCE)].strip()
        return LANGUAGE_TAG.sub("", inner, count=1)

    lines = lines[1:]
    if lines and lines[-1].strip() == FENCE:
        lines = lines[:-1]
    elif lines:
        lines[-1] = lines[-1].rstrip()[: -len(FENCE)]
    return "\n".join(lines).strip()


def parse_llm_json(response_text: str) -> Any:
    """
    Parse JSON from an LLM reply after stripping code fences.

    Raises:
        InvalidModelOutput: If the reply is not valid JSON
    """
    cleaned = strip_code_fences(response_text)
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals and runaway nesting
        raise InvalidModelOutput(
            f"Failed to parse JSON from response: {e}", raw=response_text
        ) from e


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_chunk_score(response_text: str) -> ChunkScore:
    """
    Validate a chunk reply against the {score, justification} contract.

    Numeric strings are accepted for score; it is rounded and clamped to 0-100.

    Raises:
        InvalidModelOutput: If the reply does not match the contract
    """
    payload = parse_llm_json(response_text)
    if not isinstance(payload, dict):
        raise InvalidModelOutput("Expected a JSON object", raw=response_text)

    score = payload.get("score")
    justification = payload.get("justification")

    if isinstance(score, bool) or not isinstance(score, (int, float, str)):
        raise InvalidModelOutput(f"Invalid score: {score!r}", raw=response_text)
    try:
        numeric = float(score)
    except ValueError:
        raise InvalidModelOutput(f"Invalid score: {score!r}", raw=response_text)
    if not math.isfinite(numeric):
        raise InvalidModelOutput(f"Invalid score: {score!r}", raw=response_text)

    if not isinstance(justification, str):
        raise InvalidModelOutput("Missing string justification", raw=response_text)

    return ChunkScore(
        score=min(100, max(0, round_half_up(numeric))),
        justification=justification,
    )


@dataclass(frozen=True)
class ScoredChunk:
    """Raw model reply together with its validated result."""

    raw: str
    result: ChunkScore


async def score_chunk(llm, dimension: Dimension, chunk: str) -> ScoredChunk:
    """
    Score a single chunk for one dimension.

    Args:
        llm: Client exposing ``complete(prompt) -> str``
        dimension: Dimension whose prompt is used
        chunk: Text chunk to score

    Returns:
        ScoredChunk with the raw reply and parsed score

    Raises:
        ModelError: If the model call fails
        InvalidModelOutput: If the reply does not match the contract
    """
    raw = (await llm.complete(dimension.chunk_prompt(chunk))).strip()
    return ScoredChunk(raw=raw, result=parse_chunk_score(raw))
