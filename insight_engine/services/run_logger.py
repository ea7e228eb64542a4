# insight_engine/services/run_logger.py
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from insight_engine.schemas.analysis import ChunkScore

logger = logging.getLogger(__name__)

RUN_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_run_id() -> str:
    """Timestamp-prefixed run id, e.g. 2024-05-01T10-11-12-345Z_<uuid4>."""
    stamp = re.sub(r"[:.]", "-", _timestamp())
    return f"{stamp}_{uuid.uuid4()}"


def is_valid_run_id(run_id: str) -> bool:
    return bool(RUN_ID_PATTERN.match(run_id))


class RunLogger:
    """
    Append-only audit trail, one file per run under ``logs_dir``.

    Every entry goes out in a single append-mode write so concurrent runs and
    interleaved calls never split a record. Write failures are reported as
    warnings and never raised.
    """

    def __init__(self, logs_dir: str | Path, chunk_preview_chars: int = 2000):
        self.logs_dir = Path(logs_dir)
        self.chunk_preview_chars = chunk_preview_chars

    def _path(self, run_id: str) -> Path:
        if not is_valid_run_id(run_id):
            raise ValueError(f"Invalid run id: {run_id!r}")
        return self.logs_dir / f"{run_id}.log"

    def _append(self, run_id: str, entry: str) -> None:
        try:
            path = self._path(run_id)
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(entry)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to write run log for {run_id}: {e}")

    def append_line(self, run_id: str, message: str) -> None:
        """Append a timestamped message to the run log."""
        self._append(run_id, f"[{_timestamp()}] {message}\n")

    def append_chunk_record(
        self,
        run_id: str,
        phase: str,
        chunk_index: int,
        chunk_text: str,
        raw_response: str,
        parsed: Optional[ChunkScore] = None,
    ) -> None:
        """
        Append the full record of one chunk scoring attempt.

        The chunk text is truncated to ``chunk_preview_chars``; its real length
        is always noted.
        """
        limit = self.chunk_preview_chars
        displayed = chunk_text
        if len(chunk_text) > limit:
            displayed = chunk_text[:limit] + "...[truncated]"

        if parsed is not None:
            parsed_info = (
                f'Parsed result: score={parsed.score}, justification="{parsed.justification}"'
            )
        else:
            parsed_info = "Parsed result: <none or parse error>"

        entry = "\n".join(
            [
                f"[{_timestamp()}] === {phase.upper()} Chunk {chunk_index + 1} ===",
                f"Chunk text length: {len(chunk_text)} chars (showing up to {limit}):\n{displayed}",
                f"Raw LLM response:\n{raw_response}",
                parsed_info,
                "",
            ]
        )
        self._append(run_id, entry)

    def read_run_log(self, run_id: str) -> Optional[str]:
        """
        Return the log text for a run, or None if no log exists.

        Raises:
            ValueError: If run_id is malformed
        """
        path = self._path(run_id)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")
