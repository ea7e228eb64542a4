"""Unit tests for dimension summaries and their fallback."""
import asyncio
import json

from insight_engine.exceptions import ModelError
from insight_engine.helpers.dimensions import GROWTH, TRUST
from insight_engine.helpers.summarizer import summarize_insights
from tests.conftest import FakeLLM


def _summarize(llm, dimension, score, justifications, **kwargs):
    return asyncio.run(summarize_insights(llm, dimension, score, justifications, **kwargs))


class TestSummarizeInsights:
    def test_valid_reply_is_used(self):
        reply = json.dumps(
            {"overallJustification": "Candid report.", "recommendations": ["Share KPIs", 3]}
        )
        llm = FakeLLM(replies=[f"```json\n{reply}\n```"])

        result = _summarize(llm, TRUST, 77, ["open", "detailed"])

        assert result.overall_justification == "Candid report."
        assert result.recommendations == ["Share KPIs", "3"]
        prompt = llm.prompts[0]
        assert "scored 77/100" in prompt
        assert "- Chunk 1: open" in prompt
        assert "- Chunk 2: detailed" in prompt

    def test_non_json_reply_falls_back(self):
        llm = FakeLLM(replies=["The company is quite transparent overall."])

        result = _summarize(llm, TRUST, 42, ["open", "detailed"])

        assert "42" in result.overall_justification
        assert result.overall_justification == (
            "Trust score is 42/100. Observations: open | detailed"
        )
        assert result.recommendations == []

    def test_wrong_shape_falls_back(self):
        llm = FakeLLM(
            replies=['{"overallJustification": "fine", "recommendations": "do more"}']
        )

        result = _summarize(llm, GROWTH, 55, ["clear"])

        assert result.overall_justification.startswith("Growth score is 55/100.")
        assert result.recommendations == []

    def test_model_error_falls_back(self):
        llm = FakeLLM(replies=[ModelError("All 1 providers failed")])

        result = _summarize(llm, GROWTH, 0, [])

        assert "0/100" in result.overall_justification
        assert result.recommendations == []

    def test_long_justification_lists_are_truncated(self):
        justifications = [f"note {i}" for i in range(1, 13)]
        llm = FakeLLM(replies=["nope"])

        result = _summarize(llm, TRUST, 60, justifications, max_justifications=10)

        prompt = llm.prompts[0]
        assert "- Chunk 10: note 10" in prompt
        assert "- Chunk 11:" not in prompt
        assert "...and 2 more observations omitted for brevity." in prompt
        assert "note 11" not in result.overall_justification
        assert result.overall_justification.endswith(
            "...and 2 more observations omitted for brevity."
        )

    def test_raw_reply_and_fallback_are_logged(self, run_logger):
        llm = FakeLLM(replies=["garbage"])

        _summarize(llm, TRUST, 10, ["x"], run_logger=run_logger, run_id="run-2")

        log = run_logger.read_run_log("run-2")
        assert "Trust summary raw response:\ngarbage" in log
        assert "Trust summary fallback used" in log

    def test_oversized_integer_recommendation_falls_back(self):
        llm = FakeLLM(
            replies=['{"overallJustification": "ok", "recommendations": [' + "9" * 5000 + "]}"]
        )

        result = _summarize(llm, TRUST, 33, ["x"])

        assert result.overall_justification.startswith("Trust score is 33/100.")
        assert result.recommendations == []

    def test_deeply_nested_reply_falls_back(self):
        llm = FakeLLM(replies=["[" * 100000 + "]" * 100000])

        result = _summarize(llm, GROWTH, 12, [])

        assert "12/100" in result.overall_justification
        assert result.recommendations == []
