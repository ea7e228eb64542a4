"""Shared fakes for the pipeline tests."""
import json

import fitz
import pytest

from insight_engine.exceptions import FetchError, ModelError
from insight_engine.services.run_logger import RunLogger


class FakeLLM:
    """Scripted stand-in for LLMClient.complete."""

    def __init__(self, replies=None, default=None):
        self.replies = list(replies or [])
        self.default = default
        self.prompts = []

    async def complete(self, prompt, *, temperature=None, model=None):
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else self.default
        if callable(reply):
            reply = reply(prompt)
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            raise ModelError("no scripted reply")
        return reply


class FakeFetcher:
    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []

    async def fetch(self, url):
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(f"Fetch failed for {url}", url=url)
        return page


def pipeline_reply(prompt: str) -> str:
    """Reply like a well-behaved model for both chunk and summary prompts."""
    if "overallJustification" in prompt:
        return json.dumps(
            {
                "overallJustification": "Solid disclosure with room to improve.",
                "recommendations": ["Publish segment risks", "Add KPI targets"],
            }
        )
    return '```json\n{"score": 70, "justification": "Discusses risks openly."}\n```'


@pytest.fixture
def fake_llm():
    return FakeLLM(default=pipeline_reply)


@pytest.fixture
def run_logger(tmp_path):
    return RunLogger(tmp_path / "logs", chunk_preview_chars=50)


@pytest.fixture
def pdf_bytes():
    """A one-page PDF with a couple of sentences on it."""
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text(
        (72, 72),
        "Annual report 2023. We discuss supply chain risks openly.\nMargins fell in Q3.",
    )
    data = doc.tobytes()
    doc.close()
    return data
