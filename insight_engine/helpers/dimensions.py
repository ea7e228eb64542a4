# insight_engine/helpers/dimensions.py

from dataclasses import dataclass
from typing import Dict

CHUNK_PROMPT_TEMPLATE = '''
You are evaluating a company's {source_description} excerpt for {aspect}.
On a scale from 0 to 100, {scoring_question}
Respond ONLY in JSON: {{ "score": <int 0-100>, "justification": "<brief explanation>" }}.
Excerpt:
"""{excerpt}"""
'''

SUMMARY_PROMPT_TEMPLATE = """
You are {summary_persona}. A company's {aspect} ({label}) has been scored {score}/100 based on analysis of its {evidence_description}. Here are key observations from different sections:
{observations}{omitted_note}

Based on these observations and the score, provide:
1. A concise overall justification paragraph explaining why the {label} score is at this level.
2. Specific actionable recommendations for {recommendation_focus}.
Respond in JSON with shape:
{{
  "overallJustification": "<concise paragraph>",
  "recommendations": ["<rec 1>", "<rec 2>", ...]
}}
Only respond with valid JSON.
"""


@dataclass(frozen=True)
class Dimension:
    """One scoring axis. Prompts are rendered from these fields."""

    key: str
    label: str
    aspect: str
    source_description: str
    evidence_description: str
    scoring_question: str
    summary_persona: str
    recommendation_focus: str

    def chunk_prompt(self, excerpt: str) -> str:
        return CHUNK_PROMPT_TEMPLATE.format(
            source_description=self.source_description,
            aspect=self.aspect,
            scoring_question=self.scoring_question,
            excerpt=excerpt,
        )

    def summary_prompt(self, score: int, observations: str, omitted_note: str) -> str:
        return SUMMARY_PROMPT_TEMPLATE.format(
            summary_persona=self.summary_persona,
            aspect=self.aspect,
            label=self.label,
            score=score,
            evidence_description=self.evidence_description,
            observations=observations,
            omitted_note=omitted_note,
            recommendation_focus=self.recommendation_focus,
        )


TRUST = Dimension(
    key="trust",
    label="Trust",
    aspect="Transparency",
    source_description="annual report",
    evidence_description="annual report excerpts",
    scoring_question="how openly does the company discuss its challenges and risks?",
    summary_persona="an expert business consultant",
    recommendation_focus=(
        "improving transparency in communications, investor relations, or marketing "
        "(e.g., what topics or data to disclose more openly)"
    ),
)

GROWTH = Dimension(
    key="growth",
    label="Growth",
    aspect="Differentiation",
    source_description="communications",
    evidence_description="communications and web content",
    scoring_question="how clear and strong is its unique value proposition?",
    summary_persona="an expert marketing and strategy consultant",
    recommendation_focus=(
        "strengthening differentiation and marketing positioning "
        "(e.g., messaging focus, channels, partnerships)"
    ),
)

DIMENSIONS: Dict[str, Dimension] = {d.key: d for d in (TRUST, GROWTH)}
