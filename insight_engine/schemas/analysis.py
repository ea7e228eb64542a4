# insight_engine/schemas/analysis.py

from typing import List, Optional

from pydantic import BaseModel, Field


class ChunkScore(BaseModel):
    """Validated model verdict for a single chunk."""

    score: int = Field(ge=0, le=100)
    justification: str


class AggregateResult(BaseModel):
    """Mean score over successful chunks plus their justifications, in chunk order."""

    score: int = Field(ge=0, le=100)
    justifications: List[str] = []


class SummaryResult(BaseModel):
    """Overall justification and recommendations for one dimension."""

    overall_justification: str = Field(alias="overallJustification")
    recommendations: List[str] = []

    class Config:
        populate_by_name = True


class AnalysisResponse(BaseModel):
    """Response body for a completed analysis run."""

    ticker: str
    trust_score: int = Field(alias="trustScore", ge=0, le=100)
    trust_justification: str = Field(alias="trustJustification")
    trust_recommendations: List[str] = Field(alias="trustRecommendations")
    growth_score: int = Field(alias="growthScore", ge=0, le=100)
    growth_justification: str = Field(alias="growthJustification")
    growth_recommendations: List[str] = Field(alias="growthRecommendations")
    summary: str
    run_id: str = Field(alias="runId")

    class Config:
        populate_by_name = True


class ErrorResponse(BaseModel):
    """Structured error body. run_id points at the audit log when a run was started."""

    error: str
    run_id: Optional[str] = Field(default=None, alias="runId")

    class Config:
        populate_by_name = True
