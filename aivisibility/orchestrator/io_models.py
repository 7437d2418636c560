"""
CLI Input Models
================

Pydantic models validating the JSON scan files read by the CLI.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..analysis.analysis_models import BusinessIdentity, PlatformResponse
from ..scoring.composite_scorer import CompositeScore


class BusinessModel(BaseModel):
    """Business identity (name + tracked competitors)."""
    name: str = Field(min_length=1)
    competitors: List[str] = Field(default_factory=list)

    def to_identity(self) -> BusinessIdentity:
        return BusinessIdentity(name=self.name, competitor_names=tuple(self.competitors))


class ResponseModel(BaseModel):
    """One AI answer. A null response marks a failed platform call."""
    response: Optional[str] = None
    platform: Optional[str] = None
    query: Optional[str] = None

    def to_platform_response(self) -> PlatformResponse:
        return PlatformResponse(response_text=self.response, platform=self.platform, query=self.query)


class PreviousScoreModel(BaseModel):
    """Most recent stored score of the business."""
    score_id: Optional[str] = None
    visibility: int = Field(ge=0, le=100)
    sentiment: int = Field(ge=0, le=100)
    confidence: int = Field(ge=0, le=100)
    recommendation: int = Field(ge=0, le=100)
    citation: int = Field(ge=0, le=100)
    trust: int = Field(ge=0, le=100)
    overall: int = Field(ge=0, le=100)

    def to_score(self, business_id: Optional[str] = None) -> CompositeScore:
        return CompositeScore(
            visibility=self.visibility,
            sentiment=self.sentiment,
            confidence=self.confidence,
            recommendation=self.recommendation,
            citation=self.citation,
            trust=self.trust,
            overall=self.overall,
            business_id=business_id,
            score_id=self.score_id,
        )


class ScanRequestModel(BaseModel):
    """A complete scan file."""
    business_id: Optional[str] = None
    scan_id: Optional[str] = None
    business: BusinessModel
    responses: List[ResponseModel] = Field(default_factory=list)
    previous: Optional[PreviousScoreModel] = None
