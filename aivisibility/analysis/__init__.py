"""
Per-Response Analysis
=====================

Deterministic extraction and classification of one AI response.
No ML, no embeddings: every output traces back to a regex match or a
lexicon entry.

Modules:
    analysis_models     - SignalSet, ResponseAnalysis, BusinessIdentity, enums
    signal_extractor    - mentions, context, ranking, citations, competitors
    response_classifier - sentiment, hedging, confidence, recommendation, mention type
"""

from .analysis_models import (
    BusinessIdentity,
    MentionType,
    PlatformResponse,
    RecommendationStrength,
    ResponseAnalysis,
    Sentiment,
    SignalSet,
)
from .signal_extractor import SignalExtractor
from .response_classifier import ResponseClassifier

__all__ = [
    "BusinessIdentity",
    "MentionType",
    "PlatformResponse",
    "RecommendationStrength",
    "ResponseAnalysis",
    "Sentiment",
    "SignalSet",
    "SignalExtractor",
    "ResponseClassifier",
]
