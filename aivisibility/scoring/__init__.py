"""
Composite Scoring
=================

Deterministic scan-level scoring of AI visibility.

Components:
    - ScoringConfig: every lexicon, threshold and weight in one place
    - CompositeScorer: ScanBatch → CompositeScore (6 sub-scores + overall)
    - ScanInsightBuilder: highlights / critical issues per scan

Usage:
    from aivisibility.scoring import CompositeScorer, ScanBatch

    score = CompositeScorer().aggregate(ScanBatch(analyses, scan_id="s1"))
    print(score.overall)
"""

from .scoring_config import (
    ScoringConfig,
    DEFAULT_CONFIG,
    load_scoring_config,
    config_from_dict,
)
from .composite_scorer import (
    CompositeScorer,
    CompositeScore,
    ScanBatch,
    round_half_away,
)
from .scan_insights import (
    ScanInsightBuilder,
    ScanInsights,
    PlatformBreakdown,
)

__all__ = [
    "ScoringConfig",
    "DEFAULT_CONFIG",
    "load_scoring_config",
    "config_from_dict",
    "CompositeScorer",
    "CompositeScore",
    "ScanBatch",
    "round_half_away",
    "ScanInsightBuilder",
    "ScanInsights",
    "PlatformBreakdown",
]
