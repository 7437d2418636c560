"""
Scan Insight Builder
=====================

Summarises a scored scan into highlights, critical issues and a
per-platform breakdown. Consumed by the report and recommendation
collaborators; this module does not generate advice itself.

Usage:
    builder = ScanInsightBuilder()
    insights = builder.build(score, analyses)
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..analysis.analysis_models import MentionType, ResponseAnalysis
from .composite_scorer import CompositeScore
from .scoring_config import DEFAULT_CONFIG, InsightConfig

logger = logging.getLogger(__name__)


@dataclass
class PlatformBreakdown:
    """Mention statistics for one AI platform within a scan."""
    platform: str
    responses: int
    mentions: int
    recommended: int

    @property
    def mention_rate(self) -> float:
        if self.responses == 0:
            return 0.0
        return self.mentions / self.responses


@dataclass
class ScanInsights:
    """Highlights and issues attached to a completed scan."""
    highlights: List[str] = field(default_factory=list)
    critical_issues: List[str] = field(default_factory=list)
    mention_types: Dict[str, int] = field(default_factory=dict)
    platforms: List[PlatformBreakdown] = field(default_factory=list)

    @property
    def has_critical_issues(self) -> bool:
        return bool(self.critical_issues)


class ScanInsightBuilder:
    """Rule-based highlights and critical issues for one scan."""

    def __init__(self, config: Optional[InsightConfig] = None):
        self.config = config or DEFAULT_CONFIG.insights

    def build(self, score: CompositeScore, analyses: Sequence[ResponseAnalysis]) -> ScanInsights:
        cfg = self.config
        highlights = []
        issues = []

        if score.visibility >= cfg.strong_visibility:
            highlights.append("Strong AI visibility")
        if score.trust >= cfg.high_trust:
            highlights.append("High AI trust signals")
        if score.recommendation >= cfg.good_recommendation:
            highlights.append("Good recommendation rate")

        if score.visibility < cfg.low_visibility:
            issues.append("Very low AI visibility")
        if score.trust < cfg.low_trust:
            issues.append("Trust issues detected")
        if any(a.mention_type == MentionType.NEGATIVE for a in analyses):
            issues.append("Negative mentions found")

        type_counts = Counter(a.mention_type.value for a in analyses)

        insights = ScanInsights(
            highlights=highlights,
            critical_issues=issues,
            mention_types={t.value: type_counts.get(t.value, 0) for t in MentionType},
            platforms=self.platform_breakdown(analyses),
        )

        if issues:
            logger.info(f"Scan {score.scan_id or '-'} critical issues: {', '.join(issues)}")
        return insights

    @staticmethod
    def platform_breakdown(analyses: Sequence[ResponseAnalysis]) -> List[PlatformBreakdown]:
        """Per-platform counts, sorted by platform name for stable output."""
        stats: Dict[str, PlatformBreakdown] = {}
        for analysis in analyses:
            key = analysis.platform or "unknown"
            entry = stats.setdefault(key, PlatformBreakdown(key, 0, 0, 0))
            entry.responses += 1
            if analysis.signals.mentioned:
                entry.mentions += 1
            if analysis.is_recommended:
                entry.recommended += 1
        return [stats[k] for k in sorted(stats)]
