"""
Competitor Benchmarking
=======================

Scores competitors with the SAME extractor, classifier and aggregator as
the business itself, then compares the two score sets and computes
share of voice on category queries.

Competitor scores used to come from a separate, reduced analyzer; running
one engine for both removes the drift between "your score" and
"competitor score". Historical benchmark numbers may shift accordingly.

Usage:
    benchmarker = CompetitorBenchmarker()
    theirs = benchmarker.score_competitor(business, "Globex", responses)
    benchmark = benchmarker.compare(your_score, "Globex", theirs)
    alert = benchmarker.overtake_alert(benchmark, business_id="biz-1")
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from ..alerts.alert_models import Alert, AlertSeverity, AlertType
from ..analysis.analysis_models import BusinessIdentity, PlatformResponse
from ..analysis.response_classifier import ResponseClassifier
from ..analysis.signal_extractor import SignalExtractor, build_name_pattern
from ..scoring.composite_scorer import CompositeScore, CompositeScorer, ScanBatch
from ..scoring.scoring_config import DEFAULT_CONFIG, ScoringConfig

logger = logging.getLogger(__name__)

# Dimensions compared between a business and a competitor, with display labels
BENCHMARK_AREAS = (
    ("visibility", "AI Visibility", "{competitor} has higher AI visibility"),
    ("trust", "AI Trust", "{competitor} has stronger trust signals"),
    ("recommendation", "Recommendations", "{competitor} gets recommended more often"),
)


def _one_decimal(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass
class CompetitorBenchmark:
    """Side-by-side comparison of a business and one competitor."""
    competitor: str
    your_scores: Dict[str, int]
    competitor_scores: Dict[str, int]
    differences: Dict[str, int]             # yours - theirs
    strength_areas: List[str] = field(default_factory=list)
    weakness_areas: List[str] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryMention:
    """
    Whether the business and one competitor appeared in the answer to a
    category-level query ("Best plumbers in Austin").
    """
    query: str
    competitor: str
    your_mentioned: bool
    competitor_mentioned: bool


@dataclass
class CompetitorShare:
    name: str
    mentions: int
    share_of_voice: float


@dataclass
class ShareOfVoice:
    """Share of category-query mentions attributable to the business."""
    total_mentions: int
    category_total_mentions: int
    share_of_voice: float                   # percent, one decimal
    competitor_shares: List[CompetitorShare] = field(default_factory=list)


class CompetitorBenchmarker:
    """Competitor scoring, comparison, overtake alerts and share of voice."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.extractor = SignalExtractor(self.config.extractor)
        self.classifier = ResponseClassifier(self.config.lexicons, self.config.classifier)
        self.scorer = CompositeScorer(self.config.weights)

    # =========================================================================
    # COMPETITOR SCORING
    # =========================================================================

    def score_competitor(
        self,
        business: BusinessIdentity,
        competitor_name: str,
        responses: Iterable[PlatformResponse],
    ) -> CompositeScore:
        """
        Score a competitor from the answers to queries about it.

        The competitor is the subject; the business and the other tracked
        competitors are its rivals for COMPARISON detection.
        """
        identity = business.as_competitor(competitor_name)
        batch = ScanBatch(scan_id=f"competitor:{competitor_name}")
        for response in responses:
            signals = self.extractor.extract(response.response_text, identity)
            batch.add(self.classifier.classify(signals, response.response_text, response.platform))

        score = self.scorer.aggregate(batch)
        logger.info(
            f"Competitor {competitor_name}: {score.response_count} responses, "
            f"visibility={score.visibility} trust={score.trust} "
            f"recommendation={score.recommendation}"
        )
        return score

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def compare(
        self,
        your_score: CompositeScore,
        competitor_name: str,
        competitor_score: CompositeScore,
    ) -> CompetitorBenchmark:
        """
        Differences are yours minus theirs. A difference above
        strength_margin is a strength, below -strength_margin a weakness.
        """
        margin = self.config.benchmark.strength_margin
        differences = {
            "visibility": your_score.visibility - competitor_score.visibility,
            "trust": your_score.trust - competitor_score.trust,
            "recommendation": your_score.recommendation - competitor_score.recommendation,
            "sentiment": your_score.sentiment - competitor_score.sentiment,
        }

        benchmark = CompetitorBenchmark(
            competitor=competitor_name,
            your_scores={
                "visibility": your_score.visibility,
                "trust": your_score.trust,
                "recommendation": your_score.recommendation,
            },
            competitor_scores={
                "visibility": competitor_score.visibility,
                "trust": competitor_score.trust,
                "recommendation": competitor_score.recommendation,
            },
            differences=differences,
        )

        for key, label, insight in BENCHMARK_AREAS:
            diff = differences[key]
            if diff > margin:
                benchmark.strength_areas.append(label)
            elif diff < -margin:
                benchmark.weakness_areas.append(label)
                benchmark.insights.append(insight.format(competitor=competitor_name))

        return benchmark

    def overtake_alert(
        self,
        benchmark: CompetitorBenchmark,
        business_id: Optional[str] = None,
    ) -> Optional[Alert]:
        """COMPETITOR_OVERTAKE when the competitor leads on visibility or trust."""
        margin = self.config.benchmark.overtake_margin
        visibility_diff = benchmark.differences["visibility"]
        trust_diff = benchmark.differences["trust"]

        if visibility_diff >= -margin and trust_diff >= -margin:
            return None

        competitor = benchmark.competitor
        logger.info(
            f"Competitor overtake: {competitor} (visibility_diff={visibility_diff}, "
            f"trust_diff={trust_diff})",
            extra={"business_id": business_id, "alert_type": AlertType.COMPETITOR_OVERTAKE.value},
        )
        return Alert(
            alert_type=AlertType.COMPETITOR_OVERTAKE,
            severity=AlertSeverity.WARNING,
            business_id=business_id,
            title=f"{competitor} has stronger AI presence",
            message=f"{competitor} now ranks higher than you in AI visibility or trust.",
            data={
                "competitor": competitor,
                "differences": {
                    "visibilityDiff": visibility_diff,
                    "trustDiff": trust_diff,
                },
            },
        )

    # =========================================================================
    # SHARE OF VOICE
    # =========================================================================

    @staticmethod
    def category_mention(
        query: str,
        response_text: str,
        business: BusinessIdentity,
        competitor_name: str,
    ) -> CategoryMention:
        """Record who appeared in one category-query answer."""
        text = response_text or ""
        your_pattern = build_name_pattern(business.name)
        their_pattern = build_name_pattern(competitor_name)
        return CategoryMention(
            query=query,
            competitor=competitor_name,
            your_mentioned=bool(your_pattern and your_pattern.search(text)),
            competitor_mentioned=bool(their_pattern and their_pattern.search(text)),
        )

    @staticmethod
    def share_of_voice(
        mentions: Sequence[CategoryMention],
        competitors: Optional[Sequence[str]] = None,
    ) -> ShareOfVoice:
        """
        Share of voice across category-query records.

        yours = records where the business appeared; each competitor
        counts the records of its own queries where it appeared. Shares
        are percentages of yours + all competitor mentions, rounded to one
        decimal. Nothing mentioned at all gives 0 everywhere.
        """
        names = list(competitors) if competitors is not None else []
        for record in mentions:
            if record.competitor not in names:
                names.append(record.competitor)

        yours = sum(1 for m in mentions if m.your_mentioned)
        per_competitor = {
            name: sum(1 for m in mentions if m.competitor == name and m.competitor_mentioned)
            for name in names
        }
        total = yours + sum(per_competitor.values())

        def share(count: int) -> float:
            if total == 0:
                return 0.0
            return _one_decimal(Decimal(count) * 100 / Decimal(total))

        return ShareOfVoice(
            total_mentions=yours,
            category_total_mentions=total,
            share_of_voice=share(yours),
            competitor_shares=[
                CompetitorShare(name=name, mentions=count, share_of_voice=share(count))
                for name, count in per_competitor.items()
            ],
        )
