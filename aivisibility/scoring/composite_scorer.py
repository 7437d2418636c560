"""
Composite Score Aggregator - deterministic scan scoring.

Turns the batch of ResponseAnalysis objects produced by one scan into
six 0-100 sub-scores plus a weighted overall score.

PHILOSOPHY:
- Same batch → byte-identical CompositeScore
- Permuting the batch never changes the result (sums and counts only)
- Every weighted sum uses the already-rounded sub-scores
- Rounding is half away from zero, computed in Decimal

USAGE:
    batch = ScanBatch(scan_id="scan-1", business_id="biz-1")
    for analysis in analyses:
        batch.add(analysis)          # raises MalformedResponseAnalysis
    score = CompositeScorer().aggregate(batch)   # seals the batch
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..analysis.analysis_models import MentionType, ResponseAnalysis, SignalSet
from ..errors import MalformedResponseAnalysis, ScanBatchSealedError
from .scoring_config import DEFAULT_CONFIG, CompositeWeights

logger = logging.getLogger(__name__)

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def round_half_away(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero (2.5 → 3, -2.5 → -3)."""
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


def to_decimal(value: float) -> Decimal:
    """Decimal of a float's shortest repr, so 0.35 stays exactly 0.35."""
    return Decimal(str(value))


def weighted_sum(weights: Sequence[float], values: Sequence[Union[int, Decimal]]) -> Decimal:
    return sum(
        (to_decimal(w) * Decimal(v) for w, v in zip(weights, values)),
        Decimal("0"),
    )


# =============================================================================
# SCAN BATCH
# =============================================================================

def validate_analysis(analysis: Any, index: Optional[int] = None) -> ResponseAnalysis:
    """
    Reject analyses that would silently corrupt a scan's score.

    Raises:
        MalformedResponseAnalysis: on any structural or range violation.
    """
    if not isinstance(analysis, ResponseAnalysis):
        raise MalformedResponseAnalysis(
            f"expected ResponseAnalysis, got {type(analysis).__name__}", index=index
        )

    platform = analysis.platform

    def reject(reason: str):
        raise MalformedResponseAnalysis(reason, platform=platform, index=index)

    if analysis.response_text is None:
        reject("response text is missing")

    signals = analysis.signals
    if not isinstance(signals, SignalSet):
        reject("signals are missing")
    if signals.mention_count < 0:
        reject(f"negative mention_count {signals.mention_count}")
    if signals.mentioned != (signals.mention_count > 0):
        reject(
            f"mentioned={signals.mentioned} inconsistent with "
            f"mention_count={signals.mention_count}"
        )
    if signals.mentioned != bool(signals.mention_context):
        reject("mention_context must be present exactly when mentioned")

    if not isinstance(analysis.mention_type, MentionType):
        reject(f"invalid mention_type {analysis.mention_type!r}")
    if (analysis.mention_type == MentionType.ABSENT) == signals.mentioned:
        reject(
            f"mention_type={analysis.mention_type.value} inconsistent with "
            f"mentioned={signals.mentioned}"
        )

    sentiment_score = analysis.sentiment_score
    if not isinstance(sentiment_score, (int, float)) or not math.isfinite(sentiment_score) \
            or not -1.0 <= sentiment_score <= 1.0:
        reject(f"sentiment_score {sentiment_score!r} outside [-1, 1]")

    confidence = analysis.confidence_score
    if not isinstance(confidence, (int, float)) or not math.isfinite(confidence) \
            or not 0.0 <= confidence <= 1.0:
        reject(f"confidence_score {confidence!r} outside [0, 1]")

    return analysis


class ScanBatch:
    """
    The closed set of analyses for one scan of one business.

    Items are validated on add. Once scoring begins the batch is sealed:
    further adds raise ScanBatchSealedError, so a score always reflects a
    one-shot snapshot rather than a re-aggregated superset.

    Not thread-safe: do not share one instance across concurrent scans.
    """

    def __init__(
        self,
        analyses: Optional[Iterable[ResponseAnalysis]] = None,
        scan_id: Optional[str] = None,
        business_id: Optional[str] = None,
    ):
        self.scan_id = scan_id
        self.business_id = business_id
        self._items: List[ResponseAnalysis] = []
        self._sealed = False
        if analyses is not None:
            self.extend(analyses)

    def add(self, analysis: ResponseAnalysis) -> None:
        if self._sealed:
            raise ScanBatchSealedError(self.scan_id)
        self._items.append(validate_analysis(analysis, index=len(self._items)))

    def extend(self, analyses: Iterable[ResponseAnalysis]) -> None:
        for analysis in analyses:
            self.add(analysis)

    def seal(self) -> Tuple[ResponseAnalysis, ...]:
        self._sealed = True
        return tuple(self._items)

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def items(self) -> Tuple[ResponseAnalysis, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ResponseAnalysis]:
        return iter(tuple(self._items))


# =============================================================================
# COMPOSITE SCORE
# =============================================================================

@dataclass(frozen=True)
class CompositeScore:
    """
    Scores of one completed scan. Never mutated: drift linkage produces a
    new instance through with_previous().

    Identity and timestamp are assigned by the caller so that aggregating
    the same batch twice yields equal objects.
    """
    visibility: int
    sentiment: int
    confidence: int
    recommendation: int
    citation: int
    trust: int
    overall: int
    response_count: int = 0
    business_id: Optional[str] = None
    scan_id: Optional[str] = None
    score_id: Optional[str] = None
    created_at: Optional[datetime] = None
    previous_score_id: Optional[str] = None
    overall_change: Optional[int] = None

    @property
    def category_authority(self) -> int:
        """Mean of trust and visibility."""
        return round_half_away((Decimal(self.trust) + Decimal(self.visibility)) / 2)

    def with_previous(self, previous: Optional["CompositeScore"]) -> "CompositeScore":
        """Copy linked to the prior score of the same business (if any)."""
        if previous is None:
            return replace(self, previous_score_id=None, overall_change=None)
        return replace(
            self,
            previous_score_id=previous.score_id,
            overall_change=self.overall - previous.overall,
        )

    def with_identity(self, score_id: str, created_at: datetime) -> "CompositeScore":
        return replace(self, score_id=score_id, created_at=created_at)

    def sub_scores(self) -> Dict[str, int]:
        return {
            "visibility": self.visibility,
            "sentiment": self.sentiment,
            "confidence": self.confidence,
            "recommendation": self.recommendation,
            "citation": self.citation,
            "trust": self.trust,
            "overall": self.overall,
        }

    def to_record(self) -> Dict[str, Any]:
        """Row for the storage collaborator (scores table column names)."""
        return {
            "id": self.score_id,
            "business_id": self.business_id,
            "scan_id": self.scan_id,
            "overall_score": self.overall,
            "ai_trust_score": self.trust,
            "ai_visibility_score": self.visibility,
            "ai_recommendation_score": self.recommendation,
            "ai_citation_score": self.citation,
            "sentiment_score": self.sentiment,
            "confidence_score": self.confidence,
            "category_authority_score": self.category_authority,
            "previous_score_id": self.previous_score_id,
            "overall_change": self.overall_change,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


# =============================================================================
# AGGREGATOR
# =============================================================================

class CompositeScorer:
    """
    Aggregates a ScanBatch into a CompositeScore.

    VISIBILITY     = % responses mentioning the business
    SENTIMENT      = mean sentiment_score mapped from [-1, 1] to [0, 100]
    CONFIDENCE     = mean confidence_score × 100
    RECOMMENDATION = % responses recommending the business
    CITATION       = % responses citing a business URL
    TRUST          = weighted sentiment / no-hedging / recommendation / non-negative
    OVERALL        = weighted trust / visibility / recommendation / citation /
                     sentiment / confidence
    """

    def __init__(self, weights: Optional[CompositeWeights] = None):
        self.weights = weights or DEFAULT_CONFIG.weights

    def aggregate(
        self,
        batch: Union[ScanBatch, Iterable[ResponseAnalysis]],
    ) -> CompositeScore:
        """
        Score a batch. A plain iterable is validated into a new ScanBatch.
        The batch is sealed before any arithmetic.

        An empty batch is a valid outcome (every platform call failed) and
        returns the neutral default rather than raising.
        """
        if not isinstance(batch, ScanBatch):
            batch = ScanBatch(batch)
        items = batch.seal()
        n = len(items)

        if n == 0:
            score = self._compose(
                visibility=0,
                sentiment=self.weights.empty_sentiment,
                confidence=self.weights.empty_confidence,
                recommendation=0,
                citation=0,
                hedging_rate=Decimal("0"),
                non_negative_rate=Decimal("0"),
                batch=batch,
                n=0,
            )
            logger.info(
                f"Empty scan batch (scan_id={batch.scan_id}): neutral default overall={score.overall}"
            )
            return score

        count = Decimal(n)
        mentioned = sum(1 for a in items if a.signals.mentioned)
        recommended = sum(1 for a in items if a.is_recommended)
        cited = sum(1 for a in items if a.signals.has_citation)
        hedged = sum(1 for a in items if a.has_hedging)
        non_negative = sum(1 for a in items if a.mention_type != MentionType.NEGATIVE)

        avg_sentiment = sum((to_decimal(a.sentiment_score) for a in items), Decimal("0")) / count
        avg_confidence = sum((to_decimal(a.confidence_score) for a in items), Decimal("0")) / count

        score = self._compose(
            visibility=round_half_away(_HUNDRED * mentioned / count),
            sentiment=round_half_away(_HUNDRED * (avg_sentiment + 1) / 2),
            confidence=round_half_away(_HUNDRED * avg_confidence),
            recommendation=round_half_away(_HUNDRED * recommended / count),
            citation=round_half_away(_HUNDRED * cited / count),
            hedging_rate=Decimal(hedged) / count,
            non_negative_rate=Decimal(non_negative) / count,
            batch=batch,
            n=n,
        )

        logger.info(
            f"Scored scan {batch.scan_id or '-'}: {n} responses, overall={score.overall} "
            f"(visibility={score.visibility}, trust={score.trust}, "
            f"recommendation={score.recommendation}, citation={score.citation})"
        )
        return score

    def _compose(
        self,
        visibility: int,
        sentiment: int,
        confidence: int,
        recommendation: int,
        citation: int,
        hedging_rate: Decimal,
        non_negative_rate: Decimal,
        batch: ScanBatch,
        n: int,
    ) -> CompositeScore:
        w = self.weights

        trust = round_half_away(weighted_sum(
            w.trust_weights,
            (
                sentiment,
                _HUNDRED - _HUNDRED * hedging_rate,
                recommendation,
                _HUNDRED * non_negative_rate,
            ),
        ))

        overall = round_half_away(weighted_sum(
            w.overall_weights,
            (trust, visibility, recommendation, citation, sentiment, confidence),
        ))

        return CompositeScore(
            visibility=visibility,
            sentiment=sentiment,
            confidence=confidence,
            recommendation=recommendation,
            citation=citation,
            trust=trust,
            overall=overall,
            response_count=n,
            business_id=batch.business_id,
            scan_id=batch.scan_id,
        )
