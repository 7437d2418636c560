"""
Tests for the Composite Score Aggregator.

Tests the deterministic aggregation of a scan batch:
- Sub-scores: visibility, sentiment, confidence, recommendation, citation
- Trust and overall weighted sums over rounded sub-scores
- Rounding: half away from zero, exact Decimal arithmetic
- Invariants: determinism, order-independence, bounds
- Batch lifecycle: validation on add, sealing, empty-batch default

Usage:
    pytest tests/test_composite_scorer.py -v
"""

import itertools
from decimal import Decimal

import pytest
from aivisibility.analysis.analysis_models import (
    MentionType,
    RecommendationStrength,
    ResponseAnalysis,
    Sentiment,
    SignalSet,
)
from aivisibility.errors import MalformedResponseAnalysis, ScanBatchSealedError
from aivisibility.scoring.composite_scorer import (
    CompositeScore,
    CompositeScorer,
    ScanBatch,
    round_half_away,
)


# ============================================================================
# TEST DATA
# ============================================================================

def make_analysis(
    mentioned: bool = True,
    count: int = None,
    sentiment_score: float = 0.0,
    confidence: float = 0.5,
    hedging: bool = False,
    recommended: bool = False,
    mention_type: MentionType = None,
    cited_url: str = None,
    platform: str = "chatgpt",
    text: str = "response",
) -> ResponseAnalysis:
    """Helper to create a consistent ResponseAnalysis."""
    if count is None:
        count = 1 if mentioned else 0
    if mention_type is None:
        mention_type = MentionType.BRIEF if mentioned else MentionType.ABSENT
    signals = SignalSet(
        mentioned=mentioned,
        mention_count=count,
        mention_context="Acme" if mentioned else "",
        cited_url=cited_url,
        cited_urls=[cited_url] if cited_url else [],
    )
    return ResponseAnalysis(
        signals=signals,
        sentiment=Sentiment.NEUTRAL,
        sentiment_score=sentiment_score,
        confidence_score=confidence,
        has_hedging=hedging,
        hedging_phrases={"might", "could"} if hedging else set(),
        is_recommended=recommended,
        recommendation_strength=(
            RecommendationStrength.MODERATE if recommended else RecommendationStrength.NONE
        ),
        mention_type=mention_type,
        platform=platform,
        response_text=text,
    )


HALF_MENTIONED = [
    make_analysis(mentioned=True),
    make_analysis(mentioned=False),
    make_analysis(mentioned=True),
    make_analysis(mentioned=False),
]


# ============================================================================
# ROUNDING TESTS
# ============================================================================

class TestRounding:
    """Tests for round_half_away()."""

    def test_halves_away_from_zero(self):
        assert round_half_away(Decimal("2.5")) == 3
        assert round_half_away(Decimal("57.5")) == 58
        assert round_half_away(Decimal("-2.5")) == -3

    def test_not_bankers_rounding(self):
        # round(24.5) == 24 in Python
        assert round_half_away(Decimal("24.5")) == 25

    def test_below_half(self):
        assert round_half_away(Decimal("37.49")) == 37


# ============================================================================
# AGGREGATION TESTS
# ============================================================================

class TestAggregation:
    """Tests for CompositeScorer.aggregate()."""

    def setup_method(self):
        self.scorer = CompositeScorer()

    def test_half_mentioned_reference_values(self):
        score = self.scorer.aggregate(ScanBatch(HALF_MENTIONED))
        assert score.visibility == 50
        assert score.sentiment == 50
        assert score.confidence == 50
        assert score.recommendation == 0
        assert score.citation == 0
        # 0.35*50 + 0.30*100 + 0.25*0 + 0.10*100 = 57.5
        assert score.trust == 58
        # 0.25*58 + 0.20*50 + 0.20*0 + 0.10*0 + 0.15*50 + 0.10*50 = 37.0
        assert score.overall == 37
        assert score.response_count == 4

    def test_perfect_scan(self):
        analyses = [
            make_analysis(sentiment_score=1.0, confidence=1.0, recommended=True,
                          cited_url="https://acme.com")
            for _ in range(3)
        ]
        score = self.scorer.aggregate(analyses)
        assert score.sub_scores() == {
            "visibility": 100, "sentiment": 100, "confidence": 100,
            "recommendation": 100, "citation": 100, "trust": 100, "overall": 100,
        }

    def test_worst_scan(self):
        analyses = [
            make_analysis(sentiment_score=-1.0, confidence=0.0, hedging=True,
                          count=2, mention_type=MentionType.NEGATIVE)
            for _ in range(2)
        ]
        score = self.scorer.aggregate(analyses)
        assert score.trust == 0
        assert score.sentiment == 0
        # only visibility contributes: 0.20 * 100
        assert score.overall == 20

    def test_hedging_and_negative_rates(self):
        analyses = [
            make_analysis(hedging=True),
            make_analysis(count=2, mention_type=MentionType.NEGATIVE),
            make_analysis(),
            make_analysis(),
        ]
        score = self.scorer.aggregate(analyses)
        # 0.35*50 + 0.30*75 + 0.25*0 + 0.10*75 = 47.5
        assert score.trust == 48

    def test_citation_uses_business_url(self):
        analyses = [make_analysis(cited_url="https://acme.com"), make_analysis()]
        assert self.scorer.aggregate(analyses).citation == 50

    def test_fractional_sentiment(self):
        analyses = [
            make_analysis(sentiment_score=1 / 3),
            make_analysis(sentiment_score=0.0),
        ]
        # mean 1/6 -> 100 * (7/6) / 2 = 58.33
        assert self.scorer.aggregate(analyses).sentiment == 58

    def test_category_authority(self):
        score = self.scorer.aggregate(ScanBatch(HALF_MENTIONED))
        # (58 + 50) / 2
        assert score.category_authority == 54

    def test_record_columns(self):
        record = self.scorer.aggregate(HALF_MENTIONED).to_record()
        assert record["overall_score"] == 37
        assert record["ai_trust_score"] == 58
        assert record["ai_visibility_score"] == 50
        assert record["created_at"] is None


# ============================================================================
# INVARIANT TESTS
# ============================================================================

class TestInvariants:
    """Determinism, order-independence and bounds."""

    def setup_method(self):
        self.scorer = CompositeScorer()
        self.analyses = [
            make_analysis(sentiment_score=1 / 3, confidence=0.7, recommended=True),
            make_analysis(mentioned=False, sentiment_score=-0.5, confidence=0.3, hedging=True),
            make_analysis(sentiment_score=0.2, confidence=0.9, cited_url="https://acme.com"),
            make_analysis(count=3, mention_type=MentionType.PRIMARY, confidence=0.4),
        ]

    def test_deterministic(self):
        first = self.scorer.aggregate(ScanBatch(self.analyses, scan_id="s1"))
        second = self.scorer.aggregate(ScanBatch(self.analyses, scan_id="s1"))
        assert first == second

    def test_order_independent(self):
        expected = self.scorer.aggregate(self.analyses)
        for permutation in itertools.permutations(self.analyses):
            assert self.scorer.aggregate(list(permutation)) == expected

    def test_scores_bounded(self):
        score = self.scorer.aggregate(self.analyses)
        for name, value in score.sub_scores().items():
            assert 0 <= value <= 100, name

    def test_empty_batch_neutral_default(self):
        score = self.scorer.aggregate(ScanBatch())
        assert score.visibility == 0
        assert score.sentiment == 50
        assert score.confidence == 50
        assert score.recommendation == 0
        assert score.citation == 0
        # 0.35*50 + 0.30*100 = 47.5
        assert score.trust == 48
        # 0.25*48 + 0.15*50 + 0.10*50 = 24.5
        assert score.overall == 25
        assert score.response_count == 0


# ============================================================================
# BATCH TESTS
# ============================================================================

class TestScanBatch:
    """Tests for batch validation and sealing."""

    def test_sealed_after_aggregation(self):
        batch = ScanBatch([make_analysis()], scan_id="scan-1")
        CompositeScorer().aggregate(batch)
        assert batch.sealed is True
        with pytest.raises(ScanBatchSealedError):
            batch.add(make_analysis())
        assert len(batch) == 1

    def test_missing_response_rejected(self):
        analysis = make_analysis(text=None, platform="gemini")
        with pytest.raises(MalformedResponseAnalysis) as exc_info:
            ScanBatch().add(analysis)
        assert exc_info.value.platform == "gemini"
        assert exc_info.value.index == 0

    def test_count_mismatch_rejected(self):
        analysis = make_analysis()
        analysis.signals.mention_count = 0
        with pytest.raises(MalformedResponseAnalysis):
            ScanBatch([analysis])

    def test_absent_type_with_mention_rejected(self):
        with pytest.raises(MalformedResponseAnalysis):
            ScanBatch([make_analysis(mention_type=MentionType.ABSENT)])

    def test_missing_context_rejected(self):
        analysis = make_analysis()
        analysis.signals.mention_context = ""
        with pytest.raises(MalformedResponseAnalysis):
            ScanBatch([analysis])

    @pytest.mark.parametrize("field_name,value", [
        ("sentiment_score", 1.5),
        ("sentiment_score", float("nan")),
        ("confidence_score", -0.1),
        ("confidence_score", float("inf")),
    ])
    def test_out_of_range_rejected(self, field_name, value):
        analysis = make_analysis()
        setattr(analysis, field_name, value)
        with pytest.raises(MalformedResponseAnalysis):
            ScanBatch([analysis])

    def test_non_analysis_rejected(self):
        with pytest.raises(MalformedResponseAnalysis):
            ScanBatch(["not an analysis"])

    def test_rejection_keeps_earlier_items(self):
        batch = ScanBatch()
        batch.add(make_analysis())
        with pytest.raises(MalformedResponseAnalysis):
            batch.add(make_analysis(text=None))
        assert len(batch) == 1


# ============================================================================
# SCORE LINKAGE TESTS
# ============================================================================

class TestCompositeScore:
    """Tests for the immutable score value."""

    def make_score(self, overall, score_id=None):
        return CompositeScore(
            visibility=50, sentiment=50, confidence=50, recommendation=50,
            citation=50, trust=50, overall=overall, score_id=score_id,
        )

    def test_with_previous(self):
        current = self.make_score(70, "s2")
        linked = current.with_previous(self.make_score(62, "s1"))
        assert linked.previous_score_id == "s1"
        assert linked.overall_change == 8
        assert current.previous_score_id is None

    def test_with_previous_none(self):
        linked = self.make_score(70).with_previous(None)
        assert linked.previous_score_id is None
        assert linked.overall_change is None

    def test_frozen(self):
        score = self.make_score(70)
        with pytest.raises(AttributeError):
            score.overall = 10
