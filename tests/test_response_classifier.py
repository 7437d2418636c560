"""
Tests for the Response Classifier and the Lexicon Store.

Tests the rule-based classification of one response:
- Sentiment: score formula and category thresholds
- Hedging & confidence: distinct-hit counting, clamping, exact decimals
- Recommendation: strength tiers and the mention requirement
- Mention type: NEGATIVE > PRIMARY > FEATURED > COMPARISON > BRIEF
- Reference scenarios for absent, primary and hedged responses

Usage:
    pytest tests/test_response_classifier.py -v
"""

import logging

import pytest
from aivisibility.analysis.analysis_models import (
    BusinessIdentity,
    MentionType,
    RecommendationStrength,
    Sentiment,
    SignalSet,
)
from aivisibility.analysis.response_classifier import ResponseClassifier
from aivisibility.analysis.signal_extractor import SignalExtractor
from aivisibility.lexicons import HEDGING_LEXICON, POSITIVE_LEXICON, find_hits
from aivisibility.scoring.scoring_config import ClassifierConfig, LexiconConfig


ACME = BusinessIdentity("Acme", ("Globex",))


def analyze(text, business=ACME, classifier=None, platform="chatgpt"):
    """Helper: extract + classify one response."""
    signals = SignalExtractor().extract(text, business)
    return (classifier or ResponseClassifier()).classify(signals, text, platform)


# ============================================================================
# LEXICON TESTS
# ============================================================================

class TestLexicons:
    """Tests for lexicon hit detection."""

    def test_hits_are_distinct(self):
        assert find_hits("great, great, great", POSITIVE_LEXICON) == ["great"]

    def test_hits_in_lexicon_order(self):
        assert find_hits("reliable and excellent", POSITIVE_LEXICON) == ["excellent", "reliable"]

    def test_substring_matching(self):
        # "maybe" contains "may"
        assert find_hits("maybe", HEDGING_LEXICON) == ["may", "maybe"]

    def test_blank_entries_skipped(self):
        assert find_hits("anything", ("", "thing")) == ["thing"]


# ============================================================================
# REFERENCE SCENARIOS
# ============================================================================

class TestReferenceScenarios:
    """Absent, primary and hedged reference responses."""

    def test_absent_business_is_not_recommended(self):
        analysis = analyze("We love this company, highly recommended and trusted!")
        assert analysis.mentioned is False
        assert analysis.mention_type == MentionType.ABSENT
        assert analysis.positive_indicators == ["recommend", "trusted", "highly recommended"]
        assert analysis.sentiment == Sentiment.POSITIVE
        assert analysis.sentiment_score == 1.0
        assert analysis.recommendation_strength == RecommendationStrength.MODERATE
        assert analysis.is_recommended is False

    def test_three_mentions_is_primary(self):
        analysis = analyze(
            "Acme is a great plumber. Customers call Acme for repairs, and Acme answers fast."
        )
        assert analysis.mentioned is True
        assert analysis.signals.mention_count == 3
        assert analysis.negative_indicators == []
        assert analysis.mention_type == MentionType.PRIMARY

    def test_two_hedges_one_positive(self):
        analysis = analyze("Acme might be a good fit, and it could be reliable.")
        assert analysis.hedging_phrases == {"might", "could"}
        assert analysis.positive_indicators == ["reliable"]
        assert analysis.has_hedging is True
        assert analysis.confidence_score == 0.4


# ============================================================================
# SENTIMENT TESTS
# ============================================================================

class TestSentiment:
    """Tests for sentiment score and category."""

    def setup_method(self):
        self.classifier = ResponseClassifier()

    def test_score_formula(self):
        assert ResponseClassifier.sentiment_score(0, 0) == 0.0
        assert ResponseClassifier.sentiment_score(3, 1) == 0.5
        assert ResponseClassifier.sentiment_score(0, 2) == -1.0

    def test_two_negatives_is_negative(self):
        analysis = analyze("Acme has complaints and issues.")
        assert analysis.sentiment == Sentiment.NEGATIVE
        assert analysis.sentiment_score == -1.0

    def test_single_negative_is_cautious(self):
        assert analyze("Acme had a few problems.").sentiment == Sentiment.CAUTIOUS

    def test_no_hits_is_neutral(self):
        analysis = analyze("Acme is a plumber.")
        assert analysis.sentiment == Sentiment.NEUTRAL
        assert analysis.sentiment_score == 0.0

    def test_weak_positive(self):
        # 2 positive, 1 negative -> 0.333 > 0.3
        assert self.classifier.sentiment_category(1 / 3, 1) == Sentiment.POSITIVE
        assert self.classifier.sentiment_category(0.2, 1) == Sentiment.POSITIVE

    def test_very_categories_never_emitted(self):
        for pos in range(0, 5):
            for neg in range(0, 5):
                score = ResponseClassifier.sentiment_score(pos, neg)
                category = self.classifier.sentiment_category(score, neg)
                assert category not in (Sentiment.VERY_POSITIVE, Sentiment.VERY_NEGATIVE)

    def test_score_always_bounded(self):
        for pos in range(0, 10):
            for neg in range(0, 10):
                assert -1.0 <= ResponseClassifier.sentiment_score(pos, neg) <= 1.0


# ============================================================================
# CONFIDENCE TESTS
# ============================================================================

class TestConfidence:
    """Tests for hedging detection and confidence."""

    def setup_method(self):
        self.classifier = ResponseClassifier()

    def test_single_hedge_is_not_hedging(self):
        analysis = analyze("Acme might help.")
        assert analysis.has_hedging is False
        assert analysis.confidence_score == 0.4

    def test_confidence_base(self):
        assert self.classifier.confidence_score(0, 0) == 0.5

    def test_confidence_clamped_high(self):
        assert self.classifier.confidence_score(9, 0) == 1.0

    def test_confidence_clamped_low(self):
        assert self.classifier.confidence_score(0, 8) == 0.0

    def test_confidence_exact_decimal(self):
        assert self.classifier.confidence_score(2, 0) == 0.7
        assert self.classifier.confidence_score(1, 3) == 0.3


# ============================================================================
# RECOMMENDATION TESTS
# ============================================================================

class TestRecommendation:
    """Tests for recommendation strength and is_recommended."""

    def test_strong_recommendation(self):
        analysis = analyze("I recommend Acme, definitely worth it.")
        assert analysis.recommendation_strength == RecommendationStrength.STRONG
        assert analysis.is_recommended is True

    def test_moderate_recommendation(self):
        analysis = analyze("Consider Acme.")
        assert analysis.recommendation_strength == RecommendationStrength.MODERATE
        assert analysis.is_recommended is True

    def test_no_recommendation(self):
        analysis = analyze("Acme is a plumber.")
        assert analysis.recommendation_strength == RecommendationStrength.NONE
        assert analysis.is_recommended is False

    def test_negative_sentiment_blocks_recommendation(self):
        analysis = analyze("Consider Acme, despite complaints and problems.")
        assert analysis.sentiment == Sentiment.NEGATIVE
        assert analysis.is_recommended is False

    def test_mention_requirement_can_be_disabled(self):
        classifier = ResponseClassifier(
            config=ClassifierConfig(require_mention_for_recommendation=False)
        )
        analysis = analyze("Consider this one.", classifier=classifier)
        assert analysis.mentioned is False
        assert analysis.is_recommended is True


# ============================================================================
# MENTION TYPE TESTS
# ============================================================================

class TestMentionType:
    """Tests for mention type precedence."""

    def setup_method(self):
        self.classifier = ResponseClassifier()

    def make_signals(self, count, competitors=()):
        return SignalSet(
            mentioned=count > 0,
            mention_count=count,
            mention_context="Acme" if count else "",
            competitors_mentioned=set(competitors),
        )

    def test_absent(self):
        assert self.classifier.mention_type(self.make_signals(0), 5) == MentionType.ABSENT

    def test_negative_outranks_volume(self):
        signals = self.make_signals(4, ["Globex"])
        assert self.classifier.mention_type(signals, 2) == MentionType.NEGATIVE

    def test_primary_outranks_comparison(self):
        signals = self.make_signals(3, ["Globex"])
        assert self.classifier.mention_type(signals, 1) == MentionType.PRIMARY

    def test_featured(self):
        assert self.classifier.mention_type(self.make_signals(2), 0) == MentionType.FEATURED

    def test_comparison(self):
        signals = self.make_signals(1, ["Globex"])
        assert self.classifier.mention_type(signals, 0) == MentionType.COMPARISON

    def test_brief(self):
        assert self.classifier.mention_type(self.make_signals(1), 1) == MentionType.BRIEF

    def test_comparison_end_to_end(self):
        assert analyze("Acme or Globex, both nearby.").mention_type == MentionType.COMPARISON


# ============================================================================
# OUTPUT SHAPE TESTS
# ============================================================================

class TestAnalysisOutput:
    """Tests for key phrases, missing responses and custom lexicons."""

    def test_key_phrases_limited(self):
        analysis = analyze(
            "Acme is excellent, outstanding, great and reliable but has complaints and problems."
        )
        assert analysis.key_phrases == ["excellent", "outstanding", "great", "reliable", "complaints"]
        assert analysis.mention_type == MentionType.NEGATIVE

    def test_none_response_kept_as_none(self):
        analysis = analyze(None)
        assert analysis.response_text is None
        assert analysis.mention_type == MentionType.ABSENT
        assert analysis.sentiment == Sentiment.NEUTRAL
        assert analysis.confidence_score == 0.5

    def test_platform_passed_through(self):
        assert analyze("Acme", platform="perplexity").platform == "perplexity"

    def test_custom_lexicon(self):
        lexicons = LexiconConfig(positive=("splendid",))
        classifier = ResponseClassifier(lexicons=lexicons)
        analysis = analyze("Acme is splendid and excellent.", classifier=classifier)
        assert analysis.positive_indicators == ["splendid"]

    def test_deterministic(self):
        text = "I recommend Acme; it might be the best, perhaps."
        assert analyze(text) == analyze(text)

    def test_to_record(self):
        record = analyze("Acme might be good, it could be.").to_record()
        assert record["mentioned"] is True
        assert record["mention_type"] == "BRIEF"
        assert record["hedging_phrases"] == ["could", "might"]
        assert record["platform"] == "chatgpt"


@pytest.mark.parametrize("text", [
    "Acme", "Acme might", "complaints about Acme", "I recommend Acme and Globex",
])
def test_scores_within_bounds(text):
    analysis = analyze(text)
    assert -1.0 <= analysis.sentiment_score <= 1.0
    assert 0.0 <= analysis.confidence_score <= 1.0


def test_platform_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="aivisibility.analysis.response_classifier"):
        analyze("Acme is great.", platform="gemini")
    records = [r for r in caplog.records if r.name == "aivisibility.analysis.response_classifier"]
    assert records[-1].platform == "gemini"
