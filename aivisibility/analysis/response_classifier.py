"""
Response Classifier (Deterministic)
====================================

Turns a SignalSet plus the raw response into a ResponseAnalysis:
sentiment, hedging, confidence, recommendation and mention type.

Every output is a pure function of the inputs and the configured
lexicons, so re-classifying the same response always gives the same
analysis.

Usage:
    classifier = ResponseClassifier()
    analysis = classifier.classify(signals, response_text, platform="chatgpt")
"""

import logging
from decimal import Decimal
from typing import Optional

from .analysis_models import (
    MentionType,
    RecommendationStrength,
    ResponseAnalysis,
    Sentiment,
    SignalSet,
)
from ..lexicons import find_hits
from ..scoring.scoring_config import (
    DEFAULT_CONFIG,
    ClassifierConfig,
    LexiconConfig,
)

logger = logging.getLogger(__name__)


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


class ResponseClassifier:
    """
    Lexicon- and rule-based classifier.

    Lexical counts are DISTINCT entries found, not occurrences: "great,
    great, great" counts once.
    """

    def __init__(
        self,
        lexicons: Optional[LexiconConfig] = None,
        config: Optional[ClassifierConfig] = None,
    ):
        self.lexicons = lexicons or DEFAULT_CONFIG.lexicons
        self.config = config or DEFAULT_CONFIG.classifier

    def classify(
        self,
        signals: SignalSet,
        response: Optional[str],
        platform: Optional[str] = None,
    ) -> ResponseAnalysis:
        """
        Classify one response.

        A None response is classified as empty text but keeps
        response_text=None, so the scan batch can reject it.
        """
        cfg = self.config
        lowered = (response or "").lower()

        positive = find_hits(lowered, self.lexicons.positive)
        negative = find_hits(lowered, self.lexicons.negative)
        hedges = find_hits(lowered, self.lexicons.hedging)
        recommendations = find_hits(lowered, self.lexicons.recommendation)

        sentiment_score = self.sentiment_score(len(positive), len(negative))
        sentiment = self.sentiment_category(sentiment_score, len(negative))

        has_hedging = len(hedges) >= cfg.hedging_min_hits
        confidence = self.confidence_score(len(positive), len(hedges))

        is_recommended = len(recommendations) > 0 and sentiment != Sentiment.NEGATIVE
        if cfg.require_mention_for_recommendation and not signals.mentioned:
            is_recommended = False

        analysis = ResponseAnalysis(
            signals=signals,
            sentiment=sentiment,
            sentiment_score=sentiment_score,
            confidence_score=confidence,
            has_hedging=has_hedging,
            hedging_phrases=set(hedges),
            is_recommended=is_recommended,
            recommendation_strength=self.recommendation_strength(len(recommendations)),
            mention_type=self.mention_type(signals, len(negative)),
            positive_indicators=positive,
            negative_indicators=negative,
            key_phrases=(positive + negative)[:cfg.key_phrase_limit],
            platform=platform,
            response_text=response,
        )

        logger.debug(
            f"Classified response (platform={platform}): sentiment={sentiment.value} "
            f"score={sentiment_score:.2f} confidence={confidence:.2f} "
            f"hedging={has_hedging} recommended={is_recommended} "
            f"mention_type={analysis.mention_type.value}",
            extra={"platform": platform},
        )
        return analysis

    # =========================================================================
    # RULES
    # =========================================================================

    @staticmethod
    def sentiment_score(positive_count: int, negative_count: int) -> float:
        """(pos - neg) / max(1, pos + neg), always within [-1, 1]."""
        return (positive_count - negative_count) / max(1, positive_count + negative_count)

    def sentiment_category(self, score: float, negative_count: int) -> Sentiment:
        cfg = self.config
        if negative_count >= cfg.negative_min_hits:
            return Sentiment.NEGATIVE
        elif score > cfg.strong_positive_threshold:
            # Reserved for a future VERY_POSITIVE threshold
            return Sentiment.POSITIVE
        elif score > 0:
            return Sentiment.POSITIVE
        elif negative_count > 0:
            return Sentiment.CAUTIOUS
        else:
            return Sentiment.NEUTRAL

    def confidence_score(self, positive_count: int, hedge_count: int) -> float:
        """clamp01(base + step*positive - step*hedges), computed exactly."""
        cfg = self.config
        raw = (
            _dec(cfg.confidence_base)
            + _dec(cfg.confidence_positive_step) * positive_count
            - _dec(cfg.confidence_hedging_step) * hedge_count
        )
        clamped = max(Decimal("0"), min(Decimal("1"), raw))
        return float(clamped)

    def recommendation_strength(self, hits: int) -> RecommendationStrength:
        if hits >= self.config.strong_recommendation_min_hits:
            return RecommendationStrength.STRONG
        elif hits >= 1:
            return RecommendationStrength.MODERATE
        return RecommendationStrength.NONE

    def mention_type(self, signals: SignalSet, negative_count: int) -> MentionType:
        """
        Precedence (first match wins): severity outranks volume, which
        outranks relational context, which outranks the default.
        """
        cfg = self.config
        if not signals.mentioned:
            return MentionType.ABSENT
        if negative_count >= cfg.negative_mention_min_hits:
            return MentionType.NEGATIVE
        if signals.mention_count >= cfg.primary_min_mentions:
            return MentionType.PRIMARY
        if signals.mention_count >= cfg.featured_min_mentions:
            return MentionType.FEATURED
        if signals.competitors_mentioned:
            return MentionType.COMPARISON
        return MentionType.BRIEF
