"""
Thresholds, weights and lexicons for the visibility engine.

This file centralises EVERY tunable of the extraction, classification,
aggregation and alerting stages.

PHILOSOPHY:
- Every threshold is explicit and documented
- No magic numbers in the engine code
- Tunable without touching scoring logic, but deterministic for a
  given configuration

Overrides are supplied either by constructing a ScoringConfig directly
or through a JSON file read by load_scoring_config().
"""

import json
import logging
import math
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from ..lexicons import (
    HEDGING_LEXICON,
    NEGATIVE_LEXICON,
    POSITIVE_LEXICON,
    RECOMMENDATION_LEXICON,
)
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LexiconConfig:
    """Phrase lists used by the Response Classifier."""
    hedging: Tuple[str, ...] = HEDGING_LEXICON
    positive: Tuple[str, ...] = POSITIVE_LEXICON
    negative: Tuple[str, ...] = NEGATIVE_LEXICON
    recommendation: Tuple[str, ...] = RECOMMENDATION_LEXICON


@dataclass(frozen=True)
class ExtractorConfig:
    """
    Signal Extractor settings.

    Rankings beyond max_ranking_position are treated as list noise
    (footnotes, step numbers) rather than an ordinal placement.
    """
    context_window: int = 150
    context_ellipsis: str = "..."
    max_ranking_position: int = 10


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Response Classifier thresholds.

    SENTIMENT (first match wins):
        negative hits >= negative_min_hits      → NEGATIVE
        score > strong_positive_threshold       → POSITIVE
        score > 0                               → POSITIVE
        negative hits > 0                       → CAUTIOUS
        otherwise                               → NEUTRAL

    A single hedge word is casual phrasing, not uncertainty, hence
    hedging_min_hits = 2.
    """
    negative_min_hits: int = 2
    strong_positive_threshold: float = 0.3
    hedging_min_hits: int = 2

    # confidence = clamp01(base + step*positive - step*hedges)
    confidence_base: float = 0.5
    confidence_positive_step: float = 0.1
    confidence_hedging_step: float = 0.1

    strong_recommendation_min_hits: int = 2
    # An absent business cannot be recommended, even when the
    # recommendation lexicon matches the surrounding text.
    require_mention_for_recommendation: bool = True

    # Mention type precedence: NEGATIVE > PRIMARY > FEATURED > COMPARISON > BRIEF
    negative_mention_min_hits: int = 2
    primary_min_mentions: int = 3
    featured_min_mentions: int = 2

    key_phrase_limit: int = 5


@dataclass(frozen=True)
class CompositeWeights:
    """
    Weights of the composite scores (each group sums to 1.0).

    TRUST = sentiment, absence of hedging, recommendation rate,
            share of non-negative mentions
    OVERALL = trust, visibility, recommendation, citation, sentiment,
              confidence
    """
    trust_sentiment: float = 0.35
    trust_hedging: float = 0.30
    trust_recommendation: float = 0.25
    trust_non_negative: float = 0.10

    overall_trust: float = 0.25
    overall_visibility: float = 0.20
    overall_recommendation: float = 0.20
    overall_citation: float = 0.10
    overall_sentiment: float = 0.15
    overall_confidence: float = 0.10

    # Neutral defaults reported for a scan with no responses
    empty_sentiment: int = 50
    empty_confidence: int = 50

    @property
    def trust_weights(self) -> Tuple[float, ...]:
        return (
            self.trust_sentiment,
            self.trust_hedging,
            self.trust_recommendation,
            self.trust_non_negative,
        )

    @property
    def overall_weights(self) -> Tuple[float, ...]:
        return (
            self.overall_trust,
            self.overall_visibility,
            self.overall_recommendation,
            self.overall_citation,
            self.overall_sentiment,
            self.overall_confidence,
        )


@dataclass(frozen=True)
class DriftConfig:
    """
    Drift alert thresholds on the overall score delta.

    delta <= drop_threshold           → SCORE_DROP / WARNING
    delta <= critical_drop_threshold  → SCORE_DROP / CRITICAL
    delta >= improvement_threshold    → SCORE_IMPROVEMENT / POSITIVE
    """
    drop_threshold: int = -10
    critical_drop_threshold: int = -20
    improvement_threshold: int = 10
    major_improvement_threshold: int = 20
    alert_on_improvement: bool = True


@dataclass(frozen=True)
class BenchmarkConfig:
    """Competitor comparison margins (score points)."""
    strength_margin: int = 10
    overtake_margin: int = 20


@dataclass(frozen=True)
class InsightConfig:
    """Highlight / critical-issue thresholds for scan summaries."""
    strong_visibility: int = 70
    high_trust: int = 70
    good_recommendation: int = 60
    low_visibility: int = 30
    low_trust: int = 30


@dataclass(frozen=True)
class ScoringConfig:
    """
    Global engine configuration.

    Single entry point for calibration.
    """
    lexicons: LexiconConfig = field(default_factory=LexiconConfig)
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    weights: CompositeWeights = field(default_factory=CompositeWeights)
    drift: DriftConfig = field(default_factory=DriftConfig)
    benchmark: BenchmarkConfig = field(default_factory=BenchmarkConfig)
    insights: InsightConfig = field(default_factory=InsightConfig)

    def validate(self) -> bool:
        """Check configuration consistency. Raises ConfigurationError."""
        for group, values in (
            ("trust", self.weights.trust_weights),
            ("overall", self.weights.overall_weights),
        ):
            total = sum(Decimal(str(v)) for v in values)
            if total != Decimal("1"):
                raise ConfigurationError(
                    f"{group} weights must sum to 1.0, got {total}"
                )
            if any(v < 0 for v in values):
                raise ConfigurationError(f"{group} weights cannot be negative")

        drift = self.drift
        if not drift.critical_drop_threshold <= drift.drop_threshold < 0:
            raise ConfigurationError(
                "Expected critical_drop_threshold <= drop_threshold < 0, got "
                f"{drift.critical_drop_threshold} / {drift.drop_threshold}"
            )
        if not 0 < drift.improvement_threshold <= drift.major_improvement_threshold:
            raise ConfigurationError(
                "Expected 0 < improvement_threshold <= major_improvement_threshold"
            )

        if self.extractor.context_window < 0:
            raise ConfigurationError("context_window cannot be negative")
        if self.extractor.max_ranking_position < 1:
            raise ConfigurationError("max_ranking_position must be at least 1")

        for name in ("hedging", "positive", "negative", "recommendation"):
            if not getattr(self.lexicons, name):
                raise ConfigurationError(f"Lexicon '{name}' is empty")
        return True


# Default instance
DEFAULT_CONFIG = ScoringConfig()


def _check_override(section: str, key: str, current: Any, value: Any) -> Any:
    """
    Type-check one override against the field it replaces.

    Lexicons must be lists of strings (a bare string would be split into
    characters). Numbers must be real numbers, never booleans or strings.
    """
    name = f"{section}.{key}"
    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ConfigurationError(f"{name} must be true or false, got {value!r}")
        return value
    if isinstance(current, tuple):
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"{name} must be a list of strings, got {value!r}")
        return tuple(value)
    if isinstance(current, str):
        if not isinstance(value, str):
            raise ConfigurationError(f"{name} must be a string, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if isinstance(current, int) and not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return value


def config_from_dict(overrides: Dict[str, Any], base: ScoringConfig = DEFAULT_CONFIG) -> ScoringConfig:
    """
    Apply a nested override dict on top of a base configuration.

    Example:
        {"drift": {"drop_threshold": -15}, "lexicons": {"hedging": ["might"]}}
    """
    sections = {f.name for f in fields(ScoringConfig)}
    updated = {}

    for section, values in overrides.items():
        if section not in sections:
            raise ConfigurationError(f"Unknown configuration section '{section}'")
        if not isinstance(values, dict):
            raise ConfigurationError(f"Section '{section}' must be an object")

        current = getattr(base, section)
        known = {f.name for f in fields(current)}
        unknown = set(values) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown keys in '{section}': {', '.join(sorted(unknown))}"
            )

        values = {
            key: _check_override(section, key, getattr(current, key), value)
            for key, value in values.items()
        }
        updated[section] = replace(current, **values)

    config = replace(base, **updated)
    config.validate()
    return config


def load_scoring_config(path: Union[str, Path], base: ScoringConfig = DEFAULT_CONFIG) -> ScoringConfig:
    """Load a JSON override file and return the resulting validated config."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            overrides = json.load(fh)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read scoring config {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Scoring config {path} must contain a JSON object")

    config = config_from_dict(overrides, base)
    logger.info(f"Loaded scoring overrides from {path}: sections={sorted(overrides)}")
    return config
