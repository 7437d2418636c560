"""
Response Analysis Data Models
==============================

Structured outputs of the per-response pipeline. These map directly to
the prompt_results rows persisted by the storage layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple


class Sentiment(str, Enum):
    """
    Sentiment categories.

    VERY_POSITIVE and VERY_NEGATIVE are part of the stored taxonomy but
    the rule-based classifier never emits them.
    """
    VERY_POSITIVE = "VERY_POSITIVE"
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    CAUTIOUS = "CAUTIOUS"
    NEGATIVE = "NEGATIVE"
    VERY_NEGATIVE = "VERY_NEGATIVE"


class RecommendationStrength(str, Enum):
    NONE = "NONE"
    MODERATE = "MODERATE"
    STRONG = "STRONG"


class MentionType(str, Enum):
    """How the business appears in a response."""
    ABSENT = "ABSENT"
    BRIEF = "BRIEF"
    COMPARISON = "COMPARISON"
    FEATURED = "FEATURED"
    PRIMARY = "PRIMARY"
    NEGATIVE = "NEGATIVE"


@dataclass(frozen=True)
class BusinessIdentity:
    """Business name plus the competitor names tracked for it."""
    name: str
    competitor_names: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any sequence from callers, store a tuple
        object.__setattr__(self, "competitor_names", tuple(self.competitor_names))

    def as_competitor(self, competitor_name: str) -> "BusinessIdentity":
        """
        Identity used when scanning a competitor: the competitor becomes
        the subject and the original business joins its rival list.
        """
        rivals = [self.name] + [c for c in self.competitor_names if c != competitor_name]
        return BusinessIdentity(name=competitor_name, competitor_names=tuple(rivals))


@dataclass(frozen=True)
class PlatformResponse:
    """One AI answer as delivered by the query layer."""
    response_text: Optional[str]
    platform: Optional[str] = None
    query: Optional[str] = None


@dataclass
class SignalSet:
    """Raw signals detected in one response (Signal Extractor output)."""
    mentioned: bool = False
    mention_count: int = 0
    mention_context: str = ""
    ranking_position: Optional[int] = None
    cited_urls: List[str] = field(default_factory=list)
    cited_url: Optional[str] = None         # best-effort business citation
    competitors_mentioned: Set[str] = field(default_factory=set)

    @property
    def has_citation(self) -> bool:
        return self.cited_url is not None


@dataclass
class ResponseAnalysis:
    """Classified view of one AI response (Response Classifier output)."""
    signals: SignalSet
    sentiment: Sentiment
    sentiment_score: float                  # -1.0 to 1.0
    confidence_score: float                 # 0.0 to 1.0
    has_hedging: bool
    hedging_phrases: Set[str]
    is_recommended: bool
    recommendation_strength: RecommendationStrength
    mention_type: MentionType
    positive_indicators: List[str] = field(default_factory=list)
    negative_indicators: List[str] = field(default_factory=list)
    key_phrases: List[str] = field(default_factory=list)
    platform: Optional[str] = None          # opaque tag, never used for branching
    response_text: Optional[str] = None     # None = response never arrived

    @property
    def mentioned(self) -> bool:
        return self.signals.mentioned

    def to_record(self) -> Dict[str, Any]:
        """Flat dict for the storage collaborator (one row per response)."""
        return {
            "platform": self.platform,
            "response": self.response_text,
            "mentioned": self.signals.mentioned,
            "mention_type": self.mention_type.value,
            "mention_context": self.signals.mention_context,
            "mention_count": self.signals.mention_count,
            "sentiment": self.sentiment.value,
            "sentiment_score": self.sentiment_score,
            "confidence_score": self.confidence_score,
            "has_hedging": self.has_hedging,
            "hedging_phrases": sorted(self.hedging_phrases),
            "is_recommended": self.is_recommended,
            "recommendation_strength": self.recommendation_strength.value,
            "ranking": self.signals.ranking_position,
            "cited_url": self.signals.cited_url,
            "cited_sources": list(self.signals.cited_urls),
            "competitors_mentioned": sorted(self.signals.competitors_mentioned),
            "key_phrases": list(self.key_phrases),
            "positive_indicators": list(self.positive_indicators),
            "negative_indicators": list(self.negative_indicators),
        }
