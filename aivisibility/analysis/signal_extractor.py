"""
Signal Extractor (Deterministic)
=================================

Detects raw signals in one AI response: business mentions, context
window, ranking position, citation URLs and competitor co-mentions.
No LLM required: every signal traces back to a regex match.

Usage:
    extractor = SignalExtractor()
    signals = extractor.extract(response_text, BusinessIdentity("Acme", ("Globex",)))
"""

import logging
import re
from typing import List, Optional, Set

from .analysis_models import BusinessIdentity, SignalSet
from ..scoring.scoring_config import DEFAULT_CONFIG, ExtractorConfig

logger = logging.getLogger(__name__)


# First numbered list item, e.g. "1. Acme" or "2.**Globex**"
RANKING_PATTERN = re.compile(r"(\d+)\.\s*\*?\*?([^*\n]+)")

# http(s) URL bounded by whitespace, quotes, angle/curly/square brackets,
# pipe, backslash, caret and backtick
URL_PATTERN = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+", re.IGNORECASE)


def build_name_pattern(name: str) -> Optional[re.Pattern]:
    """
    Case-insensitive pattern matching the literal business name.

    Returns None for a blank name, which never matches.
    """
    if not name or not name.strip():
        return None
    return re.compile(re.escape(name), re.IGNORECASE)


def extract_urls(text: str) -> List[str]:
    """All well-formed http(s) URLs in order of appearance (no dedup)."""
    return URL_PATTERN.findall(text)


def find_business_citation(urls: List[str], business_name: str) -> Optional[str]:
    """
    First URL whose text contains the business name with whitespace removed.

    Best-effort heuristic: "Acme Plumbing" only matches URLs containing
    "acmeplumbing", so hyphenated domains and third-party review pages are
    missed. Kept as-is pending product review.
    """
    needle = re.sub(r"\s+", "", business_name.lower())
    if not needle:
        return None
    for url in urls:
        if needle in url.lower():
            return url
    return None


class SignalExtractor:
    """
    Extracts a SignalSet from a response for a given business identity.

    Never raises on missing data: a None or empty response yields an
    empty SignalSet.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or DEFAULT_CONFIG.extractor

    def extract(self, response: Optional[str], business: BusinessIdentity) -> SignalSet:
        text = response or ""
        if not text:
            return SignalSet()

        pattern = build_name_pattern(business.name)
        matches = list(pattern.finditer(text)) if pattern else []
        mention_count = len(matches)
        mentioned = mention_count > 0

        mention_context = ""
        if mentioned:
            first = matches[0]
            mention_context = self.extract_context(text, first.start(), first.end())

        urls = extract_urls(text)

        signals = SignalSet(
            mentioned=mentioned,
            mention_count=mention_count,
            mention_context=mention_context,
            ranking_position=self.detect_ranking(text) if mentioned else None,
            cited_urls=urls,
            cited_url=find_business_citation(urls, business.name),
            competitors_mentioned=self.find_competitors(text, business.competitor_names),
        )

        logger.debug(
            f"Extracted signals for '{business.name}': mentions={mention_count}, "
            f"ranking={signals.ranking_position}, urls={len(urls)}, "
            f"competitors={len(signals.competitors_mentioned)}"
        )
        return signals

    def extract_context(self, text: str, start: int, end: int) -> str:
        """
        Window of context_window chars before start and after end,
        clamped to the text, with ellipses marking truncation.
        """
        window = self.config.context_window
        ellipsis = self.config.context_ellipsis

        left = max(0, start - window)
        right = min(len(text), end + window)
        context = text[left:right]

        if left > 0:
            context = ellipsis + context
        if right < len(text):
            context = context + ellipsis
        return context

    def detect_ranking(self, text: str) -> Optional[int]:
        """
        Position of the first numbered list item in the response.

        Only the first list item is considered; anything above
        max_ranking_position is ignored.
        """
        match = RANKING_PATTERN.search(text)
        if not match:
            return None
        digits = match.group(1).lstrip("0") or "0"
        # More digits than max_ranking_position is always out of range
        if len(digits) > len(str(self.config.max_ranking_position)):
            return None
        position = int(digits)
        if position <= self.config.max_ranking_position:
            return position
        return None

    @staticmethod
    def find_competitors(text: str, competitor_names) -> Set[str]:
        """Competitor names (as configured) appearing as substrings."""
        lowered = text.lower()
        return {
            name for name in competitor_names
            if name and name.strip() and name.lower() in lowered
        }
