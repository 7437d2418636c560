"""
Lexicon Store
=============

Static, versioned phrase lists read by the Response Classifier.
Entries are matched as case-insensitive substrings of the response, and
each entry counts at most once per response regardless of repetition.

The same lexicons serve the primary scan and competitor scans. Earlier
competitor scoring used a reduced list; scores computed before
LEXICON_VERSION 2 are therefore not directly comparable.

Overrides go through LexiconConfig in scoring_config, not by editing
these tuples.
"""

from typing import Dict, Tuple

LEXICON_VERSION = 2


# =============================================================================
# HEDGING - qualifying language that weakens an assertion
# =============================================================================

HEDGING_LEXICON: Tuple[str, ...] = (
    "might", "could", "may", "possibly", "perhaps", "maybe",
    "generally", "typically", "usually", "sometimes", "often",
    "it seems", "appears to", "tends to", "some say",
)

# =============================================================================
# SENTIMENT INDICATORS
# =============================================================================

POSITIVE_LEXICON: Tuple[str, ...] = (
    "excellent", "outstanding", "great", "recommend", "trusted",
    "reliable", "best", "top", "quality", "professional",
    "highly recommended", "well-known", "established",
)

NEGATIVE_LEXICON: Tuple[str, ...] = (
    "complaints", "issues", "problems", "avoid", "poor",
    "negative", "scam", "controversial", "warning", "careful",
)

# =============================================================================
# RECOMMENDATION MARKERS
# =============================================================================

RECOMMENDATION_LEXICON: Tuple[str, ...] = (
    "recommend", "suggest", "consider", "good choice", "worth",
    "definitely", "should try", "top pick",
)


def default_lexicons() -> Dict[str, Tuple[str, ...]]:
    """All shipped lexicons keyed by their LexiconConfig field name."""
    return {
        "hedging": HEDGING_LEXICON,
        "positive": POSITIVE_LEXICON,
        "negative": NEGATIVE_LEXICON,
        "recommendation": RECOMMENDATION_LEXICON,
    }


def find_hits(text_lower: str, lexicon: Tuple[str, ...]) -> list:
    """
    Distinct lexicon entries present in already lower-cased text,
    in lexicon order.
    """
    hits = [entry.lower() for entry in lexicon if entry and entry.lower() in text_lower]
    return list(dict.fromkeys(hits))
