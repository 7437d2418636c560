"""
Competitor benchmarks and share of voice, computed with the same engine
as the business's own score.
"""

from .competitor_benchmark import (
    CategoryMention,
    CompetitorBenchmark,
    CompetitorBenchmarker,
    CompetitorShare,
    ShareOfVoice,
)

__all__ = [
    "CategoryMention",
    "CompetitorBenchmark",
    "CompetitorBenchmarker",
    "CompetitorShare",
    "ShareOfVoice",
]
