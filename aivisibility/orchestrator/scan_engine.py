"""
Scan Engine
===========

In-process façade composing the four engine stages for one scan:

    responses ──► SignalExtractor ──► ResponseClassifier ──► ScanBatch
              ──► CompositeScorer ──► DriftEvaluator (+ ScanInsightBuilder)

No I/O: querying AI platforms, fetching the previous score and storing
results belong to the caller. Safe to share across threads; each scan
gets its own ScanBatch.

Usage:
    engine = ScanEngine()
    outcome = engine.run_scan(business, responses, business_id="biz-1",
                              previous=last_score)
    store(outcome.score.to_record(), [a.to_record() for a in outcome.analyses])
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..alerts.alert_models import Alert
from ..alerts.drift_evaluator import DriftEvaluator
from ..analysis.analysis_models import BusinessIdentity, PlatformResponse, ResponseAnalysis
from ..analysis.response_classifier import ResponseClassifier
from ..analysis.signal_extractor import SignalExtractor
from ..errors import MalformedResponseAnalysis
from ..scoring.composite_scorer import CompositeScore, CompositeScorer, ScanBatch
from ..scoring.scan_insights import ScanInsightBuilder, ScanInsights
from ..scoring.scoring_config import DEFAULT_CONFIG, ScoringConfig

logger = logging.getLogger(__name__)


@dataclass
class ScanOutcome:
    """Everything one scan hands to the storage and recommendation layers."""
    score: CompositeScore
    analyses: Tuple[ResponseAnalysis, ...]
    alert: Optional[Alert]
    insights: ScanInsights
    rejected: List[MalformedResponseAnalysis] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score.to_record(),
            "alert": self.alert.to_record() if self.alert else None,
            "highlights": list(self.insights.highlights),
            "critical_issues": list(self.insights.critical_issues),
            "mention_types": dict(self.insights.mention_types),
            "platforms": [
                {
                    "platform": p.platform,
                    "responses": p.responses,
                    "mentions": p.mentions,
                    "recommended": p.recommended,
                    "mention_rate": round(p.mention_rate, 3),
                }
                for p in self.insights.platforms
            ],
            "results": [a.to_record() for a in self.analyses],
            "rejected": [e.message for e in self.rejected],
        }


class ScanEngine:
    """One parameterized engine for business and competitor scans alike."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.config.validate()
        self.extractor = SignalExtractor(self.config.extractor)
        self.classifier = ResponseClassifier(self.config.lexicons, self.config.classifier)
        self.scorer = CompositeScorer(self.config.weights)
        self.drift = DriftEvaluator(self.config.drift)
        self.insight_builder = ScanInsightBuilder(self.config.insights)

    def analyze(
        self,
        response_text: Optional[str],
        business: BusinessIdentity,
        platform: Optional[str] = None,
    ) -> ResponseAnalysis:
        """Extract and classify one response."""
        signals = self.extractor.extract(response_text, business)
        return self.classifier.classify(signals, response_text, platform)

    def score_scan(
        self,
        business: BusinessIdentity,
        analyses: Iterable[ResponseAnalysis],
        business_id: Optional[str] = None,
        scan_id: Optional[str] = None,
        previous: Optional[CompositeScore] = None,
        skip_malformed: bool = False,
        score_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> ScanOutcome:
        """
        Build a closed batch, score it, link it to the previous score and
        evaluate drift.

        Args:
            skip_malformed: Drop analyses rejected by the batch (recorded in
                ScanOutcome.rejected) instead of aborting the scan.

        Raises:
            MalformedResponseAnalysis: when skip_malformed is False.
        """
        started = time.monotonic()
        batch = ScanBatch(scan_id=scan_id, business_id=business_id)
        rejected = []
        for analysis in analyses:
            try:
                batch.add(analysis)
            except MalformedResponseAnalysis as e:
                if not skip_malformed:
                    raise
                logger.warning(f"Dropping response from scan {scan_id or '-'}: {e.message}")
                rejected.append(e)

        score = self.scorer.aggregate(batch)
        score = score.with_identity(
            score_id or str(uuid.uuid4()),
            created_at or datetime.now(timezone.utc),
        )
        score = self.drift.link(score, previous)

        alert = self.drift.evaluate(score, previous, business.name)
        insights = self.insight_builder.build(score, batch.items)

        logger.info(
            f"Scan complete for {business.name}: overall={score.overall} "
            f"change={score.overall_change} responses={score.response_count} "
            f"rejected={len(rejected)} alert={alert.alert_type.value if alert else None}",
            extra={
                "business_id": business_id,
                "scan_id": scan_id,
                "score": score.overall,
                "duration": round(time.monotonic() - started, 3),
            },
        )
        return ScanOutcome(
            score=score,
            analyses=batch.items,
            alert=alert,
            insights=insights,
            rejected=rejected,
        )

    def run_scan(
        self,
        business: BusinessIdentity,
        responses: Iterable[PlatformResponse],
        business_id: Optional[str] = None,
        scan_id: Optional[str] = None,
        previous: Optional[CompositeScore] = None,
        skip_malformed: bool = False,
    ) -> ScanOutcome:
        """analyze() every response, then score_scan()."""
        analyses = [
            self.analyze(r.response_text, business, r.platform)
            for r in responses
        ]
        return self.score_scan(
            business,
            analyses,
            business_id=business_id,
            scan_id=scan_id,
            previous=previous,
            skip_malformed=skip_malformed,
        )
