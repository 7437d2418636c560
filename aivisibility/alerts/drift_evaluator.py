"""
Drift & Alert Evaluator
=======================

Compares a new CompositeScore with the immediately preceding score of
the same business and emits at most one typed alert.

Stateless: fetching the previous score is the storage layer's job.

RULES (delta = current.overall - previous.overall):
    no previous score        → no alert (baseline)
    delta <= -20             → SCORE_DROP, CRITICAL
    delta <= -10             → SCORE_DROP, WARNING
    delta >= +10             → SCORE_IMPROVEMENT, POSITIVE (if enabled)
"""

import logging
from typing import Optional

from .alert_models import Alert, AlertSeverity, AlertType
from ..scoring.composite_scorer import CompositeScore
from ..scoring.scoring_config import DEFAULT_CONFIG, DriftConfig

logger = logging.getLogger(__name__)


class DriftEvaluator:
    """Threshold-based drift detection on the overall score."""

    def __init__(self, config: Optional[DriftConfig] = None):
        self.config = config or DEFAULT_CONFIG.drift

    def link(self, current: CompositeScore, previous: Optional[CompositeScore]) -> CompositeScore:
        """Return current with previous_score_id / overall_change filled in."""
        return current.with_previous(previous)

    def evaluate(
        self,
        current: CompositeScore,
        previous: Optional[CompositeScore],
        business_name: Optional[str] = None,
    ) -> Optional[Alert]:
        """
        Evaluate the drift between two consecutive scores.

        Args:
            current: Score of the scan that just completed.
            previous: Most recent stored score for the business, or None.
            business_name: Used in alert titles only.

        Returns:
            An Alert, or None when no threshold is crossed.
        """
        if previous is None:
            logger.debug(f"No previous score for business {current.business_id}: baseline only")
            return None

        cfg = self.config
        delta = current.overall - previous.overall
        label = business_name or current.business_id or "business"
        data = {
            "previousScore": previous.overall,
            "newScore": current.overall,
            "delta": delta,
            "previousScoreId": previous.score_id,
        }

        alert = None
        if delta <= cfg.drop_threshold:
            severity = (
                AlertSeverity.CRITICAL if delta <= cfg.critical_drop_threshold
                else AlertSeverity.WARNING
            )
            alert = Alert(
                alert_type=AlertType.SCORE_DROP,
                severity=severity,
                business_id=current.business_id,
                title=f"Score dropped for {label}",
                message=f"Overall score dropped from {previous.overall} to {current.overall}",
                data=data,
            )
        elif cfg.alert_on_improvement and delta >= cfg.improvement_threshold:
            major = delta >= cfg.major_improvement_threshold
            alert = Alert(
                alert_type=AlertType.SCORE_IMPROVEMENT,
                severity=AlertSeverity.POSITIVE,
                business_id=current.business_id,
                title=f"{'Major score' if major else 'Score'} improvement for {label}",
                message=f"Overall score rose from {previous.overall} to {current.overall}",
                data={**data, "major": major},
            )

        if alert is not None:
            logger.info(
                f"{alert.alert_type.value} ({alert.severity.value}) for {label}: "
                f"{previous.overall} -> {current.overall}",
                extra={
                    "business_id": current.business_id,
                    "scan_id": current.scan_id,
                    "alert_type": alert.alert_type.value,
                    "score": current.overall,
                },
            )
        return alert
