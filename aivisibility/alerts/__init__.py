"""
Alerting
========

Drift-triggered and benchmark-triggered alerts.

Modules:
    alert_models    - Alert, AlertType, AlertSeverity
    drift_evaluator - SCORE_DROP / SCORE_IMPROVEMENT between consecutive scans
"""

from .alert_models import Alert, AlertSeverity, AlertType
from .drift_evaluator import DriftEvaluator

__all__ = ["Alert", "AlertSeverity", "AlertType", "DriftEvaluator"]
