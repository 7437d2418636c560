"""
Alert Models
============

Typed alerts emitted by the drift and benchmark evaluators. Alerts are
immutable; the read/acknowledged flag is owned by the notification
system, not by this engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class AlertType(str, Enum):
    """Full alert taxonomy shared with the notification system."""
    SCORE_DROP = "SCORE_DROP"
    SCORE_IMPROVEMENT = "SCORE_IMPROVEMENT"
    VISIBILITY_LOST = "VISIBILITY_LOST"
    VISIBILITY_GAINED = "VISIBILITY_GAINED"
    NEW_NEGATIVE_MENTION = "NEW_NEGATIVE_MENTION"
    NEW_POSITIVE_MENTION = "NEW_POSITIVE_MENTION"
    COMPETITOR_OVERTAKE = "COMPETITOR_OVERTAKE"
    CITATION_ADDED = "CITATION_ADDED"
    CITATION_LOST = "CITATION_LOST"
    RANKING_CHANGE = "RANKING_CHANGE"
    SHARE_OF_VOICE_CHANGE = "SHARE_OF_VOICE_CHANGE"
    RECOMMENDATION_URGENT = "RECOMMENDATION_URGENT"
    AUDIT_CRITICAL = "AUDIT_CRITICAL"
    ZERO_MENTIONS_SPIKE = "ZERO_MENTIONS_SPIKE"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    POSITIVE = "POSITIVE"


@dataclass(frozen=True)
class Alert:
    """One alert for one business."""
    alert_type: AlertType
    severity: AlertSeverity
    business_id: Optional[str]
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        return {
            "business_id": self.business_id,
            "alert_type": self.alert_type.value,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "data": dict(self.data),
        }
