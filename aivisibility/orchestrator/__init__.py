"""
AI Visibility Orchestrator Module
=================================

Composition layer over the engine stages.

Components:
    - ScanEngine: extract, classify, score and evaluate drift for one scan
    - ScanOutcome: score, alert, insights and per-response analyses
    - setup_logging: console / JSON / rotating-file logging
    - CLI: Command-line interface (python -m aivisibility.orchestrator.cli)

Usage:
    from aivisibility.orchestrator import ScanEngine

    outcome = ScanEngine().run_scan(business, responses, business_id="biz-1")
"""

from .logging_config import JSONFormatter, setup_logging
from .scan_engine import ScanEngine, ScanOutcome

__all__ = [
    # Engine
    "ScanEngine",
    "ScanOutcome",
    # Logging
    "JSONFormatter",
    "setup_logging",
]
