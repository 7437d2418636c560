"""
AI Visibility Engine
====================

Deterministic analysis of AI-assistant answers about a business:
per-response signals and classification, composite 0-100 scores,
score-drift alerts and competitor benchmarks.

Packages:
    analysis      - signal extraction and response classification
    scoring       - configuration, composite scoring, scan insights
    alerts        - typed alerts and drift evaluation
    benchmarks    - competitor comparison and share of voice
    orchestrator  - scan engine façade, logging, CLI
"""

__version__ = "1.0.0"
