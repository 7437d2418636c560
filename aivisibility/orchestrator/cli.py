"""
AI Visibility Engine CLI
========================

Command-line interface for the scan engine.

Commands:
    analyze     - Analyze one AI response for a business
    score       - Score a complete scan file (JSON)

Usage:
    python -m aivisibility.orchestrator.cli analyze --business "Acme" --text "..."
    python -m aivisibility.orchestrator.cli analyze --business "Acme" --file answer.txt --json
    python -m aivisibility.orchestrator.cli score --input scan.json --json
    cat scan.json | python -m aivisibility.orchestrator.cli score --skip-malformed

Scan file format:
    {
      "business_id": "biz-1",
      "scan_id": "scan-42",
      "business": {"name": "Acme", "competitors": ["Globex"]},
      "responses": [{"platform": "chatgpt", "response": "..."}],
      "previous": {"score_id": "s-41", "visibility": 50, ..., "overall": 62}
    }
"""

import argparse
import json
import sys
from typing import List, Optional

from pydantic import ValidationError

from ..config import get_settings
from ..errors import ConfigurationError, MalformedResponseAnalysis
from ..scoring.scoring_config import load_scoring_config
from .io_models import BusinessModel, ScanRequestModel
from .logging_config import setup_logging
from .scan_engine import ScanEngine


def _read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _build_engine(args) -> ScanEngine:
    if args.config:
        return ScanEngine(load_scoring_config(args.config))
    return ScanEngine(get_settings().scoring_config())


def cmd_analyze(args):
    """Analyze a single response."""
    try:
        business = BusinessModel(name=args.business, competitors=args.competitor or [])
        text = args.text if args.text is not None else _read_input(args.file)
        engine = _build_engine(args)
        analysis = engine.analyze(text, business.to_identity(), args.platform)
    except (ValidationError, ConfigurationError) as e:
        print(f"ERROR: Invalid input: {e}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Cannot read input: {e}")
        return 1

    record = analysis.to_record()
    if args.json:
        print(json.dumps(record, indent=2))
        return 0

    print("=" * 60)
    print(f"RESPONSE ANALYSIS: {args.business}")
    print("=" * 60)
    print(f"Mentioned:       {record['mentioned']} ({record['mention_count']}x, {record['mention_type']})")
    print(f"Sentiment:       {record['sentiment']} ({record['sentiment_score']:+.2f})")
    print(f"Confidence:      {record['confidence_score']:.2f}")
    print(f"Recommendation:  {record['recommendation_strength']} (recommended={record['is_recommended']})")
    if record["ranking"] is not None:
        print(f"Ranking:         #{record['ranking']}")
    if record["hedging_phrases"]:
        print(f"Hedging:         {', '.join(record['hedging_phrases'])}")
    if record["competitors_mentioned"]:
        print(f"Competitors:     {', '.join(record['competitors_mentioned'])}")
    if record["cited_url"]:
        print(f"Cited URL:       {record['cited_url']}")
    if record["mention_context"]:
        print()
        print(f"Context: {record['mention_context']}")
    return 0


def cmd_score(args):
    """Score a scan file."""
    try:
        request = ScanRequestModel.model_validate_json(_read_input(args.input))
        engine = _build_engine(args)
        previous = request.previous.to_score(request.business_id) if request.previous else None
        outcome = engine.run_scan(
            request.business.to_identity(),
            [r.to_platform_response() for r in request.responses],
            business_id=request.business_id,
            scan_id=request.scan_id,
            previous=previous,
            skip_malformed=args.skip_malformed,
        )
    except ValidationError as e:
        print(f"ERROR: Invalid scan file: {e}")
        return 1
    except MalformedResponseAnalysis as e:
        print(f"ERROR: {e.message} (use --skip-malformed to drop it)")
        return 1
    except ConfigurationError as e:
        print(f"ERROR: Invalid scoring configuration: {e}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Cannot read input: {e}")
        return 1

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
        return 0

    score = outcome.score
    print("=" * 60)
    print(f"AI VISIBILITY SCORE: {request.business.name}")
    print("=" * 60)
    print(f"Overall:         {score.overall}/100")
    if score.overall_change is not None:
        print(f"Change:          {score.overall_change:+d}")
    print(f"Trust:           {score.trust}")
    print(f"Visibility:      {score.visibility}")
    print(f"Recommendation:  {score.recommendation}")
    print(f"Citation:        {score.citation}")
    print(f"Sentiment:       {score.sentiment}")
    print(f"Confidence:      {score.confidence}")
    print(f"Responses:       {score.response_count} ({len(outcome.rejected)} rejected)")
    print()

    if outcome.alert:
        print(f"ALERT [{outcome.alert.severity.value}] {outcome.alert.title}")
        print(f"  {outcome.alert.message}")
        print()

    if outcome.insights.platforms:
        print("Platforms:")
        for p in outcome.insights.platforms:
            print(f"  {p.platform:<12} {p.mentions}/{p.responses} mentioned, {p.recommended} recommended")
        print()

    for highlight in outcome.insights.highlights:
        print(f"  + {highlight}")
    for issue in outcome.insights.critical_issues:
        print(f"  ! {issue}")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="aivisibility",
        description="AI Visibility scan engine CLI",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config",
        help="JSON scoring overrides (default: AIVIS_SCORING_CONFIG)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze one AI response")
    analyze_parser.add_argument(
        "--business",
        required=True,
        help="Business name to look for",
    )
    analyze_parser.add_argument(
        "--competitor",
        action="append",
        help="Tracked competitor name (repeatable)",
    )
    analyze_parser.add_argument(
        "--platform",
        help="AI platform that produced the response",
    )
    analyze_parser.add_argument(
        "--text",
        help="Response text (default: read --file or stdin)",
    )
    analyze_parser.add_argument(
        "--file",
        help="File containing the response text",
    )
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # score command
    score_parser = subparsers.add_parser("score", help="Score a scan file")
    score_parser.add_argument(
        "--input",
        help="Scan JSON file (default: stdin)",
    )
    score_parser.add_argument(
        "--skip-malformed",
        action="store_true",
        help="Drop malformed responses instead of aborting",
    )
    score_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(
        level="DEBUG" if args.verbose else settings.logging.level,
        json_output=settings.logging.json_logs,
        log_file=settings.logging.log_file,
    )

    if args.command is None:
        parser.print_help()
        return 1

    # Dispatch to command handler
    commands = {
        "analyze": cmd_analyze,
        "score": cmd_score,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
