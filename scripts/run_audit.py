#!/usr/bin/env python3
"""
Staged Audit Runner

Runs the funnel's website audit from the command line:
1. PageSpeed Insights scores (printed as soon as they arrive)
2. AI enrichment via DeepSeek, or rule-based fallback without a key
3. Final merged report

Usage:
    # Optional environment variables:
    export GOOGLE_API_KEY=your_key
    export DEEPSEEK_API_KEY=your_key

    # Run audit:
    python scripts/run_audit.py exempel.se

    # Mobile strategy, JSON output:
    python scripts/run_audit.py https://exempel.se --strategy mobile --json
"""

import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from seo_funnel.audit import AuditError
from seo_funnel.clients import FunnelClients
from seo_funnel.models import AnalysisResult
from seo_funnel.utils import Settings, format_url, is_valid_url

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def print_scores(result: AnalysisResult):
    metrics = result.metrics
    timings = result.detailed_metrics

    print("\n" + "=" * 70)
    print("PAGESPEED INSIGHTS")
    print("=" * 70)
    print(f"Performance:     {metrics.performance}/100")
    print(f"Accessibility:   {metrics.accessibility}/100")
    print(f"Best Practices:  {metrics.best_practices}/100")
    print(f"SEO:             {metrics.seo}/100")
    print()
    print(f"First Contentful Paint:   {timings.first_contentful_paint}")
    print(f"Speed Index:              {timings.speed_index}")
    print(f"Largest Contentful Paint: {timings.largest_contentful_paint}")
    print(f"Total Blocking Time:      {timings.total_blocking_time}")
    print(f"Time to Interactive:      {timings.time_to_interactive}")
    print(f"Cumulative Layout Shift:  {timings.cumulative_layout_shift}")


def print_findings(result: AnalysisResult):
    print("\n" + "=" * 70)
    print("FÖRBÄTTRINGSFÖRSLAG")
    print("=" * 70)
    for suggestion in result.suggestions:
        print(f"  ✓ {suggestion}")

    print("\n" + "=" * 70)
    print("PROBLEM")
    print("=" * 70)
    if not result.issues:
        print("  (inga)")
    for issue in result.issues:
        print(f"  ⚠ {issue}")


async def run_audit(url: str, strategy: str, as_json: bool) -> int:
    """Run the staged audit. Returns the process exit code."""
    load_dotenv()
    settings = Settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)

    if not is_valid_url(url):
        print(f"ERROR: Invalid URL: {url}")
        return 1
    target = format_url(url)

    def on_interim(result: AnalysisResult):
        if not as_json:
            print_scores(result)
            print("\nHämtar AI-analys...")

    async with FunnelClients(settings, strategy=strategy) as clients:
        clients.log_status()
        try:
            final = await clients.orchestrator.run_staged_audit(target, on_interim)
        except AuditError as e:
            print(f"ERROR: {e}")
            return 1

    if as_json:
        print(json.dumps(final.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_findings(final)
        print(f"\nAnalys klar: {final.url} ({final.timestamp.isoformat()})")

    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run a staged PageSpeed + AI website audit"
    )
    parser.add_argument(
        "url",
        help="Website to analyze (e.g., exempel.se)"
    )
    parser.add_argument(
        "--strategy",
        default="desktop",
        choices=["desktop", "mobile"],
        help="Lighthouse strategy (default: desktop)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final result as JSON"
    )

    args = parser.parse_args()

    sys.exit(asyncio.run(run_audit(args.url, args.strategy, args.json)))


if __name__ == "__main__":
    main()
