"""
SEO Lead Funnel - Audit Package

This package runs the website audit:
- PageSpeed Insights client (fast Lighthouse audit)
- Metrics extraction (scores, timings, issues)
- Staged orchestration (interim result, enrichment, merge)
"""

from .pagespeed import PageSpeedClient, PageSpeedError
from .metrics import (
    extract_metrics,
    extract_detailed_metrics,
    extract_basic_issues,
    extract_issues,
    score_to_percent,
)
from .orchestrator import (
    StagedAuditOrchestrator,
    AuditError,
    INTERIM_SUGGESTIONS,
    merge_suggestions,
    merge_issues,
)

__all__ = [
    # Client
    "PageSpeedClient",
    "PageSpeedError",

    # Metrics
    "extract_metrics",
    "extract_detailed_metrics",
    "extract_basic_issues",
    "extract_issues",
    "score_to_percent",

    # Orchestrator
    "StagedAuditOrchestrator",
    "AuditError",
    "INTERIM_SUGGESTIONS",
    "merge_suggestions",
    "merge_issues",
]
