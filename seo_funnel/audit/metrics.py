"""
Lighthouse Metrics Extraction

Turns a raw PageSpeed Insights response into normalized scores, display
timings and human-readable (Swedish) issue strings.

Extraction never raises on missing data: absent scores become 0, absent
timings become "N/A", and unreadable audits simply produce no issues.
"""

import math
import logging
from typing import Any, Dict, List, Optional

from seo_funnel.models import LighthouseMetrics, DetailedMetrics

logger = logging.getLogger(__name__)


NOT_AVAILABLE = "N/A"

# Lighthouse category id -> LighthouseMetrics field
CATEGORY_FIELDS = {
    "performance": "performance",
    "accessibility": "accessibility",
    "best-practices": "best_practices",
    "seo": "seo",
}

# Lighthouse audit id -> DetailedMetrics field
TIMING_AUDITS = {
    "first-contentful-paint": "first_contentful_paint",
    "speed-index": "speed_index",
    "largest-contentful-paint": "largest_contentful_paint",
    "total-blocking-time": "total_blocking_time",
    "interactive": "time_to_interactive",
    "cumulative-layout-shift": "cumulative_layout_shift",
}

# Fast-path checks: (audit id, score threshold, message), in check order
BASIC_ISSUE_CHECKS = [
    ("largest-contentful-paint", 0.5, "Långsam Largest Contentful Paint påverkar användarupplevelsen"),
    ("first-contentful-paint", 0.5, "Första innehållet laddas för långsamt"),
    ("speed-index", 0.5, "Hastighetindex visar långsam visuell laddning"),
    ("cumulative-layout-shift", 0.75, "Layout-skift påverkar användarupplevelsen negativt"),
]

CRITICAL_AUDITS = [
    "first-contentful-paint",
    "largest-contentful-paint",
    "speed-index",
    "meta-description",
    "document-title",
    "image-alt",
]

CRITICAL_AUDIT_THRESHOLD = 0.9
DEFAULT_AUDIT_DESCRIPTION = "Behöver förbättras"
MAX_ISSUES = 6


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _lighthouse(raw_data: Dict[str, Any]) -> Dict[str, Any]:
    return _as_dict(_as_dict(raw_data).get("lighthouseResult"))


def _numeric(value: Any) -> Optional[float]:
    """Return value as float, or None for null/bool/non-numeric/NaN input."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def score_to_percent(score: Any) -> int:
    """
    Convert a 0-1 Lighthouse score to an int in [0, 100].

    Rounds half up; missing or non-numeric scores give 0.
    """
    value = _numeric(score)
    if value is None:
        return 0
    value = max(0.0, min(1.0, value))
    return int(math.floor(value * 100 + 0.5))


def extract_metrics(raw_data: Dict[str, Any]) -> LighthouseMetrics:
    """Extract the four category scores from a PageSpeed response."""
    categories = _as_dict(_lighthouse(raw_data).get("categories"))
    scores = {
        field_name: score_to_percent(_as_dict(categories.get(category_id)).get("score"))
        for category_id, field_name in CATEGORY_FIELDS.items()
    }
    return LighthouseMetrics(**scores)


def extract_detailed_metrics(raw_data: Dict[str, Any]) -> DetailedMetrics:
    """Extract display-formatted timings from a PageSpeed response."""
    audits = _as_dict(_lighthouse(raw_data).get("audits"))
    timings = {}
    for audit_id, field_name in TIMING_AUDITS.items():
        display_value = _as_dict(audits.get(audit_id)).get("displayValue")
        timings[field_name] = str(display_value) if display_value else NOT_AVAILABLE
    return DetailedMetrics(**timings)


def extract_basic_issues(raw_data: Dict[str, Any]) -> List[str]:
    """
    Quick issue list for the interim result.

    Only looks at four timing audits. Audits are read from the Lighthouse
    result, or from a top-level "audits" mapping when the payload is
    already unwrapped. Any error while reading gives an empty list.
    """
    issues: List[str] = []

    try:
        audits = _lighthouse(raw_data).get("audits") or raw_data.get("audits") or {}

        for audit_id, threshold, message in BASIC_ISSUE_CHECKS:
            audit = audits.get(audit_id) or {}
            score = audit.get("score")
            if score is not None and score < threshold:
                issues.append(message)

    except (AttributeError, TypeError) as e:
        logger.warning(f"Could not extract basic issues: {e}")
        return []

    return issues


def extract_issues(metrics: LighthouseMetrics, raw_data: Dict[str, Any]) -> List[str]:
    """
    Full issue list from failed audits and low category scores.

    Audit-derived issues come first (in CRITICAL_AUDITS order), followed by
    score-derived issues. At most MAX_ISSUES are returned.
    """
    issues: List[str] = []

    audits = _as_dict(_lighthouse(raw_data).get("audits"))
    for audit_id in CRITICAL_AUDITS:
        audit = _as_dict(audits.get(audit_id))
        score = _numeric(audit.get("score"))
        if score is None or score >= CRITICAL_AUDIT_THRESHOLD:
            continue
        title = audit.get("title")
        if title:
            description = audit.get("description") or DEFAULT_AUDIT_DESCRIPTION
            issues.append(f"{title}: {description}")

    if metrics.performance < 50:
        issues.append("Kritiskt låg prestanda - webbplatsen laddar mycket långsamt")

    if metrics.seo < 70:
        issues.append("SEO-problem upptäckta - kan påverka synlighet i sökmotorer")

    if metrics.accessibility < 80:
        issues.append("Tillgänglighetsproblem - kan hindra användare med funktionsnedsättningar")

    return issues[:MAX_ISSUES]
