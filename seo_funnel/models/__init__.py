"""
SEO Lead Funnel - Data Models

Shared data models passed between the audit, enrichment and lead clients.
Field names are snake_case; to_dict() renders the camelCase shape the
funnel's web UI reads.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional


@dataclass
class LighthouseMetrics:
    """Lighthouse category scores, each an int in [0, 100]."""
    performance: int = 0
    accessibility: int = 0
    best_practices: int = 0
    seo: int = 0

    @property
    def average(self) -> float:
        return (self.performance + self.accessibility + self.best_practices + self.seo) / 4

    def to_dict(self) -> Dict[str, int]:
        return {
            "performance": self.performance,
            "accessibility": self.accessibility,
            "bestPractices": self.best_practices,
            "seo": self.seo,
        }


@dataclass
class DetailedMetrics:
    """Display-formatted Lighthouse timings ("N/A" when the audit is missing)."""
    first_contentful_paint: str = "N/A"
    speed_index: str = "N/A"
    largest_contentful_paint: str = "N/A"
    total_blocking_time: str = "N/A"
    time_to_interactive: str = "N/A"
    cumulative_layout_shift: str = "N/A"

    def to_dict(self) -> Dict[str, str]:
        return {
            "firstContentfulPaint": self.first_contentful_paint,
            "speedIndex": self.speed_index,
            "largestContentfulPaint": self.largest_contentful_paint,
            "totalBlockingTime": self.total_blocking_time,
            "timeToInteractive": self.time_to_interactive,
            "cumulativeLayoutShift": self.cumulative_layout_shift,
        }


@dataclass
class EnrichmentResult:
    """Natural-language enrichment, from the LLM or the rule-based fallback."""
    suggestions: List[str] = field(default_factory=list)
    priority_issues: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    technical_recommendations: List[str] = field(default_factory=list)
    business_impact: str = ""
    overall_assessment: str = ""
    source: str = "fallback"  # "ai" or "fallback"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": list(self.suggestions),
            "priorityIssues": list(self.priority_issues),
            "opportunities": list(self.opportunities),
            "technicalRecommendations": list(self.technical_recommendations),
            "businessImpact": self.business_impact,
            "overallAssessment": self.overall_assessment,
        }


@dataclass
class PageSpeedResult:
    """Parsed fast-audit response plus the raw payload it came from."""
    metrics: LighthouseMetrics
    detailed_metrics: DetailedMetrics
    raw_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def loading_experience(self) -> Optional[Dict[str, Any]]:
        value = self.raw_data.get("loadingExperience")
        return value if value else None


@dataclass
class AnalysisResult:
    """Complete audit result handed to the caller."""
    url: str
    metrics: LighthouseMetrics
    detailed_metrics: DetailedMetrics
    suggestions: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    loading_experience: Optional[Dict[str, Any]] = None

    def with_findings(self, suggestions: List[str], issues: List[str]) -> "AnalysisResult":
        """
        Return a new result with suggestions/issues replaced.

        Every other field is deep-copied so the two results never share
        mutable state.
        """
        return AnalysisResult(
            url=self.url,
            metrics=copy.deepcopy(self.metrics),
            detailed_metrics=copy.deepcopy(self.detailed_metrics),
            suggestions=list(suggestions),
            issues=list(issues),
            timestamp=self.timestamp,
            loading_experience=copy.deepcopy(self.loading_experience),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "url": self.url,
            "metrics": self.metrics.to_dict(),
            "detailedMetrics": self.detailed_metrics.to_dict(),
            "suggestions": list(self.suggestions),
            "issues": list(self.issues),
            "timestamp": self.timestamp.isoformat(),
        }
        if self.loading_experience is not None:
            data["loadingExperience"] = self.loading_experience
        return data


@dataclass
class LeadData:
    """Contact details captured by the funnel's contact form."""
    name: str
    email: str
    phone: str
    source: Optional[str] = None
    company: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        """Body for the leads intake endpoint."""
        return {
            "name": self.name,
            "email": self.email,
            "source": self.source or "SEO Analys",
            "phone": self.phone,
            "company": self.company or "",
        }


__all__ = [
    "LighthouseMetrics",
    "DetailedMetrics",
    "EnrichmentResult",
    "PageSpeedResult",
    "AnalysisResult",
    "LeadData",
]
