"""
Staged Audit Orchestrator

Coordinates the two-stage website audit:
1. Fast audit (PageSpeed Insights) - scores and timings
2. Interim result handed to the caller's callback
3. AI enrichment (DeepSeek, or rule-based fallback)
4. Merge into the final result

Only a failed fast audit aborts a run. Every later step degrades.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Union

from seo_funnel.models import AnalysisResult, EnrichmentResult, PageSpeedResult
from seo_funnel.enrichment.fallback import get_fallback_analysis
from .metrics import extract_basic_issues, extract_issues

logger = logging.getLogger(__name__)


InterimCallback = Callable[[AnalysisResult], Union[None, Awaitable[None]]]

# Shown while the AI enrichment is running. A fixed placeholder list, not
# derived from the audit data.
INTERIM_SUGGESTIONS = [
    "Optimera bilder för snabbare laddning",
    "Använd moderna bildformat som WebP",
    "Implementera lazy loading för bilder",
    "Komprimera CSS och JavaScript",
]

MAX_INTERIM_ISSUES = 3
MAX_SUGGESTIONS = 8
MAX_ISSUES = 6

AUDIT_ERROR_PREFIX = "Kunde inte analysera webbplatsen"


class AuditError(Exception):
    """Raised when a run cannot produce a result (fast audit failed)."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


def merge_suggestions(enrichment: EnrichmentResult) -> List[str]:
    """AI suggestions, then opportunities, then technical recommendations."""
    combined = [
        *enrichment.suggestions,
        *enrichment.opportunities,
        *enrichment.technical_recommendations,
    ]
    return combined[:MAX_SUGGESTIONS]


def merge_issues(enrichment: EnrichmentResult, extracted: List[str]) -> List[str]:
    """AI priority issues first, then issues extracted from the audit."""
    return [*enrichment.priority_issues, *extracted][:MAX_ISSUES]


class StagedAuditOrchestrator:
    """
    Runs one audit per call; holds no state between runs.

    Usage:
        orchestrator = StagedAuditOrchestrator(pagespeed_client, deepseek_client)

        final = await orchestrator.run_staged_audit(url, on_interim=show_scores)

    Cancelling the awaiting task abandons the run; a retry is simply a new call.
    """

    def __init__(self, pagespeed, enrichment):
        """
        Initialize orchestrator.

        Args:
            pagespeed: PageSpeedClient instance (fast audit)
            enrichment: DeepseekClient instance (AI enrichment with fallback)
        """
        self.pagespeed = pagespeed
        self.enrichment = enrichment

    async def run_staged_audit(
        self,
        url: str,
        on_interim: Optional[InterimCallback] = None,
    ) -> AnalysisResult:
        """
        Execute the staged audit.

        Args:
            url: Normalized website URL
            on_interim: Called (or awaited) once with the interim result,
                before enrichment starts. Never called if the fast audit fails.

        Returns:
            Final AnalysisResult with AI-derived suggestions and issues

        Raises:
            AuditError: If the fast audit fails
        """
        logger.info(f"Starting staged audit for: {url}")

        try:
            pagespeed_result = await self.pagespeed.analyze(url)

            base = self._build_base_result(url, pagespeed_result)
            interim = self._build_interim_result(base, pagespeed_result)

            if on_interim is not None:
                callback_result = on_interim(interim)
                if asyncio.iscoroutine(callback_result):
                    await callback_result
        except Exception as e:
            logger.error(f"Staged audit failed: {e}")
            raise AuditError(f"{AUDIT_ERROR_PREFIX}: {e}", cause=e) from e

        logger.info("PageSpeed stage complete, getting AI insights...")

        # Built from the untouched base, so callback mutations of the
        # interim result never reach the final one.
        final = await self._enrich(base, pagespeed_result)

        logger.info(f"Staged audit with AI analysis completed for {url}")
        return final

    async def run_full_audit(self, url: str) -> AnalysisResult:
        """
        Single-shot audit without an interim stage.

        Raises:
            AuditError: If the fast audit fails
        """
        logger.info(f"Starting full audit for: {url}")

        try:
            pagespeed_result = await self.pagespeed.analyze(url)
        except Exception as e:
            logger.error(f"Full audit failed: {e}")
            raise AuditError(f"{AUDIT_ERROR_PREFIX}: {e}", cause=e) from e

        base = self._build_base_result(url, pagespeed_result)
        final = await self._enrich(base, pagespeed_result)

        logger.info(f"Full audit with AI analysis completed for {url}")
        return final

    @staticmethod
    def _build_base_result(url: str, pagespeed_result: PageSpeedResult) -> AnalysisResult:
        """Shared fields of one run; never handed to the caller."""
        return AnalysisResult(
            url=url,
            metrics=pagespeed_result.metrics,
            detailed_metrics=pagespeed_result.detailed_metrics,
            loading_experience=pagespeed_result.loading_experience,
        )

    @staticmethod
    def _build_interim_result(base: AnalysisResult, pagespeed_result: PageSpeedResult) -> AnalysisResult:
        basic_issues = extract_basic_issues(pagespeed_result.raw_data)
        return base.with_findings(
            suggestions=INTERIM_SUGGESTIONS,
            issues=basic_issues[:MAX_INTERIM_ISSUES],
        )

    async def _enrich(self, base: AnalysisResult, pagespeed_result: PageSpeedResult) -> AnalysisResult:
        """Enrichment plus full issue extraction, merged into a new result."""
        try:
            enrichment = await self.enrichment.analyze(
                base.url,
                pagespeed_result.metrics,
                pagespeed_result.detailed_metrics,
            )
        except Exception as e:
            logger.error(f"Enrichment step failed: {e}")
            enrichment = get_fallback_analysis(pagespeed_result.metrics)
        logger.debug(f"Enrichment source: {enrichment.source}")

        try:
            extracted = extract_issues(pagespeed_result.metrics, pagespeed_result.raw_data)
        except Exception as e:
            logger.warning(f"Issue extraction failed, continuing without: {e}")
            extracted = []

        return base.with_findings(
            suggestions=merge_suggestions(enrichment),
            issues=merge_issues(enrichment, extracted),
        )
