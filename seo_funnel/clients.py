"""
Client Factory

Builds the funnel's HTTP clients from Settings. Credentials are passed in
explicitly here; the clients themselves never read the environment.
"""

import logging
from typing import Optional

from seo_funnel.audit import PageSpeedClient, StagedAuditOrchestrator
from seo_funnel.enrichment import DeepseekClient
from seo_funnel.leads import LeadsClient
from seo_funnel.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_pagespeed_client(settings: Optional[Settings] = None, strategy: Optional[str] = None) -> PageSpeedClient:
    """Create a PageSpeed Insights client."""
    settings = settings or get_settings()
    if not settings.GOOGLE_API_KEY:
        logger.warning("GOOGLE_API_KEY not configured - PageSpeed requests are unauthenticated")

    return PageSpeedClient(
        api_key=settings.GOOGLE_API_KEY,
        endpoint=settings.PAGESPEED_API_ENDPOINT,
        strategy=strategy or settings.PAGESPEED_STRATEGY,
        timeout=settings.PAGESPEED_TIMEOUT,
    )


def create_deepseek_client(settings: Optional[Settings] = None) -> DeepseekClient:
    """Create a DeepSeek client (fallback-only when no key is set)."""
    settings = settings or get_settings()
    return DeepseekClient(
        api_key=settings.DEEPSEEK_API_KEY,
        base_url=settings.DEEPSEEK_BASE_URL,
        model=settings.DEEPSEEK_MODEL,
        timeout=settings.DEEPSEEK_TIMEOUT,
    )


def create_leads_client(settings: Optional[Settings] = None) -> LeadsClient:
    """Create a leads intake client."""
    settings = settings or get_settings()
    return LeadsClient(
        endpoint=settings.LEADS_API_ENDPOINT,
        api_key=settings.LEADS_API_KEY,
        timeout=settings.LEADS_TIMEOUT,
    )


class FunnelClients:
    """
    Owns the audit clients for the lifetime of a process or script run.

    Usage:
        async with FunnelClients(settings) as clients:
            result = await clients.orchestrator.run_staged_audit(url, on_interim)
    """

    def __init__(self, settings: Optional[Settings] = None, strategy: Optional[str] = None):
        self.settings = settings or get_settings()
        self.pagespeed = create_pagespeed_client(self.settings, strategy=strategy)
        self.deepseek = create_deepseek_client(self.settings)
        self.orchestrator = StagedAuditOrchestrator(self.pagespeed, self.deepseek)

    def log_status(self):
        """Log configuration status."""
        logger.info(
            f"External API status: "
            f"PageSpeed={'keyed' if self.settings.GOOGLE_API_KEY else 'anonymous'}, "
            f"DeepSeek={'enabled' if self.settings.has_enrichment else 'fallback only'}"
        )
        if not self.settings.LEADS_API_KEY:
            logger.warning("LEADS_API_KEY not set - lead submissions will likely be rejected")

    async def close(self):
        """Close all clients."""
        await self.pagespeed.close()
        await self.deepseek.close()
        logger.debug("Closed audit clients")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
