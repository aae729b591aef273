"""
Google PageSpeed Insights Client

Async HTTP client for the fast Lighthouse audit:
- All four Lighthouse categories in one request
- Bounded timeout (expiry is an ordinary failure)
- Raw payload kept for issue extraction and loadingExperience pass-through
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from seo_funnel.models import PageSpeedResult
from .metrics import extract_metrics, extract_detailed_metrics

logger = logging.getLogger(__name__)


class PageSpeedError(Exception):
    """Custom exception for PageSpeed Insights API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class PageSpeedClient:
    """
    Async client for PageSpeed Insights v5.

    Usage:
        client = PageSpeedClient(api_key="your_google_key")

        result = await client.analyze("https://exempel.se")
        # result.metrics.performance = 87
        # result.detailed_metrics.speed_index = "1.2 s"

        await client.close()
    """

    API_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    CATEGORIES = ["performance", "accessibility", "best-practices", "seo"]

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        strategy: str = "desktop",
        timeout: float = 60.0,
    ):
        """
        Initialize PageSpeed client.

        Args:
            api_key: Google API key (optional; unauthenticated calls are rate limited)
            endpoint: runPagespeed endpoint URL
            strategy: "desktop" or "mobile"
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.endpoint = endpoint or self.API_ENDPOINT
        self.strategy = strategy

        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._closed = False

    def _build_params(self, url: str) -> List[Tuple[str, str]]:
        params = [("url", url)]
        if self.api_key:
            params.append(("key", self.api_key))
        params.extend(("category", category) for category in self.CATEGORIES)
        params.append(("strategy", self.strategy))
        return params

    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        Run the Lighthouse audit and return the raw response.

        Raises:
            PageSpeedError: On transport failure, timeout, non-2xx status,
                unreadable body or a response without lighthouseResult
        """
        if self._closed:
            raise PageSpeedError("Client is closed")

        logger.info(f"Fetching PageSpeed data for: {url} (strategy={self.strategy})")

        try:
            response = await self._client.get(self.endpoint, params=self._build_params(url))
        except httpx.TimeoutException as e:
            raise PageSpeedError(f"Request timed out: {e}")
        except httpx.HTTPError as e:
            raise PageSpeedError(f"Request failed: {e}")

        if not response.is_success:
            raise PageSpeedError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PageSpeedError(f"Invalid JSON response: {e}", status_code=response.status_code)

        if not isinstance(data, dict) or not data.get("lighthouseResult"):
            raise PageSpeedError("No Lighthouse results returned", response=data if isinstance(data, dict) else None)

        return data

    async def analyze(self, url: str) -> PageSpeedResult:
        """Run the audit and extract scores and timings."""
        data = await self.fetch(url)

        result = PageSpeedResult(
            metrics=extract_metrics(data),
            detailed_metrics=extract_detailed_metrics(data),
            raw_data=data,
        )

        logger.info(
            f"PageSpeed analysis completed for {url}: "
            f"performance={result.metrics.performance}, "
            f"accessibility={result.metrics.accessibility}, "
            f"best_practices={result.metrics.best_practices}, "
            f"seo={result.metrics.seo}"
        )
        return result

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
