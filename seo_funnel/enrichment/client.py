"""
DeepSeek Enrichment Client

Asks a chat-completion LLM for Swedish-language suggestions based on the
Lighthouse scores. Enrichment is never fatal: a missing key, a failed
request or an unusable answer all produce the rule-based fallback.

API: https://api-docs.deepseek.com/
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from seo_funnel.models import LighthouseMetrics, DetailedMetrics, EnrichmentResult
from .fallback import get_fallback_analysis

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "Du är en expert på webbprestanda och SEO. Svara alltid med valid JSON "
    "enligt specificerat format. Använd svenska språket."
)

ANALYSIS_PROMPT_TEMPLATE = """
Analyze this website SEO performance data and provide actionable recommendations. Respond ONLY with valid JSON in the exact format specified.

Website: {url}
Lighthouse Scores:
- Performance: {performance}/100
- Accessibility: {accessibility}/100
- Best Practices: {best_practices}/100
- SEO: {seo}/100

Key Metrics:
- First Contentful Paint: {first_contentful_paint}
- Speed Index: {speed_index}
- Largest Contentful Paint: {largest_contentful_paint}
- Total Blocking Time: {total_blocking_time}
- Time to Interactive: {time_to_interactive}
- Cumulative Layout Shift: {cumulative_layout_shift}

Respond with JSON in this exact format (no additional text):
{{
  "suggestions": ["konkret actionable suggestion 1", "suggestion 2", "suggestion 3"],
  "priorityIssues": ["högsta prioritet issue 1", "issue 2"],
  "opportunities": ["optimization opportunity 1", "opportunity 2"],
  "technicalRecommendations": ["technical rec 1", "technical rec 2"],
  "businessImpact": "short description of business impact in Swedish",
  "overallAssessment": "brief overall assessment in Swedish"
}}

Keep all text in Swedish. Make suggestions specific and actionable. Limit arrays to 2-4 items each."""


class EnrichmentError(Exception):
    """Custom exception for DeepSeek API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


def _as_text_items(value: Any) -> Any:
    """Render list items as strings; non-lists are left for validation to reject."""
    if isinstance(value, list):
        return [item if isinstance(item, str) else str(item) for item in value]
    return value


class AIAnalysisPayload(BaseModel):
    """
    JSON object the model is asked to return.

    Only `suggestions` is required and it must be a list. Optional lists
    may be missing or null, and non-string list items are kept as text.
    """
    model_config = ConfigDict(populate_by_name=True)

    suggestions: List[str]
    priority_issues: List[str] = Field(default_factory=list, alias="priorityIssues")
    opportunities: List[str] = Field(default_factory=list)
    technical_recommendations: List[str] = Field(default_factory=list, alias="technicalRecommendations")
    business_impact: str = Field("", alias="businessImpact")
    overall_assessment: str = Field("", alias="overallAssessment")

    @field_validator("suggestions", mode="before")
    @classmethod
    def _suggestions_as_text(cls, value: Any) -> Any:
        return _as_text_items(value)

    @field_validator("priority_issues", "opportunities", "technical_recommendations", mode="before")
    @classmethod
    def _optional_list(cls, value: Any) -> Any:
        if value is None:
            return []
        return _as_text_items(value)

    @field_validator("business_impact", "overall_assessment", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def to_result(self) -> EnrichmentResult:
        return EnrichmentResult(
            suggestions=list(self.suggestions),
            priority_issues=list(self.priority_issues),
            opportunities=list(self.opportunities),
            technical_recommendations=list(self.technical_recommendations),
            business_impact=self.business_impact,
            overall_assessment=self.overall_assessment,
            source="ai",
        )


def build_analysis_prompt(url: str, metrics: LighthouseMetrics, detailed_metrics: DetailedMetrics) -> str:
    """Render the user prompt with scores and timings."""
    return ANALYSIS_PROMPT_TEMPLATE.format(
        url=url,
        performance=metrics.performance,
        accessibility=metrics.accessibility,
        best_practices=metrics.best_practices,
        seo=metrics.seo,
        first_contentful_paint=detailed_metrics.first_contentful_paint,
        speed_index=detailed_metrics.speed_index,
        largest_contentful_paint=detailed_metrics.largest_contentful_paint,
        total_blocking_time=detailed_metrics.total_blocking_time,
        time_to_interactive=detailed_metrics.time_to_interactive,
        cumulative_layout_shift=detailed_metrics.cumulative_layout_shift,
    )


def parse_ai_response(data: Dict[str, Any]) -> EnrichmentResult:
    """
    Validate a chat-completion envelope and decode the JSON answer.

    Raises:
        EnrichmentError: If the envelope, the JSON or its structure is unusable
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise EnrichmentError("Invalid response format from DeepSeek API", response=data)

    try:
        payload = json.loads(content)
    except (TypeError, ValueError) as e:
        raise EnrichmentError(f"AI response is not valid JSON: {e}")

    try:
        return AIAnalysisPayload.model_validate(payload).to_result()
    except ValidationError as e:
        raise EnrichmentError(f"Invalid AI response structure: {e.error_count()} error(s)")


class DeepseekClient:
    """
    Async client for DeepSeek chat completions.

    Usage:
        client = DeepseekClient(api_key="your_api_key")

        result = await client.analyze(url, metrics, detailed_metrics)
        # result.suggestions = ["Optimera bilder ...", ...]
        # result.source = "ai" (or "fallback")

        await client.close()
    """

    BASE_URL = "https://api.deepseek.com/v1"
    DEFAULT_MODEL = "deepseek-chat"
    MAX_TOKENS = 800
    TEMPERATURE = 0.3

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize DeepSeek client.

        Args:
            api_key: DeepSeek API key. None runs in fallback-only mode.
            base_url: API base URL
            model: Chat model name
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=base_url or self.BASE_URL,
            headers=headers,
            timeout=httpx.Timeout(timeout),
        )
        self._closed = False

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def analyze(
        self,
        url: str,
        metrics: LighthouseMetrics,
        detailed_metrics: DetailedMetrics,
    ) -> EnrichmentResult:
        """
        Get AI enrichment, falling back to rule-based analysis on any failure.

        Returns:
            EnrichmentResult (source "ai" on success, "fallback" otherwise)
        """
        if not self.is_configured:
            logger.info("DeepSeek API key not configured, using fallback analysis")
            return get_fallback_analysis(metrics)

        try:
            result = await self.request_analysis(url, metrics, detailed_metrics)
            logger.info("DeepSeek AI analysis completed successfully")
            return result
        except Exception as e:
            logger.error(f"DeepSeek AI analysis failed: {e}")
            logger.info("Falling back to rule-based analysis")
            return get_fallback_analysis(metrics)

    async def request_analysis(
        self,
        url: str,
        metrics: LighthouseMetrics,
        detailed_metrics: DetailedMetrics,
    ) -> EnrichmentResult:
        """
        Single AI request without fallback.

        Raises:
            EnrichmentError: On any API, transport or parsing failure
        """
        if self._closed:
            raise EnrichmentError("Client has been closed")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_analysis_prompt(url, metrics, detailed_metrics)},
            ],
            "max_tokens": self.MAX_TOKENS,
            "temperature": self.TEMPERATURE,
            "response_format": {"type": "json_object"},
        }

        logger.info(f"Sending data to DeepSeek AI for analysis of {url}")

        try:
            response = await self._client.post("/chat/completions", json=payload)
        except httpx.TimeoutException as e:
            raise EnrichmentError(f"Request timed out: {e}")
        except httpx.HTTPError as e:
            raise EnrichmentError(f"Request failed: {e}")

        if not response.is_success:
            raise EnrichmentError(
                f"DeepSeek API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EnrichmentError(f"Invalid JSON envelope: {e}", status_code=response.status_code)

        return parse_ai_response(data)

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
