"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import json
import pytest
from typing import Any, Callable, Dict, Optional

import httpx

from seo_funnel.models import (
    LighthouseMetrics,
    DetailedMetrics,
    PageSpeedResult,
)
from seo_funnel.audit.metrics import extract_metrics, extract_detailed_metrics


# ============================================================================
# Mock Data Fixtures
# ============================================================================

@pytest.fixture
def pagespeed_response() -> Dict[str, Any]:
    """Trimmed PageSpeed Insights v5 response for a slow Swedish site."""
    return {
        "id": "https://exempel.se/",
        "loadingExperience": {
            "id": "https://exempel.se/",
            "overall_category": "AVERAGE",
            "metrics": {
                "LARGEST_CONTENTFUL_PAINT_MS": {"percentile": 3100, "category": "AVERAGE"},
            },
        },
        "lighthouseResult": {
            "categories": {
                "performance": {"id": "performance", "score": 0.45},
                "accessibility": {"id": "accessibility", "score": 0.9},
                "best-practices": {"id": "best-practices", "score": 0.9},
                "seo": {"id": "seo", "score": 0.85},
            },
            "audits": {
                "first-contentful-paint": {
                    "score": 0.62,
                    "displayValue": "1.8 s",
                    "title": "First Contentful Paint",
                    "description": "First Contentful Paint marks the time at which the first text or image is painted.",
                },
                "largest-contentful-paint": {
                    "score": 0.31,
                    "displayValue": "4.2 s",
                    "title": "Largest Contentful Paint",
                    "description": "Largest Contentful Paint marks the time at which the largest text or image is painted.",
                },
                "speed-index": {
                    "score": 0.44,
                    "displayValue": "3.9 s",
                    "title": "Speed Index",
                },
                "total-blocking-time": {"score": 0.7, "displayValue": "320 ms"},
                "interactive": {"score": 0.5, "displayValue": "5.1 s"},
                "cumulative-layout-shift": {"score": 0.95, "displayValue": "0.02"},
                "meta-description": {
                    "score": 0,
                    "title": "Document does not have a meta description",
                    "description": "",
                },
                "document-title": {"score": 1, "title": "Document has a `<title>` element"},
                "image-alt": {"score": None, "title": "Image elements have `[alt]` attributes"},
            },
        },
    }


@pytest.fixture
def pagespeed_result(pagespeed_response) -> PageSpeedResult:
    return PageSpeedResult(
        metrics=extract_metrics(pagespeed_response),
        detailed_metrics=extract_detailed_metrics(pagespeed_response),
        raw_data=pagespeed_response,
    )


@pytest.fixture
def low_performance_metrics() -> LighthouseMetrics:
    return LighthouseMetrics(performance=45, accessibility=90, best_practices=90, seo=85)


@pytest.fixture
def detailed_metrics() -> DetailedMetrics:
    return DetailedMetrics(
        first_contentful_paint="1.8 s",
        speed_index="3.9 s",
        largest_contentful_paint="4.2 s",
        total_blocking_time="320 ms",
        time_to_interactive="5.1 s",
        cumulative_layout_shift="0.02",
    )


@pytest.fixture
def ai_answer() -> Dict[str, Any]:
    """JSON object as returned by the model."""
    return {
        "suggestions": [
            "Komprimera hero-bilden på startsidan",
            "Ladda tredjepartsskript asynkront",
        ],
        "priorityIssues": ["Långsam LCP på mobil"],
        "opportunities": ["Inför CDN för statiska filer"],
        "technicalRecommendations": ["Använd preload för typsnitt"],
        "businessImpact": "Snabbare sidor ger fler konverteringar",
        "overallAssessment": "Bra grund men prestandan behöver lyftas",
    }


# ============================================================================
# HTTP Helpers
# ============================================================================

@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Factory for httpx responses returned by mocked client calls."""

    def _make(status_code: int = 200, json_data: Optional[Any] = None, text: Optional[str] = None) -> httpx.Response:
        request = httpx.Request("GET", "https://test.invalid")
        if json_data is not None:
            return httpx.Response(status_code, json=json_data, request=request)
        return httpx.Response(status_code, text=text or "", request=request)

    return _make


@pytest.fixture
def chat_completion() -> Callable[[Any], Dict[str, Any]]:
    """Wrap content in a chat-completion envelope."""

    def _wrap(content: Any) -> Dict[str, Any]:
        if not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "model": "deepseek-chat",
            "choices": [
                {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"},
            ],
            "usage": {"prompt_tokens": 300, "completion_tokens": 200, "total_tokens": 500},
        }

    return _wrap
