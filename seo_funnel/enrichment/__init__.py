"""
SEO Lead Funnel - Enrichment Package

Natural-language suggestions for an audited site:
- DeepSeek chat completions when an API key is configured
- Deterministic rule-based fallback otherwise, or on any AI failure
"""

from .client import (
    DeepseekClient,
    EnrichmentError,
    build_analysis_prompt,
    parse_ai_response,
)
from .fallback import get_fallback_analysis, calculate_overall_assessment

__all__ = [
    # Client
    "DeepseekClient",
    "EnrichmentError",
    "build_analysis_prompt",
    "parse_ai_response",

    # Fallback
    "get_fallback_analysis",
    "calculate_overall_assessment",
]
