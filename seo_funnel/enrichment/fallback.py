"""
Rule-Based Fallback Analysis

Deterministic substitute for the AI enrichment, used when no DeepSeek key is
configured or the AI call fails. Output depends only on the category scores.
"""

from typing import List

from seo_funnel.models import LighthouseMetrics, EnrichmentResult


MAX_SUGGESTIONS = 4
MAX_PRIORITY_ISSUES = 3
MAX_OPPORTUNITIES = 3
MAX_TECHNICAL_RECOMMENDATIONS = 4

BUSINESS_IMPACT_LOW = "Låg prestanda kan leda till högre avhoppningsfrekvens och lägre konverteringar"
BUSINESS_IMPACT_OK = "God prestanda stödjer användarengagemang och sökmotorrankning"

# (minimum average, assessment), checked top to bottom
ASSESSMENT_TIERS = [
    (90, "Utmärkt prestanda på alla områden - fortsätt så här!"),
    (80, "Bra grundläggande prestanda med utrymme för förbättringar"),
    (70, "Godkänd prestanda men flera områden behöver uppmärksamhet"),
]
ASSESSMENT_NEEDS_WORK = "Betydande förbättringar krävs för optimal prestanda"


def calculate_overall_assessment(metrics: LighthouseMetrics) -> str:
    """Pick the assessment text for the unweighted mean of the four scores."""
    average = metrics.average
    for minimum, assessment in ASSESSMENT_TIERS:
        if average >= minimum:
            return assessment
    return ASSESSMENT_NEEDS_WORK


def get_fallback_analysis(metrics: LighthouseMetrics) -> EnrichmentResult:
    """
    Build enrichment output from score thresholds alone.

    Args:
        metrics: Lighthouse category scores

    Returns:
        EnrichmentResult with source="fallback"
    """
    suggestions: List[str] = []
    priority_issues: List[str] = []
    opportunities: List[str] = []
    technical_recommendations: List[str] = []

    # Performance
    if metrics.performance < 70:
        priority_issues.append("Kritiskt låg prestanda påverkar användarupplevelsen")
        suggestions.append("Optimera bilder och använd moderna format som WebP")
        technical_recommendations.append("Implementera lazy loading för bilder och videos")
    elif metrics.performance < 85:
        opportunities.append("Förbättra laddningstider för bättre användarupplevelse")
        suggestions.append("Minifiera och komprimera CSS/JavaScript-filer")

    # SEO
    if metrics.seo < 80:
        priority_issues.append("SEO-brister kan minska synligheten i sökmotorer")
        suggestions.append("Lägg till meta descriptions och optimera sidtitlar")
        technical_recommendations.append("Implementera strukturerad data (Schema.org)")

    # Accessibility
    if metrics.accessibility < 85:
        suggestions.append("Förbättra tillgänglighet med alt-text och bättre kontrast")
        technical_recommendations.append("Använd semantiska HTML-element")

    # Best practices
    if metrics.best_practices < 85:
        opportunities.append("Förbättra säkerhet och moderna webbstandarder")
        technical_recommendations.append("Implementera HTTPS och Content Security Policy")

    # Good scores everywhere
    if not suggestions:
        suggestions.append("Fortsätt optimera Core Web Vitals")
        opportunities.append("Överväg Progressive Web App funktioner")

    business_impact = BUSINESS_IMPACT_LOW if metrics.performance < 70 else BUSINESS_IMPACT_OK

    return EnrichmentResult(
        suggestions=suggestions[:MAX_SUGGESTIONS],
        priority_issues=priority_issues[:MAX_PRIORITY_ISSUES],
        opportunities=opportunities[:MAX_OPPORTUNITIES],
        technical_recommendations=technical_recommendations[:MAX_TECHNICAL_RECOMMENDATIONS],
        business_impact=business_impact,
        overall_assessment=calculate_overall_assessment(metrics),
        source="fallback",
    )
