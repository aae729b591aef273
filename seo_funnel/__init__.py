"""
SEO Lead Funnel

Backend for a lead-generation SEO analysis funnel that:
1. Audits a website with Google PageSpeed Insights
2. Shows the scores immediately while AI enrichment runs
3. Adds Swedish-language suggestions from DeepSeek (or rule-based fallback)
4. Forwards captured contact details to the leads API
"""

__version__ = "0.1.0"
