# =============================================================================
# seo_core/ai/__init__.py
# AI research module for SEO Manager
# =============================================================================
"""
AI-assisted research console.

Usage:
    from seo_core.ai import ResearchService

    service = ResearchService(settings.gemini_api_keys, settings.gemini_model)
    outcome = service.generate(prompt)
"""

from .research_service import (
    ResearchService,
    ResearchResult,
    DEFAULT_MODEL,
    gemini_model_factory,
    mask_key,
)

__all__ = [
    "ResearchService",
    "ResearchResult",
    "DEFAULT_MODEL",
    "gemini_model_factory",
    "mask_key",
]
