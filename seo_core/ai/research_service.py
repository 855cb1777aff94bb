# =============================================================================
# seo_core/ai/research_service.py
# Research console backed by the Gemini API with key rotation
# =============================================================================
"""
ResearchService forwards a prompt to Gemini, trying each configured API key
in order until one answers.

Usage:
    service = ResearchService(settings.gemini_api_keys)
    outcome = service.generate("Trending search terms for home espresso")
    if outcome.error:
        st.error(outcome.error)
    else:
        st.markdown(outcome.result)
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import google.generativeai as genai

from seo_core.errors import ResearchError
from seo_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# genai.configure() sets process-wide state
_configure_lock = threading.Lock()

ModelFactory = Callable[[str, str], Any]


@dataclass
class ResearchResult:
    result: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def gemini_model_factory(api_key: str, model_name: str) -> Any:
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def mask_key(api_key: str) -> str:
    return f"...{api_key[-4:]}"


class ResearchService:
    """
    Args:
        api_keys: Keys tried in order; blank entries are skipped
        model_name: Gemini model id
        model_factory: Builds a model object exposing generate_content(prompt)
    """

    def __init__(
        self,
        api_keys: List[str],
        model_name: str = DEFAULT_MODEL,
        model_factory: ModelFactory = gemini_model_factory,
    ):
        self.api_keys = [k.strip() for k in api_keys if k and k.strip()]
        self.model_name = model_name
        self.model_factory = model_factory

    def _generate_with(self, api_key: str, prompt: str) -> str:
        with _configure_lock:
            model = self.model_factory(api_key, self.model_name)
            response = model.generate_content(prompt)
        text = getattr(response, "text", None)
        if not text:
            raise ResearchError("Empty response from model")
        return text

    def generate_or_raise(self, prompt: str) -> str:
        """
        Raises:
            ResearchError: If no key is configured or every key fails
        """
        if not prompt or not prompt.strip():
            raise ResearchError("Prompt is required", attempts=0)
        if not self.api_keys:
            raise ResearchError("No Gemini API keys configured", attempts=0)

        last_error: Optional[Exception] = None
        for attempt, api_key in enumerate(self.api_keys, start=1):
            try:
                text = self._generate_with(api_key, prompt)
                logger.info(f"Research answered with key {mask_key(api_key)} (attempt {attempt})")
                return text
            except Exception as e:
                logger.warning(f"Gemini API error with key ending in {mask_key(api_key)}: {e}")
                last_error = e

        message = getattr(last_error, "message", None) or str(last_error) or "Unknown error"
        raise ResearchError(
            f"All API keys failed. Last error: {message}",
            attempts=len(self.api_keys),
        )

    def generate(self, prompt: str) -> ResearchResult:
        """Result-or-error form for the research console."""
        try:
            return ResearchResult(result=self.generate_or_raise(prompt))
        except ResearchError as e:
            logger.error(e.message)
            return ResearchResult(error=e.message)
