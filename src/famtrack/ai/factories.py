"""Provider factory functions."""

import os
from typing import Optional

import structlog

from famtrack.ai.providers import GeminiProvider, LLMProvider, OpenAIProvider

logger = structlog.get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT = 120.0


def _timeout(environ) -> float:
    raw = environ.get("FAMTRACK_AI_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"FAMTRACK_AI_TIMEOUT must be a number of seconds, got '{raw}'")


def create_providers(environ: Optional[dict] = None) -> list[LLMProvider]:
    """Build the provider tiers in fallback order: Gemini, then OpenAI.

    A tier whose API key is not set is left out of the chain.

    Args:
        environ: Mapping to read settings from. Defaults to os.environ

    Returns:
        Configured providers, possibly empty
    """
    environ = os.environ if environ is None else environ
    timeout = _timeout(environ)
    providers: list[LLMProvider] = []

    gemini_key = environ.get("GOOGLE_GEMINI_API_KEY")
    if gemini_key:
        providers.append(
            GeminiProvider(
                gemini_key,
                model=environ.get("FAMTRACK_GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
                timeout=timeout,
            )
        )

    openai_key = environ.get("OPENAI_API_KEY")
    if openai_key:
        providers.append(
            OpenAIProvider(
                openai_key,
                model=environ.get("FAMTRACK_OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
                base_url=environ.get("OPENAI_BASE_URL") or None,
                timeout=timeout,
            )
        )

    logger.debug("providers_configured", providers=[p.name for p in providers])
    return providers
