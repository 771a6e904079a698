"""
Factory for the configured nutrition estimation service.

Reads ``Settings`` once and passes everything the client needs to its
constructor; the client itself never touches the environment.
"""

import logging
from functools import lru_cache

from macro_api.core.config import get_settings

from .base import NutritionEstimationService
from .gemini_provider import GeminiNutritionClient
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_nutrition_service() -> NutritionEstimationService:
    """
    Get the process-wide nutrition service.

    A missing API key is not fatal here: the client is still built and
    reports ``CredentialError`` on each request.

    Returns:
        Configured GeminiNutritionClient instance
    """
    settings = get_settings()

    if not settings.is_llm_configured:
        logger.warning("GEMINI_API_KEY is not set; nutrition requests will fail")

    logger.info(
        f"Configuring Gemini provider: model={settings.gemini_model}, "
        f"text_retries={settings.text_max_retries}, "
        f"image_retries={settings.image_max_retries}"
    )

    return GeminiNutritionClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.upstream_timeout,
        text_retry=RetryPolicy(
            max_attempts=settings.text_max_retries,
            initial_delay_ms=settings.initial_backoff_ms,
        ),
        image_retry=RetryPolicy(
            max_attempts=settings.image_max_retries,
            initial_delay_ms=settings.initial_backoff_ms,
        ),
    )


def clear_service_cache():
    """Clear the cached service instance (useful for testing)."""
    get_nutrition_service.cache_clear()
