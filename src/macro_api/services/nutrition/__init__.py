"""
Nutrition estimation service - Gemini-backed macro and food photo analysis.
"""

from .base import NutritionEstimationService
from .factory import clear_service_cache, get_nutrition_service
from .gemini_provider import GeminiNutritionClient
from .retry import RetryPolicy, is_retryable_status

__all__ = [
    "NutritionEstimationService",
    "GeminiNutritionClient",
    "RetryPolicy",
    "is_retryable_status",
    "get_nutrition_service",
    "clear_service_cache",
]
