"""Pydantic models for Macro Lens API."""

from .nutrition import (
    EnvironmentReport,
    ErrorResponse,
    ImageAnalysisRequest,
    ImageQuery,
    ImageRecognitionResult,
    MacroRequest,
    MacroResult,
    NutritionQuery,
)

__all__ = [
    "EnvironmentReport",
    "ErrorResponse",
    "ImageAnalysisRequest",
    "ImageQuery",
    "ImageRecognitionResult",
    "MacroRequest",
    "MacroResult",
    "NutritionQuery",
]
