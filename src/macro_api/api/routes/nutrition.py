"""Nutrition API routes.

Endpoints used by the browser client to turn a meal description or a food
photo into a structured estimate.
"""

import logging

from fastapi import APIRouter

from macro_api.api.dependencies import NutritionServiceDep
from macro_api.core.exceptions import InputError
from macro_api.models.nutrition import (
    ErrorResponse,
    ImageAnalysisRequest,
    ImageQuery,
    ImageRecognitionResult,
    MacroRequest,
    MacroResult,
    NutritionQuery,
)

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    500: {"model": ErrorResponse, "description": "Missing API key or upstream failure"},
}


@router.post(
    "/get-macros",
    response_model=MacroResult,
    responses=ERROR_RESPONSES,
    summary="Estimate calories and macros for a food description",
)
async def get_macros(
    service: NutritionServiceDep,
    request: MacroRequest | None = None,
) -> MacroResult:
    """
    Estimate calories, protein, carbs and fat for free text such as
    "2 large eggs and 100g rice".

    Terminal upstream rejections are returned with the provider's status code.
    """
    if request is None or not request.query or not request.query.strip():
        raise InputError("Query is required")

    return await service.estimate_macros(NutritionQuery(text=request.query))


@router.post(
    "/analyze-image",
    response_model=ImageRecognitionResult,
    responses=ERROR_RESPONSES,
    summary="Identify the food in a photo",
)
async def analyze_image(
    service: NutritionServiceDep,
    request: ImageAnalysisRequest | None = None,
) -> ImageRecognitionResult:
    """Identify the food in a base64 photo (bare or data URL) and suggest a portion."""
    if request is None or not request.image or not request.image.strip():
        raise InputError("Image is required")

    query = ImageQuery.from_upload(request.image, request.mime_type)
    return await service.recognize_image(query)
