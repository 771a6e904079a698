"""Pydantic models for the nutrition proxy API contract.

Defines the normalized queries handed to the upstream client, the results it
returns, and the HTTP request/response bodies used by the browser client.
"""

import math
import re
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

# Non-negative nutrient amount; whole numbers stay ints on the wire
Amount = Annotated[int, Field(ge=0)] | Annotated[float, Field(ge=0)]

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(;[^,]*)?;base64,", re.IGNORECASE)


def coerce_amount(value: Any) -> int | float:
    """
    Coerce an upstream nutrient value to a non-negative number.

    Numbers and numeric strings pass through, with integral values kept as
    ints; anything else (missing, null, booleans, NaN, infinities, values too
    large for a float, negatives, free text) becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    if number.is_integer():
        return int(number)
    return number


def coerce_text(value: Any) -> str:
    """Coerce an upstream string field, mapping missing values to ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


# =============================================================================
# Upstream queries
# =============================================================================


class NutritionQuery(BaseModel):
    """Free-text food description to estimate macros for."""

    text: str


class ImageQuery(BaseModel):
    """Base64-encoded food photo to identify."""

    image_data: str
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    @classmethod
    def from_upload(cls, image: str, mime_type: str | None = None) -> "ImageQuery":
        """
        Build a query from browser input.

        Accepts either bare base64 or a ``data:<mime>;base64,<payload>`` URL
        as produced by ``FileReader.readAsDataURL``. An explicit ``mime_type``
        wins over the one embedded in the data URL.
        """
        image = image.strip()
        match = _DATA_URL_RE.match(image)
        if match:
            image = image[match.end():]
            mime_type = mime_type or match.group("mime")
        return cls(image_data=image, mime_type=mime_type or DEFAULT_IMAGE_MIME_TYPE)


# =============================================================================
# Upstream results
# =============================================================================


class MacroResult(BaseModel):
    """Nutrition totals for a described meal."""

    name: str = Field("", description="Corrected or parsed name of the food items")
    calories: Amount = Field(0, description="Energy in kcal")
    protein: Amount = Field(0, description="Protein in grams")
    carbs: Amount = Field(0, description="Carbohydrates in grams")
    fat: Amount = Field(0, description="Fat in grams")

    @field_validator("name", mode="before")
    @classmethod
    def _lenient_name(cls, value: Any) -> str:
        return coerce_text(value)

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> int | float:
        return coerce_amount(value)


class ImageRecognitionResult(BaseModel):
    """Food identified in a photo plus a portion hint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    food_name: str = Field("", description="Name of the main food in the image")
    suggested_quantity: str = Field(
        "", description="Portion estimate, e.g. '1 cup' or '200g'"
    )

    @field_validator("food_name", "suggested_quantity", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> str:
        return coerce_text(value)


# =============================================================================
# HTTP bodies
# =============================================================================


class MacroRequest(BaseModel):
    """Body of POST /api/get-macros."""

    query: str | None = None


class ImageAnalysisRequest(BaseModel):
    """Body of POST /api/analyze-image."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image: str | None = None
    mime_type: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned for every failure."""

    error: str
    details: Any | None = None


class EnvironmentReport(BaseModel):
    """Diagnostic snapshot returned by GET /api/test-env."""

    status: str
    uptime_seconds: float
    api_key_configured: bool
    model: str
    port: int
