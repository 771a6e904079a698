"""
Base interface for nutrition estimation providers.

Routes depend on this interface only; tests and alternative providers plug in
behind it.
"""

from abc import ABC, abstractmethod

from macro_api.models.nutrition import (
    ImageQuery,
    ImageRecognitionResult,
    MacroResult,
    NutritionQuery,
)


class NutritionEstimationService(ABC):
    """Abstract base class for upstream nutrition providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        ...

    @abstractmethod
    async def estimate_macros(self, query: NutritionQuery) -> MacroResult:
        """
        Estimate calories and macronutrients for a food description.

        Raises:
            InputError: If the query text is empty
            CredentialError: If the provider key is missing
            UpstreamError: If the provider call fails
        """
        ...

    @abstractmethod
    async def recognize_image(self, query: ImageQuery) -> ImageRecognitionResult:
        """
        Identify the food in a photo and suggest a portion.

        Raises:
            InputError: If the image payload is empty
            CredentialError: If the provider key is missing
            UpstreamError: If the provider call fails
        """
        ...

    async def close(self) -> None:
        """Release network resources held by the provider."""
        return None
