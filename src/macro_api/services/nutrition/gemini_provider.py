"""
Google Gemini provider for nutrition estimation.

Sends the food description or photo to the ``generateContent`` endpoint with a
JSON response schema, retries transient failures with exponential backoff and
normalizes the embedded JSON answer.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from macro_api.core.exceptions import (
    ClientRejectedError,
    CredentialError,
    InputError,
    MalformedResponseError,
    RetriesExhaustedError,
    TransientServerError,
)
from macro_api.models.nutrition import (
    ImageQuery,
    ImageRecognitionResult,
    MacroResult,
    NutritionQuery,
)

from .base import NutritionEstimationService
from .prompts import (
    IMAGE_RESPONSE_SCHEMA,
    IMAGE_SYSTEM_PROMPT,
    IMAGE_USER_PROMPT,
    MACRO_RESPONSE_SCHEMA,
    MACRO_SYSTEM_PROMPT,
)
from .retry import RetryPolicy, is_retryable_status

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-preview-09-2025"

MACROS_EXHAUSTED_MESSAGE = "Failed to get macro data from AI"
IMAGE_EXHAUSTED_MESSAGE = "Failed to analyze image with AI"


class GeminiNutritionClient(NutritionEstimationService):
    """
    Nutrition estimation using the Gemini REST API.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        text_retry: RetryPolicy | None = None,
        image_retry: RetryPolicy | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key (an empty key fails every call with CredentialError)
            model: Gemini model name
            base_url: API base URL, without the ``/models`` suffix
            timeout: Per-call transport timeout in seconds
            text_retry: Retry policy for macro estimates (default: 5 attempts)
            image_retry: Retry policy for image recognition (default: 3 attempts)
            http_client: Pre-built client, e.g. one backed by ``httpx.MockTransport``
            sleep: Coroutine used for backoff waits
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.text_retry = text_retry or RetryPolicy(max_attempts=5)
        self.image_retry = image_retry or RetryPolicy(max_attempts=3)
        self._client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep

    @property
    def provider_name(self) -> str:
        return f"gemini/{self.model}"

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def estimate_macros(self, query: NutritionQuery) -> MacroResult:
        """Estimate macros for a free-text food description."""
        text = query.text.strip() if query.text else ""
        if not text:
            raise InputError("Query is required")
        self._require_api_key()

        payload = build_macro_payload(text)
        logger.info(f"Requesting macros from {self.provider_name} for: {text[:80]}")

        data = await self._generate(payload, self.text_retry, MACROS_EXHAUSTED_MESSAGE)
        return MacroResult.model_validate(data)

    async def recognize_image(self, query: ImageQuery) -> ImageRecognitionResult:
        """Identify the food shown in a base64-encoded photo."""
        image_data = query.image_data.strip() if query.image_data else ""
        if not image_data:
            raise InputError("Image is required")
        self._require_api_key()

        payload = build_image_payload(image_data, query.mime_type)
        logger.info(
            f"Requesting image recognition from {self.provider_name} "
            f"({len(image_data)} base64 chars, {query.mime_type})"
        )

        data = await self._generate(payload, self.image_retry, IMAGE_EXHAUSTED_MESSAGE)
        return ImageRecognitionResult.model_validate(data)

    # -------------------------------------------------------------------------
    # Transport and retry
    # -------------------------------------------------------------------------

    def _require_api_key(self) -> None:
        if not self.api_key:
            logger.error("GEMINI_API_KEY not found in environment variables")
            raise CredentialError()

    async def _generate(
        self,
        payload: dict[str, Any],
        policy: RetryPolicy,
        exhausted_message: str,
    ) -> dict[str, Any]:
        """Call the provider until it answers, rejects, or the budget runs out."""
        delays = policy.delays()
        last_error: TransientServerError | None = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await self._post_once(payload)
            except TransientServerError as e:
                last_error = e
                delay = next(delays, None)
                if delay is None:
                    break
                logger.warning(
                    f"Gemini attempt {attempt}/{policy.max_attempts} failed "
                    f"({e.message}); retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        logger.error(
            f"Gemini call failed after {policy.max_attempts} attempts: "
            f"{last_error.message if last_error else 'unknown error'}"
        )
        raise RetriesExhaustedError(
            exhausted_message,
            attempts=policy.max_attempts,
            last_error=last_error,
        )

    async def _post_once(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Issue a single call and classify its outcome."""
        client = await self._get_client()

        try:
            response = await client.post(
                self.endpoint,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
        except httpx.TransportError as e:
            raise TransientServerError(None, message=f"Transport error: {e!r}") from e

        if response.is_success:
            return parse_envelope(response)

        if is_retryable_status(response.status_code):
            raise TransientServerError(response.status_code)

        logger.error(f"API Error Response ({response.status_code}): {response.text}")
        raise ClientRejectedError(response.status_code, response.text)


# =============================================================================
# Payloads and parsing
# =============================================================================


def build_macro_payload(text: str) -> dict[str, Any]:
    """Request body for a text macro estimate."""
    return {
        "contents": [{"parts": [{"text": text}]}],
        "systemInstruction": {"parts": [{"text": MACRO_SYSTEM_PROMPT}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": MACRO_RESPONSE_SCHEMA,
        },
    }


def build_image_payload(image_data: str, mime_type: str) -> dict[str, Any]:
    """Request body for recognizing the food in a photo."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": IMAGE_USER_PROMPT},
                    {"inlineData": {"mimeType": mime_type, "data": image_data}},
                ]
            }
        ],
        "systemInstruction": {"parts": [{"text": IMAGE_SYSTEM_PROMPT}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": IMAGE_RESPONSE_SCHEMA,
        },
    }


def parse_envelope(response: httpx.Response) -> dict[str, Any]:
    """
    Extract the JSON object embedded in a ``generateContent`` response.

    The answer lives in ``candidates[0].content.parts[0].text`` as a JSON
    string.

    Raises:
        MalformedResponseError: If the envelope or the embedded JSON is unusable
    """
    try:
        envelope = response.json()
    except ValueError as e:
        logger.error(f"Gemini returned a non-JSON body: {response.text[:500]}")
        raise MalformedResponseError(response.text, "response body is not JSON") from e

    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        logger.error(f"Invalid API response structure: {envelope}")
        raise MalformedResponseError(
            envelope, "missing candidates[0].content.parts[0].text"
        ) from e

    if not isinstance(text, str):
        logger.error(f"Invalid API response structure: {envelope}")
        raise MalformedResponseError(envelope, "candidate text is not a string")

    try:
        data = json.loads(_strip_code_fence(text))
    except ValueError as e:
        logger.error(f"Candidate text is not valid JSON: {text[:500]}")
        raise MalformedResponseError(text, "candidate text is not valid JSON") from e

    if not isinstance(data, dict):
        logger.error(f"Candidate JSON is not an object: {text[:500]}")
        raise MalformedResponseError(text, "candidate JSON is not an object")

    return data


def _strip_code_fence(text: str) -> str:
    """Drop a surrounding ```json fence if the model added one anyway."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
