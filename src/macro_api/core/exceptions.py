"""Custom exception classes for the API."""

from typing import Any


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int = 400, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class InputError(APIError):
    """A required request field is missing or empty."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=400, details=details)


class CredentialError(APIError):
    """The upstream provider API key is not configured."""

    def __init__(self, message: str = "API key not configured"):
        super().__init__(message=message, status_code=500)


class UpstreamError(APIError):
    """Base class for failures talking to the upstream provider."""


class TransientServerError(UpstreamError):
    """
    Retryable upstream failure: HTTP 429, HTTP 5xx or a transport error.

    ``status_code`` on the HTTP side is always 502; the upstream status (None
    for transport errors) is kept in ``upstream_status``.
    """

    def __init__(self, upstream_status: int | None, message: str | None = None):
        self.upstream_status = upstream_status
        if message is None:
            message = f"Server error: {upstream_status}"
        super().__init__(
            message=message,
            status_code=502,
            details={"upstream_status": upstream_status},
        )


class ClientRejectedError(UpstreamError):
    """Non-retryable rejection from the provider; its status is passed through."""

    def __init__(self, upstream_status: int, body: str):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(
            message=f"API request failed: {upstream_status}",
            status_code=upstream_status,
            details={"upstream_status": upstream_status, "body": body},
        )


class MalformedResponseError(UpstreamError):
    """The provider envelope or its embedded JSON did not match expectations."""

    def __init__(self, raw: Any, reason: str | None = None):
        self.raw = raw
        self.reason = reason
        super().__init__(
            message="AI returned an invalid response",
            status_code=500,
            details={"reason": reason} if reason else None,
        )


class RetriesExhaustedError(UpstreamError):
    """Every attempt in the retry budget failed with a retryable error."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_error: TransientServerError | None = None,
    ):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            message=message,
            status_code=500,
            details={
                "attempts": attempts,
                "last_error": last_error.message if last_error else None,
            },
        )
