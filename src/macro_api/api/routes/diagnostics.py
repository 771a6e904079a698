"""Diagnostic routes."""

import time

from fastapi import APIRouter

from macro_api.api.dependencies import SettingsDep
from macro_api.models.nutrition import EnvironmentReport

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/test-env", response_model=EnvironmentReport)
async def test_env(settings: SettingsDep) -> EnvironmentReport:
    """Report uptime and whether the API key is configured (never the key itself)."""
    return EnvironmentReport(
        status="ok",
        uptime_seconds=round(time.monotonic() - _STARTED_AT, 3),
        api_key_configured=settings.is_llm_configured,
        model=settings.gemini_model,
        port=settings.port,
    )
