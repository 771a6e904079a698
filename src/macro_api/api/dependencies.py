"""FastAPI dependency injection factories."""

from typing import Annotated

from fastapi import Depends

from macro_api.core.config import Settings, get_settings
from macro_api.services.nutrition import (
    NutritionEstimationService,
    get_nutrition_service,
)

# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
NutritionServiceDep = Annotated[
    NutritionEstimationService, Depends(get_nutrition_service)
]
