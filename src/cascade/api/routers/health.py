"""
Health check endpoint for monitoring and deployment probes.
"""

import os
from fastapi import APIRouter, Depends

from ..models.common import HealthStatus
from ..dependencies.state import get_app_settings
from ..responses import utc_timestamp
from cascade.settings import AppSettings, ConfigurationError, MODEL_ENV_KEYS, validate_api_keys

router = APIRouter()


@router.get("/health", response_model=HealthStatus, response_model_exclude_none=True)
async def health_check(settings: AppSettings = Depends(get_app_settings)):
    """
    Report whether the required credentials are configured.

    No upstream model is called; ``models`` only says which model
    identifiers are set in the environment.
    """
    try:
        validate_api_keys()
    except ConfigurationError as e:
        return HealthStatus(
            status="unhealthy",
            error=str(e),
            timestamp=utc_timestamp(),
        )

    return HealthStatus(
        status="healthy",
        timestamp=utc_timestamp(),
        environment=settings.environment,
        models={model: bool(os.getenv(env_key)) for model, env_key in MODEL_ENV_KEYS.items()},
    )
