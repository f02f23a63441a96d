from fastapi import Request

from cascade.models.manager import ModelManager
from cascade.settings import AppSettings


def get_model_manager(request: Request) -> ModelManager:
    """FastAPI dependency to get the model manager from app state."""
    return request.app.state.model_manager


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings
