"""
Shared fixtures for the cascade test suite.

Nothing here touches the network: model calls go through an AsyncMock'd
ModelManager and providers are exercised with mocked clients/transports.
"""

import time
from unittest.mock import AsyncMock, Mock

import pytest

from cascade.models.manager import ModelManager
from cascade.models.providers.base import ModelResponse
from cascade.settings import DEFAULT_CONFIG_PATH, REQUIRED_ENV_KEYS, MODEL_ENV_KEYS

REQUIRED_ENV = {
    "FIREWORKS_API_KEY": "fw-test-key",
    "GOOGLE_API_KEY": "google-test-key",
    "FIREWORKS_BASE_URL": "https://fireworks.test/inference/v1",
    "GOOGLE_BASE_URL": "https://gemini.test/v1beta",
}


@pytest.fixture
def required_env(monkeypatch):
    """All four required keys present, model ids unset."""
    for key in REQUIRED_ENV_KEYS:
        monkeypatch.setenv(key, REQUIRED_ENV[key])
    for key in MODEL_ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    return dict(REQUIRED_ENV)


@pytest.fixture
def missing_env(monkeypatch):
    for key in REQUIRED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config_path():
    return DEFAULT_CONFIG_PATH


@pytest.fixture
def make_manager():
    """
    Build a ModelManager stand-in whose ``call`` returns canned text per task.

    A value that is an exception instance is raised instead of returned.
    """
    def _make(outputs: dict) -> Mock:
        async def fake_call(task, prompt_ref, variables, **params):
            output = outputs[task]
            if isinstance(output, BaseException):
                raise output
            return ModelResponse(content=output, raw=None, meta={"provider": "fake"})

        manager = Mock(spec=ModelManager)
        manager.call = AsyncMock(side_effect=fake_call)
        manager.cleanup = AsyncMock()
        return manager

    return _make


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock(monkeypatch):
    """Controllable wall clock for window expiry in the limiter's MemoryStorage."""
    fake = FakeClock(time.time())
    monkeypatch.setattr(time, "time", fake)
    return fake
