from __future__ import annotations
from typing import Optional, Dict, Any, Union
from pathlib import Path
from enum import Enum
import time
import logging

from .prompts import PromptManager
from .providers.base import ChatRequest, ModelProvider, ModelResponse, ModelError
from .providers.gemini import GeminiProvider
from .providers.openai_sdk import OpenAIProvider
from ..settings import load_config, resolve_env

logger = logging.getLogger(__name__)


class Provider(Enum):
    OPENAI = "openai"
    GEMINI = "gemini"


class ModelManager:
    def __init__(self, config_path: Union[Path, str], prompts_dir: Optional[Path] = None):
        self.config_path = Path(config_path)
        self.config = load_config(self.config_path)
        self.prompts = PromptManager(prompts_dir)
        self._providers: Dict[str, ModelProvider] = {}

    def _get_provider(self, provider_name: str) -> ModelProvider:
        if provider_name in self._providers:
            return self._providers[provider_name]
        if provider_name not in self.config['providers']:
            raise ValueError(f"Unknown provider: {provider_name}")

        provider_cfg = self.config["providers"][provider_name]
        settings = resolve_env(provider_cfg.get("settings", {}))

        try:
            provider_type = Provider(provider_cfg["type"])
        except ValueError:
            raise ValueError(f"Unknown provider type: {provider_cfg['type']}") from None

        if provider_type is Provider.OPENAI:
            provider = OpenAIProvider(name=provider_name, **settings)
        else:
            provider = GeminiProvider(name=provider_name, **settings)

        self._providers[provider_name] = provider
        logger.info(f"initialized provider: {provider_name} ({provider_type.value})")
        return provider

    def model_for(self, task: str) -> str:
        if task not in self.config["tasks"]:
            raise ValueError(f"Unknown task: {task}")
        return resolve_env(self.config["tasks"][task]["model"])

    async def call(self, task: str, prompt_ref: str, variables: Dict[str, Any], **params_override) -> ModelResponse:
        if task not in self.config["tasks"]:
            raise ValueError(f"Unknown task: {task}")

        task_cfg = self.config["tasks"][task]
        rendered = self.prompts.render(prompt_ref, variables)

        # None overrides mean "use the task default"
        overrides = {k: v for k, v in params_override.items() if v is not None}
        params = {**task_cfg.get("params", {}), **overrides}

        request = ChatRequest(
            model=self.model_for(task),
            messages=rendered,
            params=params,
            timeout=task_cfg.get("timeout"),
        )

        provider = self._get_provider(task_cfg["provider"])
        start_time = time.perf_counter()
        try:
            response = await provider.chat(request)
        except ModelError as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(f"task '{task}' failed after {elapsed_ms:.0f}ms: {e}")
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"task '{task}' completed in {elapsed_ms:.0f}ms ({len(response.content)} chars)")
        return response

    async def cleanup(self):
        for name, provider in self._providers.items():
            try:
                await provider.cleanup()
                logger.info(f"Cleaned up provider: {name}")
            except Exception as e:
                logger.error(f"Cleanup failed for {name}: {e}")

        self._providers.clear()
