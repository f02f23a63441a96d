from __future__ import annotations
from typing import Dict, Any, Optional
import time

from openai import AsyncOpenAI
from openai import APIStatusError, APITimeoutError, APIConnectionError

from .base import ModelProvider, ChatRequest, ModelResponse, ModelError, ModelTimeout, UpstreamError


class OpenAIProvider(ModelProvider):
    """Chat completions against any OpenAI-compatible endpoint (Fireworks, OpenRouter, OpenAI)."""

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, name: str = "openai", default_headers: Optional[Dict[str, str]] = None, timeout: float = 60.0, **kwargs):
        # failed calls surface immediately, the pipeline never retries
        kwargs.setdefault("max_retries", 0)
        self.client = AsyncOpenAI(
            base_url=base_url,
            api_key=api_key,
            default_headers=default_headers or {},
            timeout=timeout,
            **kwargs
        )
        self.name = name
        self.base_url = base_url
        self.timeout = timeout

    async def chat(self, req: ChatRequest) -> ModelResponse:
        params = dict(req.params or {})
        params.setdefault("stream", False)

        completion_params: Dict[str, Any] = {
            "model": req.model,
            "messages": req.messages,
            **params
        }
        if req.timeout is not None:
            completion_params["timeout"] = req.timeout

        t0 = time.perf_counter()
        try:
            response = await self.client.chat.completions.create(**completion_params)
        except APITimeoutError as e:
            raise ModelTimeout(f"{self.name} timeout after {req.timeout or self.timeout}s: {e}") from e
        except APIStatusError as e:
            raise UpstreamError(self.name, e.status_code, e.response.text) from e
        except APIConnectionError as e:
            raise ModelError(f"{self.name} connection error: {e}") from e

        dt = time.perf_counter() - t0

        try:
            content = response.choices[0].message.content or ""
        except (IndexError, AttributeError, TypeError) as e:
            raise ModelError(f"Invalid response structure from {self.name} API: {e}") from e

        meta = {
            "provider": self.name,
            "model": getattr(response, 'model', req.model),
            "latency": dt,
            "base_url": self.base_url,
        }

        if getattr(response, 'usage', None):
            meta["usage"] = response.usage.model_dump()

        if response.choices:
            meta["finish_reason"] = getattr(response.choices[0], 'finish_reason', None)

        if hasattr(response, 'id'):
            meta["id"] = response.id

        return ModelResponse(content=content, raw=response, meta=meta)

    async def health_check(self) -> bool:
        try:
            await self.client.models.list()
            return True
        except Exception:
            return False

    async def cleanup(self) -> None:
        await self.client.close()
