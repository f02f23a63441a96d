from __future__ import annotations
from typing import Any, Dict, List, Optional
import time
import httpx

from .base import ModelProvider, ChatRequest, ModelResponse, ModelError, ModelTimeout, UpstreamError

DEFAULT_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiProvider(ModelProvider):
    """Google generate-content endpoint spoken over plain httpx."""

    def __init__(self, base_url: str, api_key: str, name: str = "gemini", timeout: float = 60.0, safety_settings: Optional[List[Dict[str, str]]] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
            timeout=timeout,
            transport=transport,
        )
        self.name = name
        self.base_url = base_url
        self.timeout = timeout
        self.safety_settings = safety_settings if safety_settings is not None else DEFAULT_SAFETY_SETTINGS

    def _build_payload(self, req: ChatRequest) -> Dict[str, Any]:
        # generate-content takes a single text blob, so system and user turns are folded together
        text = "\n\n".join(msg["content"] for msg in req.messages if msg.get("content"))
        generation_config = dict(req.params or {})
        generation_config.setdefault("stopSequences", [])
        return {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": generation_config,
            "safetySettings": self.safety_settings,
        }

    async def chat(self, req: ChatRequest) -> ModelResponse:
        payload = self._build_payload(req)
        timeout = req.timeout or self.timeout

        t0 = time.perf_counter()
        try:
            response = await self.client.post(f"/models/{req.model}:generateContent", json=payload, timeout=timeout)
        except httpx.TimeoutException as e:
            raise ModelTimeout(f"{self.name} timeout after {timeout}s: {e}") from e
        except httpx.HTTPError as e:
            raise ModelError(f"{self.name} request failed: {e}") from e

        if response.is_error:
            raise UpstreamError(self.name, response.status_code, response.text)

        dt = time.perf_counter() - t0

        try:
            data = response.json()
        except ValueError as e:
            raise ModelError(f"Invalid JSON from {self.name} API: {e}") from e

        content = self._extract_text(data)

        meta = {"provider": self.name, "model": req.model, "latency": dt}
        if "usageMetadata" in data:
            meta["usage"] = data["usageMetadata"]
        finish_reason = data["candidates"][0].get("finishReason")
        if finish_reason:
            meta["finish_reason"] = finish_reason

        return ModelResponse(content=content, raw=data, meta=meta)

    def _extract_text(self, data: Any) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise ModelError("Invalid response format from Gemini API") from None
        if not isinstance(text, str):
            raise ModelError("Invalid response format from Gemini API")
        return text

    async def health_check(self) -> bool:
        try:
            response = await self.client.get("/models")
            return response.is_success
        except httpx.HTTPError:
            return False

    async def cleanup(self) -> None:
        await self.client.aclose()
