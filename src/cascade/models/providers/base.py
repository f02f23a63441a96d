from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional, List

#unified model errors
class ModelError(RuntimeError): ...
class ModelTimeout(ModelError): ...

class UpstreamError(ModelError):
    """Non-success HTTP status returned by a model provider."""

    def __init__(self, provider: str, status_code: int, body: str):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} API error ({status_code}): {body}")

@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: List[Dict[str, Any]]
    params: Dict[str, Any] | None = None
    timeout: Optional[float] = None #per-request override of the provider timeout

@dataclass(frozen=True)
class ModelResponse:
    content: str
    raw: Any #provider-native response obj/dict
    meta: Dict[str, Any] #timings, token counts, model, finish reason, etc.

class ModelProvider(ABC):
    @abstractmethod
    async def chat(self, req: ChatRequest) -> ModelResponse:
        raise NotImplementedError

    @abstractmethod
    async def health_check(self) -> bool:
        raise NotImplementedError

    async def cleanup(self) -> None:
        return None
