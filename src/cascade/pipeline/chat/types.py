from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Stage(str, Enum):
    ALL = "all"
    DEEPSEEK = "deepseek"
    QWEN = "qwen"
    GEMINI = "gemini"

    def includes(self, model: str) -> bool:
        return self is Stage.ALL or self.value == model

# Input types
@dataclass
class ChatSettings:
    temperature: Optional[float] = None  # None keeps each model's own default

@dataclass
class ChatInput:
    message: str
    stage: Stage = Stage.ALL
    settings: ChatSettings = field(default_factory=ChatSettings)

# Output types
@dataclass
class PipelineResult:
    deepseek: Optional[str] = None
    qwen: Optional[str] = None
    gemini: Optional[str] = None
    final_response: str = ""
    models_used: List[str] = field(default_factory=list)
    confidence_score: int = 0
    processing_time: int = 0  # milliseconds
