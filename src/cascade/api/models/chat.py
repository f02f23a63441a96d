"""
API models for the multi-model chat endpoint.

These Pydantic models define the request/response schemas for POST /api/chat.
They are separate from the pipeline dataclasses to keep the HTTP contract stable.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import List, Optional

from cascade.pipeline.chat.types import Stage


# API Request Models
class ChatSettingsModel(BaseModel):
    """Generation overrides applied to every model in the run."""
    temperature: Optional[float] = Field(None, description="Sampling temperature; omitted means per-model default")


class ChatRequest(BaseModel):
    """Request to run a message through the model pipeline."""
    message: StrictStr = Field(..., description="The user message")
    stage: Stage = Field(Stage.ALL, description="Which part of the pipeline to run")
    settings: Optional[ChatSettingsModel] = Field(None, description="Optional generation settings")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Write a sort function",
                "stage": "all",
                "settings": {"temperature": 0.6}
            }
        }
    )

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


# API Response Models
class PipelineResultData(BaseModel):
    """Data payload for a pipeline run."""
    deepseek: Optional[str] = Field(None, description="DeepSeek analysis, null if not run")
    qwen: Optional[str] = Field(None, description="Qwen implementation, null if not run")
    gemini: Optional[str] = Field(None, description="Gemini synthesis, null if not run")
    final_response: str = Field(..., description="Synthesized answer")
    models_used: List[str] = Field(..., description="Models invoked, in order")
    confidence_score: int = Field(..., ge=0, le=100, description="Length-based heuristic, 0-100")
    processing_time: int = Field(..., description="Pipeline time in milliseconds")


class ChatResponse(BaseModel):
    """Response after a successful pipeline run."""
    success: bool = True
    data: PipelineResultData
    timestamp: str
    processing_time: int
