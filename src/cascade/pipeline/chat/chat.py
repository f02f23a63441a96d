import logging
import time
from typing import Optional

from cascade.models.manager import ModelManager
from cascade.models.providers.base import ModelError
from cascade.settings import validate_api_keys
from .context import build_qwen_context, build_synthesis_context
from .synthesis import calculate_confidence_score, synthesize_response
from .types import ChatInput, PipelineResult

logger = logging.getLogger(__name__)


class PipelineError(RuntimeError):
    """A model stage failed; the remaining stages were not run."""

    def __init__(self, stage: str, cause: ModelError):
        self.stage = stage
        self.status_code: Optional[int] = getattr(cause, "status_code", None)
        super().__init__(f"Processing failed: {stage} stage failed: {cause}")


class ChatPipeline:
    def __init__(self, manager: ModelManager):
        self.model_manager = manager

    async def process(self, chat_input: ChatInput) -> PipelineResult:
        """
        Run DeepSeek -> Qwen -> Gemini for the requested stage.

        Stages are awaited one after another: every stage's prompt is built
        from the outputs of the stages before it. A failing stage aborts the
        whole run.
        """
        start_time = time.perf_counter()
        validate_api_keys()

        result = PipelineResult()
        message = chat_input.message
        stage = chat_input.stage
        temperature = chat_input.settings.temperature

        if stage.includes("deepseek"):
            logger.info("Starting DeepSeek analysis")
            result.deepseek = await self._run(
                "deepseek", "deepseek/analyze@v1", {"message": message}, temperature
            )
            result.models_used.append("deepseek")

        if stage.includes("qwen"):
            logger.info("Starting Qwen implementation")
            context = build_qwen_context(message, result.deepseek)
            result.qwen = await self._run(
                "qwen", "qwen/implement@v1", {"context": context}, temperature
            )
            result.models_used.append("qwen")

        if stage.includes("gemini"):
            logger.info("Starting Gemini synthesis")
            context = build_synthesis_context(message, result.deepseek, result.qwen)
            result.gemini = await self._run(
                "gemini", "gemini/synthesize@v1", {"context": context}, temperature
            )
            result.models_used.append("gemini")

        result.final_response = synthesize_response(result, message)
        result.confidence_score = calculate_confidence_score(result)
        result.processing_time = int((time.perf_counter() - start_time) * 1000)

        logger.info(
            f"Pipeline finished: models={result.models_used} "
            f"confidence={result.confidence_score} time={result.processing_time}ms"
        )
        return result

    async def _run(self, task: str, prompt_ref: str, variables: dict, temperature: Optional[float]) -> str:
        try:
            response = await self.model_manager.call(
                task=task,
                prompt_ref=prompt_ref,
                variables=variables,
                temperature=temperature,
            )
        except ModelError as e:
            raise PipelineError(task, e) from e
        return response.content
