from .types import PipelineResult

MIN_FINAL_RESPONSE_CHARS = 100
MIN_SCORED_RESPONSE_CHARS = 50
MESSAGE_PREVIEW_CHARS = 100

BASE_SCORES = {"deepseek": 30, "qwen": 35, "gemini": 35}
COMPREHENSIVE_THRESHOLDS = {"deepseek": 500, "qwen": 800, "gemini": 1000}
COMPREHENSIVE_BONUS = 5


def synthesize_response(result: PipelineResult, message: str) -> str:
    """Pick the most downstream output that carries real content."""
    for output in (result.gemini, result.qwen, result.deepseek):
        if output and len(output.strip()) > MIN_FINAL_RESPONSE_CHARS:
            return output
    return fallback_response(message)


def calculate_confidence_score(result: PipelineResult) -> int:
    score = 0
    for model, base in BASE_SCORES.items():
        output = getattr(result, model)
        if not output:
            continue
        if len(output) > MIN_SCORED_RESPONSE_CHARS:
            score += base
        if len(output) > COMPREHENSIVE_THRESHOLDS[model]:
            score += COMPREHENSIVE_BONUS
    return max(0, min(score, 100))


def fallback_response(message: str) -> str:
    preview = message[:MESSAGE_PREVIEW_CHARS]
    if len(message) > MESSAGE_PREVIEW_CHARS:
        preview += "..."

    return f"""I apologize, but I encountered difficulties processing your request through the multi-model pipeline.

This could be due to:
- Temporary API service issues
- Network connectivity problems
- Rate limiting or quota restrictions

**Your message:** "{preview}"

**Suggested actions:**
1. Please try your request again in a few moments
2. Consider simplifying your query if it's very complex
3. Check that all required services are operational

I'm designed to provide you with the best possible responses by leveraging multiple AI models. Thank you for your patience!"""
