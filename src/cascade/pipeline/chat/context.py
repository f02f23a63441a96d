"""
Context assembly between pipeline stages.

Each downstream model sees the original request plus whatever the upstream
models produced, in a fixed section order.
"""

from typing import Optional

ORIGINAL_REQUEST_HEADER = "ORIGINAL USER REQUEST:"
DEEPSEEK_HEADER = "DEEPSEEK V3-0324 ANALYSIS:"
QWEN_HEADER = "QWEN3-30B-A3B IMPLEMENTATION:"
SECTION_SEPARATOR = "\n\n"

SYNTHESIS_OBJECTIVES = """SYNTHESIS OBJECTIVES:
- Integrate all previous analyses into a cohesive solution
- Enhance implementation with modern best practices
- Optimize for production deployment and user experience
- Ensure accessibility, performance, and maintainability
- Provide actionable next steps and deployment guidance"""


def build_qwen_context(message: str, deepseek: Optional[str]) -> str:
    if not deepseek:
        return message
    return f"Based on this analysis: {deepseek}\n\nUser request: {message}"


def build_synthesis_context(message: str, deepseek: Optional[str] = None, qwen: Optional[str] = None) -> str:
    sections = [f"{ORIGINAL_REQUEST_HEADER}\n{message}"]

    if deepseek:
        sections.append(f"{DEEPSEEK_HEADER}\n{deepseek}")

    if qwen:
        sections.append(f"{QWEN_HEADER}\n{qwen}")

    sections.append(SYNTHESIS_OBJECTIVES)
    return SECTION_SEPARATOR.join(sections)
