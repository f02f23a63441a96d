import pytest

from cascade.pipeline.chat.context import (
    DEEPSEEK_HEADER,
    ORIGINAL_REQUEST_HEADER,
    QWEN_HEADER,
    SECTION_SEPARATOR,
    SYNTHESIS_OBJECTIVES,
    build_qwen_context,
    build_synthesis_context,
)

MESSAGE = "Write a sort function\n\n  keep   the spacing  "


class TestQwenContext:
    def test_without_analysis_passes_message_through(self):
        assert build_qwen_context(MESSAGE, None) == MESSAGE
        assert build_qwen_context(MESSAGE, "") == MESSAGE

    def test_with_analysis(self):
        context = build_qwen_context("sort it", "Use merge sort")
        assert context == "Based on this analysis: Use merge sort\n\nUser request: sort it"


class TestSynthesisContext:
    """Section layout of the Gemini synthesis context"""

    @pytest.mark.parametrize("deepseek, qwen", [
        (None, None),
        ("analysis body", None),
        (None, "implementation body"),
        ("analysis body", "implementation body"),
    ])
    def test_sections_in_fixed_order(self, deepseek, qwen):
        """
        Test: Every subset of prior outputs
        How: Build the context and split it back at the section headers
        Ensures: Message is verbatim, present outputs are labelled, order is message/deepseek/qwen/objectives
        """
        context = build_synthesis_context(MESSAGE, deepseek, qwen)

        assert context.startswith(f"{ORIGINAL_REQUEST_HEADER}\n{MESSAGE}{SECTION_SEPARATOR}")
        assert context.endswith(SYNTHESIS_OBJECTIVES)

        positions = [context.index(ORIGINAL_REQUEST_HEADER)]
        if deepseek:
            assert f"{DEEPSEEK_HEADER}\n{deepseek}" in context
            positions.append(context.index(DEEPSEEK_HEADER))
        else:
            assert DEEPSEEK_HEADER not in context
        if qwen:
            assert f"{QWEN_HEADER}\n{qwen}" in context
            positions.append(context.index(QWEN_HEADER))
        else:
            assert QWEN_HEADER not in context
        positions.append(context.index("SYNTHESIS OBJECTIVES:"))

        assert positions == sorted(positions)

    def test_full_context_exact(self):
        context = build_synthesis_context("hi", "A", "B")

        assert context.split(SECTION_SEPARATOR) == [
            "ORIGINAL USER REQUEST:\nhi",
            "DEEPSEEK V3-0324 ANALYSIS:\nA",
            "QWEN3-30B-A3B IMPLEMENTATION:\nB",
            SYNTHESIS_OBJECTIVES,
        ]

    def test_message_recoverable(self):
        context = build_synthesis_context(MESSAGE, "A", "B")

        body = context[len(ORIGINAL_REQUEST_HEADER) + 1:]
        recovered = body[:body.index(f"{SECTION_SEPARATOR}{DEEPSEEK_HEADER}")]

        assert recovered == MESSAGE
