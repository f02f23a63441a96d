"""Cascade: a DeepSeek -> Qwen -> Gemini chat pipeline served over HTTP."""

__version__ = "1.0.0"
