"""Generative-text provider adapters."""

from .runner import LLMRequest, LLMRunner

__all__ = ["LLMRequest", "LLMRunner"]
