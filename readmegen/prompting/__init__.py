"""README prompt assembly."""

from .builder import PromptComposer, postprocess

__all__ = ["PromptComposer", "postprocess"]
