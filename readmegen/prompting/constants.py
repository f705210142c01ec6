"""Shared constants for README prompt assembly."""

from __future__ import annotations

# (title, guidance, optional); the model is asked for these in this order.
README_SECTIONS: tuple[tuple[str, str, bool], ...] = (
    ("Title", "the project name as a level-one heading with a one-line tagline", False),
    ("Overview", "what the project does and the problem it solves", False),
    ("Features", "the key capabilities as a bulleted list", False),
    ("Tech Stack", "languages, frameworks and notable libraries", False),
    ("Project Structure", "the main components and how they fit together", False),
    ("API Documentation", "endpoints with method, path and purpose", True),
    ("Installation", "prerequisites and setup steps", False),
    ("Usage", "how to run and use the project, with examples", False),
    ("Configuration", "environment variables and settings", True),
    ("Contributing", "how to contribute", False),
    ("License", "license information", False),
)

STYLE_DIRECTIVE = (
    "Write in the first person as the project's author. Describe what the software does for its users, "
    "not how the source is laid out. Do not mention analyzed files, code excerpts or the repository "
    "structure as such, and do not add commentary about this request. Return only the Markdown "
    "document, without wrapping it in a code block."
)

MAX_BUSINESS_NOTES = 60
MAX_API_ENDPOINTS = 60
DEFAULT_MAX_PROMPT_CHARS = 120_000


__all__ = [
    "DEFAULT_MAX_PROMPT_CHARS",
    "MAX_API_ENDPOINTS",
    "MAX_BUSINESS_NOTES",
    "README_SECTIONS",
    "STYLE_DIRECTIVE",
]
