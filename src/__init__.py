"""
mdprettify - Code-aware markdown formatter

Reformats the fenced, indented and inline code of Q&A-style markdown
through Prettier and splices it back without touching the prose.
"""

__version__ = "1.0.0"

from .lib import (
    MarkdownPrettifier,
    PrettierFormatter,
    markdown_format,
    text_format,
    FinalPassFailure,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "MarkdownPrettifier",
    "PrettierFormatter",
    "markdown_format",
    "text_format",
    "FinalPassFailure",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
