"""
mdprettify - Code-aware markdown formatter

Formats the code regions of Q&A-style markdown with Prettier, leaving prose untouched.
"""

__version__ = "1.0.0"

from .segmenter import Segmenter, segment
from .resolver import LanguageResolver, languages_resolve
from .dispatcher import FormatDispatcher
from .reconstructor import Reconstructor
from .formatter import Formatter, PrettierFormatter
from .engine import MarkdownPrettifier, markdown_format, text_format
from .exceptions import MdPrettifyError, FormatterError, SegmentationAbort, FinalPassFailure
from .log import LOG, state_connectToLogger

__all__ = [
    "Segmenter",
    "segment",
    "LanguageResolver",
    "languages_resolve",
    "FormatDispatcher",
    "Reconstructor",
    "Formatter",
    "PrettierFormatter",
    "MarkdownPrettifier",
    "markdown_format",
    "text_format",
    "MdPrettifyError",
    "FormatterError",
    "SegmentationAbort",
    "FinalPassFailure",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
