"""
Exception hierarchy for mdprettify

Block-level failures are recovered inside the dispatcher and reported as
BlockResult statuses; only the exceptions below ever reach a caller.
"""

from typing import Optional


class MdPrettifyError(Exception):
    """Base class for all mdprettify errors"""
    pass


class FormatterError(MdPrettifyError):
    """
    Raised by a formatter when it cannot format the given source

    Attributes:
        language: Formatter language that was requested
        stderr: Diagnostic output from the formatter, if any
    """

    def __init__(self, message: str, language: Optional[str] = None, stderr: str = ""):
        super().__init__(message)
        self.language = language
        self.stderr = stderr


class SegmentationAbort(MdPrettifyError):
    """
    Raised by Segmenter.segment_strict() when a fence is never closed

    Attributes:
        line: 0-based line index of the unterminated opening fence
    """

    def __init__(self, line: int):
        super().__init__(f"Unterminated code fence opened at line {line + 1}")
        self.line = line


class FinalPassFailure(MdPrettifyError):
    """
    Raised when the whole-buffer markdown pass fails

    Attributes:
        substituted: Buffer after block-level substitution only
        cause: The formatter error that aborted the final pass
    """

    def __init__(self, substituted: str, cause: Optional[Exception] = None):
        super().__init__(f"Final markdown pass failed: {cause}")
        self.substituted = substituted
        self.cause = cause
