"""
Block-level data models

Type-safe structures passed between the segmenter, resolver, dispatcher and
reconstructor stages.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional

from .languages import FormatLanguage


class BlockKind(Enum):
    """
    Coarse kinds of code region recognized in a markdown buffer
    """
    FENCED = "FencedCodeBlock"          # ```lang-js ... ```
    INDENTED = "IndentedCodeBlock"      # 4-space indented, optional <!-- language: -->
    SNIPPET = "InlineSnippet"           # `code` inside a prose line
    LANGUAGE_ALL = "LanguageAllDirective"  # <!-- language-all: lang-js -->


class BlockStatus(Enum):
    """
    Per-block outcome of a dispatch attempt
    """
    FORMATTED = "formatted"
    UNRESOLVED = "unresolved"      # no declared language and no standing default
    UNSUPPORTED = "unsupported"    # token has no formatter mapping
    FAILED = "failed"              # formatter raised


class PipelineStatus(Enum):
    """
    Overall outcome of one pipeline invocation
    """
    FORMATTED = "formatted"
    ABORTED = "aborted"                      # unterminated fence, no changes made
    FINAL_PASS_FAILED = "final_pass_failed"  # block substitutions only


@dataclass
class Block:
    """
    A contiguous run of buffer lines recognized as code

    Line indices are 0-based and half-open, so the block covers
    ``lines[start:end]`` of the original buffer and its code (the part that
    is handed to the formatter) is ``lines[code_start:code_end]``.

    Attributes:
        kind: Which syntax produced the block
        start: First line of the block (fence or language header included)
        end: One past the last line of the block
        lines: Original text of lines[start:end]
        code_start: First code line (skips opening fence / language header)
        code_end: One past the last code line (skips closing fence)
        declared_language: Raw token from the block's own syntax, if any
        language_token: Token the resolver settled on (declared or standing)
        resolved_language: Canonical formatter language, None if unresolved
                           or unsupported

    Example:
        For buffer "text\\n```js\\nlet a\\n```":
        Block(kind=BlockKind.FENCED, start=1, end=4, code_start=2, code_end=3,
              declared_language="js", ...)
    """
    kind: BlockKind
    start: int
    end: int
    lines: List[str]
    code_start: int
    code_end: int
    declared_language: Optional[str] = None
    language_token: Optional[str] = None
    resolved_language: Optional[FormatLanguage] = None

    @property
    def header(self) -> List[str]:
        """Lines before the code (opening fence, or language comment plus blanks)"""
        return self.lines[: self.code_start - self.start]

    @property
    def footer(self) -> List[str]:
        """Lines after the code (closing fence)"""
        return self.lines[self.code_end - self.start:]

    @property
    def code_lines(self) -> List[str]:
        return self.lines[self.code_start - self.start: self.code_end - self.start]


@dataclass
class SegmentResult:
    """
    Output of Segmenter.segment()

    Attributes:
        blocks: Ordered, non-overlapping blocks
        sealed: False if a fence was still open at end of input; callers
                must then leave the buffer untouched
        open_fence_line: Line index of the unterminated fence, if any
    """
    blocks: List[Block]
    sealed: bool = True
    open_fence_line: Optional[int] = None


@dataclass
class Resolution:
    """
    Output of the language resolution fold

    Attributes:
        blocks: Code blocks with language fields filled in (directives removed)
        standing: Standing default token after the last directive
    """
    blocks: List[Block]
    standing: Optional[str] = None


@dataclass
class BlockResult:
    """
    Explicit outcome of formatting one block

    Attributes:
        block: The block that was dispatched
        status: What happened
        text: Formatted code for FORMATTED (whole snippet line for InlineSnippet)
        error: Exception raised by the formatter for FAILED
    """
    block: Block
    status: BlockStatus
    text: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def formatted(self) -> bool:
        return self.status is BlockStatus.FORMATTED


@dataclass
class Reconstruction:
    """
    Output of Reconstructor.reconstruct()

    Both stages are kept so callers decide what to do when the
    whole-buffer markdown pass fails.

    Attributes:
        substituted: Buffer after block-level substitutions only
        finalized: Buffer after the final markdown pass, None if it failed
                   or was skipped
        final_error: Exception from the final pass, if it failed
    """
    substituted: str
    finalized: Optional[str] = None
    final_error: Optional[Exception] = None


@dataclass
class FormatReport:
    """
    Everything one pipeline run produced

    Attributes:
        original: Input buffer
        status: Overall outcome
        output: Buffer to hand back (original on abort, substituted on final
                pass failure, finalized otherwise)
        reconstruction: Reconstructor output (None on abort)
        results: Per-block dispatch results
        standing: Standing default language after the last directive
    """
    original: str
    status: PipelineStatus
    output: str
    reconstruction: Optional[Reconstruction] = None
    results: List[BlockResult] = field(default_factory=list)
    standing: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.output != self.original

    def count(self, status: BlockStatus) -> int:
        """Number of block results with the given status"""
        return sum(1 for result in self.results if result.status is status)
