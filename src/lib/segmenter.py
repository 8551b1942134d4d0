"""
Segmenter for code regions in Q&A-style markdown

Splits a buffer into the ordered list of code blocks it contains, leaving
every other line as pass-through prose.

Recognized syntax (https://stackoverflow.com/editing-help#code):

    ```lang-js            fenced block, backticks or tildes, optional language
    const foo = 'bar';
    ```

    `const foo = 'bar';`  inline snippet, one or two backticks

    <!-- language: lang-js -->

        const foo = 'bar';    indented block with a declared language

        const foo = 'bar';    plain indented block

    <!-- language-all: lang-js -->   default language for what follows

Lines are tested in a fixed order: fence, fence body, snippet, blank,
language comment, language-all comment, indentation. A line that could be
both a fence and a snippet is therefore always a fence.

Example:
    >>> result = Segmenter("text\\n```js\\nlet a=1\\n```").segment()
    >>> result.sealed
    True
    >>> result.blocks[0].kind, result.blocks[0].declared_language
    (<BlockKind.FENCED: 'FencedCodeBlock'>, 'js')
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from ..models.blocks import Block, BlockKind, SegmentResult
from .exceptions import SegmentationAbort
from .log import LOG


FENCE_RE = re.compile(r'^\s{0,3}(?:`{3,}|~{3,})\s*(?:lang-)?([\w#+.-]+)?')
# Opening and closing backtick runs must have the same length
SNIPPET_RE = re.compile(r"(?<!`)(`{1,2})(?!`)([^\n]+?)(?<!`)\1(?!`)")
BLANK_RE = re.compile(r'^\s*$')
LANGUAGE_RE = re.compile(r'^\s*<!--\s*language:\s*(?:lang-)?(\S+?)\s*-->')
LANGUAGE_ALL_RE = re.compile(r'^\s*<!--\s*language-all:\s*(?:lang-)?(\S+?)\s*-->')
INDENTED_RE = re.compile(r'^(?: {4}|\t)')


@dataclass
class _OpenBlock:
    """Indented block still accepting lines (code_start is None until code appears)"""
    start: int
    code_start: Optional[int] = None
    code_end: Optional[int] = None
    declared_language: Optional[str] = None


class Segmenter:
    """
    Line-oriented state machine producing code blocks

    Two pieces of state are carried between lines: the start of an open
    fence (if any) and the indented block that can still be extended.
    """

    def __init__(self, buffer: str):
        """
        Args:
            buffer: Raw editor text; lines are split on "\\n" only so that
                    joining them back reproduces the buffer exactly
        """
        self.buffer = buffer
        self.lines: List[str] = buffer.split('\n')
        self.blocks: List[Block] = []
        self.fence_start: Optional[int] = None
        self.fence_language: Optional[str] = None
        self.indented: Optional[_OpenBlock] = None

    def segment(self) -> SegmentResult:
        """
        Scan the whole buffer

        Returns:
            SegmentResult with sealed=False if a fence is still open at the
            end of input. In that case the blocks are incomplete and must
            not be used to modify the buffer.
        """
        self.blocks = []
        self.fence_start = None
        self.fence_language = None
        self.indented = None

        for index, line in enumerate(self.lines):
            self.line_consume(index, line)

        if self.fence_start is not None:
            LOG(f"Unterminated fence at line {self.fence_start + 1}, leaving buffer untouched", level=2)
            return SegmentResult(blocks=self.blocks, sealed=False, open_fence_line=self.fence_start)

        self.indented_close()
        LOG(f"Segmented {len(self.lines)} lines into {len(self.blocks)} blocks", level=3)
        return SegmentResult(blocks=self.blocks, sealed=True)

    def segment_strict(self) -> List[Block]:
        """
        Like segment(), but raise on an unterminated fence

        Raises:
            SegmentationAbort: If a fence was never closed
        """
        result = self.segment()
        if not result.sealed:
            raise SegmentationAbort(result.open_fence_line or 0)
        return result.blocks

    def line_consume(self, index: int, line: str) -> None:
        """Advance the state machine by one line"""
        fence = FENCE_RE.match(line)
        if fence:
            if self.fence_start is None:
                self.indented_close()
                self.fence_start = index
                self.fence_language = fence.group(1)
                LOG(f"Fence opened at line {index + 1} ({self.fence_language})", level=3)
            else:
                self.fence_close(index)
            return

        if self.fence_start is not None:
            return

        if SNIPPET_RE.search(line):
            self.indented_close()
            self.block_emit(Block(
                kind=BlockKind.SNIPPET,
                start=index,
                end=index + 1,
                lines=[line],
                code_start=index,
                code_end=index + 1,
            ))
            return

        if BLANK_RE.match(line):
            # Only a language-declared indented block survives blank lines
            if self.indented is not None and self.indented.declared_language is None:
                self.indented_close()
            return

        language = LANGUAGE_RE.match(line)
        if language:
            self.indented_close()
            self.indented = _OpenBlock(start=index, declared_language=language.group(1))
            return

        language_all = LANGUAGE_ALL_RE.match(line)
        if language_all:
            self.indented_close()
            self.block_emit(Block(
                kind=BlockKind.LANGUAGE_ALL,
                start=index,
                end=index + 1,
                lines=[line],
                code_start=index + 1,
                code_end=index + 1,
                declared_language=language_all.group(1),
            ))
            return

        if INDENTED_RE.match(line):
            if self.indented is None:
                self.indented = _OpenBlock(start=index)
            if self.indented.code_start is None:
                self.indented.code_start = index
            self.indented.code_end = index + 1
            return

        # Prose
        self.indented_close()

    def fence_close(self, index: int) -> None:
        """Emit the fenced block that ends at line index"""
        start = self.fence_start
        assert start is not None
        self.block_emit(Block(
            kind=BlockKind.FENCED,
            start=start,
            end=index + 1,
            lines=self.lines[start:index + 1],
            code_start=start + 1,
            code_end=index,
            declared_language=self.fence_language,
        ))
        self.fence_start = None
        self.fence_language = None

    def indented_close(self) -> None:
        """
        Emit the open indented block, if it holds any code

        A language comment that was never followed by indented code is
        dropped; its lines stay in the buffer as prose.
        """
        open_block = self.indented
        self.indented = None
        if open_block is None or open_block.code_start is None or open_block.code_end is None:
            return

        self.block_emit(Block(
            kind=BlockKind.INDENTED,
            start=open_block.start,
            end=open_block.code_end,
            lines=self.lines[open_block.start:open_block.code_end],
            code_start=open_block.code_start,
            code_end=open_block.code_end,
            declared_language=open_block.declared_language,
        ))

    def block_emit(self, block: Block) -> None:
        LOG(f"{block.kind.value} at lines {block.start + 1}-{block.end}", level=3)
        self.blocks.append(block)


def segment(buffer: str) -> SegmentResult:
    """Convenience wrapper: Segmenter(buffer).segment()"""
    return Segmenter(buffer).segment()
