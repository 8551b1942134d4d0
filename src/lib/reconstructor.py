"""
Reconstruction of the buffer from formatted blocks

Formatted blocks are spliced back by the line ranges recorded at
segmentation time. Two byte-identical blocks therefore never get confused
with each other, and prose between blocks is copied through untouched.

A final whole-buffer markdown pass then normalizes spacing outside code.
Its result is kept apart from the block-substituted buffer (see
Reconstruction) so a failure there does not lose the block-level work.
"""

from typing import List

from ..models.blocks import BlockKind, BlockResult, Reconstruction
from ..models.languages import FormatLanguage
from .formatter import Formatter
from .log import LOG

INDENT = '    '


class Reconstructor:
    """
    Builds the output buffer from the original and the dispatch results
    """

    def __init__(self, formatter: Formatter, final_pass: bool = True):
        """
        Args:
            formatter: Formatter used for the final markdown pass
            final_pass: Run the whole-buffer markdown pass
        """
        self.formatter = formatter
        self.final_pass = final_pass

    def reconstruct(self, buffer: str, results: List[BlockResult]) -> Reconstruction:
        """
        Substitute formatted blocks, then run the final markdown pass

        Returns:
            Reconstruction. ``finalized`` is None and ``final_error`` is set
            when the markdown pass fails; ``finalized`` is also None when
            the pass is disabled.
        """
        substituted = self.blocks_substitute(buffer, results)

        if not self.final_pass:
            return Reconstruction(substituted=substituted)

        try:
            finalized = self.formatter.format(substituted, FormatLanguage.MARKDOWN)
        except Exception as e:
            LOG(f"Final markdown pass failed: {e}", level=1)
            return Reconstruction(substituted=substituted, final_error=e)

        return Reconstruction(substituted=substituted, finalized=finalized)

    def blocks_substitute(self, buffer: str, results: List[BlockResult]) -> str:
        """
        Replace the line range of every formatted block

        Blocks that were not formatted (unresolved, unsupported, failed)
        keep their original lines.
        """
        lines = buffer.split('\n')
        output: List[str] = []
        cursor = 0

        formatted = sorted(
            (result for result in results if result.formatted),
            key=lambda result: result.block.start,
        )
        for result in formatted:
            block = result.block
            output.extend(lines[cursor:block.start])
            output.extend(self.block_render(result))
            cursor = block.end

        output.extend(lines[cursor:])
        return '\n'.join(output)

    @staticmethod
    def block_render(result: BlockResult) -> List[str]:
        """
        Lines that replace a formatted block

        - FencedCodeBlock: opening fence, formatted code, closing fence
        - IndentedCodeBlock: language comment and blank lines (if any),
          then the formatted code indented by four spaces
        - InlineSnippet: the line with its spans already substituted
        """
        block = result.block
        text = result.text or ''

        if block.kind is BlockKind.SNIPPET:
            return [text]

        code = text.split("\n") if text else []
        if block.kind is BlockKind.INDENTED:
            code = [f"{INDENT}{line}" if line.strip() else "" for line in code]

        # CRLF buffers: formatted lines take the ending of the block's first line
        ending = "\r" if block.lines[0].endswith("\r") else ""
        code = [f"{line}{ending}" for line in code]

        return block.header + code + block.footer
