"""
Per-block formatting dispatch

Each block gets exactly one BlockResult. A formatter failure is recorded on
that block's result and dispatch moves on, so a single block with broken
syntax never stops the rest of the document from being formatted.
"""

from typing import List

from ..models.blocks import Block, BlockKind, BlockResult, BlockStatus
from ..models.languages import FormatLanguage
from .exceptions import FormatterError
from .formatter import Formatter
from .log import LOG
from .segmenter import SNIPPET_RE


def code_dedent(line: str) -> str:
    """Strip one level of markdown code indentation (4 spaces or a tab)"""
    if line.startswith('    '):
        return line[4:]
    if line.startswith('\t'):
        return line[1:]
    return line.strip()


class FormatDispatcher:
    """
    Calls the formatter once per resolved block

    Example:
        >>> results = FormatDispatcher(PrettierFormatter()).dispatch(resolution.blocks)
        >>> [r.status for r in results]
        [<BlockStatus.FORMATTED: 'formatted'>, <BlockStatus.FAILED: 'failed'>]
    """

    def __init__(self, formatter: Formatter):
        self.formatter = formatter

    def dispatch(self, blocks: List[Block]) -> List[BlockResult]:
        """Format every block, in order, isolating failures"""
        results = [self.block_dispatch(block) for block in blocks]
        formatted = sum(1 for result in results if result.formatted)
        LOG(f"Formatted {formatted} of {len(results)} code blocks", level=2)
        return results

    def block_dispatch(self, block: Block) -> BlockResult:
        """Format a single block and report what happened"""
        where = f"{block.kind.value} at line {block.start + 1}"

        if block.language_token is None:
            LOG(f"{where}: no language, left as written", level=2)
            return BlockResult(block=block, status=BlockStatus.UNRESOLVED)

        language = block.resolved_language
        if language is None:
            LOG(f"{where}: unsupported language '{block.language_token}', left as written", level=2)
            return BlockResult(block=block, status=BlockStatus.UNSUPPORTED)

        if block.kind is BlockKind.SNIPPET:
            return self.snippet_dispatch(block, language)

        source = self.code_extract(block)
        try:
            formatted = self.formatter.format(source, language)
        except Exception as e:
            LOG(f"{where}: {language.value} formatting failed: {e}", level=2)
            return BlockResult(block=block, status=BlockStatus.FAILED, error=e)

        LOG(f"{where}: formatted as {language.value}", level=2)
        return BlockResult(block=block, status=BlockStatus.FORMATTED, text=formatted.rstrip('\n'))

    @staticmethod
    def code_extract(block: Block) -> str:
        """
        Code handed to the formatter

        Fences and language comments are excluded. Indented code loses its
        markdown indentation so the formatter sees plain source. A CRLF
        buffer keeps its "\r" on each line; it is removed here and put back
        by the reconstructor.
        """
        lines = [line.removesuffix("\r") for line in block.code_lines]
        if block.kind is BlockKind.INDENTED:
            lines = [code_dedent(line) for line in lines]
        return '\n'.join(lines)

    def snippet_dispatch(self, block: Block, language: FormatLanguage) -> BlockResult:
        """
        Format every backtick span on a snippet line

        Only the text between the backticks is formatted; the prose around
        the spans and the backtick counts are kept. Spans are isolated from
        each other the same way blocks are: a span that fails keeps its
        original text.
        """
        line = block.lines[0]
        errors: List[Exception] = []
        successes = 0

        def span_replace(match) -> str:
            nonlocal successes
            backticks, snippet = match.groups()
            try:
                formatted = self.formatter.format(snippet, language).rstrip('\n')
                if not formatted.strip():
                    raise FormatterError("Snippet formatted to nothing", language=language.value)
                if "\n" in formatted:
                    raise FormatterError(
                        "Snippet formatted to multiple lines", language=language.value
                    )
            except Exception as e:
                errors.append(e)
                return match.group(0)
            successes += 1
            return f"{backticks}{formatted}{backticks}"

        text = SNIPPET_RE.sub(span_replace, line)

        if errors and not successes:
            LOG(f"InlineSnippet at line {block.start + 1}: {errors[-1]}", level=2)
            return BlockResult(block=block, status=BlockStatus.FAILED, error=errors[-1])

        LOG(f"InlineSnippet at line {block.start + 1}: {successes} span(s) formatted", level=2)
        return BlockResult(block=block, status=BlockStatus.FORMATTED, text=text)
