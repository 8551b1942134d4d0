"""
Language resolution for segmented blocks

A left fold over the block list. The accumulator carries the standing
default language, which only language-all directives change. Directives are
consumed by the fold and never reach the dispatcher.
"""

import dataclasses
from functools import reduce
from typing import List, Optional

from ..models.blocks import Block, BlockKind, Resolution
from ..models.languages import language_lookup
from .log import LOG


class LanguageResolver:
    """
    Fills in language_token and resolved_language for each code block

    Example:
        >>> blocks = Segmenter("<!-- language-all: lang-js -->\\n`a`").segment().blocks
        >>> resolution = LanguageResolver().resolve(blocks)
        >>> resolution.blocks[0].resolved_language
        <FormatLanguage.BABEL: 'babel'>
    """

    def __init__(self, default_language: Optional[str] = None):
        """
        Args:
            default_language: Standing default before the first directive
        """
        self.default_language = default_language

    def resolve(self, blocks: List[Block]) -> Resolution:
        """
        Resolve every block in document order

        The input blocks are not modified; resolved copies are returned.

        Returns:
            Resolution with the code blocks (directives removed) and the
            standing default left after the last directive
        """
        initial = Resolution(blocks=[], standing=self.default_language)
        return reduce(self.block_step, blocks, initial)

    @staticmethod
    def block_step(acc: Resolution, block: Block) -> Resolution:
        """One step of the fold"""
        if block.kind is BlockKind.LANGUAGE_ALL:
            LOG(f"Standing language -> {block.declared_language} (line {block.start + 1})", level=3)
            return Resolution(blocks=acc.blocks, standing=block.declared_language)

        token = block.declared_language or acc.standing
        resolved = dataclasses.replace(
            block,
            language_token=token,
            resolved_language=language_lookup(token),
        )
        return Resolution(blocks=acc.blocks + [resolved], standing=acc.standing)


def languages_resolve(blocks: List[Block], default_language: Optional[str] = None) -> Resolution:
    """Convenience wrapper: LanguageResolver(default_language).resolve(blocks)"""
    return LanguageResolver(default_language).resolve(blocks)
