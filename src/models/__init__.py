"""
Models package for mdprettify

Contains data structures and type definitions for the formatting pipeline.
"""

from .state import ProgramState, pipeline
from .languages import FormatLanguage, LANGUAGE_ALIASES, language_lookup
from .blocks import (
    Block,
    BlockKind,
    BlockStatus,
    BlockResult,
    FormatReport,
    PipelineStatus,
    Reconstruction,
    Resolution,
    SegmentResult,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "FormatLanguage",
    "LANGUAGE_ALIASES",
    "language_lookup",
    "Block",
    "BlockKind",
    "BlockStatus",
    "BlockResult",
    "FormatReport",
    "PipelineStatus",
    "Reconstruction",
    "Resolution",
    "SegmentResult",
]
