"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Each stage receives a copy of the state and fills in the fields it owns.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, pattern, language,
                   markdownOnly, noFinalPass, prettier
        - env_check: envOK
        - sources_discover: inputSourceFiles
        - sources_format: reports
        - results_write: writtenFiles, failedFiles
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing markdown sources
        outputdir: Directory receiving the formatted copies
        verbosity: Logging verbosity level (1-3)
        inputFile: Single input file (relative to inputdir), overrides pattern
        pattern: Glob used to discover sources when inputFile is empty
        language: Default language for blocks that declare none
        markdownOnly: Skip code segmentation, format as plain markdown
        noFinalPass: Skip the whole-buffer markdown pass
        prettier: Formatter command override
        envOK: Environment validation passed
        inputSourceFiles: Resolved source files
        reports: FormatReport per source, keyed by path relative to inputdir
        writtenFiles: Output files written
        failedFiles: Sources whose final markdown pass failed
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    pattern: Optional[str] = field(default=None)
    language: Optional[str] = field(default=None)
    markdownOnly: bool = field(default=False)
    noFinalPass: bool = field(default=False)
    prettier: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFiles: List[Path] = field(default_factory=list)
    reports: Dict[str, Any] = field(default_factory=dict)  # str -> FormatReport
    writtenFiles: List[Path] = field(default_factory=list)
    failedFiles: List[str] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing source files
            outputdir: Directory for formatted output

        Returns:
            ProgramState instance with all matching CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown options (e.g. those injected by chris_plugin) are dropped
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_discover,
            sources_format,
            results_write,
            results_report
        )

    This is equivalent to:
        results_report(results_write(sources_format(sources_discover(env_check(s)))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
