#!/usr/bin/env python3
"""
mdprettify - Code-aware markdown formatter

Reformats the code regions of Q&A-style markdown files (fenced blocks,
indented blocks, inline snippets) through Prettier and writes the result
to an output directory, leaving the prose around the code untouched.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Behavior:
    - Code in an unknown or undeclared language is left exactly as written
    - A block the formatter rejects is left exactly as written
    - A file with an unterminated ``` fence is copied unchanged
    - A file whose final markdown pass fails is written with its block-level
      formatting only, and the run exits with status 1

Usage:
    mdprettify inputdir/ outputdir/ [--inputFile answer.md] [--pattern '*.md']

Examples:
    # Format every markdown file in the current directory
    mdprettify . formatted/

    # Default undeclared blocks to JavaScript
    mdprettify . formatted/ --inputFile answer.md --language js

    # Markdown-only normalization through npx
    mdprettify . formatted/ --markdownOnly --prettier "npx prettier" -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import MarkdownPrettifier, PrettierFormatter, __version__, LOG, state_connectToLogger
from .lib.log import LOG_error
from .models import ProgramState, PipelineStatus, BlockStatus, pipeline


DISPLAY_TITLE = r"""
               _                 _   _  __
  _ __ ___   __| |_ __  _ __ ___| |_| |_(_)/ _|_   _
 | '_ ` _ \ / _` | '_ \| '__/ _ \ __| __| | |_| | | |
 | | | | | | (_| | |_) | | |  __/ |_| |_| |  _| |_| |
 |_| |_| |_|\__,_| .__/|_|  \___|\__|\__|_|_|  \__, |
                 |_|                           |___/
  Code-aware markdown formatter
"""

parser = ArgumentParser(
    description="mdprettify - format the code inside markdown with Prettier",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile",
    default="",
    type=str,
    help="Single markdown file to format (relative to inputdir); overrides --pattern",
)

parser.add_argument(
    "--pattern",
    default=None,
    type=str,
    help=f"Glob for markdown sources in inputdir (default from settings: {appsettings.file_pattern})",
)

parser.add_argument(
    "--language",
    default=None,
    type=str,
    help="Default language for code that declares none (e.g. js, ts, css)",
)

parser.add_argument(
    "--markdownOnly",
    default=False,
    action="store_true",
    help="Only normalize the markdown; do not segment and format code blocks",
)

parser.add_argument(
    "--noFinalPass",
    default=False,
    action="store_true",
    help="Skip the whole-document markdown pass after block formatting",
)

parser.add_argument(
    "--prettier",
    default=None,
    type=str,
    help="Prettier command (e.g. 'npx prettier'); default from settings",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the input and output directories.

    Returns:
        ProgramState with envOK set and the output directory created

    Exits:
        1 if the input directory or the requested input file does not exist
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if state.inputFile and not (state.inputdir / state.inputFile).is_file():
        print(f"Error: Input file not found: {state.inputdir / state.inputFile}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    assert state.outputdir is not None
    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_discover(inputstate: ProgramState) -> ProgramState:
    """
    Resolve the markdown files to format.

    Returns:
        ProgramState with inputSourceFiles set (sorted, relative order stable)
    """
    state = inputstate.copy()
    assert state.inputdir is not None and state.outputdir is not None

    if state.inputFile:
        state.inputSourceFiles = [state.inputdir / state.inputFile]
    else:
        pattern = state.pattern or appsettings.file_pattern
        state.inputSourceFiles = sorted(
            path for path in state.inputdir.rglob(pattern)
            if path.is_file() and not path.resolve().is_relative_to(state.outputdir.resolve())
        )

    LOG(f"Found {len(state.inputSourceFiles)} markdown source(s)", level=1)
    return state


def sources_format(inputstate: ProgramState) -> ProgramState:
    """
    Run the formatting pipeline over every source.

    Returns:
        ProgramState with reports: relative path -> FormatReport

    Exits:
        1 if a source cannot be read
    """
    state = inputstate.copy()
    assert state.inputdir is not None

    prettifier = MarkdownPrettifier(
        formatter=PrettierFormatter(command=state.prettier),
        default_language=state.language,
        markdown_only=True if state.markdownOnly else None,
        final_pass=False if state.noFinalPass else None,
    )

    reports = {}
    for source_file in state.inputSourceFiles:
        relative = str(source_file.relative_to(state.inputdir))
        LOG(f"Formatting {relative}", level=1)
        try:
            buffer = source_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {source_file}: {e}", file=sys.stderr)
            sys.exit(1)
        reports[relative] = prettifier.run(buffer)

    state.reports = reports
    return state


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write each report's output buffer under outputdir.

    Aborted sources are copied unchanged; sources whose final pass failed
    are written with block-level formatting only and remembered in
    failedFiles.
    """
    state = inputstate.copy()
    assert state.outputdir is not None

    written = []
    failed = []
    for relative, report in state.reports.items():
        target = state.outputdir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(report.output, encoding="utf-8")
        written.append(target)

        if report.status is PipelineStatus.FINAL_PASS_FAILED:
            error = report.reconstruction.final_error if report.reconstruction else None
            LOG_error(f"{relative}: final markdown pass failed ({error}); wrote block-level result")
            failed.append(relative)
        LOG(f"Wrote {target}", level=2)

    state.writtenFiles = written
    state.failedFiles = failed
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize what was formatted.

    Exits:
        1 if any source's final markdown pass failed
    """
    state: ProgramState = inputstate.copy()

    for relative, report in state.reports.items():
        if report.status is PipelineStatus.ABORTED:
            LOG(f"  {relative}: unterminated code fence, copied unchanged", level=1)
            continue
        LOG(
            f"  {relative}: "
            f"{report.count(BlockStatus.FORMATTED)} formatted, "
            f"{report.count(BlockStatus.FAILED)} failed, "
            f"{report.count(BlockStatus.UNSUPPORTED)} unsupported, "
            f"{report.count(BlockStatus.UNRESOLVED)} without language"
            f"{'' if report.changed else ' (no changes)'}",
            level=1,
        )

    LOG(f"\n{len(state.writtenFiles)} file(s) written to {state.outputdir}", level=1)

    if state.failedFiles:
        print(f"Error: final markdown pass failed for {len(state.failedFiles)} file(s)", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="mdprettify - Code-aware markdown formatter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - format markdown sources from inputdir into outputdir.

    Orchestrates:
        1. env_check: Validate directories
        2. sources_discover: Resolve input files
        3. sources_format: Segment, resolve, dispatch, reconstruct each file
        4. results_write: Write outputs
        5. results_report: Summarize, exit 1 on final-pass failures

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, sources_discover, sources_format, results_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
