"""
Formatter capability

The pipeline needs exactly one thing from a formatter:
``format(source, language) -> str``, raising on input it cannot handle.
PrettierFormatter satisfies that contract by piping the source through the
Prettier CLI (``prettier --parser <language>`` reads stdin when no file is
given).
"""

import subprocess
from typing import List, Optional, Protocol, runtime_checkable

from ..config import appsettings
from ..models.languages import FormatLanguage
from .exceptions import FormatterError
from .log import LOG


@runtime_checkable
class Formatter(Protocol):
    """Anything that can reformat source text for a given language"""

    def format(self, source: str, language: FormatLanguage) -> str:
        ...


class PrettierFormatter:
    """
    Formatter backed by the Prettier command-line tool

    Stateless: every call spawns a fresh process, so one instance can be
    reused for any number of blocks and buffers.
    """

    def __init__(self, command: Optional[str] = None, print_width: Optional[int] = None):
        """
        Args:
            command: Command string (defaults to appsettings.prettier_command)
            print_width: Line width (defaults to appsettings.print_width)
        """
        self.argv: List[str] = appsettings.command_split(command)
        self.print_width = print_width if print_width is not None else appsettings.print_width

    def command_build(self, language: FormatLanguage) -> List[str]:
        argv = [*self.argv, '--parser', language.value]
        if self.print_width:
            argv += ['--print-width', str(self.print_width)]
        return argv

    def format(self, source: str, language: FormatLanguage) -> str:
        """
        Format source with Prettier

        Raises:
            FormatterError: If Prettier is missing or rejects the input
        """
        argv = self.command_build(language)
        LOG(f"Running {' '.join(argv)} on {len(source)} characters", level=3)
        try:
            completed = subprocess.run(
                argv,
                input=source,
                capture_output=True,
                text=True,
                encoding='utf-8',
                check=False,
            )
        except FileNotFoundError as e:
            raise FormatterError(f"Formatter not found: {argv[0]}", language=language.value) from e
        except UnicodeDecodeError as e:
            raise FormatterError(f"Formatter produced undecodable output: {e}", language=language.value) from e

        if completed.returncode != 0:
            stderr = completed.stderr.strip()
            first_line = stderr.splitlines()[0] if stderr else f"exit status {completed.returncode}"
            raise FormatterError(first_line, language=language.value, stderr=stderr)

        return completed.stdout
