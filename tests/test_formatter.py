"""
PrettierFormatter and settings tests

The Prettier process is replaced by a stub of subprocess.run; these tests
check the command line and the error mapping, not Prettier itself.
"""

import subprocess

import pytest

from mdprettify.config import AppSettings
from mdprettify.lib import formatter as formatter_module
from mdprettify.lib.exceptions import FormatterError
from mdprettify.lib.formatter import Formatter, PrettierFormatter
from mdprettify.models.languages import FormatLanguage


class RunStub:
    """Records the argv/input of each call and returns a canned result"""

    def __init__(self, returncode=0, stdout="", stderr="", raises=None):
        self.calls = []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(argv, self.returncode, self.stdout, self.stderr)


class TestPrettierFormatter:
    """Command construction and error mapping"""

    def test_satisfies_protocol(self):
        assert isinstance(PrettierFormatter(command="prettier"), Formatter)

    def test_command_and_stdin(self, monkeypatch):
        stub = RunStub(stdout="const a = 1;\n")
        monkeypatch.setattr(formatter_module.subprocess, "run", stub)

        result = PrettierFormatter(command="npx prettier", print_width=60).format(
            "const a=1", FormatLanguage.BABEL
        )

        assert result == "const a = 1;\n"
        argv, kwargs = stub.calls[0]
        assert argv == ["npx", "prettier", "--parser", "babel", "--print-width", "60"]
        assert kwargs["input"] == "const a=1"

    def test_nonzero_exit_raises(self, monkeypatch):
        stub = RunStub(returncode=2, stderr="[error] stdin: SyntaxError: Unexpected token (1:5)\n[error] more")
        monkeypatch.setattr(formatter_module.subprocess, "run", stub)

        with pytest.raises(FormatterError) as excinfo:
            PrettierFormatter(command="prettier").format("a b c", FormatLanguage.TYPESCRIPT)

        assert "SyntaxError" in str(excinfo.value)
        assert excinfo.value.language == "typescript"
        assert "more" in excinfo.value.stderr

    def test_nonzero_exit_without_stderr(self, monkeypatch):
        monkeypatch.setattr(formatter_module.subprocess, "run", RunStub(returncode=1))
        with pytest.raises(FormatterError, match="exit status 1"):
            PrettierFormatter(command="prettier").format("x", FormatLanguage.CSS)

    def test_missing_executable(self, monkeypatch):
        stub = RunStub(raises=FileNotFoundError("prettier"))
        monkeypatch.setattr(formatter_module.subprocess, "run", stub)
        with pytest.raises(FormatterError, match="not found"):
            PrettierFormatter(command="prettier").format("x", FormatLanguage.YAML)


class TestSettings:
    """AppSettings from environment"""

    def test_defaults(self, monkeypatch):
        for name in ("PRETTIER_COMMAND", "DEFAULT_LANGUAGE", "MARKDOWN_ONLY", "FINAL_PASS"):
            monkeypatch.delenv(f"MDPRETTIFY_{name}", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.prettier_command == "prettier"
        assert settings.default_language is None
        assert settings.markdown_only is False
        assert settings.final_pass is True
        assert settings.file_pattern == "*.md"

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("MDPRETTIFY_DEFAULT_LANGUAGE", "ts")
        monkeypatch.setenv("MDPRETTIFY_PRINT_WIDTH", "100")
        monkeypatch.setenv("MDPRETTIFY_FINAL_PASS", "false")
        settings = AppSettings(_env_file=None)
        assert settings.default_language == "ts"
        assert settings.print_width == 100
        assert settings.final_pass is False

    def test_command_split(self):
        settings = AppSettings(_env_file=None, prettier_command="npx --yes prettier")
        assert settings.command_split() == ["npx", "--yes", "prettier"]
        assert settings.command_split("node_modules/.bin/prettier") == ["node_modules/.bin/prettier"]
