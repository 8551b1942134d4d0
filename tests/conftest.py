"""
Shared fixtures

FakeFormatter stands in for Prettier so the pipeline can be tested without
node. Its "formatting" is deterministic and idempotent: it spaces out '='
and ':' and ends the output with a newline, like Prettier does.
"""

import re

import pytest

from mdprettify.lib.exceptions import FormatterError
from mdprettify.models.languages import FormatLanguage


class FakeFormatter:
    """
    Records every call; fails on sources containing the marker "!!" or on
    any language listed in fail_languages
    """

    def __init__(self, fail_languages=(), fail_marker="!!"):
        self.calls = []
        self.fail_languages = set(fail_languages)
        self.fail_marker = fail_marker

    def format(self, source, language):
        self.calls.append((source, language))
        if language in self.fail_languages or self.fail_marker in source:
            raise FormatterError("SyntaxError: Unexpected token", language=language.value)
        if language is FormatLanguage.MARKDOWN:
            return source
        if language in (FormatLanguage.CSS, FormatLanguage.SCSS, FormatLanguage.LESS):
            return re.sub(r'\s*:\s*', ': ', source) + '\n'
        return re.sub(r'\s*=\s*', ' = ', source) + '\n'

    def languages(self):
        """Languages of all non-markdown calls, in order"""
        return [language for _, language in self.calls if language is not FormatLanguage.MARKDOWN]


@pytest.fixture
def formatter():
    return FakeFormatter()


@pytest.fixture
def make_formatter():
    return FakeFormatter
