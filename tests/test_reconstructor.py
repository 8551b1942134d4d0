"""
Reconstructor tests

Tests line-range substitution of formatted blocks and the separate
final markdown pass.
"""

from mdprettify.lib.dispatcher import FormatDispatcher
from mdprettify.lib.reconstructor import Reconstructor
from mdprettify.lib.resolver import languages_resolve
from mdprettify.lib.segmenter import segment
from mdprettify.models.languages import FormatLanguage


def substitute(source, formatter, default=None):
    blocks = languages_resolve(segment(source).blocks, default).blocks
    results = FormatDispatcher(formatter).dispatch(blocks)
    return Reconstructor(formatter, final_pass=False).blocks_substitute(source, results)


class TestBlockRendering:
    """Each block kind is reassembled around its formatted code"""

    def test_fenced_keeps_fence_lines(self, formatter):
        source = "intro\n~~~lang-js\na=1\n~~~\noutro"
        assert substitute(source, formatter) == "intro\n~~~lang-js\na = 1\n~~~\noutro"

    def test_indented_reindented(self, formatter):
        source = "intro\n    a=1\n    b=2\noutro"
        assert substitute(source, formatter, default="js") == "intro\n    a = 1\n    b = 2\noutro"

    def test_indented_with_language_header(self, formatter):
        source = "<!-- language: lang-js -->\n\n    a=1\n\ntext"
        expected = "<!-- language: lang-js -->\n\n    a = 1\n\ntext"
        assert substitute(source, formatter) == expected

    def test_blank_formatted_lines_not_indented(self):
        class Spacing:
            def format(self, source, language):
                return "a\n\nb\n"

        source = "<!-- language: lang-js -->\n    a\n    b"
        result = substitute(source, Spacing())
        assert result == "<!-- language: lang-js -->\n    a\n\n    b"

    def test_snippet_inner_span(self, formatter):
        assert substitute("use `a=1` here", formatter, default="js") == "use `a = 1` here"

    def test_formatted_text_may_change_line_count(self):
        class Expanding:
            def format(self, source, language):
                return "a {\n  b: c;\n}\n"

        source = "```css\na{b:c}\n```\nafter"
        assert substitute(source, Expanding()) == "```css\na {\n  b: c;\n}\n```\nafter"


class TestUnformattedBlocks:
    """Unresolved, unsupported and failed blocks stay byte-identical"""

    def test_unresolved_verbatim(self, formatter):
        source = "```\na=1\n```"
        assert substitute(source, formatter) == source

    def test_failed_verbatim(self, formatter):
        source = "```js\na=!!\n```\n```js\nb=2\n```"
        assert substitute(source, formatter) == "```js\na=!!\n```\n```js\nb = 2\n```"

    def test_prose_between_blocks_untouched(self, formatter):
        source = "  odd   spacing  \n```js\na=1\n```\n\n\n*emph*   \n"
        result = substitute(source, formatter)
        assert result.startswith("  odd   spacing  \n")
        assert result.endswith("\n\n\n*emph*   \n")


class TestLineRangeSubstitution:
    """Identical blocks are replaced by position, not by text search"""

    def test_identical_code_first_unresolved(self, formatter):
        """Only the second copy is declared; the first must stay as written"""
        source = "```\na=1\n```\n```js\na=1\n```"
        assert substitute(source, formatter) == "```\na=1\n```\n```js\na = 1\n```"

    def test_identical_snippet_lines(self, formatter):
        source = "<!-- language-all: lang-python -->\n`a=1`\n<!-- language-all: lang-js -->\n`a=1`"
        result = substitute(source, formatter)
        assert result.split("\n") == [
            "<!-- language-all: lang-python -->",
            "`a=1`",
            "<!-- language-all: lang-js -->",
            "`a = 1`",
        ]


class TestFinalPass:
    """Whole-buffer markdown pass"""

    def test_final_pass_runs_on_substituted_buffer(self, formatter):
        source = "```js\na=1\n```"
        blocks = languages_resolve(segment(source).blocks).blocks
        results = FormatDispatcher(formatter).dispatch(blocks)

        reconstruction = Reconstructor(formatter).reconstruct(source, results)

        assert formatter.calls[-1] == ("```js\na = 1\n```", FormatLanguage.MARKDOWN)
        assert reconstruction.substituted == "```js\na = 1\n```"
        assert reconstruction.finalized == "```js\na = 1\n```"
        assert reconstruction.final_error is None

    def test_final_pass_failure_keeps_substituted(self, make_formatter):
        formatter = make_formatter(fail_languages={FormatLanguage.MARKDOWN})
        source = "```js\na=1\n```"
        blocks = languages_resolve(segment(source).blocks).blocks
        results = FormatDispatcher(formatter).dispatch(blocks)

        reconstruction = Reconstructor(formatter).reconstruct(source, results)

        assert reconstruction.substituted == "```js\na = 1\n```"
        assert reconstruction.finalized is None
        assert reconstruction.final_error is not None

    def test_final_pass_disabled(self, formatter):
        reconstruction = Reconstructor(formatter, final_pass=False).reconstruct("text", [])
        assert reconstruction.substituted == "text"
        assert reconstruction.finalized is None
        assert formatter.calls == []


class TestLineEndings:
    """Formatted lines keep the block's line ending"""

    def test_crlf_fenced_block(self, formatter):
        source = "text\r\n```js\r\na=1\r\nb=2\r\n```\r\nafter\r\n"
        expected = "text\r\n```js\r\na = 1\r\nb = 2\r\n```\r\nafter\r\n"
        assert substitute(source, formatter) == expected

    def test_crlf_indented_block(self, formatter):
        source = "<!-- language: lang-js -->\r\n\r\n    a=1\r\ntext\r\n"
        expected = "<!-- language: lang-js -->\r\n\r\n    a = 1\r\ntext\r\n"
        assert substitute(source, formatter) == expected

    def test_lf_buffer_unchanged_endings(self, formatter):
        assert substitute("```js\na=1\n```\n", formatter) == "```js\na = 1\n```\n"
