"""
Pipeline entry points

Runs Segmenter -> LanguageResolver -> FormatDispatcher -> Reconstructor on
one buffer, strictly in that order and to completion.

Example:
    >>> report = markdown_format("Some text.\\n`const x=1;`\\n", default_language="js")
    >>> report.status
    <PipelineStatus.FORMATTED: 'formatted'>
    >>> report.output
    'Some text.\\n`const x = 1;`\\n'
"""

from typing import Optional

from ..config import appsettings
from ..models.blocks import FormatReport, PipelineStatus
from .dispatcher import FormatDispatcher
from .exceptions import FinalPassFailure
from .formatter import Formatter, PrettierFormatter
from .log import LOG
from .reconstructor import Reconstructor
from .resolver import LanguageResolver
from .segmenter import Segmenter


class MarkdownPrettifier:
    """
    Formats the code regions of a markdown buffer

    Holds only configuration, never a buffer, so one instance can serve
    any number of invocations.
    """

    def __init__(
        self,
        formatter: Optional[Formatter] = None,
        default_language: Optional[str] = None,
        markdown_only: Optional[bool] = None,
        final_pass: Optional[bool] = None,
    ) -> None:
        """
        Args:
            formatter: Formatter capability (defaults to PrettierFormatter)
            default_language: Standing default language before any directive
            markdown_only: Skip segmentation and only run the markdown pass
            final_pass: Run the whole-buffer markdown pass

        Arguments left as None fall back to appsettings.
        """
        self.formatter: Formatter = formatter if formatter is not None else PrettierFormatter()
        self.default_language = (
            default_language if default_language is not None else appsettings.default_language
        )
        self.markdown_only = markdown_only if markdown_only is not None else appsettings.markdown_only
        self.final_pass = final_pass if final_pass is not None else appsettings.final_pass
        self.reconstructor = Reconstructor(self.formatter, final_pass=self.final_pass)

    def run(self, buffer: str) -> FormatReport:
        """
        Format one buffer

        Returns:
            FormatReport. ``output`` is the buffer to show the user:
                - ABORTED: the original buffer (unterminated fence)
                - FINAL_PASS_FAILED: the block-substituted buffer
                - FORMATTED: the finalized buffer (or the substituted one
                  when the final pass is disabled)
        """
        if self.markdown_only:
            LOG("Markdown-only mode, skipping code segmentation", level=2)
            return self.report_build(buffer, [], None)

        segmented = Segmenter(buffer).segment()
        if not segmented.sealed:
            LOG("Unterminated code fence, no changes made", level=1)
            return FormatReport(original=buffer, status=PipelineStatus.ABORTED, output=buffer)

        resolution = LanguageResolver(self.default_language).resolve(segmented.blocks)
        results = FormatDispatcher(self.formatter).dispatch(resolution.blocks)
        return self.report_build(buffer, results, resolution.standing)

    def report_build(self, buffer: str, results, standing: Optional[str]) -> FormatReport:
        reconstruction = self.reconstructor.reconstruct(buffer, results)

        if reconstruction.final_error is not None:
            status = PipelineStatus.FINAL_PASS_FAILED
            output = reconstruction.substituted
        else:
            status = PipelineStatus.FORMATTED
            output = (
                reconstruction.finalized
                if reconstruction.finalized is not None
                else reconstruction.substituted
            )

        return FormatReport(
            original=buffer,
            status=status,
            output=output,
            reconstruction=reconstruction,
            results=results,
            standing=standing,
        )


def markdown_format(buffer: str, formatter: Optional[Formatter] = None, **kwargs) -> FormatReport:
    """
    Run the pipeline once

    Args:
        buffer: Editor text
        formatter: Formatter capability (defaults to PrettierFormatter)
        **kwargs: default_language, markdown_only, final_pass

    Returns:
        FormatReport with both reconstruction stages available
    """
    return MarkdownPrettifier(formatter=formatter, **kwargs).run(buffer)


def text_format(buffer: str, formatter: Optional[Formatter] = None, **kwargs) -> str:
    """
    Run the pipeline and return only the text to write back

    An unterminated fence returns the buffer unchanged.

    Raises:
        FinalPassFailure: If the whole-buffer markdown pass failed; the
                          block-substituted buffer is on ``.substituted``
    """
    report = markdown_format(buffer, formatter=formatter, **kwargs)
    if report.status is PipelineStatus.FINAL_PASS_FAILED:
        assert report.reconstruction is not None
        raise FinalPassFailure(report.reconstruction.substituted, report.reconstruction.final_error)
    return report.output
