"""
Formatter language identifiers and the alias table

Language tokens written by authors (``js``, ``lang-ts``, ``scss``) are mapped
through a closed table onto the parser names the formatter understands.
Tokens missing from the table are unsupported and never formatted.
"""

from enum import Enum
from typing import Dict, Optional


class FormatLanguage(str, Enum):
    """
    Canonical formatter languages (Prettier parser names)
    """
    BABEL = "babel"
    TYPESCRIPT = "typescript"
    FLOW = "flow"
    CSS = "css"
    SCSS = "scss"
    LESS = "less"
    HTML = "html"
    YAML = "yaml"
    JSON = "json"
    MARKDOWN = "markdown"


LANGUAGE_ALIASES: Dict[str, FormatLanguage] = {
    'js': FormatLanguage.BABEL,
    'javascript': FormatLanguage.BABEL,
    'jsx': FormatLanguage.BABEL,
    'ts': FormatLanguage.TYPESCRIPT,
    'typescript': FormatLanguage.TYPESCRIPT,
    'tsx': FormatLanguage.TYPESCRIPT,
    'flow': FormatLanguage.FLOW,
    'css': FormatLanguage.CSS,
    'scss': FormatLanguage.SCSS,
    'sass': FormatLanguage.SCSS,
    'less': FormatLanguage.LESS,
    'html': FormatLanguage.HTML,
    'yaml': FormatLanguage.YAML,
    'yml': FormatLanguage.YAML,
    'json': FormatLanguage.JSON,
    'md': FormatLanguage.MARKDOWN,
    'markdown': FormatLanguage.MARKDOWN,
}


def language_lookup(token: Optional[str]) -> Optional[FormatLanguage]:
    """
    Map an author-written language token onto a formatter language

    Args:
        token: Raw token, with or without a ``lang-`` prefix

    Returns:
        FormatLanguage, or None if the token is empty or unmapped

    Example:
        >>> language_lookup("lang-js")
        <FormatLanguage.BABEL: 'babel'>
        >>> language_lookup("python") is None
        True
    """
    if not token:
        return None
    key = token.strip().lower()
    if key.startswith('lang-'):
        key = key[len('lang-'):]
    return LANGUAGE_ALIASES.get(key)
