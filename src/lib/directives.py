"""
Code fence directive parsing

The info string after a fence marker takes the form:

    language? "collapse"? ("title" <any text>)?

All functions here are pure and total: malformed info strings degrade to
empty fields, they never raise.

Note that "collapse" and "title" are found by plain substring search, so a
language name containing either word is misread (``subtitle`` yields a
title). Callers relying on exotic language names should be aware of this.
"""

from ..models.directives import CodeBlockDirective, DIRECTIVE_KEYWORDS


def language_parse(info: str) -> str:
    """
    Extract the language tag from a fence info string.

    Args:
        info: Raw fence info string

    Returns:
        First whitespace-delimited token, or "" when that token is a
        directive keyword or the info string is blank

    Example:
        >>> language_parse("python title Example")
        'python'
        >>> language_parse("collapse")
        ''
    """
    tokens = info.split()
    if not tokens:
        return ""

    first = tokens[0]
    if first in DIRECTIVE_KEYWORDS:
        # collapsing or titling without a language
        return ""
    return first


def title_parse(info: str) -> str:
    """
    Extract the title from a fence info string.

    Everything after the first occurrence of "title" is returned as-is,
    including the separator character that follows the keyword.

    Example:
        >>> title_parse("python title My Title")
        ' My Title'
        >>> title_parse("python")
        ''
    """
    index = info.find("title")
    if index < 0:
        return ""
    return info[index + len("title"):]


def collapse_parse(info: str) -> bool:
    """True when the info string asks for a collapsed code macro"""
    return "collapse" in info


def directive_parse(info: str) -> CodeBlockDirective:
    """
    Parse a fence info string into a CodeBlockDirective.

    Args:
        info: Raw fence info string (may be empty)

    Returns:
        CodeBlockDirective with language, collapse and title fields
    """
    return CodeBlockDirective(
        language=language_parse(info),
        collapse=collapse_parse(info),
        title=title_parse(info),
    )
