"""
Leading H1 handling

Wiki pages carry their title outside the body, so a Markdown document that
opens with a top-level heading would show the title twice. These helpers
pull out or drop that one heading.

NOTE: both functions only look at the very start of the whole document.
Never feed them individual lines or fragments: every line starting with a
single ``#`` would then be treated as "the" leading heading.
"""

import re


LEADING_H1_RE = re.compile(r"\A#(?!#)(?P<text>[^\n]*)(?:\n|\Z)")


def leadingH1_extract(markdown: str) -> str:
    """
    Extract the text of the document's leading H1 heading.

    Args:
        markdown: Whole Markdown document

    Returns:
        Trimmed heading text, or "" if the document doesn't open with a
        single-# heading

    Example:
        >>> leadingH1_extract("# Title\\nBody")
        'Title'
        >>> leadingH1_extract("Body\\n# Title")
        ''
    """
    match = LEADING_H1_RE.match(markdown)
    if match is None:
        return ""
    return match.group("text").strip()


def leadingH1_drop(markdown: str) -> str:
    """
    Drop the document's leading H1 heading line.

    Example:
        >>> leadingH1_drop("# Title\\nBody")
        'Body'
    """
    return LEADING_H1_RE.sub("", markdown, count=1)
