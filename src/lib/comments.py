"""
Inline comment marker recovery

An inline comment anchor survives Markdown rendering as its two bracketing
HTML comments with the (rendered) commented text in between:

    <!-- inline comment_id='abc-123' -->flagged text<!-- inline -->

The storage format wants a single marker element instead:

    <span class="inline-comment-marker" data-ref="abc-123">flagged text</span>

Recovery runs once over the whole rendered document. An opening comment
without a closing ``<!-- inline -->`` on the same line, before the next
anchor opens, is left as it is.
"""

import re
from typing import List

from ..models.comments import CLOSING_COMMENT, InlineCommentAnchor
from .log import LOG


ANCHOR_OPENING = r"<!--[^>]*comment_id='(?P<comment_id>[^']*)'[^>]*-->"

# The body may not run into another anchor's opening comment, and only the
# bare closing comment ends an anchor.
INLINE_COMMENT_RE = re.compile(
    ANCHOR_OPENING
    + r"(?P<body>(?:(?!<!--[^>]*comment_id=).)*?)"
    + rf"<!--\s*{re.escape(CLOSING_COMMENT.strip())}\s*-->"
)


def anchors_find(html: str) -> List[InlineCommentAnchor]:
    """
    Find every inline comment anchor in rendered HTML.

    Args:
        html: Rendered document

    Returns:
        Anchors in document order
    """
    return [
        InlineCommentAnchor(comment_id=m.group("comment_id"), body=m.group("body"))
        for m in INLINE_COMMENT_RE.finditer(html)
    ]


def markers_recover(html: str) -> str:
    """
    Rewrite every inline comment anchor into a storage marker span.

    Matches are collected from the original text in a single pass; the
    replacement spans are never scanned again.

    Args:
        html: Rendered document

    Returns:
        Document with anchors rewritten; unchanged if none are found
    """
    count = 0

    def marker_render(match: "re.Match[str]") -> str:
        nonlocal count
        count += 1
        anchor = InlineCommentAnchor(
            comment_id=match.group("comment_id"), body=match.group("body")
        )
        return anchor.span_render()

    recovered = INLINE_COMMENT_RE.sub(marker_render, html)
    if count:
        LOG(f"Recovered {count} inline comment markers", level=2)
    return recovered
