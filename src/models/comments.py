"""
Inline comment anchor model

Inline comments in the wiki are anchored to a span of text. In Markdown the
anchor is written as a pair of HTML comments bracketing the commented text,
with the comment id in the opening one:

    <!-- inline comment_id='abc-123' -->flagged text<!-- inline -->

In storage HTML the same anchor is a single marker element.
"""

from dataclasses import dataclass


CLOSING_COMMENT = " inline "


@dataclass(frozen=True)
class InlineCommentAnchor:
    """
    A span of commented text

    Attributes:
        comment_id: Wiki-side identifier of the comment thread
        body: The commented text (already rendered HTML on the forward path)
    """
    comment_id: str
    body: str

    def span_render(self) -> str:
        """Storage-format marker element for this anchor"""
        return (
            f'<span class="inline-comment-marker" data-ref="{self.comment_id}">'
            f'{self.body}</span>'
        )

    def openingComment_get(self) -> str:
        """Text of the opening comment (without the <!-- --> delimiters)"""
        return f" inline comment_id='{self.comment_id}' "

    def comments_render(self) -> str:
        """Bracketing-comment Markdown form for this anchor"""
        return f"<!--{self.openingComment_get()}-->{self.body}<!--{CLOSING_COMMENT}-->"
