"""
Reverse conversion: storage-format HTML back to Markdown

Existing wiki pages are fetched as storage XHTML and turned back into
Markdown with markdownify. Three things need care on the way back:

- HTML comments are kept verbatim; markdownify would drop them.
- Inline comment markers (``<ac:inline-comment-marker ac:ref="ID">`` or the
  recovered ``<span class="inline-comment-marker" data-ref="ID">``) become
  the bracketing-comment form again, so they survive the next forward
  conversion.
- Code macros become fenced code blocks whose info string carries the
  language, collapse and title directives.
"""

import html as htmlcodec
import re
import secrets
from pathlib import Path
from typing import Dict, List, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from markdownify import MarkdownConverter

from ..models.comments import CLOSING_COMMENT, InlineCommentAnchor
from .log import LOG


CDATA_BODY_RE = re.compile(
    r"(<ac:plain-text-body>)<!\[CDATA\[(.*?)\]\]>(</ac:plain-text-body>)", re.DOTALL
)


class ReverseError(Exception):
    """Raised when storage HTML can't be read, converted or written"""
    pass


class HtmlReverser(MarkdownConverter):
    """
    markdownify converter for storage-format HTML

    Example:
        >>> HtmlReverser().html_convert("<h1>Title</h1><!-- note -->")
        '# Title\\n\\n<!-- note -->\\n'
    """

    def __init__(self, **options) -> None:
        options.setdefault("heading_style", "ATX")
        options.setdefault("bullets", "*")
        options.setdefault("code_language_callback", self.codeInfo_get)
        super().__init__(**options)

    @staticmethod
    def codeInfo_get(el: Tag) -> str:
        """Fence info string stashed on a <pre> by codeMacros_unwrap()"""
        info = el.get("data-info", "")
        return info if isinstance(info, str) else ""

    def cdata_unwrap(self, html: str) -> str:
        """Replace CDATA code bodies with escaped text before parsing"""
        def body_escape(match: "re.Match[str]") -> str:
            body = match.group(2).replace("]]]]><![CDATA[>", "]]>")
            return f"{match.group(1)}{htmlcodec.escape(body, quote=False)}{match.group(3)}"

        return CDATA_BODY_RE.sub(body_escape, html)

    def codeMacros_unwrap(self, soup: BeautifulSoup) -> int:
        """
        Replace code macros with <pre><code> blocks.

        Returns:
            Number of macros replaced
        """
        count = 0
        for macro in soup.find_all("ac:structured-macro"):
            if macro.get("ac:name") != "code":
                continue

            parameters: Dict[str, str] = {}
            for parameter in macro.find_all("ac:parameter", recursive=False):
                parameters[str(parameter.get("ac:name", ""))] = parameter.get_text()

            body = macro.find("ac:plain-text-body")
            text = body.get_text() if body is not None else ""

            info: List[str] = []
            language = parameters.get("language", "").strip()
            if language and language != "none":
                info.append(language)
            if parameters.get("collapse", "").strip().lower() == "true":
                info.append("collapse")
            title = parameters.get("title", "").strip()
            if title:
                info.append(f"title {title}")

            pre = soup.new_tag("pre")
            pre["data-info"] = " ".join(info)
            code = soup.new_tag("code")
            code.string = text
            pre.append(code)
            macro.replace_with(pre)
            count += 1
        return count

    def markers_unwrap(self, soup: BeautifulSoup) -> int:
        """
        Replace inline comment markers with bracketing comments.

        Returns:
            Number of markers replaced
        """
        count = 0
        markers = soup.find_all("ac:inline-comment-marker") + soup.find_all(
            "span", class_="inline-comment-marker"
        )
        for marker in markers:
            comment_id = marker.get("ac:ref") or marker.get("data-ref")
            if not comment_id:
                continue
            anchor = InlineCommentAnchor(comment_id=str(comment_id), body="")
            marker.insert_before(Comment(anchor.openingComment_get()))
            marker.insert_after(Comment(CLOSING_COMMENT))
            marker.unwrap()
            count += 1
        return count

    def comments_protect(self, soup: BeautifulSoup) -> Dict[str, str]:
        """
        Swap comment nodes for plain-text tokens markdownify leaves alone.

        Returns:
            Token to original comment markup
        """
        nonce = secrets.token_hex(4)
        protected: Dict[str, str] = {}
        for index, comment in enumerate(soup.find_all(string=lambda s: isinstance(s, Comment))):
            token = f"MDSTORAGECOMMENT{nonce}X{index}X"
            protected[token] = f"<!--{comment}-->"
            comment.replace_with(NavigableString(token))
        return protected

    def html_convert(self, html: str) -> str:
        """
        Convert storage-format HTML to Markdown.

        Args:
            html: Storage-format (X)HTML

        Returns:
            Markdown text ending in a single newline

        Raises:
            ReverseError: If the HTML can't be parsed or converted
        """
        try:
            soup = BeautifulSoup(self.cdata_unwrap(html), "html.parser")

            macros = self.codeMacros_unwrap(soup)
            markers = self.markers_unwrap(soup)
            protected = self.comments_protect(soup)
            LOG(
                f"Reversing HTML: {macros} code macros, {markers} comment markers, "
                f"{len(protected)} comments",
                level=2,
            )

            markdown = self.convert_soup(soup)
        except Exception as e:
            raise ReverseError(f"Failed to convert HTML: {e}") from e
        for token, comment in protected.items():
            markdown = markdown.replace(token, comment)

        return markdown.strip() + "\n"


def html_convert(html: str) -> str:
    """Convert storage-format HTML to Markdown with default options"""
    return HtmlReverser().html_convert(html)


def markdown_write(html: str, destination: Union[str, Path]) -> Path:
    """
    Convert storage-format HTML and write the Markdown to a file.

    The file handle is closed on every exit path.

    Args:
        html: Storage-format (X)HTML
        destination: Markdown file to create or overwrite

    Returns:
        Path of the written file

    Raises:
        ReverseError: If the HTML can't be converted or the file can't be
            written
    """
    path = Path(destination)
    markdown = html_convert(html)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(markdown)
    except OSError as e:
        raise ReverseError(f"Failed to write {path}: {e}")
    LOG(f"Wrote {len(markdown)} characters to {path}", level=2)
    return path
