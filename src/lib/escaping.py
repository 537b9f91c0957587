"""
Reserved macro tag protection

Bare macro tags such as ``<ac:rich-text-body>`` look like URI autolinks to
a CommonMark engine (scheme ``ac``), so left alone they come out as
``<a href="ac:rich-text-body">ac:rich-text-body</a>``. Before rendering,
the colon of every reserved tag is swapped for a placeholder made only of
tag-name characters; the engine then sees an ordinary raw HTML tag and
passes it through. After rendering the placeholder is swapped back.

    <ac:rich-text-body>  ->  <ac-mdstorage-COLON-3f9a...-rich-text-body>  ->  <ac:rich-text-body>

The placeholder is generated per conversion and checked against the
document, so a document can't collide with it.
"""

import re
import secrets
from typing import Iterable, Optional

from ..config import appsettings
from .log import LOG


def tagPattern_build(namespaces: Optional[Iterable[str]] = None) -> "re.Pattern[str]":
    """
    Compile the reserved tag pattern for the given namespace prefixes.

    Only attribute-less tags match: ``<ac:name>`` and ``</ac:name>``. Names
    are limited to letters, digits and hyphens, the characters an HTML tag
    name may carry once the colon is gone.

    Args:
        namespaces: Namespace prefixes (defaults to settings.reserved_namespaces)

    Returns:
        Compiled pattern with groups (prefix, tag name)
    """
    if namespaces is None:
        alternation = appsettings.namespacePattern_get()
    else:
        alternation = "|".join(re.escape(ns) for ns in namespaces)
    return re.compile(rf"<(/?(?:{alternation})):([A-Za-z0-9-]+)>")


def placeholder_generate(document: str, prefix: Optional[str] = None) -> str:
    """
    Generate a colon placeholder that does not occur in the document.

    Args:
        document: Markdown source the placeholder must not collide with
        prefix: Readable prefix (defaults to settings.placeholder_prefix)

    Returns:
        Placeholder like "-mdstorage-COLON-1a2b3c4d5e6f-"
    """
    prefix = prefix or appsettings.placeholder_prefix
    while True:
        placeholder = f"-{prefix}-{secrets.token_hex(6)}-"
        if placeholder not in document:
            return placeholder


def tags_escape(
    document: str, placeholder: str, pattern: Optional["re.Pattern[str]"] = None
) -> str:
    """
    Replace the colon of every reserved tag with the placeholder.

    Args:
        document: Markdown source
        placeholder: Colon substitute (see placeholder_generate)
        pattern: Reserved tag pattern (defaults to tagPattern_build())

    Returns:
        Document with reserved tags disguised; all other text untouched
    """
    pattern = pattern or tagPattern_build()
    return pattern.sub(lambda m: f"<{m.group(1)}{placeholder}{m.group(2)}>", document)


def tags_unescape(html: str, placeholder: str) -> str:
    """Restore every placeholder occurrence to a colon"""
    return html.replace(placeholder, ":")


class TagCodec:
    """
    Escape/unescape pair bound to one conversion

    Example:
        >>> codec = TagCodec.codec_createFor(source)
        >>> html = render(codec.encode(source))
        >>> html = codec.decode(html)
    """

    def __init__(self, placeholder: str, namespaces: Optional[Iterable[str]] = None) -> None:
        self.placeholder = placeholder
        self.pattern = tagPattern_build(namespaces)

    @classmethod
    def codec_createFor(
        cls, document: str, namespaces: Optional[Iterable[str]] = None
    ) -> "TagCodec":
        """Create a codec whose placeholder is absent from the document"""
        return cls(placeholder_generate(document), namespaces)

    def encode(self, document: str) -> str:
        encoded = tags_escape(document, self.placeholder, self.pattern)
        LOG(f"Protected {len(self.pattern.findall(document))} reserved tags", level=3)
        return encoded

    def decode(self, html: str) -> str:
        return tags_unescape(html, self.placeholder)
