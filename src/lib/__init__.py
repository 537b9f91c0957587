"""
mdstorage - Markdown to wiki storage format converter

Renders extended Markdown into storage-format XHTML and converts storage
XHTML back into Markdown.
"""

__version__ = "1.0.0"

from .compiler import Compiler, StorageRenderer, markdown_compile
from .directives import directive_parse, language_parse, title_parse
from .escaping import TagCodec
from .comments import markers_recover
from .headings import leadingH1_extract, leadingH1_drop
from .reverse import HtmlReverser, ReverseError, html_convert, markdown_write
from .templates import TemplateLibrary, TemplateError
from .log import LOG, state_connectToLogger

__all__ = [
    "Compiler",
    "StorageRenderer",
    "markdown_compile",
    "directive_parse",
    "language_parse",
    "title_parse",
    "TagCodec",
    "markers_recover",
    "leadingH1_extract",
    "leadingH1_drop",
    "HtmlReverser",
    "ReverseError",
    "html_convert",
    "markdown_write",
    "TemplateLibrary",
    "TemplateError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
