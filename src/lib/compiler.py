"""
Compiler for Markdown to wiki storage format

Renders extended Markdown with markdown-it-py, emitting code macros in
place of generic code blocks.

The conversion runs in four passes over the document:
1. Escape: disguise reserved macro tags so the engine passes them through
2. Render: markdown-it-py with StorageRenderer (code blocks -> code macro)
3. Unescape: restore the reserved tags' colons
4. Recover: rewrite inline comment anchors into marker spans
"""

import io
import re
from typing import Any, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.renderer import RendererHTML
from markdown_it.rules_block import StateBlock, html_block
from markdown_it.token import Token
from markdown_it.utils import OptionsDict, EnvType
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin

from ..config import AppSettings, appsettings
from .comments import ANCHOR_OPENING, markers_recover
from .directives import directive_parse
from .escaping import TagCodec
from .log import LOG
from .templates import CODE_MACRO, TemplateLibrary


ANCHOR_LINE_RE = re.compile(ANCHOR_OPENING + r"[ \t]*\S")


def anchorInline_plugin(md: MarkdownIt) -> None:
    """
    Keep lines that open with an inline comment anchor in their paragraph.

    CommonMark starts an HTML block at any line beginning with ``<!--``,
    which would emit an anchor-led line raw, unparsed and outside any <p>.
    The html_block rule is wrapped so it declines such lines when text
    follows the anchor's opening comment; the paragraph rule takes them.
    """

    def _html_block(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
        line_start = state.bMarks[start_line] + state.tShift[start_line]
        if ANCHOR_LINE_RE.match(state.src, line_start, state.eMarks[start_line]):
            return False
        return html_block(state, start_line, end_line, silent)

    md.block.ruler.at(
        "html_block", _html_block, {"alt": ["paragraph", "reference", "blockquote"]}
    )


class StorageRenderer(RendererHTML):
    """
    HTML renderer that emits code macros for code blocks

    Only the code block token types (fenced and indented) are overridden;
    every other token goes through the stock RendererHTML rules. The
    template library is attached by the Compiler after the engine creates
    the renderer.
    """

    def __init__(self, parser: Any = None) -> None:
        super().__init__(parser)
        self.templates: Optional[TemplateLibrary] = None

    def _codeMacro_render(self, info: str, literal: str) -> str:
        """
        Render one code block through the code macro template.

        Args:
            info: Fence info string ("" for indented blocks)
            literal: Code body as parsed (normally newline terminated)

        Returns:
            Macro markup produced by the template
        """
        if self.templates is None:
            raise RuntimeError("StorageRenderer has no template library attached")

        directive = directive_parse(info)
        # Exactly one trailing newline belongs to the block, not the code
        text = literal[:-1] if literal.endswith("\n") else literal

        sink = io.StringIO()
        self.templates.template_execute(sink, CODE_MACRO, directive.template_context(text))
        return sink.getvalue()

    def fence(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        token = tokens[idx]
        info = unescapeAll(token.info).strip() if token.info else ""
        return self._codeMacro_render(info, token.content)

    def code_block(self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType) -> str:
        return self._codeMacro_render("", tokens[idx].content)


class Compiler:
    """
    Compiles extended Markdown to storage-format XHTML

    A Compiler holds a configured markdown-it-py engine and a template
    library; neither is modified by compilation, so one instance can
    compile any number of documents.
    """

    def __init__(
        self,
        templates: Optional[TemplateLibrary] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            templates: Template backend for macros (defaults to the built-in
                       library plus settings.templates_file overrides)
            settings: Application settings (defaults to the appsettings singleton)
        """
        self.settings = settings if settings is not None else appsettings
        if templates is None:
            templates = TemplateLibrary(overrides_file=self.settings.templates_file)
        self.templates = templates
        self.md = self.engine_build()

    def engine_build(self) -> MarkdownIt:
        """
        Configure the markdown-it-py engine.

        CommonMark core already covers fenced code and backslash hard line
        breaks. On top of it: raw HTML passthrough, tables, strikethrough,
        linkify autolinks, typographic replacements, definition lists,
        footnotes and heading ids.
        """
        md = MarkdownIt(
            "commonmark",
            {
                "html": True,
                "xhtmlOut": self.settings.xhtml_output,
                "typographer": self.settings.typographer,
                "linkify": self.settings.linkify,
            },
            renderer_cls=StorageRenderer,
        )
        md.enable(["table", "strikethrough"])
        if self.settings.typographer:
            md.enable(["replacements", "smartquotes"])
        if self.settings.linkify:
            md.enable("linkify")

        md.use(anchorInline_plugin)
        md.use(deflist_plugin)
        md.use(footnote_plugin)
        if self.settings.heading_anchors:
            md.use(anchors_plugin, max_level=6)

        md.renderer.templates = self.templates
        return md

    def markdown_compile(self, markdown: str) -> str:
        """
        Compile a Markdown document to storage-format XHTML.

        Args:
            markdown: Markdown source

        Returns:
            Storage-format XHTML
        """
        LOG(f"rendering markdown:\n{markdown}", level=3)

        codec = TagCodec.codec_createFor(markdown, self.settings.reserved_namespaces)
        html = self.md.render(codec.encode(markdown))
        html = codec.decode(html)
        html = markers_recover(html)

        LOG(f"rendered markdown to html:\n{html}", level=3)
        return html


def markdown_compile(markdown: str, templates: Optional[TemplateLibrary] = None) -> str:
    """Compile a Markdown document with a default-configured Compiler"""
    return Compiler(templates=templates).markdown_compile(markdown)
