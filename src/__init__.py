"""
mdstorage - Markdown to wiki storage format converter

Compiles extended Markdown (code macros, inline comment anchors, literal
macro tags) into a wiki's storage-format XHTML, and back.
"""

__version__ = "1.0.0"

from .lib import Compiler, TemplateLibrary, HtmlReverser, LOG, state_connectToLogger

__all__ = ["Compiler", "TemplateLibrary", "HtmlReverser", "LOG", "state_connectToLogger", "__version__"]
