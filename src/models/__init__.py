"""
Models package for mdstorage

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .directives import CodeBlockDirective, DIRECTIVE_KEYWORDS
from .comments import CLOSING_COMMENT, InlineCommentAnchor

__all__ = [
    "ProgramState",
    "pipeline",
    "CodeBlockDirective",
    "DIRECTIVE_KEYWORDS",
    "InlineCommentAnchor",
    "CLOSING_COMMENT",
]
