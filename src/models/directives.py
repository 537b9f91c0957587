"""
Code block directive model

A fenced code block's info string carries more than a language tag: the
storage format's code macro also takes a collapse flag and a title, written
as free-form directives after the fence marker:

    ```go collapse title Example
    fmt.Println()
    ```
"""

from dataclasses import dataclass
from typing import Any, Dict


# Keywords that are directives, never language tags
DIRECTIVE_KEYWORDS = ("collapse", "title")


@dataclass(frozen=True)
class CodeBlockDirective:
    """
    Structured metadata derived from a code fence info string

    Attributes:
        language: Language tag (first info token unless it is a directive keyword)
        collapse: True when the info string mentions "collapse"
        title: Text following the "title" keyword, separator included

    Example:
        For info string "go collapse title Example":
        CodeBlockDirective(language="go", collapse=True, title=" Example")
    """
    language: str = ""
    collapse: bool = False
    title: str = ""

    def template_context(self, text: str) -> Dict[str, Any]:
        """
        Build the record handed to the code macro template.

        Args:
            text: Literal code body (trailing newline already stripped)

        Returns:
            Dict with exactly the fields Language, Collapse, Title, Text
        """
        return {
            "Language": self.language,
            "Collapse": self.collapse,
            "Title": self.title,
            "Text": text,
        }
