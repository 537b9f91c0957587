"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDSTORAGE_ prefix (e.g., MDSTORAGE_TYPOGRAPHER=false).

Settings can also be loaded from a .env file in the project root.
"""

import re
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDSTORAGE_ prefix.

    Examples:
        MDSTORAGE_RESERVED_NAMESPACES='["ac", "ri"]'
        MDSTORAGE_TEMPLATES_FILE=templates.yaml
        MDSTORAGE_LINKIFY=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MDSTORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Reserved tag codec
    reserved_namespaces: List[str] = Field(
        default_factory=lambda: ["ac"],
        description="Macro namespace prefixes whose bare tags are protected from the Markdown engine",
    )

    placeholder_prefix: str = Field(
        default="mdstorage-COLON",
        description="Prefix of the colon placeholder (letters, digits and dashes only)",
    )

    # Template backend
    templates_file: Optional[str] = Field(
        default=None,
        description="Optional YAML file mapping template names to Jinja2 sources",
    )

    # Markdown engine
    xhtml_output: bool = Field(
        default=True,
        description="Emit self-closing void tags (<br />) as the storage format requires",
    )

    typographer: bool = Field(
        default=True,
        description="Enable smart quotes, dashes and other typographic replacements",
    )

    linkify: bool = Field(
        default=True,
        description="Turn bare URLs into links",
    )

    heading_anchors: bool = Field(
        default=True,
        description="Generate id attributes for headings",
    )

    def namespacePattern_get(self) -> str:
        """
        Regex alternation of the reserved namespaces.

        Example:
            >>> AppSettings(reserved_namespaces=["ac", "ri"]).namespacePattern_get()
            'ac|ri'
        """
        return "|".join(re.escape(ns) for ns in self.reserved_namespaces)


# Singleton instance - import this in your code
appsettings = AppSettings()
