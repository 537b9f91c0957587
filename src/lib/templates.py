"""
Template backend for storage-format macros

Macro markup is produced from named Jinja2 templates. The library ships
built-in templates and can load overrides from a YAML file mapping
template names to Jinja2 sources:

    ac:code: |
      <ac:structured-macro ac:name="code">...</ac:structured-macro>

The code macro template receives exactly Language, Collapse, Title, Text.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, TextIO

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateNotFound

from .log import LOG


CODE_MACRO = "ac:code"

DEFAULT_TEMPLATES: Dict[str, str] = {
    CODE_MACRO: (
        '<ac:structured-macro ac:name="code">\n'
        "{% if Language %}"
        '<ac:parameter ac:name="language">{{ Language | e }}</ac:parameter>\n'
        "{% endif %}"
        '<ac:parameter ac:name="collapse">{{ "true" if Collapse else "false" }}</ac:parameter>\n'
        "{% if Title | trim %}"
        '<ac:parameter ac:name="title">{{ Title | trim | e }}</ac:parameter>\n'
        "{% endif %}"
        "<ac:plain-text-body><![CDATA[{{ Text | cdata }}]]></ac:plain-text-body>\n"
        "</ac:structured-macro>\n"
    ),
}


class TemplateError(Exception):
    """Raised when a template is unknown or template overrides can't be loaded"""
    pass


def cdata_escape(text: str) -> str:
    """
    Make text safe inside a CDATA section.

    A literal ``]]>`` would end the section early, so it is split across
    two sections.
    """
    return text.replace("]]>", "]]]]><![CDATA[>")


class TemplateLibrary:
    """
    Named Jinja2 templates for macro rendering

    The library is created by the caller and only read by the renderer.
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, str]] = None,
        overrides_file: Optional[str] = None,
    ) -> None:
        """
        Build the template environment.

        Args:
            templates: Template sources by name (defaults to DEFAULT_TEMPLATES)
            overrides_file: Optional YAML file whose entries replace or extend them

        Raises:
            TemplateError: If the overrides file is missing or malformed
        """
        self.sources: Dict[str, str] = dict(templates if templates is not None else DEFAULT_TEMPLATES)
        if overrides_file:
            self.sources.update(self._overrides_load(Path(overrides_file)))

        self.environment = Environment(
            loader=DictLoader(self.sources),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.environment.filters["cdata"] = cdata_escape
        LOG(f"Template library ready: {', '.join(sorted(self.sources))}", level=3)

    def _overrides_load(self, path: Path) -> Dict[str, str]:
        """Load and validate a YAML overrides file"""
        if not path.exists():
            raise TemplateError(f"Templates file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                overrides: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TemplateError(f"Failed to parse {path.name}: {e}")

        if overrides is None:
            return {}
        if not isinstance(overrides, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in overrides.items()
        ):
            raise TemplateError(f"{path.name} must map template names to template sources")
        LOG(f"Loaded {len(overrides)} template overrides from {path}", level=2)
        return overrides

    def template_has(self, name: str) -> bool:
        return name in self.sources

    def template_render(self, name: str, context: Mapping[str, Any]) -> str:
        """
        Render a named template.

        Args:
            name: Template name (e.g., "ac:code")
            context: Template fields

        Returns:
            Rendered markup

        Raises:
            TemplateError: If no template has that name
        """
        try:
            template = self.environment.get_template(name)
        except TemplateNotFound:
            raise TemplateError(f"Unknown template: {name}")
        return template.render(**context)

    def template_execute(self, sink: TextIO, name: str, context: Mapping[str, Any]) -> None:
        """Render a named template into a text sink"""
        sink.write(self.template_render(name, context))
