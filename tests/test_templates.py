"""
Template library tests

Tests the built-in code macro template, YAML overrides and error cases.
"""

import io

import jinja2
import pytest

from mdstorage.lib.templates import (
    CODE_MACRO,
    TemplateError,
    TemplateLibrary,
    cdata_escape,
)


def code_context(**overrides):
    context = {"Language": "go", "Collapse": True, "Title": " Example", "Text": "fmt.Println()"}
    context.update(overrides)
    return context


class TestCodeMacroTemplate:
    """Test the built-in ac:code template"""

    def test_full_macro(self):
        """All parameters are emitted when present"""
        rendered = TemplateLibrary().template_render(CODE_MACRO, code_context())
        assert rendered == (
            '<ac:structured-macro ac:name="code">\n'
            '<ac:parameter ac:name="language">go</ac:parameter>\n'
            '<ac:parameter ac:name="collapse">true</ac:parameter>\n'
            '<ac:parameter ac:name="title">Example</ac:parameter>\n'
            "<ac:plain-text-body><![CDATA[fmt.Println()]]></ac:plain-text-body>\n"
            "</ac:structured-macro>\n"
        )

    def test_optional_parameters_omitted(self):
        """Empty language and title parameters are left out"""
        rendered = TemplateLibrary().template_render(
            CODE_MACRO, code_context(Language="", Collapse=False, Title="")
        )
        assert 'ac:name="language"' not in rendered
        assert 'ac:name="title"' not in rendered
        assert '<ac:parameter ac:name="collapse">false</ac:parameter>' in rendered

    def test_title_is_escaped(self):
        """The title is XML-escaped and trimmed"""
        rendered = TemplateLibrary().template_render(CODE_MACRO, code_context(Title=" a < b"))
        assert '<ac:parameter ac:name="title">a &lt; b</ac:parameter>' in rendered

    def test_cdata_terminator_split(self):
        """A CDATA terminator in the code is split"""
        rendered = TemplateLibrary().template_render(CODE_MACRO, code_context(Text="x ]]> y"))
        assert "<![CDATA[x ]]]]><![CDATA[> y]]>" in rendered

    def test_execute_writes_to_sink(self):
        """template_execute writes the rendering to the sink"""
        sink = io.StringIO()
        TemplateLibrary().template_execute(sink, CODE_MACRO, code_context())
        assert sink.getvalue().startswith('<ac:structured-macro ac:name="code">')

    def test_missing_field_propagates(self):
        """Template failures are not swallowed"""
        with pytest.raises(jinja2.UndefinedError):
            TemplateLibrary().template_render(CODE_MACRO, {"Language": "go"})


class TestTemplateLookup:
    """Test named template lookup"""

    def test_unknown_template(self):
        """An unknown name raises TemplateError"""
        with pytest.raises(TemplateError):
            TemplateLibrary().template_render("ac:nothing", {})

    def test_custom_template_set(self):
        """A caller-supplied set replaces the built-ins"""
        library = TemplateLibrary({"greet": "hello {{ name }}"})
        assert library.template_has("greet")
        assert not library.template_has(CODE_MACRO)
        assert library.template_render("greet", {"name": "wiki"}) == "hello wiki"


class TestOverridesFile:
    """Test YAML template overrides"""

    def test_override_replaces_builtin(self, tmp_path):
        """A YAML entry replaces the built-in template"""
        overrides = tmp_path / "templates.yaml"
        overrides.write_text('"ac:code": "CODE[{{ Language }}]"\n', encoding="utf-8")

        library = TemplateLibrary(overrides_file=str(overrides))
        assert library.template_render(CODE_MACRO, code_context()) == "CODE[go]"

    def test_empty_file_keeps_builtins(self, tmp_path):
        """An empty overrides file changes nothing"""
        overrides = tmp_path / "templates.yaml"
        overrides.write_text("", encoding="utf-8")
        assert TemplateLibrary(overrides_file=str(overrides)).template_has(CODE_MACRO)

    def test_missing_file(self, tmp_path):
        """A missing overrides file raises TemplateError"""
        with pytest.raises(TemplateError, match="not found"):
            TemplateLibrary(overrides_file=str(tmp_path / "absent.yaml"))

    def test_malformed_yaml(self, tmp_path):
        """Unparseable YAML raises TemplateError"""
        overrides = tmp_path / "templates.yaml"
        overrides.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(TemplateError, match="Failed to parse"):
            TemplateLibrary(overrides_file=str(overrides))

    def test_non_mapping_yaml(self, tmp_path):
        """A YAML list is rejected"""
        overrides = tmp_path / "templates.yaml"
        overrides.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(TemplateError, match="must map"):
            TemplateLibrary(overrides_file=str(overrides))


class TestCdataEscape:
    """Test the cdata filter"""

    def test_plain_text_untouched(self):
        """Text without a terminator is unchanged"""
        assert cdata_escape("if a[b[0]] > 1") == "if a[b[0]] > 1"

    def test_terminator_split(self):
        """The terminator is split across two sections"""
        assert cdata_escape("]]>") == "]]]]><![CDATA[>"
