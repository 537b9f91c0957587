"""
End-to-end pipeline tests

Tests the CLI stages: source file -> heading handling -> conversion ->
written output, in both directions.
"""

import pytest

from mdstorage.__main__ import (
    document_convert,
    env_check,
    heading_process,
    results_report,
    source_read,
)
from mdstorage.models import ProgramState, pipeline


STAGES = (env_check, source_read, heading_process, document_convert, results_report)


def state_make(tmp_path, **options):
    return ProgramState(inputdir=tmp_path, outputdir=tmp_path / "out", verbosity=0, **options)


class TestForwardPipeline:
    """Test Markdown -> storage format"""

    def test_compile_to_default_output(self, tmp_path):
        """Markdown compiles to a .html file beside the input name"""
        (tmp_path / "page.md").write_text(
            "# Page Title\n\nIntro text.\n\n```bash title Install\npip install mdstorage\n```\n",
            encoding="utf-8",
        )

        final = pipeline(state_make(tmp_path, inputFile="page.md"), *STAGES)

        output = tmp_path / "out" / "page.html"
        assert final.convertResult["output_file"] == str(output)
        html = output.read_text(encoding="utf-8")
        assert "<h1" in html
        assert '<ac:parameter ac:name="title">Install</ac:parameter>' in html

    def test_drop_and_extract_h1(self, tmp_path):
        """The leading H1 becomes the title and is dropped from output"""
        (tmp_path / "page.md").write_text("# Page Title\n\nBody\n\n# Second\n", encoding="utf-8")

        final = pipeline(
            state_make(tmp_path, inputFile="page.md", dropH1=True, titleFromH1=True), *STAGES
        )

        assert final.pageTitle == "Page Title"
        html = (tmp_path / "out" / "page.html").read_text(encoding="utf-8")
        assert "Page Title" not in html
        assert "Second" in html

    def test_templates_file_override(self, tmp_path):
        """A templates file replaces the code macro"""
        (tmp_path / "page.md").write_text("```go\nx\n```\n", encoding="utf-8")
        (tmp_path / "templates.yaml").write_text(
            '"ac:code": "[{{ Language }}:{{ Text }}]"\n', encoding="utf-8"
        )

        pipeline(
            state_make(
                tmp_path,
                inputFile="page.md",
                templatesFile=str(tmp_path / "templates.yaml"),
            ),
            *STAGES,
        )

        assert (tmp_path / "out" / "page.html").read_text(encoding="utf-8") == "[go:x]"

    def test_explicit_output_file(self, tmp_path):
        """An explicit output name is honoured"""
        (tmp_path / "page.md").write_text("Body\n", encoding="utf-8")
        pipeline(state_make(tmp_path, inputFile="page.md", outputFile="storage.xml"), *STAGES)
        assert (tmp_path / "out" / "storage.xml").exists()


class TestReversePipeline:
    """Test storage format -> Markdown"""

    def test_reverse_to_default_output(self, tmp_path):
        """Storage HTML converts to a .md file keeping comments"""
        (tmp_path / "page.html").write_text(
            "<h1>Title</h1><!-- meta --><p>Body</p>", encoding="utf-8"
        )

        final = pipeline(state_make(tmp_path, inputFile="page.html", reverse=True), *STAGES)

        output = tmp_path / "out" / "page.md"
        assert final.convertResult["output_file"] == str(output)
        markdown = output.read_text(encoding="utf-8")
        assert markdown.startswith("# Title")
        assert "<!-- meta -->" in markdown

    def test_reverse_skips_heading_processing(self, tmp_path):
        """Heading options don't touch reverse input"""
        (tmp_path / "page.html").write_text("# not markdown", encoding="utf-8")
        state = state_make(tmp_path, inputFile="page.html", reverse=True, dropH1=True)
        state = source_read(env_check(state))
        assert heading_process(state).sourceText == "# not markdown"


class TestFailures:
    """Test fail-fast behavior"""

    def test_missing_input_exits(self, tmp_path):
        """A missing input file exits with status 1"""
        with pytest.raises(SystemExit) as exc:
            env_check(state_make(tmp_path, inputFile="absent.md"))
        assert exc.value.code == 1

    def test_no_source_exits(self, tmp_path):
        """Converting without source text exits"""
        with pytest.raises(SystemExit):
            document_convert(state_make(tmp_path, inputFile="page.md"))

    def test_bad_templates_file_exits(self, tmp_path):
        """An unreadable templates file is fatal"""
        (tmp_path / "page.md").write_text("Body\n", encoding="utf-8")
        state = state_make(tmp_path, inputFile="page.md", templatesFile=str(tmp_path / "nope.yaml"))
        with pytest.raises(SystemExit):
            pipeline(state, *STAGES)

    def test_report_without_result_exits(self, tmp_path):
        """Reporting without a result exits"""
        with pytest.raises(SystemExit):
            results_report(state_make(tmp_path))
