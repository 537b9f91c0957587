#!/usr/bin/env python3
"""
mdstorage - Markdown to wiki storage format converter

Compiles an extended Markdown document into the storage-format XHTML a
wiki consumes, or (with --reverse) converts fetched storage XHTML back into
Markdown.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Markdown extensions understood on the way in:
    - Code fences with directives: ```go collapse title Example
    - Literal macro tags: <ac:rich-text-body> ... </ac:rich-text-body>
    - Inline comment anchors:
      <!-- inline comment_id='abc' -->text<!-- inline -->

Usage:
    mdstorage inputdir/ outputdir/ --inputFile page.md
    mdstorage inputdir/ outputdir/ --inputFile page.html --reverse

Examples:
    # Compile, dropping the leading H1 (the page title lives elsewhere)
    mdstorage . output/ --inputFile page.md --dropH1 --titleFromH1

    # Custom macro templates
    mdstorage . output/ --inputFile page.md --templatesFile templates.yaml

    # Trace the rendered HTML
    mdstorage . output/ --inputFile page.md -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    Compiler,
    TemplateLibrary,
    __version__,
    LOG,
    state_connectToLogger,
    leadingH1_drop,
    leadingH1_extract,
    markdown_write,
)
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
               _     _
  _ __ ___  __| |___| |_ ___  _ __ __ _  __ _  ___
 | '_ ` _ \/ _` / __| __/ _ \| '__/ _` |/ _` |/ _ \
 | | | | | | (_| \__ \ || (_) | | | (_| | (_| |  __/
 |_| |_| |_|\__,_|___/\__\___/|_|  \__,_|\__, |\___|
                                         |___/
  Markdown <-> wiki storage format
"""

# Define CLI arguments
parser = ArgumentParser(
    description="mdstorage - Markdown to wiki storage format converter",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input document (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default="",
    type=str,
    help="Output document (relative to outputdir). Defaults to inputFile with .html/.md suffix",
)

parser.add_argument(
    "--reverse",
    action="store_true",
    help="Convert storage-format HTML to Markdown instead",
)

parser.add_argument(
    "--dropH1",
    action="store_true",
    help="Drop the document's leading H1 heading before compiling",
)

parser.add_argument(
    "--titleFromH1",
    action="store_true",
    help="Report the document's leading H1 heading as the page title",
)

parser.add_argument(
    "--templatesFile",
    default=None,
    type=str,
    help="YAML file of macro template overrides",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - outputTargetFile: Resolved path to the output document
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.outputFile:
        output_name = state.outputFile
    else:
        output_name = Path(state.inputFile).with_suffix(".md" if state.reverse else ".html").name

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputTargetFile = state.outputdir / output_name
    LOG(f"Output file: {state.outputTargetFile}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the input document.

    Returns:
        ProgramState with added field:
            - sourceText: Document contents

    Exits:
        1 if the file can't be read
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except Exception as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def heading_process(inputstate: ProgramState) -> ProgramState:
    """
    Extract and/or drop the Markdown document's leading H1 heading.

    Operates on the whole document only; storage HTML (--reverse) is
    passed through untouched.

    Returns:
        ProgramState with added/updated fields:
            - pageTitle: Leading H1 text (when --titleFromH1)
            - sourceText: Document without its leading H1 (when --dropH1)
    """

    state = inputstate.copy()
    if state.reverse or state.sourceText is None:
        return state

    if state.titleFromH1:
        state.pageTitle = leadingH1_extract(state.sourceText)
        LOG(f"Page title from leading H1: {state.pageTitle!r}", level=2)

    if state.dropH1:
        state.sourceText = leadingH1_drop(state.sourceText)
        LOG("Dropped leading H1", level=2)

    return state


def document_convert(inputstate: ProgramState) -> ProgramState:
    """
    Convert the document and write the result.

    Markdown is compiled to storage XHTML; with --reverse, storage XHTML is
    converted to Markdown. Any failure is fatal: nothing is recovered from a
    failed conversion.

    Returns:
        ProgramState with added field:
            - convertResult: Dict containing:
                - status: bool (conversion success)
                - output_file: str (path to written document)
                - characters: int (size of written document)

    Exits:
        1 if there is no source text or conversion fails
    """

    state = inputstate.copy()

    if state.sourceText is None:
        print("Error: No source text available", file=sys.stderr)
        sys.exit(1)

    try:
        if state.reverse:
            LOG("Converting storage HTML to Markdown...", level=1)
            markdown_write(state.sourceText, state.outputTargetFile)
            written = state.outputTargetFile.read_text(encoding="utf-8")
        else:
            LOG("Compiling Markdown to storage format...", level=1)
            templates = TemplateLibrary(
                overrides_file=state.templatesFile or appsettings.templates_file
            )
            written = Compiler(templates=templates).markdown_compile(state.sourceText)
            state.outputTargetFile.write_text(written, encoding="utf-8")
    except Exception as e:
        print(f"Conversion error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.convertResult = {
        'status': True,
        'output_file': str(state.outputTargetFile),
        'characters': len(written),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display conversion results to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if convertResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.convertResult:
        print("Error: Conversion failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Conversion successful!", level=1)
    LOG(f"  Output: {state.convertResult['output_file']}", level=1)
    LOG(f"  Characters: {state.convertResult['characters']}", level=1)
    if state.pageTitle:
        LOG(f"  Title: {state.pageTitle}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="mdstorage - Markdown to wiki storage format converter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert one document between Markdown and storage format.

    Orchestrates the conversion pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read the input document
        3. heading_process: Leading H1 extraction/removal
        4. document_convert: Compile or reverse-convert, write output
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the input document
        outputdir: Directory where the converted document is written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_read, heading_process, document_convert, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
