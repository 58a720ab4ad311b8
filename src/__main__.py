#!/usr/bin/env python3
"""
mdtransform - Markdown <-> rich-document converter

Reads a Markdown file, imports it into a document tree with the standard
transformers and writes the result back out, either as normalized Markdown
(the export of the imported tree) or as a JSON dump of the tree itself.

As with our other tools, the CLI follows the ChRIS "plugin" pattern: an
input directory, an output directory, and options.

Usage:
    mdtransform inputdir/ outputdir/ --inputFile notes.md

Examples:
    # Normalize Markdown through an import/export round trip
    mdtransform . out/ --inputFile notes.md

    # Dump the document tree as JSON
    mdtransform . out/ --inputFile notes.md --format json

    # Show the result in the terminal, highlighted, with tracing
    mdtransform . out/ --inputFile notes.md --highlight -vv
"""

import json
import sys
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace
from pathlib import Path

from chris_plugin import chris_plugin
from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import MarkdownLexer

from .config import appsettings
from .lib import (
    Editor,
    LOG,
    __version__,
    convert_from_markdown_string,
    convert_to_markdown_string,
    state_connectToLogger,
)
from .models import ProgramState, pipeline


parser = ArgumentParser(
    description="mdtransform - Markdown to document tree and back",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input Markdown file (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Output file (relative to outputdir). Defaults to the input name",
)

parser.add_argument(
    "--format",
    default="markdown",
    choices=["markdown", "json"],
    help="Write normalized Markdown or the JSON document tree",
)

parser.add_argument(
    "--highlight",
    action="store_true",
    help="Echo the Markdown result to stdout with syntax highlighting",
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
    Validate the input file and prepare the output location.

    Returns:
        ProgramState with inputSourceFile, outputTargetFile and envOK set

    Exits:
        1 if the input file does not exist
    """
    state = inputstate.copy()
    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file

    output_name = state.outputFile or state.inputFile
    if state.format == "json" and not state.outputFile:
        output_name = str(Path(output_name).with_suffix(".json"))
    state.outputTargetFile = state.outputdir / output_name
    state.outputTargetFile.parent.mkdir(parents=True, exist_ok=True)

    LOG(f"Input file: {state.inputSourceFile}", level=2)
    LOG(f"Output file: {state.outputTargetFile}", level=2)
    state.envOK = True
    return state


def source_import(inputstate: ProgramState) -> ProgramState:
    """
    Read the Markdown source and import it into a fresh Editor.

    Exits:
        1 if the file cannot be read or a transformer fails
    """
    state = inputstate.copy()
    LOG("Reading source file...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)

    editor = Editor()
    try:
        with editor.update():
            convert_from_markdown_string(source)
    except Exception as e:
        print(f"Import error: {e}", file=sys.stderr)
        sys.exit(1)

    if appsettings.debug_mode:
        LOG(json.dumps(editor.root.to_dict(), indent=2), level=3)
    state.editor = editor
    return state


def result_export(inputstate: ProgramState) -> ProgramState:
    """
    Export the imported document as Markdown or as a JSON tree.

    Exits:
        1 if no document was imported or a transformer fails
    """
    state = inputstate.copy()
    if state.editor is None:
        print("Error: No imported document available", file=sys.stderr)
        sys.exit(1)

    LOG(f"Exporting as {state.format}...", level=1)
    try:
        with state.editor.read():
            if state.format == "json":
                state.exportResult = json.dumps(state.editor.root.to_dict(), indent=2) + "\n"
            else:
                state.exportResult = convert_to_markdown_string() + "\n"
    except Exception as e:
        print(f"Export error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Write the export and summarize the run.

    Exits:
        1 if there is nothing to write
    """
    state = inputstate.copy()
    if state.exportResult is None:
        print("Error: Conversion failed", file=sys.stderr)
        sys.exit(1)

    state.outputTargetFile.write_text(state.exportResult, encoding="utf-8")
    state.conversionReport = {
        "status": True,
        "output_file": str(state.outputTargetFile),
        "block_count": state.editor.root.children_size,
    }

    if state.highlight and state.format == "markdown":
        print(highlight(state.exportResult, MarkdownLexer(), TerminalFormatter()), end="")

    LOG("✓ Conversion successful!", level=1)
    LOG(f"  Output: {state.conversionReport['output_file']}", level=1)
    LOG(f"  Blocks: {state.conversionReport['block_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="mdtransform - Markdown document converter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert one Markdown file.

    Pipeline:
        1. env_check: Validate paths
        2. source_import: Read and import the Markdown file
        3. result_export: Export Markdown or the JSON tree
        4. results_report: Write output and summarize
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )
    state_connectToLogger(state)
    pipeline(state, env_check, source_import, result_export, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
