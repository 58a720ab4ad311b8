"""
Program state model and pipeline helper

Defines ProgramState dataclass for the CLI's functional pipeline and the
pipeline() helper for composing its stages.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type, TypeVar


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the conversion pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile,
          format, highlight
        - env_check: inputSourceFile, outputTargetFile, envOK
        - source_import: editor
        - result_export: exportResult
        - results_report: conversionReport

    Attributes:
        inputdir: Directory containing the Markdown source
        outputdir: Directory receiving the converted file
        verbosity: Logging verbosity level (1-3)
        inputFile: Markdown filename (relative to inputdir)
        outputFile: Output filename (relative to outputdir); defaults to
                    inputFile, with a .json suffix for JSON output
        format: "markdown" (normalized Markdown) or "json" (document tree)
        highlight: Echo the Markdown result with syntax highlighting
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the Markdown source
        outputTargetFile: Resolved path of the file to write
        editor: Editor holding the imported document
        exportResult: Text written to outputTargetFile
        conversionReport: Summary (output_file, block_count, status)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFile: Optional[str] = field(default=None)
    format: str = field(default="markdown")
    highlight: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputTargetFile: Path = field(default=Path("/"))
    editor: Optional[Any] = field(default=None)  # Editor at runtime
    exportResult: Optional[str] = field(default=None)
    conversionReport: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Options that are not ProgramState fields are ignored.
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**{**filtered_options, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(initial_state, env_check, source_import, result_export)

    is
        result_export(source_import(env_check(initial_state)))

    read left to right.
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
