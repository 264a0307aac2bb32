"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the batch pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as processing progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity and CLI flags
        - env_check: config, envOK
        - sources_find: sourceFiles
        - sources_transform: fileResults
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory holding the source documents
        outputdir: Directory receiving transformed documents
        verbosity: Logging verbosity level (1-3)
        reverse: Convert MDX back to annotated Markdown
        description: Description to add to the frontmatter
        configFile: Optional explicit config file path
        dryRun: Preview only, write nothing
        validateOnly: Scan and validate without writing
        backup: Keep a backup copy of overwritten targets
        envOK: Environment validation passed
        config: Loaded TranspilerConfig
        sourceFiles: Files selected for processing
        fileResults: One FileResult per processed file
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    reverse: bool = field(default=False)
    description: Optional[str] = field(default=None)
    configFile: Optional[str] = field(default=None)
    dryRun: bool = field(default=False)
    validateOnly: bool = field(default=False)
    backup: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    config: Optional[Any] = field(default=None)  # TranspilerConfig at runtime
    sourceFiles: List[Path] = field(default_factory=list)
    fileResults: List[Any] = field(default_factory=list)  # List[FileResult] at runtime

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (reverse, description, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for transformed output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that are ProgramState fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

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
        final_state = pipeline(
            initial_state,
            env_check,
            sources_find,
            sources_transform,
            results_report
        )

    This is equivalent to:
        results_report(sources_transform(sources_find(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
