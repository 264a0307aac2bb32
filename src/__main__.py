#!/usr/bin/env python3
"""
annodocs - Annotation Markdown to fumadocs MDX transpiler

Converts documentation written with `:::type` block annotations into MDX
that uses fumadocs-ui components, and converts such MDX back again.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Text-first: annotated sources stay readable as plain Markdown
    - Two-way: every built-in annotation has a component form and back
    - Forgiving: one broken block never stops the rest of the document
    - Mirrored output: the input tree is reproduced under outputdir

Annotations:
    :::callout-info / -warn / -error / -note
    :::tabs, :::steps, :::accordion
    :::code-block lang=python title="hello.py"
    :::files
    :::banner type=warning

Usage:
    annodocs inputdir/ outputdir/

Examples:
    # Transform every .md file below docs/ into .mdx files below out/
    annodocs docs/ out/

    # Convert MDX back to annotated Markdown
    annodocs out/ docs/ --reverse

    # Report problems without writing anything
    annodocs docs/ out/ --validateOnly -vv

    # Write the default configuration to out/annodocs.config.yaml
    annodocs docs/ out/ --initConfig

    # Show how each annotation is written
    annodocs docs/ out/ --examples
"""

import sys
from pathlib import Path
from typing import List
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import ComponentRegistry, FileHandler, Transpiler, __version__, LOG, state_connectToLogger
from .config import ConfigError, TranspilerConfig, appsettings, config_load, config_write
from .models import ComponentCategory, FileResult, ProgramState, pipeline


DISPLAY_TITLE = r"""
                               _
   __ _ _ __  _ __   ___   __| | ___   ___ ___
  / _` | '_ \| '_ \ / _ \ / _` |/ _ \ / __/ __|
 | (_| | | | | | | | (_) | (_| | (_) | (__\__ \
  \__,_|_| |_|_| |_|\___/ \__,_|\___/ \___|___/

  Annotation Markdown <-> fumadocs MDX
"""

CONFIG_TEMPLATE_NAME = "annodocs.config.yaml"

# Define CLI arguments
parser = ArgumentParser(
    description="annodocs - Annotation Markdown to fumadocs MDX transpiler",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--reverse",
    action="store_true",
    default=False,
    help="Convert MDX components back to annotated Markdown",
)

parser.add_argument(
    "--description",
    default=None,
    type=str,
    help="Description to add to the frontmatter of every transformed file",
)

parser.add_argument(
    "--config",
    dest="configFile",
    default=None,
    type=str,
    help="Config file (YAML or JSON). Defaults to the nearest annodocs config above inputdir",
)

parser.add_argument(
    "--dryRun",
    action="store_true",
    default=False,
    help="Transform files but do not write any output",
)

parser.add_argument(
    "--validateOnly",
    action="store_true",
    default=False,
    help="Only scan and validate annotations, report problems",
)

parser.add_argument(
    "--backup",
    action="store_true",
    default=False,
    help="Keep a backup copy of output files that get overwritten",
)

parser.add_argument(
    "--initConfig",
    action="store_true",
    default=False,
    help=f"Write the default configuration to outputdir/{CONFIG_TEMPLATE_NAME} and exit",
)

parser.add_argument(
    "--listTypes",
    action="store_true",
    default=False,
    help="List the supported annotation types and exit",
)

parser.add_argument(
    "--examples",
    action="store_true",
    default=False,
    help="Print an example of every built-in annotation and exit",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def errors_print(result: FileResult) -> None:
    """Print the problems of one file to stderr, one per line"""
    for error in result.errors:
        location = f"{result.input_path}:{error.line}" if error.line else f"{result.input_path}"
        print(f"  {location}: {error.kind.value}: {error.message}", file=sys.stderr)


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and load the transform configuration.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - config: Loaded TranspilerConfig
            - envOK: True if environment is valid

    Exits:
        1 if the input directory is missing or the config is invalid
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    config_path = Path(state.configFile) if state.configFile else appsettings.configFile_find(state.inputdir)
    try:
        state.config = config_load(config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if config_path:
        LOG(f"Config file: {config_path}", level=2)
    else:
        LOG("No config file found, using defaults", level=2)

    if not (state.dryRun or state.validateOnly):
        state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_find(inputstate: ProgramState) -> ProgramState:
    """
    Collect the documents to transform.

    Returns:
        ProgramState with added field:
            - sourceFiles: Sorted list of source paths
    """

    state = inputstate.copy()

    handler = FileHandler(state.config)
    state.sourceFiles = handler.sources_find(state.inputdir, reverse=state.reverse)

    kind = "MDX" if state.reverse else "Markdown"
    LOG(f"Found {len(state.sourceFiles)} {kind} files", level=1)
    return state


def sources_transform(inputstate: ProgramState) -> ProgramState:
    """
    Transform every source file.

    Failures are recorded per file and never stop the batch.

    Returns:
        ProgramState with added field:
            - fileResults: One FileResult per source file
    """

    state = inputstate.copy()

    handler = FileHandler(state.config, dry_run=state.dryRun, backup=state.backup)
    direction = "Reversing" if state.reverse else "Transforming"

    results: List[FileResult] = []
    for path in state.sourceFiles:
        LOG(f"{direction} {path.relative_to(state.inputdir)}", level=1)
        results.append(handler.file_transform(
            path,
            state.inputdir,
            state.outputdir,
            reverse=state.reverse,
            description=state.description,
            validate_only=state.validateOnly,
        ))

    state.fileResults = results
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display transform results to the user.

    Problems are listed on stderr, grouped by file.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if any file failed
    """
    state: ProgramState = inputstate.copy()

    failed = [result for result in state.fileResults if not result.success]
    succeeded = len(state.fileResults) - len(failed)

    for result in state.fileResults:
        if result.errors:
            print(f"{result.input_path}:", file=sys.stderr)
            errors_print(result)

    if state.validateOnly:
        LOG(f"\nValidated {len(state.fileResults)} files, {len(failed)} with errors", level=1)
    else:
        LOG(f"\n✓ {succeeded} files transformed, {len(failed)} failed", level=1)
        if state.dryRun:
            LOG("  Dry run: no files were written", level=1)
        else:
            LOG(f"  Output: {state.outputdir}", level=1)

    if failed:
        sys.exit(1)
    return state


def config_init(outputdir: Path) -> None:
    """Write the default configuration as a starting point"""
    outputdir.mkdir(parents=True, exist_ok=True)
    path = config_write(TranspilerConfig(), outputdir / CONFIG_TEMPLATE_NAME)
    print(f"Wrote default configuration to {path}")


def types_print(configFile: str, inputdir: Path) -> None:
    """Print the supported annotation types, one per line"""
    config_path = Path(configFile) if configFile else appsettings.configFile_find(inputdir)
    try:
        config = config_load(config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    transpiler = Transpiler(config)
    for category in ComponentCategory:
        print(f"{category.value}:")
        for spec in transpiler.registry.components_listByCategory(category):
            print(f"  {spec.name:<16} {spec.description}")

    custom = [name for name in transpiler.supportedTypes_list()
              if transpiler.registry.spec_get(name) is None]
    if custom:
        print("custom:")
        for name in custom:
            print(f"  {name:<16} {config.component_mappings[name]}")


def examples_print() -> None:
    """Print copy-pasteable example sources of the built-in types"""
    registry = ComponentRegistry()
    for name in registry.types_list():
        spec = registry.spec_get(name)
        print(f"# {name}: {spec.description}")
        for example in spec.examples:
            print(example)
        print()


@chris_plugin(
    parser=parser,
    title="annodocs - Annotation Markdown to fumadocs MDX transpiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - transform a documentation tree.

    Orchestrates the batch pipeline:
        1. env_check: Validate paths, load config
        2. sources_find: Collect source documents
        3. sources_transform: Transform and write each document
        4. results_report: Report problems, exit non-zero on failure

    Args:
        options: CLI arguments from argparse
            - reverse: bool - MDX back to annotated Markdown
            - description: Optional[str] - Frontmatter description
            - configFile: Optional[str] - Config file path
            - dryRun / validateOnly / backup: bool - Output control
            - initConfig / listTypes / examples: bool - One-shot actions
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing source documents
        outputdir: Directory where transformed documents are written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    if options.initConfig:
        config_init(outputdir)
        return

    if options.listTypes:
        types_print(options.configFile, inputdir)
        return

    if options.examples:
        examples_print()
        return

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    # Execute transform pipeline
    pipeline(state, env_check, sources_find, sources_transform, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
