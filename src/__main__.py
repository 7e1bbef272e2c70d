#!/usr/bin/env python3
"""
content-factory - One annotated source, many tool-specific documents

Reads a project containing directive-annotated sources and a configuration
module, and generates every configured tool's output documents.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Directives:
    <content-factory-filter include="claude" exclude="roo">...</content-factory-filter>
    <content-factory-include-file path="@/partials/a.md" pipelines="adjust-headings(1)" />

Usage:
    content-factory inputdir/ outputdir/ --configFile content-factory.config.py

    inputdir is the project root: sources are discovered there, @/ paths
    resolve against it, and the configuration module is looked up in it.
    Relative output paths returned by transforms are written under outputdir.

Examples:
    # Default config file name
    content-factory . .

    # Separate output tree, verbose
    content-factory project/ build/ --configFile tools.config.py -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Engine, config_load, __version__, LOG, state_connectToLogger
from .lib import CircularDependencyError, ConfigLoadError
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
                 _             _        __            _
  ___ ___  _ __ | |_ ___ _ __ | |_     / _| __ _  ___| |_ ___  _ __ _   _
 / __/ _ \| '_ \| __/ _ \ '_ \| __|___| |_ / _` |/ __| __/ _ \| '__| | | |
| (_| (_) | | | | ||  __/ | | | ||_____|  _| (_| | (__| || (_) | |  | |_| |
 \___\___/|_| |_|\__\___|_| |_|\__|    |_|  \__,_|\___|\__\___/|_|   \__, |
                                                                     |___/
  One annotated source, many tool-specific documents
"""

# Define CLI arguments
parser = ArgumentParser(
    description="content-factory - generate tool-specific documents from annotated sources",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--configFile",
    default=appsettings.config_file,
    type=str,
    help="Configuration module (relative to inputdir) defining 'config'",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve the configuration path.

    Returns:
        ProgramState with added fields:
            - configPath: Resolved path to the configuration module
            - envOK: True if environment is valid

    Exits:
        1 if the configuration module is not found
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    config_path = Path(state.configFile)
    if not config_path.is_absolute():
        config_path = state.inputdir / config_path

    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.configPath = config_path
    LOG(f"Config file: {config_path}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def configuration_load(inputstate: ProgramState) -> ProgramState:
    """
    Import the configuration module.

    Returns:
        ProgramState with added field:
            - factoryConfig: FactoryConfig defined by the module

    Exits:
        1 if the module fails to import or defines no config
    """
    state = inputstate.copy()

    LOG("Loading configuration...", level=1)
    try:
        state.factoryConfig = config_load(state.configPath)
    except ConfigLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Loaded {len(state.factoryConfig.tools)} tools", level=2)
    return state


def factory_run(inputstate: ProgramState) -> ProgramState:
    """
    Run every configured tool over the project.

    Returns:
        ProgramState with added field:
            - runResult: Dict containing:
                - status: bool
                - tools: list of tool names run
                - files_written: list of output paths
                - diagnostics: recoverable conditions reported

    Exits:
        1 on a circular include or any unexpected failure
    """
    state = inputstate.copy()

    LOG("Generating tool documents...", level=1)
    try:
        engine = Engine(
            config=state.factoryConfig,
            root=state.inputdir,
            output_root=state.outputdir,
            verbose=state.verbosity >= 2,
        )
        state.runResult = engine.run()
    except CircularDependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Generation error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if runResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.runResult:
        print("Error: Generation failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Generation complete!", level=1)
        LOG(f"  Tools: {', '.join(state.runResult['tools'])}", level=1)
        LOG(f"  Files written: {len(state.runResult['files_written'])}", level=1)
        LOG(f"  Warnings: {len(state.runResult['diagnostics'])}", level=1)
        for path in state.runResult['files_written']:
            LOG(f"    {path}", level=2)
    return state


@chris_plugin(
    parser=parser,
    title="content-factory - tool-specific document generator",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - generate every tool's documents for a project.

    Orchestrates the run:
        1. env_check: Locate the configuration module
        2. configuration_load: Import it
        3. factory_run: Run the engine
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, configuration_load, factory_run, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
