# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the annospec command-line interface."""

import argparse
import sys
from pathlib import Path

from yachalk import chalk

from annospec.compiler.artifact import serialize, write_document
from annospec.compiler.assembler import Diagnostic
from annospec.compiler.build import GenerationError, GenerationResult, generate
from annospec.logging import configure_logging
from annospec.workspace.config import (
    CONFIG_FILE_NAME,
    OUTPUT_FORMATS,
    GenerationConfig,
    MissingConfigurationError,
    load_generation_config,
    render_starter_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the annospec CLI."""
    parser = argparse.ArgumentParser(
        prog="annospec",
        description="annospec: OpenAPI documents from annotated sources",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Write a starter configuration",
        description=f"Create a starter {CONFIG_FILE_NAME} in a project directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to write the configuration to (default: current directory)",
    )

    # generate subcommand
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the OpenAPI document",
        description="Compile the annotations of the configured files into an OpenAPI document.",
    )
    _add_common_arguments(generate_parser)
    generate_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Path of the generated document; '-' writes to stdout (default: from the configuration)",
    )
    generate_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: from the configuration)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check the annotations without writing a document",
        description="Compile every annotation and report the streams that fail.",
    )
    _add_common_arguments(check_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help=f"Directory containing {CONFIG_FILE_NAME} (default: current directory)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path of the configuration file (default: <directory>/{CONFIG_FILE_NAME})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every processed file and stream")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        _error(f"directory '{directory}' does not exist.")
        return 1

    config_file = directory / CONFIG_FILE_NAME

    if config_file.exists():
        _error(f"configuration already exists at '{config_file}'.")
        return 1

    config_file.write_text(render_starter_config(), encoding="utf-8")
    print(f"Initialized annospec configuration at '{config_file}'.")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    config = _load_config(args)
    if config is None:
        return 1
    result = _run(config)
    if result is None:
        return 1

    _report(result.diagnostics)
    output_format = args.format or config.format
    output = config.output
    if args.output is not None:
        output = None if args.output == "-" else Path(args.output)

    if output is None:
        sys.stdout.write(serialize(result.document, output_format))
        return 0

    try:
        write_document(result.document, output, output_format)
    except OSError as exc:
        _error(f"cannot write '{output}': {exc}")
        return 1
    print(
        f"Wrote {output} ({len(result.document['paths'])} path(s), "
        f"{len(result.diagnostics)} skipped block(s))."
    )
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    config = _load_config(args)
    if config is None:
        return 1
    result = _run(config)
    if result is None:
        return 1

    print(f"Checked {len(result.files)} file(s).")
    _report(result.diagnostics)
    if result.diagnostics:
        return 1
    print(chalk.green("No problems found."))
    return 0


def _load_config(args: argparse.Namespace) -> GenerationConfig | None:
    configure_logging(verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None)

    directory = Path(args.directory).resolve()
    if not directory.exists():
        _error(f"directory '{directory}' does not exist.")
        return None

    config_file = Path(args.config).resolve() if args.config else directory / CONFIG_FILE_NAME
    if not config_file.exists():
        _error(f"no configuration found at '{config_file}'. Run 'annospec init' to create one.")
        return None

    try:
        return load_generation_config(config_file)
    except MissingConfigurationError as exc:
        _error(str(exc))
        return None


def _run(config: GenerationConfig) -> GenerationResult | None:
    try:
        return generate(config)
    except GenerationError as exc:
        _error(str(exc))
        return None


def _report(diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        print(chalk.yellow(f"Warning: {diagnostic}"), file=sys.stderr)


def _error(message: str) -> None:
    print(chalk.red(f"Error: {message}"), file=sys.stderr)
