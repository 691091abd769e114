# Copyright 2026 socgraph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the socgraph command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from socgraph.catalog.library import CatalogError, ComponentLibrary, load_component_library
from socgraph.config.settings import CONFIG_FILE_NAME, LoaderConfig, LoaderConfigError, load_loader_config
from socgraph.model.entities import System
from socgraph.parser.errors import LoadError
from socgraph.parser.loader import LoadResult, SopcInfoLoader
from socgraph.validation.checks import validate

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the socgraph CLI."""
    parser = argparse.ArgumentParser(
        prog="socgraph",
        description="socgraph - load .sopcinfo system descriptions",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output from the loader",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # show subcommand
    show_parser = subparsers.add_parser(
        "show",
        help="Print the components and connections of a system",
        description="Load a .sopcinfo file and print the resulting system graph.",
    )
    show_parser.add_argument("file", help="Path to the .sopcinfo file")
    show_parser.add_argument(
        "--config",
        help=f"Loader configuration file (default: {CONFIG_FILE_NAME} next to the input, if present)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check the consistency of a system",
        description="Load a .sopcinfo file and validate the resulting system graph.",
    )
    check_parser.add_argument("file", help="Path to the .sopcinfo file")
    check_parser.add_argument(
        "--config",
        help=f"Loader configuration file (default: {CONFIG_FILE_NAME} next to the input, if present)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s: %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "show":
        return _cmd_show(args)
    if args.command == "check":
        return _cmd_check(args)
    return 0


def _load(args: argparse.Namespace) -> LoadResult | None:
    """Build a loader from the command-line options and load the input file.

    Prints the problem and returns None on failure.
    """
    source = Path(args.file)
    if not source.exists():
        print(f"Error: file '{source}' does not exist.", file=sys.stderr)
        return None

    config_path = Path(args.config) if args.config else source.parent / CONFIG_FILE_NAME
    config = LoaderConfig()
    if args.config or config_path.exists():
        try:
            config = load_loader_config(config_path)
        except LoaderConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return None

    catalog = ComponentLibrary.default()
    if config.catalog_path is not None:
        try:
            for descriptor in load_component_library(config.catalog_path).descriptors():
                catalog.register(descriptor)
        except CatalogError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return None

    try:
        return SopcInfoLoader(catalog=catalog, config=config).load(source)
    except (LoadError, OSError) as exc:
        print(f"Error: cannot load '{source}': {exc}", file=sys.stderr)
        return None


def _cmd_show(args: argparse.Namespace) -> int:
    """Handle the show subcommand."""
    result = _load(args)
    if result is None:
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning.message}")
    _print_system(result.system)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    result = _load(args)
    if result is None:
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning.message}")

    validation = validate(result.system)
    for warning in validation.warnings:
        print(f"Warning: {warning.message}")
    for error in validation.errors:
        print(f"Error: {error.message}", file=sys.stderr)

    if validation.has_errors:
        return 1

    print("No issues found.")
    return 0


def _print_system(system: System) -> None:
    print(f"System: {system.name}")
    print(f"Version: {system.version}")
    if system.unique_identifier:
        print(f"Unique identifier: {system.unique_identifier}")
    print(f"Components ({len(system.components)}):")
    for component in system.components:
        label = " ".join(part for part in (component.kind, component.version) if part)
        print(f"  {component.name} ({label})")
        for interface in component.interfaces:
            role = "master" if interface.is_master else "slave"
            print(f"    {interface.name} [{interface.kind}, {role}]")
    connections = system.connections
    print(f"Connections ({len(connections)}):")
    for connection in connections:
        master = connection.master.qualified_name if connection.master is not None else "?"
        slave = connection.slave.qualified_name if connection.slave is not None else "?"
        print(f"  {master} -> {slave} [{connection.kind}]")
