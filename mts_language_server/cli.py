#!/usr/bin/env python3
"""
mts-ls CLI - Command-line interface for the MapTool macro script language server.

This module provides the entry point for the 'mts-ls' command installed via pip.

Usage:
    mts-ls serve                          # Serve over stdio
    mts-ls serve --tcp --port 2087        # Serve over TCP
    mts-ls check macro.mts                # Print diagnostics for a file
    mts-ls check *.mts --max-problems 10  # Cap warnings per file
    mts-ls check macro.mts --show-tree    # Also dump the syntax tree
"""

import logging
import sys
from pathlib import Path

import click

from mts_language_server.src.ast import print_ast
from mts_language_server.src.common.constants import DEFAULT_SETTINGS, MTSSettings
from mts_language_server.src.common.diagnostics import DiagnosticSeverity, DocumentDiagnostics
from mts_language_server.src.server.server import create_server
from mts_language_server.src.workspace.manager import WorkspaceManager

LOG_LEVELS = ["debug", "info", "warning", "error"]


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


def check_source(
    manager: WorkspaceManager,
    source_code: str,
    source_name: str,
    settings: MTSSettings = DEFAULT_SETTINGS,
) -> DocumentDiagnostics:
    """
    Analyse one macro the way the server would for an open document.

    Args:
        manager: Workspace holding every file checked so far
        source_code: The macro text
        source_name: Path used for the document URI and messages
        settings: Settings applied to the diagnostic cap

    Returns:
        The capped diagnostics of the document
    """
    uri = Path(source_name).resolve().as_uri()
    artifacts = manager.update_document(uri, source_code, settings=settings)

    diagnostics = DocumentDiagnostics()
    if artifacts is not None:
        diagnostics.extend(artifacts.diagnostics)
    return diagnostics


@click.group()
def main():
    """Language server and offline checker for MapTool macro scripts."""


@main.command()
@click.option("--tcp", is_flag=True, help="Serve over TCP instead of stdio")
@click.option("--host", default="127.0.0.1", show_default=True, help="TCP host")
@click.option("--port", type=int, default=2087, show_default=True, help="TCP port")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def serve(tcp, host, port, log_level):
    """Run the language server."""
    setup_logging(log_level)
    server = create_server()
    if tcp:
        server.start_tcp(host, port)
    else:
        server.start_io()


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--max-problems",
    type=click.IntRange(min=0),
    default=DEFAULT_SETTINGS.max_number_of_problems,
    show_default=True,
    help="Maximum number of warnings reported per file",
)
@click.option("--show-tree", is_flag=True, help="Print the syntax tree of each file")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def check(files, max_problems, show_tree, log_level):
    """Analyse macro files and print their diagnostics."""
    setup_logging(log_level)

    # One workspace for all files, so functions defined in one are known in the others
    manager = WorkspaceManager()
    settings = MTSSettings(max_number_of_problems=max_problems, wiki_uri_root=DEFAULT_SETTINGS.wiki_uri_root)

    failed = False
    for path in files:
        try:
            source_code = path.read_text(encoding="utf-8")
        except Exception as e:
            click.echo(f"Failed to read input file: {e}", err=True)
            sys.exit(1)

        if show_tree:
            # Scripts that fail to parse are left out of the tree
            macro, _ = manager.parser.parse_tolerant(source_code, str(path))
            print_ast(macro)

        diagnostics = check_source(manager, source_code, str(path), settings)
        for message in diagnostics.get_messages(DiagnosticSeverity.HINT, str(path)):
            click.echo(message)
        if diagnostics.has_errors():
            failed = True

        if log_level in ["debug", "info"]:
            click.echo(
                f"{path.name}: {diagnostics.error_count()} error(s), {diagnostics.warning_count()} warning(s)",
                err=True,
            )

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
