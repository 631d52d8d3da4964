"""CLI entry point for mdbook-chapter-path."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import click

from chapterpath import __version__


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mdbook-chapter-path")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to a YAML file overriding book.toml settings",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose (DEBUG) logging",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Chapter path: link to mdBook chapters by chapter name.

    Without a subcommand, reads mdBook's preprocessor input from stdin and
    writes the processed book to stdout.
    """
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    if ctx.invoked_subcommand is None:
        _preprocess(config_path)


@main.command()
@click.argument("renderer")
def supports(renderer: str) -> None:
    """Check whether a renderer is supported by this preprocessor."""
    from chapterpath.preprocessor import Preprocessor

    sys.exit(0 if Preprocessor().supports_renderer(renderer) else 1)


@main.command()
@click.argument("book_json", type=click.File("r"), default="-")
@click.pass_context
def check(ctx: click.Context, book_json: TextIO) -> None:
    """Report missing and duplicate chapter names without rewriting anything.

    BOOK_JSON is an mdBook [context, book] payload (default: stdin).
    """
    from chapterpath.adapters.mdbook_io import MdbookJsonIO
    from chapterpath.config import load_config
    from chapterpath.core.errors import ChapterPathError
    from chapterpath.core.models import DiagnosticLevel
    from chapterpath.preprocessor import Preprocessor

    try:
        context, book = MdbookJsonIO().read(book_json)
        config = load_config(context.config, ctx.obj["config_path"])
    except ChapterPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    diagnostics = Preprocessor(config).check(book)
    for diagnostic in diagnostics:
        click.echo(str(diagnostic))

    errors = sum(1 for d in diagnostics if d.level is DiagnosticLevel.ERROR)
    if errors:
        click.echo(f"{errors} error(s) found.", err=True)
        sys.exit(1)
    click.echo("All chapter links resolve.")


def _preprocess(config_path: str | None) -> None:
    """Run the preprocessor over mdBook's stdin payload."""
    from chapterpath.adapters.mdbook_io import MdbookJsonIO
    from chapterpath.config import load_config
    from chapterpath.core.errors import ChapterPathError
    from chapterpath.preprocessor import Preprocessor

    book_io = MdbookJsonIO()
    try:
        context, book = book_io.read(sys.stdin)
        config = load_config(context.config, config_path)
        processed = Preprocessor(config).run(context, book)
    except ChapterPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    book_io.write(processed, sys.stdout)


def _setup_logging(verbose: bool) -> None:
    """Configure logging; stdout is reserved for the book."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
