"""
Tangles literate Markdown documents.
Writes the files declared by `> File` blocks and runs `> Run` blocks in document order.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import MalformedSourceError, RunFailedError
from .filesystem import get_max_file_size, normalize_filepath
from .tangler import tangle_file

__all__ = ["cli"]


def setup_logging(verbosity: int) -> None:
    """Configure logging based on how many `-v` flags were given."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@click.command()
@click.version_option()
@click.option(
    "--execute/--preview",
    default=None,
    help="Write files and run commands, or only show the commands that would run",
)
@click.option(
    "--scissors/--no-scissors",
    default=True,
    help="Tangle only the text between scissor markers when the document has them",
)
@click.option("--scissor-dashes", type=int, help="Number of dashes around the scissor glyph")
@click.option("--shell", help="Shell used to run `> Run` blocks")
@click.option(
    "--strict-quotes/--lenient-quotes",
    default=None,
    help="Reject quoted lines outside any File or Run block",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False),
    help="Directory for output files and commands (default: current directory)",
)
@click.option("-v", "--verbose", count=True, help="Increase logging verbosity")
@click.argument("filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def cli(
    ctx: click.Context,
    filepaths: tuple[str, ...],
    execute: bool | None = None,
    scissors: bool = True,
    scissor_dashes: int | None = None,
    shell: str | None = None,
    strict_quotes: bool | None = None,
    directory: str | None = None,
    verbose: int = 0,
):
    """
    Tangle each document in order, stopping at the first failure.

    Args:
        filepaths: Documents to tangle.
        execute: Override for execute (True) or preview (False) mode.
        scissors: Allow scissor-range extraction.
        scissor_dashes: Override for the scissor marker dash count.
        shell: Override for the run-block shell.
        strict_quotes: Override for strict handling of stray quoted lines.
        directory: Output and working directory.
        verbose: Logging verbosity level.

    Returns:
        None.

    Raises:
        click.BadParameter: If paths or configuration values are invalid.
        click.ClickException: If a document is malformed or files cannot be
            read or written.
        click.exceptions.Exit: With the child's exit status when a run block
            fails.

    Examples:
        mdtangle BOOTSTRAP.md --preview
    """
    setup_logging(verbose)
    base_dir = Path(directory).resolve() if directory else Path.cwd().resolve()

    for raw_path in filepaths:
        try:
            filepath = normalize_filepath(raw_path)
        except ValueError as error:
            raise click.BadParameter(str(error)) from error
        try:
            config = build_config(
                filepath.parent,
                execute=execute,
                scissor_dashes=scissor_dashes,
                shell=shell,
                strict_quotes=strict_quotes,
            )
        except ConfigError as error:
            raise click.BadParameter(str(error)) from error

        try:
            config = replace(config, max_file_size=get_max_file_size(default=config.max_file_size))
        except ValueError as error:
            raise click.ClickException(str(error)) from error

        try:
            report = tangle_file(filepath, config, base_dir=base_dir, scissors=scissors)
        except RunFailedError as error:
            for line in error.report():
                click.echo(line, err=True)
            ctx.exit(error.status)
        except MalformedSourceError as error:
            raise click.ClickException(f"{filepath}: {error}") from error
        except IOError as error:
            raise click.ClickException(str(error)) from error

        if not config.execute:
            for name in report.files:
                click.echo(f"Would write {name}")


if __name__ == "__main__":
    cli()
