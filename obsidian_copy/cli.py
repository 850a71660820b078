"""CLI entrypoint for obsidian-copy."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__


def _setup_logging(verbose: int) -> None:
    """Route library logging through rich on stderr."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.command()
@click.version_option(__version__, prog_name="obsidian-copy")
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    required=True,
    help="Root of vault to copy",
)
@click.option(
    "--destination",
    "-d",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    required=True,
    help="Destination to copy to",
)
@click.option(
    "--include-tags",
    "-i",
    multiple=True,
    metavar="TAG",
    help="Tags to include in copied vault (repeatable, comma-delimited)",
)
@click.option(
    "--exclude-tags",
    "-e",
    multiple=True,
    metavar="TAG",
    help="Tags to exclude in copied vault (repeatable, comma-delimited)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: <root>/.obsidian-copy.yml if present)",
)
@click.option(
    "--tag-field",
    type=str,
    default=None,
    metavar="NAME",
    help="Front matter key holding tags (default: tags)",
)
@click.option(
    "--prune-excluded/--no-prune-excluded",
    default=None,
    help="Don't follow links into notes carrying an excluded tag",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be copied without copying",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output the copy manifest as JSON",
)
@click.option(
    "--explain",
    is_flag=True,
    help="Explain why each file is included",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with error, copying nothing, if any reference is unresolved or front matter is invalid",
)
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)")
def cli(
    root: Path,
    destination: Path,
    include_tags: tuple[str, ...],
    exclude_tags: tuple[str, ...],
    config_path: Path | None,
    tag_field: str | None,
    prune_excluded: bool | None,
    dry_run: bool,
    output_json: bool,
    explain: bool,
    strict: bool,
    verbose: int,
) -> None:
    """Copies part of an Obsidian vault according to tag filters.

    Notes tagged with an included tag (and no excluded tag) are copied, along
    with every file they link to or embed, directly or indirectly.

    Examples:

        obsidian-copy -r ~/vault -d ./public -i public

        obsidian-copy -r ~/vault -d ./out -i blog,essay -e draft --dry-run
    """
    from .commands.copy_cmd import run_copy
    from .config import resolve_config
    from .errors import ConfigError

    _setup_logging(verbose)

    try:
        config = resolve_config(
            root.resolve(),
            destination.resolve(),
            include_tags=include_tags,
            exclude_tags=exclude_tags,
            config_path=config_path,
            tag_field=tag_field,
            prune_excluded=prune_excluded,
        )
    except ConfigError as e:
        raise click.ClickException(str(e))

    exit_code = run_copy(
        config,
        dry_run=dry_run,
        output_json=output_json,
        explain=explain,
        strict=strict,
    )
    sys.exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
