"""artifactindex CLI - main entry point and command registration hub."""
# ruff: noqa: E402 - commands are imported after the cli group definition

from pathlib import Path

import click

from artifactindex import __version__
from artifactindex.utils.logging import configure_file_logging


@click.group()
@click.version_option(version=__version__, prog_name="aidx")
@click.help_option("-h", "--help")
@click.option("--log-dir", default=None, help="Also write a rotating log file to this directory")
def cli(log_dir):
    """artifactindex - search-index metadata for Maven repositories

    \b
    QUICK START:
      aidx scan                 # Register repository files in the catalog
      aidx export               # Render index documents for every artifact
      aidx inspect PATH         # Show the document of a single artifact

    \b
    Settings come from .artifactindex/config.json and ARTIFACTINDEX_* variables.
    For detailed options: aidx <command> --help"""
    if log_dir:
        configure_file_logging(Path(log_dir))


from artifactindex.commands.export import export
from artifactindex.commands.inspect import inspect_command
from artifactindex.commands.scan import scan

cli.add_command(scan)
cli.add_command(export)
cli.add_command(inspect_command, name="inspect")


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
