"""Export index documents for every artifact of a repository."""

from pathlib import Path

import click
from rich.table import Table

from artifactindex.indexer.catalog import FileSystemPathResolver
from artifactindex.indexer.config import MAX_PAGE_SIZE
from artifactindex.indexer.database import SqliteArtifactCatalog
from artifactindex.indexer.exporter import DatabaseToIndexExporter
from artifactindex.indexer.sinks import JsonlDocumentSink
from artifactindex.pipeline.ui import console, print_header
from artifactindex.utils.error_handler import handle_exceptions
from artifactindex.utils.logging import get_request_id

from ._options import repository_options, resolve_settings


@click.command()
@handle_exceptions
@repository_options
@click.option("--out", default=None, help="NDJSON output file (default from config)")
@click.option(
    "--page-size",
    type=click.IntRange(1, MAX_PAGE_SIZE),
    default=None,
    help="Catalog entries fetched per page",
)
@click.option("--dry-run", is_flag=True, help="Extract and render without writing documents")
def export(root, db, storage_root, storage_id, repository_id, out, page_size, dry_run):
    """Render search-index documents for a repository's artifacts.

    Pages through the catalog, skips non-indexable files (maven-metadata.xml,
    *.properties, *.asc, *.md5, *.sha1), runs the extractors on every other
    artifact and writes one JSON document per line.

    \b
    Examples:
      aidx export
      aidx export --repository-id snapshots --out snapshots.ndjson
      aidx export --dry-run --page-size 200
    """
    settings = resolve_settings(root, db, storage_root, storage_id, repository_id)
    if not settings["db"].exists():
        raise click.ClickException(f"Catalog not found: {settings['db']} (run 'aidx scan' first)")

    page_size = page_size or settings["config"]["limits"]["page_size"]
    out_path = Path(out or settings["config"]["paths"]["output"])
    resolver = FileSystemPathResolver(settings["storage_root"])

    with SqliteArtifactCatalog(settings["db"]) as catalog:
        if dry_run:
            stats = DatabaseToIndexExporter(catalog, resolver, page_size=page_size).export(
                settings["storage_id"], settings["repository_id"]
            )
        else:
            with JsonlDocumentSink(out_path) as sink:
                stats = DatabaseToIndexExporter(
                    catalog, resolver, page_size=page_size, sink=sink
                ).export(settings["storage_id"], settings["repository_id"])

    print_header(f"EXPORT {settings['storage_id']}/{settings['repository_id']}")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for metric, count in stats.to_dict().items():
        table.add_row(metric.replace("_", " "), str(count))
    console.print(table)
    console.print(f"[dim]request id {get_request_id()}[/dim]")

    if not dry_run:
        console.print(f"Documents written to [path]{out_path}[/path]")
