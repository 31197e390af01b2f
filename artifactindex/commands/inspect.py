"""Show the index document of a single artifact."""

import json

import click

from artifactindex.indexer.catalog import FileSystemPathResolver
from artifactindex.indexer.database import SqliteArtifactCatalog
from artifactindex.indexer.exporter import DatabaseToIndexExporter, is_indexable
from artifactindex.pipeline.ui import console
from artifactindex.utils.error_handler import handle_exceptions

from ._options import repository_options, resolve_settings


@click.command()
@handle_exceptions
@repository_options
@click.argument("artifact_path")
@click.option("--record", is_flag=True, help="Print the populated metadata record instead")
def inspect_command(root, db, storage_root, storage_id, repository_id, artifact_path, record):
    """Run the extractors on ARTIFACT_PATH and print the result as JSON.

    ARTIFACT_PATH is relative to the repository, e.g.
    org/example/lib/1.0/lib-1.0.jar
    """
    settings = resolve_settings(root, db, storage_root, storage_id, repository_id)
    if not settings["db"].exists():
        raise click.ClickException(f"Catalog not found: {settings['db']} (run 'aidx scan' first)")
    resolver = FileSystemPathResolver(settings["storage_root"])

    with SqliteArtifactCatalog(settings["db"]) as catalog:
        artifact = catalog.find_by_path(
            settings["storage_id"], settings["repository_id"], artifact_path
        )
        if artifact is None:
            raise click.ClickException(f"{artifact_path} is not in the catalog")
        if artifact.coordinates is None:
            raise click.ClickException(f"{artifact_path} has no Maven coordinates")
        if not is_indexable(artifact):
            console.print(f"[warning]{artifact_path} is not indexable; showing it anyway[/warning]")

        exporter = DatabaseToIndexExporter(catalog, resolver)
        populated = exporter.populate(artifact)
        payload = populated.to_dict() if record else exporter.render(populated).to_dict()

    console.print_json(json.dumps(payload, ensure_ascii=False))
