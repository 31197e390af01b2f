"""Register the files of a repository directory in the artifact catalog."""

import click

from artifactindex.indexer.catalog import FileSystemPathResolver
from artifactindex.indexer.database import SqliteArtifactCatalog
from artifactindex.indexer.layout import scan_repository
from artifactindex.pipeline.ui import print_success
from artifactindex.utils.error_handler import handle_exceptions

from ._options import repository_options, resolve_settings


@click.command()
@handle_exceptions
@repository_options
def scan(root, db, storage_root, storage_id, repository_id):
    """Register every file of a Maven-layout repository in the catalog.

    Walks <storage-root>/<storage-id>/<repository-id>/ and upserts one
    catalog entry per file, deriving coordinates from the layout path.
    Files that are not artifacts (maven-metadata.xml, misnamed files) are
    registered without coordinates.

    \b
    Examples:
      aidx scan --storage-root /srv/repo --storage-id storage0 --repository-id releases
    """
    settings = resolve_settings(root, db, storage_root, storage_id, repository_id)
    resolver = FileSystemPathResolver(settings["storage_root"])
    repository_root = resolver.repository_root(settings["storage_id"], settings["repository_id"])

    settings["db"].parent.mkdir(parents=True, exist_ok=True)
    with SqliteArtifactCatalog(settings["db"]) as catalog:
        count = scan_repository(
            catalog, repository_root, settings["storage_id"], settings["repository_id"]
        )

    print_success(f"Registered {count} files from {repository_root} in {settings['db']}")
