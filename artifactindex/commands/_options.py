"""Options shared by commands that talk to a catalog and a storage root."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from artifactindex.config_runtime import load_runtime_config


def repository_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add --root/--db/--storage-root/--storage-id/--repository-id to a command."""
    options = [
        click.option("--root", default=".", help="Directory holding .artifactindex/config.json"),
        click.option("--db", default=None, help="Catalog database (default from config)"),
        click.option("--storage-root", default=None, help="Directory holding <storage>/<repository>/"),
        click.option("--storage-id", default=None, help="Storage id (default from config)"),
        click.option("--repository-id", default=None, help="Repository id (default from config)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_settings(root, db, storage_root, storage_id, repository_id) -> dict[str, Any]:
    """Merge command-line values over the runtime configuration."""
    cfg = load_runtime_config(root)
    return {
        "config": cfg,
        "db": Path(db or cfg["paths"]["catalog_db"]),
        "storage_root": Path(storage_root or cfg["paths"]["storage_root"]),
        "storage_id": storage_id or cfg["export"]["storage_id"],
        "repository_id": repository_id or cfg["export"]["repository_id"],
    }
