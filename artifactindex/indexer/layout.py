"""Maven repository layout: path parsing and repository scanning.

A layout path looks like

    org/example/lib/1.0/lib-1.0-sources.jar
    <group as dirs>/<artifactId>/<version>/<artifactId>-<version>[-<classifier>].<extension>

Checksum and signature files take the checksum algorithm as their
extension, so lib-1.0.jar.sha1 and lib-1.0.pom.sha1 share coordinates.
"""

import os
import re
from datetime import datetime, timezone
from pathlib import Path

from artifactindex.utils.logging import logger

from .config import NON_INDEXABLE_FILE_NAMES
from .models import ArtifactCoordinates

# Trailing extensions that describe another file rather than an artifact
CHECKSUM_EXTENSIONS: frozenset[str] = frozenset({"sha1", "md5", "asc", "sha256", "sha512"})

_SNAPSHOT_SUFFIX = "-SNAPSHOT"
_TIMESTAMP_PATTERN = r"\d{8}\.\d{6}-\d+"


def _split_remainder(remainder: str) -> tuple[str | None, str] | None:
    """Split "-classifier.ext" or ".ext" into (classifier, extension)."""
    if remainder.startswith("-"):
        classifier, dot, extension = remainder[1:].partition(".")
        if not classifier or not dot or not extension:
            return None
    elif remainder.startswith("."):
        classifier, extension = None, remainder[1:]
        if not extension:
            return None
    else:
        return None

    suffix = extension.rsplit(".", 1)[-1]
    if suffix in CHECKSUM_EXTENSIONS:
        extension = suffix
    return classifier, extension


def parse_layout_path(artifact_path: str) -> ArtifactCoordinates | None:
    """Derive coordinates from a repository-relative layout path.

    Returns None for paths that are not artifacts (metadata files, paths
    that are too short, files not named after their directory).
    """
    parts = [part for part in artifact_path.strip("/").split("/") if part]
    if len(parts) < 4:
        return None

    *group_parts, artifact_id, version, file_name = parts
    if file_name in NON_INDEXABLE_FILE_NAMES:
        return None

    file_version = version
    prefix = f"{artifact_id}-{version}"
    if not file_name.startswith(prefix) and version.endswith(_SNAPSHOT_SUFFIX):
        base = re.escape(version[: -len(_SNAPSHOT_SUFFIX)])
        match = re.match(rf"{re.escape(artifact_id)}-({base}-{_TIMESTAMP_PATTERN})", file_name)
        if match:
            file_version = match.group(1)
            prefix = f"{artifact_id}-{file_version}"

    if not file_name.startswith(prefix):
        return None

    split = _split_remainder(file_name[len(prefix):])
    if split is None:
        return None
    classifier, extension = split

    return ArtifactCoordinates(
        group_id=".".join(group_parts),
        artifact_id=artifact_id,
        version=file_version,
        classifier=classifier,
        extension=extension,
    )


def scan_repository(catalog, repository_root: Path, storage_id: str, repository_id: str) -> int:
    """Register every file below repository_root in the catalog.

    Hidden directories (.index, .trash, ...) are skipped. Returns the
    number of files registered.
    """
    repository_root = Path(repository_root)
    if not repository_root.is_dir():
        raise FileNotFoundError(f"Repository directory not found: {repository_root}")

    count = 0
    for dirpath, dirnames, filenames in os.walk(repository_root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            artifact_path = file_path.relative_to(repository_root).as_posix()
            try:
                stat = file_path.stat()
            except OSError as e:
                logger.warning("Skipping unreadable file {}: {}", file_path, e)
                continue

            catalog.add_artifact(
                storage_id,
                repository_id,
                artifact_path,
                parse_layout_path(artifact_path),
                size_in_bytes=stat.st_size,
                last_updated=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )
            count += 1

    catalog.commit()
    logger.info("Registered {} files from {}/{}", count, storage_id, repository_id)
    return count
