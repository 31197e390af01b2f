"""Collaborator contracts consumed by the extraction pipeline.

The pipeline never touches storage directly. It resolves artifact paths
through a PathResolver and looks up siblings through an ArtifactCatalog.
Both must be safe for concurrent reads if exports are parallelized.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from .models import ArtifactRef

CoordinatePattern = Mapping[str, str | None]


class PathResolver(Protocol):
    """Maps a stored artifact to a concrete path on durable storage."""

    def resolve(self, storage_id: str, repository_id: str, artifact_path: str) -> Path: ...


class ArtifactCatalog(Protocol):
    """Query surface of the artifact catalog store."""

    def find_matching(
        self,
        storage_id: str,
        repository_id: str,
        coordinates: CoordinatePattern,
        strict: bool = True,
    ) -> Sequence[ArtifactRef]: ...

    def count_matching(
        self,
        storage_id: str,
        repository_id: str,
        coordinates: CoordinatePattern,
        strict: bool = True,
    ) -> int: ...

    def find_page(
        self,
        storage_id: str,
        repository_id: str,
        skip: int,
        limit: int,
        order_by: str = "uuid",
    ) -> Sequence[ArtifactRef]: ...


class FileSystemPathResolver:
    """Resolves artifacts below <root>/<storage_id>/<repository_id>/."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def repository_root(self, storage_id: str, repository_id: str) -> Path:
        return self.root / storage_id / repository_id

    def resolve(self, storage_id: str, repository_id: str, artifact_path: str) -> Path:
        return self.repository_root(storage_id, repository_id) / artifact_path.lstrip("/")
