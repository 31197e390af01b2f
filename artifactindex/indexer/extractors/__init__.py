"""Extractor framework for the indexer.

This module defines the BaseExtractor abstract class, the
ExtractorRegistry that fixes execution order, and the CompositeExtractor
that runs every registered extractor against one artifact.

Each extractor works in two phases:
- populate(): inspect the artifact (and its siblings) and fill in fields
  of the mutable ArtifactMetadataRecord
- render(): read the frozen PopulatedRecord and add document fields

CONTRACT: an extractor contains its own IO and format failures. A broken
archive or descriptor leaves the extractor's fields unset and is logged;
it never prevents later extractors from running. Catalog and path
resolution failures are not contained and propagate to the export.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ..catalog import ArtifactCatalog, PathResolver
from ..document import IndexDocument
from ..models import ArtifactMetadataRecord, ArtifactRef, PopulatedRecord


class BaseExtractor(ABC):
    """Abstract base class for all artifact metadata extractors."""

    # Lower runs first
    priority: int = 100
    name: str = "base"

    def __init__(self, catalog: ArtifactCatalog, path_resolver: PathResolver):
        """Initialize the extractor.

        Args:
            catalog: Catalog used for sibling lookups
            path_resolver: Resolves artifacts to files on storage
        """
        self.catalog = catalog
        self.path_resolver = path_resolver

    def resolve_path(self, artifact: ArtifactRef) -> Path:
        return Path(
            self.path_resolver.resolve(
                artifact.storage_id, artifact.repository_id, artifact.artifact_path
            )
        )

    @abstractmethod
    def populate(self, record: ArtifactMetadataRecord, artifact: ArtifactRef) -> None:
        """Fill in the fields this extractor owns."""

    @abstractmethod
    def render(self, record: PopulatedRecord, document: IndexDocument) -> None:
        """Add this extractor's fields to the document."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority})"


class ExtractorRegistry:
    """Priority-ordered set of extractors selected at startup.

    The order is fixed once the registry is built: minimal info, then
    archive contents, then plugin descriptor.
    """

    def __init__(self, extractors: list[BaseExtractor]):
        self.extractors: list[BaseExtractor] = sorted(extractors, key=lambda e: e.priority)

    @classmethod
    def default(cls, catalog: ArtifactCatalog, path_resolver: PathResolver) -> "ExtractorRegistry":
        """Registry with the standard Maven extractors."""
        from .contents import ArchiveContentsExtractor
        from .minimal import MinimalInfoExtractor
        from .plugin import PluginDescriptorExtractor

        return cls([
            MinimalInfoExtractor(catalog, path_resolver),
            ArchiveContentsExtractor(catalog, path_resolver),
            PluginDescriptorExtractor(catalog, path_resolver),
        ])

    def get_extractor(self, name: str) -> BaseExtractor | None:
        for extractor in self.extractors:
            if extractor.name == name:
                return extractor
        return None

    def names(self) -> list[str]:
        return [extractor.name for extractor in self.extractors]

    def __iter__(self):
        return iter(self.extractors)

    def __len__(self) -> int:
        return len(self.extractors)


class CompositeExtractor:
    """Runs all registered extractors, populate first, then render.

    Every extractor is invoked exactly once per artifact and phase,
    always in registry order.
    """

    def __init__(self, registry: ExtractorRegistry):
        self.registry = registry

    def populate(self, record: ArtifactMetadataRecord, artifact: ArtifactRef) -> PopulatedRecord:
        for extractor in self.registry:
            extractor.populate(record, artifact)
        return record.freeze()

    def render(self, record: PopulatedRecord, document: IndexDocument) -> None:
        for extractor in self.registry:
            extractor.render(record, document)


__all__ = [
    "BaseExtractor",
    "ExtractorRegistry",
    "CompositeExtractor",
]
