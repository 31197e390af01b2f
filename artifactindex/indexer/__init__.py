"""artifactindex indexer package.

Turns a repository's artifact catalog into search-index documents:

- ArchiveReader / iter_entry_names: jar, war and zip contents
- ProjectDescriptorResolver: sibling or embedded pom.xml
- extractors: minimal info, archive contents, plugin descriptor
- DatabaseToIndexExporter: pages through the catalog and drives extraction

Storage and catalog access go through the PathResolver and ArtifactCatalog
protocols; SqliteArtifactCatalog and FileSystemPathResolver are the
bundled implementations.
"""

from .archive import ArchiveEntry, ArchiveReader, iter_entry_names, open_archive
from .catalog import ArtifactCatalog, FileSystemPathResolver, PathResolver
from .database import SqliteArtifactCatalog
from .descriptors import ProjectDescriptorResolver
from .document import IndexDocument, create_document
from .exceptions import ArchiveFormatError, CatalogError, DescriptorParseError
from .exporter import CatalogPages, DatabaseToIndexExporter, ExportStats, is_indexable
from .extractors import BaseExtractor, CompositeExtractor, ExtractorRegistry
from .models import (
    ArtifactAvailability,
    ArtifactCoordinates,
    ArtifactMetadataRecord,
    ArtifactRef,
    PopulatedRecord,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveReader",
    "iter_entry_names",
    "open_archive",
    "ArtifactCatalog",
    "FileSystemPathResolver",
    "PathResolver",
    "SqliteArtifactCatalog",
    "ProjectDescriptorResolver",
    "IndexDocument",
    "create_document",
    "ArchiveFormatError",
    "CatalogError",
    "DescriptorParseError",
    "CatalogPages",
    "DatabaseToIndexExporter",
    "ExportStats",
    "is_indexable",
    "BaseExtractor",
    "CompositeExtractor",
    "ExtractorRegistry",
    "ArtifactAvailability",
    "ArtifactCoordinates",
    "ArtifactMetadataRecord",
    "ArtifactRef",
    "PopulatedRecord",
]
