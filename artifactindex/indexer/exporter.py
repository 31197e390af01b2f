"""Export driver: catalog pages -> extraction pipeline -> index documents.

The driver never writes to the search index itself. Rendered documents
are handed to an optional DocumentSink; without one the export only
populates and renders (useful for dry runs and statistics).
"""

from collections.abc import Callable, Iterator
from dataclasses import asdict, dataclass

from artifactindex.utils.logging import logger

from .catalog import ArtifactCatalog, PathResolver
from .config import DEFAULT_PAGE_SIZE, NON_INDEXABLE_FILE_NAMES, NON_INDEXABLE_SUFFIXES, PAGE_ORDER_KEY
from .document import IndexDocument, create_document, current_millis
from .extractors import CompositeExtractor, ExtractorRegistry
from .models import ArtifactMetadataRecord, ArtifactRef, PopulatedRecord
from .sinks import DocumentSink


def is_indexable(artifact: ArtifactRef) -> bool:
    """False for repository metadata, properties, checksum and signature files."""
    file_name = artifact.file_name
    if file_name in NON_INDEXABLE_FILE_NAMES:
        return False
    return not file_name.endswith(NON_INDEXABLE_SUFFIXES)


class CatalogPages:
    """Restartable lazy sequence of catalog pages.

    Pages are requested with skip/limit ordered by a stable unique key;
    iteration ends at the first empty page. `fetches` counts the catalog
    calls of the most recent iteration, including the empty one.
    """

    def __init__(
        self,
        catalog: ArtifactCatalog,
        storage_id: str,
        repository_id: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        order_by: str = PAGE_ORDER_KEY,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.catalog = catalog
        self.storage_id = storage_id
        self.repository_id = repository_id
        self.page_size = page_size
        self.order_by = order_by
        self.fetches = 0

    def __iter__(self) -> Iterator[list[ArtifactRef]]:
        self.fetches = 0
        skip = 0
        while True:
            page = list(
                self.catalog.find_page(
                    self.storage_id, self.repository_id, skip, self.page_size, self.order_by
                )
            )
            self.fetches += 1
            if not page:
                return
            yield page
            skip += self.page_size


@dataclass
class ExportStats:
    """Counters of one repository export."""

    pages: int = 0
    artifacts: int = 0
    skipped: int = 0
    no_coordinates: int = 0
    exported: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class DatabaseToIndexExporter:
    """Walks a repository's artifact catalog and renders one document per artifact."""

    def __init__(
        self,
        catalog: ArtifactCatalog,
        path_resolver: PathResolver,
        registry: ExtractorRegistry | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        sink: DocumentSink | None = None,
        clock: Callable[[], int] = current_millis,
    ):
        self.catalog = catalog
        self.path_resolver = path_resolver
        self.registry = registry or ExtractorRegistry.default(catalog, path_resolver)
        self.composite = CompositeExtractor(self.registry)
        self.page_size = page_size
        self.sink = sink
        self.clock = clock

    def populate(self, artifact: ArtifactRef) -> PopulatedRecord:
        """Run the populate phase of every extractor for one artifact."""
        record = ArtifactMetadataRecord.for_artifact(artifact)
        # Classified siblings carry their own extension as packaging
        if record.classifier:
            record.packaging = record.extension
        return self.composite.populate(record, artifact)

    def render(self, record: PopulatedRecord) -> IndexDocument:
        return create_document(record, self.composite, self.clock)

    def create_document(self, artifact: ArtifactRef) -> IndexDocument:
        """Populate and render a single artifact."""
        return self.render(self.populate(artifact))

    def export(self, storage_id: str, repository_id: str) -> ExportStats:
        """Export every indexable artifact of one repository.

        Catalog and path resolution errors propagate and abort the export.
        """
        stats = ExportStats()
        pages = CatalogPages(self.catalog, storage_id, repository_id, self.page_size)

        for page_number, page in enumerate(pages, start=1):
            populated = []
            for artifact in page:
                stats.artifacts += 1
                if not is_indexable(artifact):
                    stats.skipped += 1
                    continue
                if artifact.coordinates is None:
                    logger.warning("Skipping {}: no Maven coordinates", artifact.artifact_path)
                    stats.no_coordinates += 1
                    continue
                populated.append(self.populate(artifact))

            # Render only after the whole page is populated
            for record in populated:
                document = self.render(record)
                if self.sink is not None:
                    self.sink(document)
                stats.exported += 1

            logger.debug(
                "Page {} of {}/{}: {} artifacts, {} documents",
                page_number, storage_id, repository_id, len(page), len(populated),
            )

        stats.pages = pages.fetches
        logger.info(
            "Exported {}/{}: {} documents from {} artifacts ({} skipped)",
            storage_id, repository_id, stats.exported, stats.artifacts,
            stats.skipped + stats.no_coordinates,
        )
        return stats
