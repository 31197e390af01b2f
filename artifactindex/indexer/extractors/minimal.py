"""Minimal artifact info: identity, size, availability flags, pom fields, sha1."""

from artifactindex.utils.logging import logger

from ..catalog import ArtifactCatalog, PathResolver
from ..config import (
    DEFAULT_PACKAGING,
    INFO_SEPARATOR,
    JAVADOC_CLASSIFIER,
    NOT_AVAILABLE,
    SIGNATURE_EXTENSION,
    SOURCES_CLASSIFIER,
)
from ..descriptors import ProjectDescriptorResolver
from ..document import (
    FLD_ARTIFACT_ID,
    FLD_ARTIFACT_ID_KW,
    FLD_CLASSIFIER,
    FLD_DESCRIPTION,
    FLD_EXTENSION,
    FLD_GROUP_ID,
    FLD_GROUP_ID_KW,
    FLD_INFO,
    FLD_NAME,
    FLD_PACKAGING,
    FLD_SHA1,
    FLD_VERSION,
    FLD_VERSION_KW,
    IndexDocument,
)
from ..models import ArtifactAvailability, ArtifactMetadataRecord, ArtifactRef, PopulatedRecord
from . import BaseExtractor


def parse_signature(content: str) -> str | None:
    """First whitespace-delimited token of a checksum file, or None if empty.

    Handles both bare checksums and the "<checksum>  <file name>" form.
    """
    tokens = content.strip().split()
    return tokens[0] if tokens else None


class MinimalInfoExtractor(BaseExtractor):
    """Populates the fields every artifact document carries."""

    priority = 1
    name = "min"

    def __init__(
        self,
        catalog: ArtifactCatalog,
        path_resolver: PathResolver,
        descriptor_resolver: ProjectDescriptorResolver | None = None,
    ):
        super().__init__(catalog, path_resolver)
        self.descriptor_resolver = descriptor_resolver or ProjectDescriptorResolver(path_resolver)

    def populate(self, record: ArtifactMetadataRecord, artifact: ArtifactRef) -> None:
        record.last_modified = artifact.last_modified_millis
        record.size = artifact.size_in_bytes

        coordinates = artifact.coordinates
        if coordinates is None:
            return

        if record.classifier:
            # A classified artifact cannot itself have sources or javadoc siblings
            record.sources_available = ArtifactAvailability.NOT_AVAILABLE
            record.javadoc_available = ArtifactAvailability.NOT_AVAILABLE
        else:
            record.javadoc_available = ArtifactAvailability.from_flag(
                coordinates.classifier == JAVADOC_CLASSIFIER
                or self._classifier_exists(artifact, JAVADOC_CLASSIFIER)
            )
            record.sources_available = ArtifactAvailability.from_flag(
                coordinates.classifier == SOURCES_CLASSIFIER
                or self._classifier_exists(artifact, SOURCES_CLASSIFIER)
            )

        descriptor = self.descriptor_resolver.resolve(artifact)
        if descriptor is not None:
            record.name = descriptor.name
            record.description = descriptor.description
            # Packaging only describes the main artifact
            if not record.classifier:
                record.packaging = descriptor.packaging or DEFAULT_PACKAGING

        signature = self._signature_entry(artifact)
        if signature is None:
            record.signature_available = ArtifactAvailability.NOT_PRESENT
            return

        record.signature_available = ArtifactAvailability.PRESENT
        signature_path = self.resolve_path(signature)
        try:
            content = signature_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.opt(exception=e).error("Failed to read sha1 signature file {}", signature_path)
            return

        sha1 = parse_signature(content)
        if sha1 is None:
            logger.warning("Empty sha1 signature file {}", signature_path)
        record.sha1 = sha1

    def _classifier_exists(self, artifact: ArtifactRef, classifier: str) -> bool:
        pattern = artifact.coordinates.with_(classifier=classifier).as_pattern()
        return self.catalog.count_matching(artifact.storage_id, artifact.repository_id, pattern, True) > 0

    def _signature_entry(self, artifact: ArtifactRef) -> ArtifactRef | None:
        pattern = artifact.coordinates.with_(extension=SIGNATURE_EXTENSION).as_pattern()
        entries = list(
            self.catalog.find_matching(artifact.storage_id, artifact.repository_id, pattern, True)
        )
        if not entries:
            return None
        # The checksum of this very file first, then by path
        expected = f"{artifact.artifact_path}.{SIGNATURE_EXTENSION}"
        entries.sort(key=lambda entry: (entry.artifact_path != expected, entry.artifact_path))
        if len(entries) > 1:
            logger.warning(
                "Received {} signature entries when at most 1 was expected. Entries = [{}]",
                len(entries),
                ", ".join(entry.artifact_path for entry in entries),
            )
        return entries[0]

    def render(self, record: PopulatedRecord, document: IndexDocument) -> None:
        info = INFO_SEPARATOR.join([
            record.packaging or NOT_AVAILABLE,
            str(record.last_modified),
            str(record.size),
            str(record.sources_available),
            str(record.javadoc_available),
            str(record.signature_available),
            record.extension or NOT_AVAILABLE,
        ])
        document.add(FLD_INFO, info)

        document.add(FLD_GROUP_ID_KW, record.group_id)
        document.add(FLD_ARTIFACT_ID_KW, record.artifact_id)
        document.add(FLD_VERSION_KW, record.version)

        document.add(FLD_GROUP_ID, record.group_id)
        document.add(FLD_ARTIFACT_ID, record.artifact_id)
        document.add(FLD_VERSION, record.version)
        document.add(FLD_EXTENSION, record.extension)

        document.add(FLD_NAME, record.name)
        document.add(FLD_DESCRIPTION, record.description)
        document.add(FLD_PACKAGING, record.packaging)
        document.add(FLD_CLASSIFIER, record.classifier)
        document.add(FLD_SHA1, record.sha1)
