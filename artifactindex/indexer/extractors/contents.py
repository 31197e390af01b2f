"""Class names contained in jar and war artifacts."""

from collections.abc import Iterable

from artifactindex.utils.logging import logger

from ..archive import iter_entry_names
from ..config import CLASS_FILE_SUFFIX, CLASS_SCAN_PREFIXES, INNER_CLASS_SEPARATOR
from ..document import FLD_CLASSNAMES, FLD_CLASSNAMES_KW, IndexDocument
from ..exceptions import ArchiveFormatError
from ..models import ArtifactMetadataRecord, ArtifactRef, PopulatedRecord
from . import BaseExtractor


def extract_class_names(entry_names: Iterable[str], prefix: str | None = None) -> list[str]:
    """Internal names of the top-level classes among archive entries.

    Inner classes are skipped. With a prefix, only entries below it count
    and the prefix is stripped. Every name starts with "/".
    """
    class_names = []
    for entry_name in entry_names:
        if not entry_name.endswith(CLASS_FILE_SUFFIX) or INNER_CLASS_SEPARATOR in entry_name:
            continue

        class_name = entry_name[: -len(CLASS_FILE_SUFFIX)]
        if prefix:
            if not class_name.startswith(prefix):
                continue
            class_name = class_name[len(prefix):]

        if not class_name.strip("/"):
            continue
        if not class_name.startswith("/"):
            class_name = "/" + class_name
        class_names.append(class_name)
    return class_names


class ArchiveContentsExtractor(BaseExtractor):
    """Populates class_names for jar and war artifacts."""

    priority = 2
    name = "jarContent"

    def populate(self, record: ArtifactMetadataRecord, artifact: ArtifactRef) -> None:
        coordinates = artifact.coordinates
        if coordinates is None or coordinates.extension not in CLASS_SCAN_PREFIXES:
            return

        prefix = CLASS_SCAN_PREFIXES[coordinates.extension]
        artifact_path = self.resolve_path(artifact)
        try:
            class_names = extract_class_names(iter_entry_names(artifact_path), prefix)
        except (OSError, ArchiveFormatError) as e:
            logger.opt(exception=e).error(
                "Failed to read {} file contents of {}", coordinates.extension, artifact_path
            )
            return

        # None when the archive holds no top-level classes
        record.class_names = tuple(class_names) if class_names else None

    def render(self, record: PopulatedRecord, document: IndexDocument) -> None:
        if record.class_names is None:
            return
        value = "\n".join(record.class_names)
        document.add(FLD_CLASSNAMES_KW, value)
        document.add(FLD_CLASSNAMES, value)
