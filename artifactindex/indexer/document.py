"""Search-index document model.

Field keys follow the Maven indexer format so that documents can be fed to
any consumer of that format. A field is stored and/or indexed; indexed
fields are either keyword (exact match) or tokenized (analyzed text).
"""

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .models import PopulatedRecord

if TYPE_CHECKING:
    from .extractors import CompositeExtractor


@dataclass(frozen=True)
class IndexField:
    """Definition of one document field."""

    key: str
    stored: bool = True
    indexed: bool = True
    tokenized: bool = False
    description: str = ""


# Unique key and document timestamp
FLD_UINFO = IndexField("u", description="Artifact unique key")
FLD_LAST_MODIFIED = IndexField("m", indexed=False, description="Document last modified")

# Minimal info
FLD_INFO = IndexField("i", indexed=False, description="Packaging, modified, size, flags, extension")
FLD_GROUP_ID_KW = IndexField("g", stored=False, description="GroupId (keyword)")
FLD_ARTIFACT_ID_KW = IndexField("a", stored=False, description="ArtifactId (keyword)")
FLD_VERSION_KW = IndexField("v", stored=False, description="Version (keyword)")
FLD_GROUP_ID = IndexField("groupId", stored=False, tokenized=True, description="GroupId (tokenized)")
FLD_ARTIFACT_ID = IndexField(
    "artifactId", stored=False, tokenized=True, description="ArtifactId (tokenized)"
)
FLD_VERSION = IndexField("version", stored=False, tokenized=True, description="Version (tokenized)")
FLD_EXTENSION = IndexField("e", description="Artifact file extension")
FLD_NAME = IndexField("n", tokenized=True, description="Name from the project descriptor")
FLD_DESCRIPTION = IndexField("d", tokenized=True, description="Description from the project descriptor")
FLD_PACKAGING = IndexField("p", description="Packaging")
FLD_CLASSIFIER = IndexField("l", description="Classifier")
FLD_SHA1 = IndexField("1", description="SHA-1 checksum from the signature file")

# Archive contents
FLD_CLASSNAMES_KW = IndexField("c", stored=False, description="Class names (keyword)")
FLD_CLASSNAMES = IndexField("classnames", tokenized=True, description="Class names (tokenized)")

# Plugin descriptor
FLD_PLUGIN_PREFIX = IndexField("px", description="Plugin goal prefix")
FLD_PLUGIN_GOALS = IndexField("gx", tokenized=True, description="Plugin goals")

ALL_FIELDS: tuple[IndexField, ...] = (
    FLD_UINFO,
    FLD_LAST_MODIFIED,
    FLD_INFO,
    FLD_GROUP_ID_KW,
    FLD_ARTIFACT_ID_KW,
    FLD_VERSION_KW,
    FLD_GROUP_ID,
    FLD_ARTIFACT_ID,
    FLD_VERSION,
    FLD_EXTENSION,
    FLD_NAME,
    FLD_DESCRIPTION,
    FLD_PACKAGING,
    FLD_CLASSIFIER,
    FLD_SHA1,
    FLD_CLASSNAMES_KW,
    FLD_CLASSNAMES,
    FLD_PLUGIN_PREFIX,
    FLD_PLUGIN_GOALS,
)


class IndexDocument:
    """Ordered collection of (field, value) pairs for one artifact."""

    def __init__(self):
        self._fields: list[tuple[IndexField, str]] = []

    def add(self, index_field: IndexField, value: str | None) -> None:
        """Add a field value. None values are ignored."""
        if value is None:
            return
        self._fields.append((index_field, value))

    def get(self, key: str) -> str | None:
        """First value stored under key, or None."""
        for index_field, value in self._fields:
            if index_field.key == key:
                return value
        return None

    def get_all(self, key: str) -> list[str]:
        return [value for index_field, value in self._fields if index_field.key == key]

    def keys(self) -> list[str]:
        return [index_field.key for index_field, _ in self._fields]

    def __iter__(self) -> Iterator[tuple[IndexField, str]]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, key: str) -> bool:
        return any(index_field.key == key for index_field, _ in self._fields)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to {key: value}; repeated keys become lists."""
        result: dict[str, Any] = {}
        for index_field, value in self._fields:
            if index_field.key in result:
                existing = result[index_field.key]
                if not isinstance(existing, list):
                    result[index_field.key] = [existing]
                result[index_field.key].append(value)
            else:
                result[index_field.key] = value
        return result


def current_millis() -> int:
    return int(time.time() * 1000)


def create_document(
    record: PopulatedRecord,
    composite: "CompositeExtractor",
    clock: Callable[[], int] = current_millis,
) -> IndexDocument:
    """Render a populated record into a new document.

    Adds the unique key and the document timestamp, then lets every
    extractor of the composite render its fields in priority order.
    """
    document = IndexDocument()
    document.add(FLD_UINFO, record.uinfo)
    document.add(FLD_LAST_MODIFIED, str(clock()))
    composite.render(record, document)
    return document
