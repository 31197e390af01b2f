"""Data model shared by the catalog, the extractors and the document renderer.

ArtifactRef is what the catalog returns. ArtifactMetadataRecord is the
mutable aggregate the extractors fill in during the populate phase, and
PopulatedRecord is its frozen snapshot handed to the render phase.
"""

from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

from .config import NOT_AVAILABLE, UINFO_SEPARATOR


class ArtifactAvailability(Enum):
    """Tri-state availability of a related artifact variant.

    Values are the legacy string forms written into the info line.
    """

    NOT_PRESENT = "0"
    PRESENT = "1"
    NOT_AVAILABLE = "2"

    @classmethod
    def from_flag(cls, present: bool) -> "ArtifactAvailability":
        return cls.PRESENT if present else cls.NOT_PRESENT

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArtifactCoordinates:
    """Maven coordinates of one stored artifact."""

    group_id: str
    artifact_id: str
    version: str
    classifier: str | None = None
    extension: str = "jar"

    def as_pattern(self) -> dict[str, str | None]:
        """Coordinate mapping used for catalog lookups."""
        return {
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "version": self.version,
            "classifier": self.classifier,
            "extension": self.extension,
        }

    def with_(self, **changes: Any) -> "ArtifactCoordinates":
        """Return sibling coordinates differing only in the given fields."""
        return replace(self, **changes)

    @property
    def file_name(self) -> str:
        base = f"{self.artifact_id}-{self.version}"
        if self.classifier:
            base = f"{base}-{self.classifier}"
        return f"{base}.{self.extension}"

    def to_path(self) -> str:
        """Render the Maven repository layout path of these coordinates."""
        return "/".join(
            [*self.group_id.split("."), self.artifact_id, self.version, self.file_name]
        )

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.version]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.extension)
        return ":".join(parts)


@dataclass(frozen=True)
class ArtifactRef:
    """One catalog entry. Immutable once read from the catalog."""

    uuid: str
    storage_id: str
    repository_id: str
    artifact_path: str
    coordinates: ArtifactCoordinates | None
    size_in_bytes: int = 0
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def file_name(self) -> str:
        return PurePosixPath(self.artifact_path).name

    @property
    def last_modified_millis(self) -> int:
        return round(self.last_updated.timestamp() * 1000)


@dataclass
class ArtifactMetadataRecord:
    """Mutable metadata aggregate for one artifact.

    Created empty per artifact, filled in place by each extractor in
    priority order, then frozen. Composite fields (class_names,
    plugin_prefix together with plugin_goals) are only ever assigned as
    a whole.
    """

    repository_id: str
    group_id: str
    artifact_id: str
    version: str
    classifier: str | None = None
    extension: str | None = None
    name: str | None = None
    description: str | None = None
    packaging: str | None = None
    last_modified: int = 0
    size: int = -1
    sources_available: ArtifactAvailability = ArtifactAvailability.NOT_PRESENT
    javadoc_available: ArtifactAvailability = ArtifactAvailability.NOT_PRESENT
    signature_available: ArtifactAvailability = ArtifactAvailability.NOT_PRESENT
    sha1: str | None = None
    class_names: tuple[str, ...] | None = None
    plugin_prefix: str | None = None
    plugin_goals: tuple[str, ...] | None = None

    @classmethod
    def for_artifact(cls, artifact: ArtifactRef) -> "ArtifactMetadataRecord":
        """Build an empty record carrying the artifact's identity.

        Raises:
            ValueError: if the artifact has no coordinates
        """
        coordinates = artifact.coordinates
        if coordinates is None:
            raise ValueError(f"Artifact {artifact.artifact_path} has no coordinates")
        return cls(
            repository_id=artifact.repository_id,
            group_id=coordinates.group_id,
            artifact_id=coordinates.artifact_id,
            version=coordinates.version,
            classifier=coordinates.classifier or None,
            extension=coordinates.extension,
        )

    def freeze(self) -> "PopulatedRecord":
        """Snapshot the populated fields for the render phase."""
        return PopulatedRecord(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass(frozen=True)
class PopulatedRecord:
    """Read-only result of the populate phase, consumed by the renderers."""

    repository_id: str
    group_id: str
    artifact_id: str
    version: str
    classifier: str | None
    extension: str | None
    name: str | None
    description: str | None
    packaging: str | None
    last_modified: int
    size: int
    sources_available: ArtifactAvailability
    javadoc_available: ArtifactAvailability
    signature_available: ArtifactAvailability
    sha1: str | None
    class_names: tuple[str, ...] | None
    plugin_prefix: str | None
    plugin_goals: tuple[str, ...] | None

    @property
    def uinfo(self) -> str:
        """Unique document key: group|artifact|version|classifier[|extension].

        The extension is only part of the key for classified artifacts,
        the primary artifact of a version is identified without it.
        """
        parts = [self.group_id, self.artifact_id, self.version, self.classifier or NOT_AVAILABLE]
        if self.classifier and self.extension:
            parts.append(self.extension)
        return UINFO_SEPARATOR.join(parts)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("sources_available", "javadoc_available", "signature_available"):
            data[key] = str(data[key])
        return data
