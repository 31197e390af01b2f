"""Project (pom) and plugin descriptor parsing and resolution.

Only a handful of top-level fields are read. Parent inheritance and
property interpolation are out of scope: a value is whatever the
descriptor literally states.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from artifactindex.utils.logging import logger

from .archive import ArchiveEntry, open_archive
from .catalog import PathResolver
from .config import EMBEDDED_POM_DIR, EMBEDDED_POM_NAME
from .exceptions import ArchiveFormatError, DescriptorParseError
from .models import ArtifactRef


@dataclass(frozen=True)
class ProjectDescriptor:
    """Top-level fields of a Maven project descriptor."""

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    packaging: str | None = None
    name: str | None = None
    description: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class PluginDescriptor:
    """Goal prefix and goals of a Maven plugin descriptor."""

    goal_prefix: str | None
    goals: tuple[str, ...]


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: ET.Element | None, name: str) -> str | None:
    if element is None:
        return None
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def _parse_root(data: bytes | str, source: str | None) -> ET.Element:
    try:
        return ET.fromstring(data)
    except (ET.ParseError, LookupError, ValueError) as e:
        # LookupError: unknown encoding declaration
        line, column = getattr(e, "position", (None, None))
        raise DescriptorParseError(
            f"Malformed descriptor {source or '<memory>'}: {e}",
            source=source,
            details={"line": line, "column": column},
        ) from e


def parse_project_descriptor(data: bytes | str, source: str | None = None) -> ProjectDescriptor:
    """Parse pom.xml content, namespace agnostic.

    Raises:
        DescriptorParseError: content is not well-formed XML
    """
    root = _parse_root(data, source)
    return ProjectDescriptor(
        group_id=_text(root, "groupId"),
        artifact_id=_text(root, "artifactId"),
        version=_text(root, "version"),
        packaging=_text(root, "packaging"),
        name=_text(root, "name"),
        description=_text(root, "description"),
        url=_text(root, "url"),
    )


def parse_plugin_descriptor(data: bytes | str, source: str | None = None) -> PluginDescriptor:
    """Parse META-INF/maven/plugin.xml content.

    Goals are listed in mojo order; a mojo without a goal element is skipped.

    Raises:
        DescriptorParseError: content is not well-formed XML
    """
    root = _parse_root(data, source)
    goals = []
    for mojo in _children(_child(root, "mojos"), "mojo"):
        goal = _text(mojo, "goal")
        if goal is not None:
            goals.append(goal)
    return PluginDescriptor(goal_prefix=_text(root, "goalPrefix"), goals=tuple(goals))


def _is_embedded_pom(entry: ArchiveEntry) -> bool:
    return entry.name == EMBEDDED_POM_NAME and entry.path.startswith(EMBEDDED_POM_DIR)


class ProjectDescriptorResolver:
    """Locates and parses the project descriptor of an artifact.

    Resolution order, first found wins:
    1. sibling <artifactId>-<version>.pom next to the artifact file
    2. first /META-INF/**/pom.xml inside the artifact archive
    3. None
    """

    def __init__(self, path_resolver: PathResolver):
        self.path_resolver = path_resolver

    def resolve(self, artifact: ArtifactRef) -> ProjectDescriptor | None:
        coordinates = artifact.coordinates
        if coordinates is None:
            return None

        artifact_path = Path(
            self.path_resolver.resolve(
                artifact.storage_id, artifact.repository_id, artifact.artifact_path
            )
        )
        pom_path = artifact_path.parent / f"{coordinates.artifact_id}-{coordinates.version}.pom"

        if pom_path.exists():
            return self._read_sibling(pom_path)
        if artifact_path.exists():
            return self._read_embedded(artifact_path)
        return None

    def _read_sibling(self, pom_path: Path) -> ProjectDescriptor | None:
        try:
            return parse_project_descriptor(pom_path.read_bytes(), source=str(pom_path))
        except (OSError, DescriptorParseError) as e:
            logger.opt(exception=e).warning("Skipping unreadable pom {}", pom_path)
            return None

    def _read_embedded(self, artifact_path: Path) -> ProjectDescriptor | None:
        try:
            with open_archive(artifact_path) as archive:
                entry = archive.find_first(_is_embedded_pom)
                if entry is None:
                    return None
                source = f"{artifact_path}!{entry.path}"
                return parse_project_descriptor(archive.read(entry), source=source)
        except (OSError, ArchiveFormatError, DescriptorParseError) as e:
            logger.opt(exception=e).warning(
                "Skipping unreadable pom within artifact {}", artifact_path
            )
            return None
