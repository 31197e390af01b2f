"""Pytest configuration and fixtures."""

import struct
import zipfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from artifactindex.indexer.catalog import FileSystemPathResolver
from artifactindex.indexer.database import SqliteArtifactCatalog
from artifactindex.indexer.layout import parse_layout_path
from artifactindex.indexer.models import ArtifactRef
from artifactindex.utils.logging import logger

STORAGE_ID = "storage0"
REPOSITORY_ID = "releases"

POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>{group}</groupId>
  <artifactId>{artifact}</artifactId>
  <version>{version}</version>
  {packaging}
  <name>{name}</name>
  <description>{description}</description>
</project>
"""

PLUGIN_XML = """<?xml version="1.0" encoding="UTF-8"?>
<plugin>
  <name>Example Maven Plugin</name>
  <goalPrefix>example</goalPrefix>
  <mojos>
    <mojo>
      <goal>compile</goal>
      <phase>compile</phase>
    </mojo>
    <mojo>
      <goal>test-compile</goal>
    </mojo>
  </mojos>
</plugin>
"""


def make_pom(group="org.example", artifact="lib", version="1.0", packaging=None,
             name="Example Library", description="An example library") -> str:
    packaging_xml = f"<packaging>{packaging}</packaging>" if packaging else ""
    return POM_TEMPLATE.format(
        group=group, artifact=artifact, version=version, packaging=packaging_xml,
        name=name, description=description,
    )


def make_archive(path: Path, entries: dict[str, str | bytes]) -> Path:
    """Write a zip archive with the given entries, in insertion order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


def patch_first_entry(
    path: Path, compress_type: int | None = None, flag_bits: int | None = None
) -> Path:
    """Rewrite header fields of the first entry of a zip archive in place.

    Used to produce entries zipfile cannot read back (unsupported
    compression method, encryption flag set).
    """
    data = bytearray(path.read_bytes())
    local = data.find(b"PK\x03\x04")
    central = data.find(b"PK\x01\x02")
    if compress_type is not None:
        struct.pack_into("<H", data, local + 8, compress_type)
        struct.pack_into("<H", data, central + 10, compress_type)
    if flag_bits is not None:
        struct.pack_into("<H", data, local + 6, flag_bits)
        struct.pack_into("<H", data, central + 8, flag_bits)
    path.write_bytes(bytes(data))
    return path


class RepositoryFixture:
    """A real on-disk repository registered in a SQLite catalog."""

    def __init__(self, root: Path):
        self.resolver = FileSystemPathResolver(root / "storage")
        self.catalog = SqliteArtifactCatalog(root / "catalog.db")
        self.storage_id = STORAGE_ID
        self.repository_id = REPOSITORY_ID

    def path_of(self, artifact_path: str) -> Path:
        return self.resolver.resolve(self.storage_id, self.repository_id, artifact_path)

    def add_file(
        self, artifact_path: str, content: str | bytes = b"", entry_uuid: str | None = None
    ) -> ArtifactRef:
        """Write a file and register it with layout-derived coordinates."""
        path = self.path_of(artifact_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return self.register(artifact_path, size=len(content), entry_uuid=entry_uuid)

    def add_archive(self, artifact_path: str, entries: dict[str, str | bytes]) -> ArtifactRef:
        path = make_archive(self.path_of(artifact_path), entries)
        return self.register(artifact_path, size=path.stat().st_size)

    def register(self, artifact_path: str, size: int = 0, entry_uuid: str | None = None) -> ArtifactRef:
        """Catalog entry only; the file may or may not exist."""
        ref = self.catalog.add_artifact(
            self.storage_id,
            self.repository_id,
            artifact_path,
            parse_layout_path(artifact_path),
            size_in_bytes=size,
            last_updated=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            entry_uuid=entry_uuid,
        )
        self.catalog.commit()
        return ref


@pytest.fixture
def repo(tmp_path):
    """Empty repository with catalog and path resolver."""
    fixture = RepositoryFixture(tmp_path)
    yield fixture
    fixture.catalog.close()


@pytest.fixture
def archive_factory():
    """make_archive(path, entries) for building jar/war files."""
    return make_archive


@pytest.fixture
def pom_factory():
    """make_pom(**fields) returning pom.xml text."""
    return make_pom


@pytest.fixture
def plugin_xml():
    return PLUGIN_XML


@pytest.fixture
def entry_patcher():
    """patch_first_entry(path, compress_type=..., flag_bits=...)."""
    return patch_first_entry


@pytest.fixture
def log_records():
    """Loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
