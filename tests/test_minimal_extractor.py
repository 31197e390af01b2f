"""Tests for MinimalInfoExtractor (availability flags, pom fields, sha1)."""

from datetime import datetime, timezone

import pytest

from artifactindex.indexer.document import IndexDocument
from artifactindex.indexer.extractors.minimal import MinimalInfoExtractor, parse_signature
from artifactindex.indexer.layout import parse_layout_path
from artifactindex.indexer.models import (
    ArtifactAvailability,
    ArtifactMetadataRecord,
    ArtifactRef,
)

JAR = "org/example/lib/1.0/lib-1.0.jar"
POM = "org/example/lib/1.0/lib-1.0.pom"
SOURCES = "org/example/lib/1.0/lib-1.0-sources.jar"
JAVADOC = "org/example/lib/1.0/lib-1.0-javadoc.jar"
JAR_SHA1 = "org/example/lib/1.0/lib-1.0.jar.sha1"
POM_SHA1 = "org/example/lib/1.0/lib-1.0.pom.sha1"


def populate(repo, artifact):
    extractor = MinimalInfoExtractor(repo.catalog, repo.resolver)
    record = ArtifactMetadataRecord.for_artifact(artifact)
    extractor.populate(record, artifact)
    return record


def make_ref(artifact_path, uuid="u-1"):
    return ArtifactRef(
        uuid=uuid,
        storage_id="storage0",
        repository_id="releases",
        artifact_path=artifact_path,
        coordinates=parse_layout_path(artifact_path),
    )


class TestParseSignature:
    @pytest.mark.parametrize("content,expected", [
        ("abc123", "abc123"),
        ("abc123  lib-1.0.jar\n", "abc123"),
        ("\n  abc123\tlib-1.0.jar  \n", "abc123"),
        ("", None),
        ("   \n", None),
    ])
    def test_first_token(self, content, expected):
        assert parse_signature(content) == expected


class TestBasics:
    def test_copies_size_and_last_modified(self, repo):
        artifact = repo.add_file(JAR, b"12345")
        record = populate(repo, artifact)

        assert record.size == 5
        assert record.last_modified == int(
            datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc).timestamp() * 1000
        )

    def test_no_descriptor_leaves_pom_fields_unset(self, repo):
        record = populate(repo, repo.register(JAR))

        assert record.name is None
        assert record.description is None
        assert record.packaging is None


class TestAvailability:
    def test_siblings_present(self, repo):
        artifact = repo.register(JAR)
        repo.register(SOURCES)
        repo.register(JAVADOC)

        record = populate(repo, artifact)
        assert record.sources_available is ArtifactAvailability.PRESENT
        assert record.javadoc_available is ArtifactAvailability.PRESENT

    def test_siblings_absent(self, repo):
        artifact = repo.register(JAR)
        repo.register(SOURCES)

        record = populate(repo, artifact)
        assert record.sources_available is ArtifactAvailability.PRESENT
        assert record.javadoc_available is ArtifactAvailability.NOT_PRESENT

    def test_sibling_of_other_version_does_not_count(self, repo):
        artifact = repo.register(JAR)
        repo.register("org/example/lib/2.0/lib-2.0-sources.jar")

        record = populate(repo, artifact)
        assert record.sources_available is ArtifactAvailability.NOT_PRESENT

    @pytest.mark.parametrize("artifact_path", [SOURCES, JAVADOC, "org/example/lib/1.0/lib-1.0-tests.jar"])
    def test_classified_artifact_is_not_applicable(self, repo, artifact_path):
        repo.register(SOURCES)
        repo.register(JAVADOC)
        artifact = repo.register(artifact_path)

        record = populate(repo, artifact)
        assert record.sources_available is ArtifactAvailability.NOT_AVAILABLE
        assert record.javadoc_available is ArtifactAvailability.NOT_AVAILABLE


class TestDescriptorFields:
    def test_name_description_and_explicit_packaging(self, repo, pom_factory):
        artifact = repo.add_archive(JAR, {"org/example/Lib.class": b""})
        repo.add_file(POM, pom_factory(packaging="bundle"))

        record = populate(repo, artifact)
        assert record.name == "Example Library"
        assert record.description == "An example library"
        assert record.packaging == "bundle"

    def test_packaging_defaults_to_jar(self, repo, pom_factory):
        artifact = repo.add_archive(JAR, {"org/example/Lib.class": b""})
        repo.add_file(POM, pom_factory())

        assert populate(repo, artifact).packaging == "jar"

    def test_classified_artifact_keeps_its_packaging(self, repo, pom_factory):
        artifact = repo.add_archive(SOURCES, {"org/example/Lib.java": "class Lib {}"})
        repo.add_file(POM, pom_factory(packaging="bundle"))

        record = ArtifactMetadataRecord.for_artifact(artifact)
        record.packaging = "jar"
        MinimalInfoExtractor(repo.catalog, repo.resolver).populate(record, artifact)

        assert record.name == "Example Library"
        assert record.packaging == "jar"


class TestSignature:
    def test_sha1_from_signature_file(self, repo):
        artifact = repo.register(JAR)
        repo.add_file(JAR_SHA1, "abc123  lib-1.0.jar\n")

        record = populate(repo, artifact)
        assert record.signature_available is ArtifactAvailability.PRESENT
        assert record.sha1 == "abc123"

    def test_no_signature(self, repo):
        record = populate(repo, repo.register(JAR))

        assert record.signature_available is ArtifactAvailability.NOT_PRESENT
        assert record.sha1 is None

    def test_unreadable_signature_is_present_without_sha1(self, repo):
        artifact = repo.register(JAR)
        repo.register(JAR_SHA1)

        record = populate(repo, artifact)
        assert record.signature_available is ArtifactAvailability.PRESENT
        assert record.sha1 is None

    def test_empty_signature_leaves_sha1_unset(self, repo):
        artifact = repo.register(JAR)
        repo.add_file(JAR_SHA1, "  \n")

        record = populate(repo, artifact)
        assert record.signature_available is ArtifactAvailability.PRESENT
        assert record.sha1 is None

    def test_own_checksum_preferred_over_catalog_order(self, repo):
        jar = repo.register(JAR)
        pom = repo.register(POM)
        repo.add_file(POM_SHA1, "POMSUM", entry_uuid="00000000")
        repo.add_file(JAR_SHA1, "JARSUM", entry_uuid="ffffffff")

        assert populate(repo, jar).sha1 == "JARSUM"
        assert populate(repo, pom).sha1 == "POMSUM"

    def test_multiple_signatures_warn_and_use_own_checksum(self, repo, log_records):
        pom_sha1 = make_ref(POM_SHA1, uuid="a")
        jar_sha1 = make_ref(JAR_SHA1, uuid="b")
        for ref, content in ((pom_sha1, "2222 lib-1.0.pom"), (jar_sha1, "1111 lib-1.0.jar")):
            path = repo.path_of(ref.artifact_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

        class TwoSignatureCatalog:
            def count_matching(self, storage_id, repository_id, coordinates, strict=True):
                return 0

            def find_matching(self, storage_id, repository_id, coordinates, strict=True):
                assert coordinates["extension"] == "sha1"
                return [pom_sha1, jar_sha1]

        artifact = make_ref(JAR)
        record = ArtifactMetadataRecord.for_artifact(artifact)
        MinimalInfoExtractor(TwoSignatureCatalog(), repo.resolver).populate(record, artifact)

        assert record.signature_available is ArtifactAvailability.PRESENT
        assert record.sha1 == "1111"
        assert any(
            "signature entries" in r["message"] for r in log_records if r["level"].name == "WARNING"
        )


class TestRender:
    def test_info_line_and_fields(self, repo, pom_factory):
        artifact = repo.add_archive(JAR, {"org/example/Lib.class": b""})
        repo.add_file(POM, pom_factory())
        repo.register(SOURCES)
        repo.add_file(JAR_SHA1, "abc123")

        extractor = MinimalInfoExtractor(repo.catalog, repo.resolver)
        record = ArtifactMetadataRecord.for_artifact(artifact)
        extractor.populate(record, artifact)
        document = IndexDocument()
        extractor.render(record.freeze(), document)

        assert document.get("i") == "\n".join([
            "jar", str(record.last_modified), str(record.size), "1", "0", "1", "jar",
        ])
        assert document.get("g") == document.get("groupId") == "org.example"
        assert document.get("a") == document.get("artifactId") == "lib"
        assert document.get("v") == document.get("version") == "1.0"
        assert document.get("e") == "jar"
        assert document.get("n") == "Example Library"
        assert document.get("d") == "An example library"
        assert document.get("p") == "jar"
        assert document.get("1") == "abc123"
        assert "l" not in document

    def test_missing_values_render_as_na(self):
        artifact = make_ref(SOURCES)
        record = ArtifactMetadataRecord.for_artifact(artifact)
        record.sources_available = ArtifactAvailability.NOT_AVAILABLE
        record.javadoc_available = ArtifactAvailability.NOT_AVAILABLE

        document = IndexDocument()
        MinimalInfoExtractor(None, None).render(record.freeze(), document)

        assert document.get("i").split("\n") == ["NA", "0", "-1", "2", "2", "0", "jar"]
        assert document.get("l") == "sources"
        assert "n" not in document
        assert "1" not in document
