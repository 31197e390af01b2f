"""Goal prefix and goals of maven-plugin artifacts."""

from artifactindex.utils.logging import logger

from ..archive import open_archive
from ..config import MAVEN_PLUGIN_PACKAGING, PLUGIN_DESCRIPTOR_PATH
from ..descriptors import parse_plugin_descriptor
from ..document import FLD_PLUGIN_GOALS, FLD_PLUGIN_PREFIX, IndexDocument
from ..exceptions import ArchiveFormatError, DescriptorParseError
from ..models import ArtifactMetadataRecord, ArtifactRef, PopulatedRecord
from . import BaseExtractor


class PluginDescriptorExtractor(BaseExtractor):
    """Reads META-INF/maven/plugin.xml from maven-plugin jars.

    Relies on the packaging set by the minimal info extractor.
    """

    priority = 3
    name = "maven-plugin"

    def applies_to(self, record: ArtifactMetadataRecord) -> bool:
        return record.packaging == MAVEN_PLUGIN_PACKAGING and record.extension == "jar"

    def populate(self, record: ArtifactMetadataRecord, artifact: ArtifactRef) -> None:
        if not self.applies_to(record):
            return

        artifact_path = self.resolve_path(artifact)
        try:
            with open_archive(artifact_path) as archive:
                entry = archive.find_first(lambda e: e.path == PLUGIN_DESCRIPTOR_PATH)
                if entry is None:
                    return
                descriptor = parse_plugin_descriptor(
                    archive.read(entry), source=f"{artifact_path}!{entry.path}"
                )
        except (OSError, ArchiveFormatError, DescriptorParseError) as e:
            logger.opt(exception=e).warning(
                "Failed to parse Maven plugin artifact {}", artifact_path
            )
            return

        record.plugin_prefix = descriptor.goal_prefix
        record.plugin_goals = descriptor.goals

    def render(self, record: PopulatedRecord, document: IndexDocument) -> None:
        document.add(FLD_PLUGIN_PREFIX, record.plugin_prefix)
        if record.plugin_goals is not None:
            document.add(FLD_PLUGIN_GOALS, " ".join(record.plugin_goals))
