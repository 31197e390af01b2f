"""End-to-end tests for the aidx command line."""

import json

import pytest
from click.testing import CliRunner

from artifactindex import __version__
from artifactindex.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch, archive_factory, pom_factory, plugin_xml):
    """A storage root with one small release repository, cwd set to tmp_path."""
    monkeypatch.chdir(tmp_path)
    repo_root = tmp_path / "storage" / "storage0" / "releases"

    archive_factory(repo_root / "org/example/lib/1.0/lib-1.0.jar", {
        "META-INF/MANIFEST.MF": "Manifest-Version: 1.0\n",
        "org/example/Lib.class": b"",
        "org/example/Lib$Inner.class": b"",
    })
    (repo_root / "org/example/lib/1.0/lib-1.0.pom").write_text(pom_factory(), encoding="utf-8")
    (repo_root / "org/example/lib/1.0/lib-1.0.jar.sha1").write_text("abc123\n", encoding="utf-8")
    (repo_root / "org/example/lib/maven-metadata.xml").write_text("<metadata/>", encoding="utf-8")

    plugin_dir = repo_root / "org/example/example-maven-plugin/1.0"
    archive_factory(plugin_dir / "example-maven-plugin-1.0.jar", {
        "META-INF/maven/plugin.xml": plugin_xml,
    })
    (plugin_dir / "example-maven-plugin-1.0.pom").write_text(
        pom_factory(artifact="example-maven-plugin", packaging="maven-plugin"), encoding="utf-8"
    )
    return tmp_path


class TestCliBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("scan", "export", "inspect"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize("command", ["scan", "export", "inspect"])
    def test_command_help(self, runner, command):
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0
        assert "--storage-root" in result.output


class TestScanAndExport:
    def test_scan_then_export(self, runner, workspace):
        result = runner.invoke(cli, ["scan"])
        assert result.exit_code == 0, result.output
        assert "Registered 6 files" in result.output

        result = runner.invoke(cli, ["export", "--page-size", "2"])
        assert result.exit_code == 0, result.output

        out = workspace / ".artifactindex" / "documents.ndjson"
        # The primary jar and its pom share a unique key and differ by extension
        documents = {
            (doc["u"], doc["e"]): doc
            for doc in map(json.loads, out.read_text(encoding="utf-8").splitlines())
        }
        assert set(documents) == {
            ("org.example|lib|1.0|NA", "jar"),
            ("org.example|lib|1.0|NA", "pom"),
            ("org.example|example-maven-plugin|1.0|NA", "jar"),
            ("org.example|example-maven-plugin|1.0|NA", "pom"),
        }

        lib = documents[("org.example|lib|1.0|NA", "jar")]
        assert lib["c"] == "/org/example/Lib"
        assert lib["1"] == "abc123"
        assert lib["n"] == "Example Library"

        plugin = documents[("org.example|example-maven-plugin|1.0|NA", "jar")]
        assert plugin["px"] == "example"
        assert plugin["gx"] == "compile test-compile"

    def test_export_dry_run_writes_nothing(self, runner, workspace):
        runner.invoke(cli, ["scan"])
        result = runner.invoke(cli, ["export", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "exported" in result.output
        assert not (workspace / ".artifactindex" / "documents.ndjson").exists()

    def test_export_without_catalog(self, runner, workspace):
        result = runner.invoke(cli, ["export"])

        assert result.exit_code != 0
        assert "Catalog not found" in result.output

    def test_scan_missing_repository(self, runner, workspace):
        result = runner.invoke(cli, ["scan", "--repository-id", "snapshots"])

        assert result.exit_code != 0
        assert "Repository directory not found" in result.output
        assert (workspace / ".artifactindex" / "error.log").exists()

    def test_settings_from_config_file(self, runner, workspace):
        config_dir = workspace / ".artifactindex"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(
            json.dumps({"paths": {"output": "custom.ndjson"}}), encoding="utf-8"
        )

        runner.invoke(cli, ["scan"])
        result = runner.invoke(cli, ["export"])

        assert result.exit_code == 0, result.output
        assert (workspace / "custom.ndjson").exists()


class TestInspect:
    def test_inspect_document(self, runner, workspace):
        runner.invoke(cli, ["scan"])
        result = runner.invoke(cli, ["inspect", "org/example/lib/1.0/lib-1.0.jar"])

        assert result.exit_code == 0, result.output
        assert '"u": "org.example|lib|1.0|NA"' in result.output
        assert '"1": "abc123"' in result.output

    def test_inspect_record(self, runner, workspace):
        runner.invoke(cli, ["scan"])
        plugin_jar = "org/example/example-maven-plugin/1.0/example-maven-plugin-1.0.jar"
        result = runner.invoke(cli, ["inspect", "--record", plugin_jar])

        assert result.exit_code == 0, result.output
        assert '"plugin_prefix": "example"' in result.output
        assert '"packaging": "maven-plugin"' in result.output

    def test_inspect_unknown_path(self, runner, workspace):
        runner.invoke(cli, ["scan"])
        result = runner.invoke(cli, ["inspect", "org/example/nope/1.0/nope-1.0.jar"])

        assert result.exit_code != 0
        assert "is not in the catalog" in result.output

    def test_inspect_entry_without_coordinates(self, runner, workspace):
        runner.invoke(cli, ["scan"])
        result = runner.invoke(cli, ["inspect", "org/example/lib/maven-metadata.xml"])

        assert result.exit_code != 0
        assert "has no Maven coordinates" in result.output


class TestOptions:
    def test_page_size_out_of_range(self, runner, workspace):
        runner.invoke(cli, ["scan"])
        result = runner.invoke(cli, ["export", "--page-size", "0"])

        assert result.exit_code == 2
        assert "--page-size" in result.output

    def test_log_dir_creates_log_file(self, runner, workspace):
        result = runner.invoke(cli, ["--log-dir", "logs", "scan"])

        assert result.exit_code == 0, result.output
        assert (workspace / "logs" / "artifactindex.log").exists()
