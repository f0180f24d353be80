"""Tests for Cargo.toml parsing and format-preserving edits."""

import pytest

from common.errors import ManifestError
from registry.cargo.manifest import parse_cargo_toml, remove_dep, set_version
from registry.models import InstallCandidate
from versioning.models import Version

CARGO_TOML = """[package]
name = "demo"
version = "0.1.0"
edition = "2021"

# runtime crates
[dependencies]
serde = { version = "1.0", features = ["derive"] }  # keep derive
rand = "0.8.5"
local = { path = "../local" }

[build-dependencies]
cc = "1.0"

[dev-dependencies]
tokio-test = "0.4"
"""


class TestParseCargoToml:
    """Reading Cargo.toml into a Config."""

    def test_groups_in_manifest_order(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_text(CARGO_TOML)

        config = parse_cargo_toml(str(path))

        assert config.name == "demo"
        assert config.version == Version("0.1.0")
        assert list(config.groups) == ["dependencies", "build-dependencies", "dev-dependencies"]
        assert list(config.groups["dependencies"]) == ["serde", "rand", "local"]

    def test_requirements(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_text(CARGO_TOML)

        deps = parse_cargo_toml(str(path)).groups["dependencies"]

        assert str(deps["serde"]) == "1.0"
        assert deps["serde"].matches(Version("1.0.190"))
        assert deps["rand"].matches(Version("0.8.9"))
        assert not deps["rand"].matches(Version("0.9.0"))
        assert deps["local"] is None

    def test_no_dependency_tables(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_text('[package]\nname = "bare"\nversion = "0.0.1"\n')

        config = parse_cargo_toml(str(path))

        assert config.groups == {}
        assert config.dependency_names() == []

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ManifestError):
            parse_cargo_toml(str(tmp_path / "Cargo.toml"))

    def test_invalid_toml_raises(self, tmp_path):
        path = tmp_path / "Cargo.toml"
        path.write_text("[dependencies\nserde = ")
        with pytest.raises(ManifestError):
            parse_cargo_toml(str(path))


class TestSetVersion:
    """Writing versions back with tomlkit."""

    def test_string_entry_replaced(self):
        out = set_version(CARGO_TOML, InstallCandidate("rand", "0.9.0", "dependencies"))

        assert 'rand = "0.9.0"\n' in out
        assert out.replace('rand = "0.9.0"', 'rand = "0.8.5"') == CARGO_TOML

    def test_table_entry_keeps_other_keys_and_comment(self):
        out = set_version(CARGO_TOML, InstallCandidate("serde", "1.0.200", "dependencies"))

        assert 'version = "1.0.200"' in out
        assert 'features = ["derive"]' in out
        assert "# keep derive" in out
        assert "# runtime crates" in out

    def test_path_table_gets_version_key(self):
        out = set_version(CARGO_TOML, InstallCandidate("local", "0.2.0", "dependencies"))

        assert 'path = "../local"' in out
        assert 'version = "0.2.0"' in out

    def test_new_entry_added(self, tmp_path):
        out = set_version(CARGO_TOML, InstallCandidate("anyhow", "1.0.75", "dev-dependencies"))
        path = tmp_path / "Cargo.toml"
        path.write_text(out)

        deps = parse_cargo_toml(str(path)).groups["dev-dependencies"]

        assert list(deps) == ["tokio-test", "anyhow"]
        assert str(deps["anyhow"]) == "1.0.75"

    def test_missing_group_created(self, tmp_path):
        text = '[package]\nname = "demo"\nversion = "0.1.0"\n'
        out = set_version(text, InstallCandidate("cc", "1.0.83", "build-dependencies"))
        path = tmp_path / "Cargo.toml"
        path.write_text(out)

        config = parse_cargo_toml(str(path))

        assert str(config.groups["build-dependencies"]["cc"]) == "1.0.83"
        assert config.name == "demo"

    def test_invalid_document_raises(self):
        with pytest.raises(ManifestError):
            set_version("[dependencies\n", InstallCandidate("a", "1.0.0", "dependencies"))


class TestRemoveDep:
    """Removing entries with tomlkit."""

    def test_removes_only_that_entry(self):
        out = remove_dep(CARGO_TOML, "dependencies", "rand")

        assert "rand" not in out
        assert "# runtime crates" in out
        assert 'serde = { version = "1.0", features = ["derive"] }  # keep derive' in out
        assert 'local = { path = "../local" }' in out

    def test_missing_entry_raises(self):
        with pytest.raises(ManifestError):
            remove_dep(CARGO_TOML, "dependencies", "tokio")

    def test_missing_group_raises(self):
        with pytest.raises(ManifestError):
            remove_dep('[package]\nname = "x"\n', "dependencies", "serde")
