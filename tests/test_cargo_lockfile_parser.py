"""Tests for the Cargo.lock parser."""

from registry.cargo.lockfile_parser import parse_cargo_lock
from registry.models import Config
from versioning.parser import parse_cargo_requirement
from versioning.models import Version

CARGO_LOCK = """# This file is automatically @generated by Cargo.
version = 3

[[package]]
name = "demo"
version = "0.1.0"
dependencies = ["rand 0.8.5", "rand 0.7.3"]

[[package]]
name = "rand"
version = "0.7.3"
source = "registry+https://github.com/rust-lang/crates.io-index"

[[package]]
name = "rand"
version = "0.8.5"
source = "registry+https://github.com/rust-lang/crates.io-index"

[[package]]
name = "serde"
version = "1.0.190"
"""


class TestCargoLockParser:
    """Test Cargo.lock parser."""

    def test_parse_packages(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text(CARGO_LOCK)

        result = parse_cargo_lock(str(lockfile_path))

        assert result["serde"] == Version("1.0.190")
        assert result["demo"] == Version("0.1.0")

    def test_duplicate_crate_without_manifest_highest_wins(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text(CARGO_LOCK)

        assert parse_cargo_lock(str(lockfile_path))["rand"] == Version("0.8.5")

    def test_duplicate_crate_follows_declared_requirement(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text(CARGO_LOCK)
        config = Config(groups={"dependencies": {"rand": parse_cargo_requirement("0.7")}})

        result = parse_cargo_lock(str(lockfile_path), config)

        assert result["rand"] == Version("0.7.3")
        assert result["serde"] == Version("1.0.190")

    def test_duplicate_crate_unparsable_requirement_highest_wins(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text(CARGO_LOCK)
        config = Config(groups={"dependencies": {"rand": None}})

        assert parse_cargo_lock(str(lockfile_path), config)["rand"] == Version("0.8.5")

    def test_duplicate_crate_no_copy_satisfies_requirement(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text(CARGO_LOCK)
        config = Config(groups={"dependencies": {"rand": parse_cargo_requirement("0.9")}})

        assert parse_cargo_lock(str(lockfile_path), config)["rand"] == Version("0.8.5")

    def test_missing_file_is_empty(self, tmp_path, caplog):
        assert parse_cargo_lock(str(tmp_path / "Cargo.lock")) == {}
        assert "not found" in caplog.text

    def test_invalid_toml_is_empty(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text("[[package]\nname = ")

        assert parse_cargo_lock(str(lockfile_path)) == {}

    def test_entries_without_valid_version_skipped(self, tmp_path):
        lockfile_path = tmp_path / "Cargo.lock"
        lockfile_path.write_text(
            '[[package]]\nname = "odd"\nversion = "1.0"\n\n[[package]]\nname = "ok"\nversion = "2.0.0"\n'
        )

        assert parse_cargo_lock(str(lockfile_path)) == {"ok": Version("2.0.0")}
