"""Tests for the depman command line entry point."""

import asyncio
import json

import pytest

from args import parse_args
from constants import BackendKind, ExitCodes
from registry.models import DepInfo
from registry.npm import NpmBackend
from versioning.models import Version
import depman
from project import parse


@pytest.fixture
def offline_registry(monkeypatch):
    async def _fetch(self, client, name):
        return DepInfo(name=name, versions=(Version("2.0.0"), Version("1.4.0"), Version("1.2.3")))

    monkeypatch.setattr(NpmBackend, "fetch_dep_info", _fetch)


class TestParseArgs:
    """Argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.DIRECTORY == "."
        assert args.CONFIG is None
        assert args.LOG_LEVEL is None

    def test_options(self):
        args = parse_args(["-d", "/tmp/x", "--loglevel", "debug", "--max-concurrency", "4"])
        assert args.DIRECTORY == "/tmp/x"
        assert args.LOG_LEVEL == "DEBUG"
        assert args.MAX_CONCURRENCY == 4


class TestRender:
    """One line per dependency."""

    def test_render_project(self, npm_project, offline_registry):
        root = npm_project(
            {"dependencies": {"lodash": "^1.0.0", "local": "file:../local"}},
            {"lodash": "1.2.3"},
        )
        project = asyncio.run(parse(root, BackendKind.NPM))

        lines = depman.render_project(project)

        assert lines == [
            "dependencies: [lodash] ^1.0.0(1.2.3) => 1.4.0(2.0.0)",
            "dependencies: [local] unknown(unknown) => unknown(2.0.0)",
        ]


class TestRun:
    """Exit codes."""

    def test_success(self, npm_project, offline_registry, capsys):
        root = npm_project({"dependencies": {"lodash": "^1.0.0"}}, {"lodash": "1.2.3"})

        code = depman.run(parse_args(["-d", root]))

        assert code == ExitCodes.SUCCESS.value
        assert "[lodash] ^1.0.0(1.2.3) => 1.4.0(2.0.0)" in capsys.readouterr().out

    def test_unsupported_directory(self, tmp_path):
        assert depman.run(parse_args(["-d", str(tmp_path)])) == ExitCodes.UNSUPPORTED_PROJECT.value

    def test_invalid_manifest(self, tmp_path):
        (tmp_path / "package-lock.json").write_text("{}")
        (tmp_path / "package.json").write_text("{ broken")
        assert depman.run(parse_args(["-d", str(tmp_path)])) == ExitCodes.FILE_ERROR.value

    def test_registry_unreachable(self, npm_project, tmp_path):
        root = npm_project({"dependencies": {"lodash": "^1.0.0"}}, {"lodash": "1.2.3"})
        config = tmp_path / "depman.yml"
        config.write_text(
            json.dumps({"registry": {"npm_registry_url": "http://127.0.0.1:9/", "request_timeout": 2}})
        )

        code = depman.run(parse_args(["-d", root, "-c", str(config)]))

        assert code == ExitCodes.CONNECTION_ERROR.value

    def test_wrongly_typed_config_is_file_error(self, npm_project, tmp_path):
        root = npm_project({"dependencies": {"lodash": "^1.0.0"}}, {"lodash": "1.2.3"})
        config = tmp_path / "depman.yml"
        config.write_text("max_concurrency: many\n")

        code = depman.run(parse_args(["-d", root, "-c", str(config)]))

        assert code == ExitCodes.FILE_ERROR.value

    def test_main_exits_with_code(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            depman.main(["-d", str(tmp_path)])
        assert exc.value.code == ExitCodes.UNSUPPORTED_PROJECT.value
