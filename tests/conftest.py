"""Shared fixtures: a local aiohttp registry and on-disk project builders."""

import contextlib
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


class FakeRegistry:
    """Serves canned JSON by request path and records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path, body, status=200):
        self.routes[path] = (status, body)

    async def _handle(self, request):
        self.requests.append(
            {
                "path": request.path,
                "query": dict(request.query),
                "user_agent": request.headers.get("User-Agent"),
            }
        )
        status, body = self.routes.get(request.path, (404, {"error": "Not found"}))
        if isinstance(body, str):
            return web.Response(status=status, text=body, content_type="application/json")
        return web.json_response(body, status=status)

    @contextlib.asynccontextmanager
    async def serve(self):
        """Run the registry; yields its base URL ending in '/'."""
        app = web.Application()
        app.router.add_route("GET", "/{tail:.*}", self._handle)
        async with TestServer(app) as server:
            yield str(server.make_url("/"))


@pytest.fixture
def fake_registry():
    return FakeRegistry()


@pytest.fixture
def npm_project(tmp_path):
    """Write package.json and package-lock.json; returns the project dir."""

    def _write(manifest, lock_packages=None, manifest_text=None):
        text = manifest_text if manifest_text is not None else json.dumps(manifest, indent=2) + "\n"
        (tmp_path / "package.json").write_text(text, encoding="utf-8")
        if lock_packages is not None:
            packages = {"": {"name": "demo"}}
            for name, version in lock_packages.items():
                packages[f"node_modules/{name}"] = {"version": version}
            lock = {"name": "demo", "lockfileVersion": 3, "packages": packages}
            (tmp_path / "package-lock.json").write_text(json.dumps(lock, indent=2), encoding="utf-8")
        return str(tmp_path)

    return _write


@pytest.fixture
def cargo_project(tmp_path):
    """Write Cargo.toml and optionally Cargo.lock; returns the project dir."""

    def _write(manifest_text, locked=None):
        (tmp_path / "Cargo.toml").write_text(manifest_text, encoding="utf-8")
        if locked is not None:
            lines = ["version = 3", ""]
            for name, version in locked:
                lines += ["[[package]]", f'name = "{name}"', f'version = "{version}"', ""]
            (tmp_path / "Cargo.lock").write_text("\n".join(lines), encoding="utf-8")
        return str(tmp_path)

    return _write


def npm_document(name, versions, **fields):
    """Minimal npm packument."""
    doc = {"name": name, "versions": {v: {"name": name, "version": v} for v in versions}}
    doc.update(fields)
    return doc


def crate_document(name, versions, **fields):
    """Minimal crates.io /crates/<name> response."""
    crate = {"name": name}
    crate.update(fields)
    return {"crate": crate, "versions": [{"num": v} for v in versions]}


@pytest.fixture
def npm_doc():
    return npm_document


@pytest.fixture
def crate_doc():
    return crate_document
