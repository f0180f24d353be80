"""Cargo registry package.

- manifest.py: Cargo.toml parsing (tomllib) and edits (tomlkit)
- lockfile_parser.py: Cargo.lock [[package]] entries
- client.py: crates.io crate documents and search
- backend.py: the Backend implementation tying them together
"""

from .backend import CargoBackend

__all__ = ["CargoBackend"]
