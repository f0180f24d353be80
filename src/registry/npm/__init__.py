"""npm registry package.

This package provides npm support:
- manifest.py: package.json parsing and format-preserving edits
- lockfile_parser.py: package-lock.json (lockfileVersion 1, 2 and 3)
- client.py: registry.npmjs.org package documents and search
- backend.py: the Backend implementation tying them together
"""

from .backend import NpmBackend

__all__ = ["NpmBackend"]
