"""Project engine: parse a directory into a queryable, mutable Project."""

from .fetch import fetch_metadata
from .project import Project, parse, reparse

__all__ = ["Project", "fetch_metadata", "parse", "reparse"]
