"""depman - dependency inspection for npm and Cargo projects.

Detects the project's ecosystem, parses its manifest and lockfile, fetches
registry metadata, and prints one line per dependency.

    Returns:
        int: Exit code
"""
import asyncio
import logging
import os
import sys
from typing import List, Optional

from args import parse_args
from common.errors import DepmanError, ManifestError, UnsupportedProjectError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from common.settings import EngineSettings
from constants import Constants, ExitCodes
from project import Project, parse
from registry.selector import detect_kind

logger = logging.getLogger(__name__)


def _display(value) -> str:
    return Constants.UNKNOWN if value is None else str(value)


def render_project(project: Project) -> List[str]:
    """Render one line per dependency.

    Format: ``group: [name] specified(current) => compatible(latest)``; absent
    values print as ``unknown``.
    """
    lines = []
    for group in project.get_groups():
        for name in project.get_deps_in_group(group):
            lines.append(
                "{}: [{}] {}({}) => {}({})".format(
                    group,
                    name,
                    _display(project.get_specified_version(group, name)),
                    _display(project.get_current_version(name)),
                    _display(project.get_best_compatible_version(group, name)),
                    _display(project.get_latest_version(name)),
                )
            )
    return lines


def run(args) -> int:
    """Run one inspection and return the process exit code."""
    root = os.path.abspath(args.DIRECTORY)
    try:
        settings = EngineSettings.from_args(args)
    except DepmanError as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    kind = detect_kind(root, settings)
    if kind is None:
        logger.error("No supported project (package-lock.json or Cargo.toml) in %s", root)
        return ExitCodes.UNSUPPORTED_PROJECT.value

    try:
        project = asyncio.run(parse(root, kind, settings))
    except ManifestError as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value
    except UnsupportedProjectError as e:
        logger.error("%s", e)
        return ExitCodes.UNSUPPORTED_PROJECT.value

    declared = project.config.dependency_names()
    if declared and not project.metadata:
        logger.error("Unable to reach the %s registry", kind.value)
        return ExitCodes.CONNECTION_ERROR.value

    for line in render_project(project):
        print(line)
    return ExitCodes.SUCCESS.value


def main(argv: Optional[List[str]] = None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main"),
        )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
