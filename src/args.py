"""Argument parsing functionality for depman."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depman",
        description="depman - inspect project dependencies against their registry",
        add_help=True,
    )

    parser.add_argument("-d", "--directory",
                        dest="DIRECTORY",
                        help="Project directory to inspect (default: current directory)",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML file with registry settings",
                        action="store",
                        type=str)
    parser.add_argument("--request-timeout",
                        dest="REQUEST_TIMEOUT",
                        help="Timeout in seconds for a single registry request",
                        action="store",
                        type=float)
    parser.add_argument("--max-concurrency",
                        dest="MAX_CONCURRENCY",
                        help="Maximum number of concurrent registry requests",
                        action="store",
                        type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])

    return parser.parse_args(argv)
