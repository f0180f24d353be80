"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    UNSUPPORTED_PROJECT = 4


class BackendKind(Enum):
    """Ecosystems supported by the program.

    Args:
        Enum (string): Ecosystem identifiers.
    """

    NPM = "npm"
    CARGO = "cargo"


class UpgradeType(Enum):
    """How far an installed dependency trails what is available."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    BREAKING = "breaking"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    REGISTRY_URL_NPM_SEARCH = "https://registry.npmjs.org/-/v1/search"
    REGISTRY_URL_CRATES = "https://crates.io/api/v1/"
    PACKAGE_PAGE_NPM = "https://www.npmjs.com/package/"
    PACKAGE_PAGE_CRATES = "https://crates.io/crates/"

    PACKAGE_JSON_FILE = "package.json"
    PACKAGE_LOCK_FILE = "package-lock.json"
    CARGO_TOML_FILE = "Cargo.toml"
    CARGO_LOCK_FILE = "Cargo.lock"

    NPM_GROUPS = [
        "dependencies",
        "devDependencies",
        "peerDependencies",
        "optionalDependencies",
    ]
    CARGO_GROUPS = ["dependencies", "dev-dependencies", "build-dependencies"]

    USER_AGENT = "depman (github.com/meain/depman)"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for a single registry request
    FETCH_DEADLINE = 120  # Overall deadline in seconds for one fetch pass
    MAX_CONCURRENCY = 16
    SEARCH_SIZE = 20

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPMAN_LOG_LEVEL"
    UNKNOWN = "unknown"
