"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1


class Namespaces(Enum):
    """URL namespaces served by the details frontend.

    Args:
        Enum (string): Namespace tag handed to the renderer.
    """

    PACKAGE = "pkg"
    MODULE = "mod"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_HOST = "127.0.0.1"
    DEFAULT_PORT = 8080
    HEALTH_PATH = "/_discovery/health"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DISCOVERY_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Pagination
    IMPORTED_BY_PAGE_SIZE = 100
    NUM_PAGES_TO_LINK = 5

    # Redistributable license types (SPDX identifiers)
    REDISTRIBUTABLE_LICENSES = frozenset([
        "AGPL-3.0",
        "Apache-2.0",
        "Artistic-2.0",
        "BSD-0-Clause",
        "BSD-2-Clause",
        "BSD-3-Clause",
        "BSL-1.0",
        "CC-BY-4.0",
        "CC0-1.0",
        "EPL-2.0",
        "GPL-2.0",
        "GPL-3.0",
        "ISC",
        "LGPL-2.1",
        "LGPL-3.0",
        "MIT",
        "MPL-2.0",
        "Unlicense",
        "Zlib",
    ])
