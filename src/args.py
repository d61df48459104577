"""Argument parsing functionality for the details server."""

import argparse
from typing import List, Optional

from constants import Constants


def parse_args(argv: Optional[List[str]] = None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="discovery-frontend",
        description=(
            "Module and package details frontend"
        ),
        add_help=True,
    )

    store_group = parser.add_mutually_exclusive_group()
    store_group.add_argument("-s", "--store-file",
                             dest="STORE_FILE",
                             help="Load module versions from a YAML or JSON file",
                             action="store",
                             type=str)
    store_group.add_argument("-u", "--store-url",
                             dest="STORE_URL",
                             help="Base URL of a remote metadata service",
                             action="store",
                             type=str)

    parser.add_argument("--host",
                        dest="HOST",
                        help=f"Address to bind (default: {Constants.DEFAULT_HOST})",
                        action="store",
                        type=str)
    parser.add_argument("-p", "--port",
                        dest="PORT",
                        help=f"Port to listen on (default: {Constants.DEFAULT_PORT})",
                        action="store",
                        type=int)
    parser.add_argument("--imported-by-limit",
                        dest="IMPORTED_BY_LIMIT",
                        help=f"Default page size of the Imported By tab (default: {Constants.IMPORTED_BY_PAGE_SIZE})",
                        action="store",
                        type=int)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"Timeout in seconds for remote store requests (default: {Constants.REQUEST_TIMEOUT})",
                        action="store",
                        type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
