"""discovery-frontend - module and package details server.

    Returns:
        int: Exit code
"""
import sys

from args import parse_args
from cli_server import run_server
from constants import ExitCodes


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    run_server(args)
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
