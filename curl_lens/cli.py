"""Command-line interface and input handling.

Provides the argparse interface for curl-lens: where to read the curl
command from and how to render the parsed request.
"""

import argparse
import os
import sys

from curl_lens import __version__


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the curl-lens CLI."""
    parser = argparse.ArgumentParser(
        prog="curl-lens",
        description=(
            "curl-lens v{ver} - Structured view of a pasted curl command.\n\n"
            "Parses a curl invocation (quotes, escapes, line continuations, "
            "surrounding text) into method, URL, query, headers, cookies, "
            "body and options, and reports constructs that cannot be "
            "reproduced faithfully."
        ).format(ver=__version__),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  curl-lens \"curl -H 'Accept: application/json' "
            "https://api.example.com/items?page=2\"\n"
            "  curl-lens --command-file request.sh --json\n"
            "  pbpaste | curl-lens --command-file -\n"
        ),
    )

    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="The curl command to parse (quote it for your shell).",
    )
    parser.add_argument(
        "--command-file",
        default=None,
        help="Read the curl command from a file ('-' reads standard input).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the parse result as JSON instead of a report.",
    )
    parser.add_argument(
        "--show-sensitive",
        action="store_false",
        dest="hide_sensitive",
        help="Show credential header and cookie values unmasked.",
    )
    parser.add_argument(
        "--raw-url",
        action="store_false",
        dest="decode_url",
        help="Show the URL as written instead of percent-decoded.",
    )
    parser.add_argument(
        "--raw-cookies",
        action="store_false",
        dest="decode_cookies",
        help="Do not percent-decode cookie values in the report.",
    )
    parser.add_argument(
        "--encode-url",
        action="store_true",
        help="Percent-encode the whole URL in --json output.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any warning is produced.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments.

    Raises:
        SystemExit: If no single input source is given, or the command
            file does not exist or is not readable.
    """
    if args.command is None and args.command_file is None:
        print(
            "Error: Provide a curl command or --command-file.",
            file=sys.stderr,
        )
        sys.exit(1)

    if args.command is not None and args.command_file is not None:
        print(
            "Error: Use either a command argument or --command-file, not both.",
            file=sys.stderr,
        )
        sys.exit(1)

    if args.command is not None and not args.command.strip():
        print("Error: Command cannot be empty.", file=sys.stderr)
        sys.exit(1)

    if args.command_file is None or args.command_file == "-":
        return

    if not os.path.isfile(args.command_file):
        print(
            f"Error: Command file not found: '{args.command_file}'",
            file=sys.stderr,
        )
        sys.exit(1)

    if not os.access(args.command_file, os.R_OK):
        print(
            f"Error: Command file is not readable: '{args.command_file}'",
            file=sys.stderr,
        )
        sys.exit(1)


def parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Args:
        argv: Optional list of arguments (defaults to sys.argv).

    Returns:
        Parsed and validated argument namespace.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    validate_args(args)
    return args
