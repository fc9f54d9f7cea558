"""curl-lens main entry point.

Ties together the CLI, parser and report modules: read a curl command,
parse it and print the structured request.
"""

import sys

from curl_lens.cli import parse_cli
from curl_lens.parser import load_command_file, parse_curl
from curl_lens.report import print_report, to_json


def main(argv: list[str] | None = None) -> int:
    """Run the curl-lens tool.

    Args:
        argv: Optional argument list (defaults to sys.argv).

    Returns:
        Exit code (0 = parsed, 1 = parsed with warnings under --strict,
        2 = error).
    """
    args = parse_cli(argv)
    verbose = not args.as_json

    if args.command is not None:
        raw_text = args.command
    elif args.command_file == "-":
        raw_text = sys.stdin.read()
    else:
        if verbose:
            print(f"[*] Loading curl command from: {args.command_file}")
        try:
            raw_text = load_command_file(args.command_file)
        except OSError as exc:
            print(f"Error reading command file: {exc}", file=sys.stderr)
            return 2

    if verbose:
        print("[*] Parsing curl command...")
    try:
        result = parse_curl(raw_text)
    except ValueError as exc:
        print(f"Error parsing command: {exc}", file=sys.stderr)
        return 2

    if args.as_json:
        print(to_json(result, encode_url=args.encode_url))
    else:
        print_report(
            result,
            hide_sensitive=args.hide_sensitive,
            decode_url=args.decode_url,
            decode_cookies=args.decode_cookies,
        )

    if args.strict and result.warnings:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
