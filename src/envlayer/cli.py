"""Command line interface for envlayer.

USAGE:
    envlayer parse FILE [FILE ...] [--format json|env] [--encoding ENC]
    envlayer find [--filename NAME]
    envlayer gitignore [--file PATH] [--entry NAME]

EXAMPLES:
    # Show what would be loaded from two files (first file wins)
    envlayer parse .env.local .env

    # Normalise a file to KEY="VALUE" lines
    envlayer parse .env --format env

    # Locate the nearest .env above the working directory
    envlayer find

    # Keep .env out of git
    envlayer gitignore
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from envlayer import __version__
from envlayer.exceptions import EnvLayerError
from envlayer.gitignore import ensure_gitignored
from envlayer.logger import DefaultLogger, Logger
from envlayer.loader import env_values, find_env_file
from envlayer.parser import format_env


def cmd_parse(args: argparse.Namespace, logger: Logger) -> int:
    try:
        values = env_values(args.files, encoding=args.encoding)
    except EnvLayerError as e:
        logger.error(e.message, code=e.code)
        return 1

    if args.format == "env":
        sys.stdout.write(format_env(values))
    else:
        print(json.dumps(values, indent=2, sort_keys=True))
    return 0


def cmd_find(args: argparse.Namespace, logger: Logger) -> int:
    found = find_env_file(args.filename)
    if found is None:
        logger.error(f"No {args.filename} found in the working directory or its parents")
        return 1
    print(found)
    return 0


def cmd_gitignore(args: argparse.Namespace, logger: Logger) -> int:
    try:
        ensure_gitignored(args.file, entry=args.entry, logger=logger)
    except EnvLayerError as e:
        logger.error(e.message, code=e.code)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envlayer",
        description="Inspect and manage .env files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    parse_cmd = subparsers.add_parser(
        "parse",
        help="Parse env files and print the merged result",
        description="Parse one or more env files. On duplicate keys the first file wins.",
    )
    parse_cmd.add_argument("files", nargs="+", help="Env files, highest precedence first")
    parse_cmd.add_argument(
        "--format",
        choices=["json", "env"],
        default="json",
        help="Output format. Default: %(default)s",
    )
    parse_cmd.add_argument("--encoding", default="utf-8", help="File encoding. Default: %(default)s")
    parse_cmd.set_defaults(func=cmd_parse)

    find_cmd = subparsers.add_parser(
        "find",
        help="Locate the nearest env file",
        description="Search the working directory and its parents for an env file",
    )
    find_cmd.add_argument("--filename", default=".env", help="File name to look for. Default: %(default)s")
    find_cmd.set_defaults(func=cmd_find)

    gitignore_cmd = subparsers.add_parser(
        "gitignore",
        help="Add an env file to .gitignore",
        description="Append an entry to .gitignore unless it is already listed",
    )
    gitignore_cmd.add_argument("--file", default=".gitignore", help="Path to .gitignore. Default: %(default)s")
    gitignore_cmd.add_argument("--entry", default=".env", help="Entry to add. Default: %(default)s")
    gitignore_cmd.set_defaults(func=cmd_gitignore)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    logger = DefaultLogger(
        output=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.INFO,
        version=__version__,
    )
    return args.func(args, logger)


if __name__ == "__main__":
    sys.exit(main())
