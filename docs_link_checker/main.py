"""
Command-line entry point for the docs link checker.

Checks every http(s) URL found in documentation files and reports the ones
that do not answer 200. GitHub repositories are additionally reported when
their last push is more than a year old.

    docs-link-checker dir ~/mongo/docs-ecosystem --out results.json
    docs-link-checker file ~/mongo/docs-ecosystem/community-supported-drivers.txt
    docs-link-checker stdin "$(cat links.txt)" -o links.json

A GitHub token avoids the unauthenticated API rate limit. Set GIT_REPO_TOKEN
(or GITHUB_TOKEN) in the environment, or store it in ~/.docs-link-checker.yaml.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from docs_link_checker.checker import Checker
from docs_link_checker.config import Settings, load_settings
from docs_link_checker.errors import ConfigError
from docs_link_checker.report import Report, write_report
from docs_link_checker.utils.logging import setup_logger

EXIT_OK = 0
EXIT_BROKEN = 1
EXIT_USAGE = 2

logger = logging.getLogger("docs_link_checker.main")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="docs-link-checker",
        description="Checks http and https URLs in documentation and reports non 200 statuses "
                    "and stale GitHub repositories."
    )

    parser.add_argument("--config", help="YAML config file (default: ~/.docs-link-checker.yaml)")
    parser.add_argument("-o", "--out", dest="outfile", help="Write the JSON report to this file")
    parser.add_argument("--timeout", type=float, help="Seconds allowed per URL check (default: 5)")
    parser.add_argument("--max-concurrency", type=int,
                        help="Maximum checks in flight; 0 for unlimited (default: 50)")
    parser.add_argument("--deadline", type=float,
                        help="Stop dispatching new files after this many seconds; 0 disables (default: 10)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level (default: INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--fail-on-broken", action="store_true",
                        help="Exit with status 1 when any link is reported")

    subparsers = parser.add_subparsers(dest="command", required=True)

    dir_parser = subparsers.add_parser(
        "dir", help="Check all matching files in a directory and its children"
    )
    dir_parser.add_argument("path", nargs="?", default=".",
                            help="Directory to search (default: current directory)")

    file_parser = subparsers.add_parser("file", help="Check a single file")
    file_parser.add_argument("path", help="File to check")

    stdin_parser = subparsers.add_parser("stdin", help="Check URLs in the given text")
    stdin_parser.add_argument("text", nargs="?", default="-",
                              help="Text to scan; '-' or omitted reads standard input")

    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: Settings) -> Report:
    """
    Execute the selected command.

    Args:
        args: Parsed command line arguments
        settings: Resolved settings

    Returns:
        Report of failing checks
    """
    async with Checker.from_settings(settings) as checker:
        if args.command == "dir":
            root = Path(os.getcwd()) if args.path == "." else Path(args.path)
            if not root.is_dir():
                raise FileNotFoundError(f"not a directory: {root}")
            return await checker.check_directory(root, settings.extensions, deadline=settings.deadline)

        if args.command == "file":
            path = Path(args.path).resolve()
            if not path.is_file():
                raise FileNotFoundError(f"not a file: {path}")
            # Read up front: an unreadable input is a usage error, not a skipped file.
            text = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
            file = path.name
        else:
            text = sys.stdin.read() if args.text == "-" else args.text
            file = "stdin"

        report = Report()
        report.extend(await checker.check_text(text, file))
        return report


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    setup_logger(
        log_file=args.log_file,
        level=getattr(logging, args.log_level),
        structured=args.json_logs,
    )

    try:
        settings = load_settings(
            config_file=args.config,
            timeout=args.timeout,
            max_concurrency=args.max_concurrency,
            deadline=args.deadline,
        )
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_USAGE

    logger.info(f"Timeout per check: {settings.timeout:g}s")
    logger.info(f"Max concurrency: {settings.max_concurrency or 'unlimited'}")
    logger.info(f"Deadline: {settings.deadline:g}s")

    try:
        report = asyncio.run(run(args, settings))
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        return EXIT_USAGE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_BROKEN
    except Exception as e:
        logger.error(f"Error: {str(e)}", exc_info=True)
        return EXIT_BROKEN

    try:
        write_report(report, args.outfile)
    except OSError as e:
        logger.error(f"Cannot write report to {args.outfile}: {e}")
        return EXIT_BROKEN

    if args.fail_on_broken and report:
        return EXIT_BROKEN
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
