"""Command-line entrypoint for the link checker."""

import argparse
import logging
import sys
from typing import List, Optional

from linkcheck.core.config import APP_NAME, APP_VERSION, ConfigurationError, parse_duration, settings
from linkcheck.core.logging import configure_logging
from linkcheck.services.report import render_config, render_json, render_text
from linkcheck.services.runner import LinkCheckRunner, SourceError, split_inputs
from linkcheck.utils.url_utils import IgnoreFilter, split_patterns

OUTPUT_FORMATS = ("text", "json")

EXAMPLES = """examples:
  # Check markdown files
  linkchecker README.md
  linkchecker --recursive ./docs

  # Check web pages for dead links
  linkchecker https://example.com

  # Mixed usage
  linkchecker README.md https://example.com ./docs

  # Advanced options
  linkchecker --ignore="example.com,test.local" --timeout=10s https://mysite.com
  linkchecker --only-dead --format=json https://example.com
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Validate links in markdown files and check web pages for dead links. "
                    "Inputs may be file paths, directories or URLs.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="PATH_OR_URL",
        help="Markdown/HTML files, directories or web page URLs (defaults to current directory).",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Recursively scan directories for markdown files.",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        help="Comma-separated list of domains or regex patterns to ignore (e.g. 'example.com,*.test.local').",
    )
    parser.add_argument(
        "--timeout",
        default=f"{settings.LINKCHECK_TIMEOUT:g}s",
        help="HTTP request timeout (e.g. 10s, 1m, 500ms).",
    )
    parser.add_argument(
        "--only-dead",
        action="store_true",
        help="Only show dead/broken links in output.",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="text",
        help="Output format: 'text' or 'json'.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.LINKCHECK_WORKERS,
        help="Number of concurrent workers for link validation (default: %(default)s).",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort on the first input that cannot be read or fetched.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint; returns the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(debug=args.debug, default_level=logging.ERROR)

    try:
        if args.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(f"invalid format '{args.output_format}': must be 'text' or 'json'")
        options = settings.check_options(timeout=parse_duration(args.timeout), workers=args.workers)
        patterns = split_patterns(args.ignore)
        ignore = IgnoreFilter(patterns)
        runner = LinkCheckRunner(options, ignore=ignore, recursive=args.recursive)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output_format == "text":
        paths, urls = split_inputs(args.inputs)
        print(render_config(paths, urls, options, args.recursive, args.only_dead, args.output_format, patterns))

    try:
        report = runner.run(args.inputs, only_dead=args.only_dead, fail_fast=args.fail_fast)
    except SourceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    render = render_json if args.output_format == "json" else render_text
    print(render(report.entries, report.summary, report.duration))

    for error in report.errors:
        print(f"Error: {error}", file=sys.stderr)
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
