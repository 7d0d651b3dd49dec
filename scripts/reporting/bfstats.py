#!/usr/bin/env python3
"""
BigFix Deployment Statistics

Converts BigFix deployment reports into text for updating Atlassian
Confluence tables.

Usage:
    bfstats -c current_report.html -t targets.csv
    bfstats -i deploy_20141015.html

The table is printed to standard output so it can be pasted straight into the
wiki. Errors and progress messages go to standard error (and to a log file
when --log is given).
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add project root to path so the script also runs from a source checkout
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from bigfix import PROGRAM_NAME, __version__
from bigfix.config import StatsConfig
from bigfix.exceptions import NoInputDataError, ReportIOError, UsageError
from bigfix.facade.bigfix_facade import BigFixStatsFacade

logger = logging.getLogger(__name__)

VALUE_FLAGS = ("-i", "-c", "-t", "--csv")
SWITCH_FLAGS = ("--minimal", "--sorted", "--verbose")
OPTIONAL_VALUE_FLAGS = ("--log",)


class StatsArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = StatsArgumentParser(
        prog=PROGRAM_NAME,
        description="Convert BigFix deployment reports into Confluence tables.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-i", dest="report", help="BigFix report with embedded targets")
    parser.add_argument("-c", dest="current", help="BigFix report with current counts")
    parser.add_argument("-t", dest="target", help="Comma-separated computer group targets")
    parser.add_argument("--csv", help="Also write the finalized table to a CSV file")
    parser.add_argument("--minimal", action="store_true", help="Use unpadded table cells")
    parser.add_argument("--sorted", action="store_true", help="Order groups by name")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log",
        nargs="?",
        const="bfstats.log",
        help="Also log to a file (defaults to bfstats.log in current directory)",
    )
    return parser


def usage() -> None:
    """Display program name, version, and usage."""
    print(f"{PROGRAM_NAME}, version {__version__}\n")
    print(f"usage: {PROGRAM_NAME} [-h] -i report | -t target -c current\n")
    print("-h display usage")
    print("-i filename of a deployment report with embedded computer group targets")
    print("-t filename of the comma-separated computer group targets")
    print("-c filename of the current computer group deployment statistics")
    print("--csv filename to also write the table to as CSV")
    print("--minimal do not pad table cells")
    print("--sorted order computer groups by name")
    print("--verbose enable debug logging")
    print("--log [filename] also write log messages to a file\n")


def check_flag_values(argv: List[str]) -> None:
    """
    Make sure every flag that takes a value is followed by one.

    Raises:
        UsageError: Naming the first flag without a value
    """
    for index, arg in enumerate(argv):
        if arg in VALUE_FLAGS:
            if index + 1 >= len(argv) or argv[index + 1].startswith("-"):
                raise UsageError(f"option {arg} requires an argument", flag=arg)


def split_known_flags(argv: List[str]) -> Tuple[List[str], List[str]]:
    """
    Separate recognized flags (and their values) from everything else.

    Flags only match exactly, so `-ix` is ignored rather than read as
    `-i x`. The values of unrecognized flags are ignored with them.

    Returns:
        (known, unknown) argument lists, each in command-line order
    """
    known: List[str] = []
    unknown: List[str] = []
    index = 0
    while index < len(argv):
        arg = argv[index]
        has_value = index + 1 < len(argv) and not argv[index + 1].startswith("-")
        if arg in VALUE_FLAGS or (arg in OPTIONAL_VALUE_FLAGS and has_value):
            known.extend(argv[index:index + 2])
            index += 2
        elif arg in SWITCH_FLAGS or arg in OPTIONAL_VALUE_FLAGS:
            known.append(arg)
            index += 1
        else:
            unknown.append(arg)
            index += 1
    return known, unknown


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_dir = Path(log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for the BigFix statistics script."""
    argv = sys.argv[1:] if argv is None else list(argv)

    # -h wins over everything else, including malformed flags
    if not argv or "-h" in argv:
        usage()
        return 0

    try:
        check_flag_values(argv)
        known, unknown = split_known_flags(argv)
        args = build_parser().parse_args(known)
        if args.report and (args.current or args.target):
            raise UsageError("option -i cannot be combined with -c or -t", flag="-i")
        if args.target and not args.current:
            raise UsageError("option -t requires a report given with -c", flag="-t")
    except UsageError as e:
        print(f"{PROGRAM_NAME}: {e}", file=sys.stderr)
        usage()
        return 1

    if not (args.report or args.current):
        usage()
        return 0

    setup_logging(verbose=args.verbose, log_file=args.log)
    if unknown:
        logger.debug(f"Ignoring unrecognized arguments: {' '.join(unknown)}")

    try:
        config = StatsConfig.from_env().with_overrides(
            render_style="minimal" if args.minimal else None,
            ordering="sorted" if args.sorted else None,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    facade = BigFixStatsFacade(config)
    try:
        if args.report:
            result = facade.run_single_file(args.report)
        else:
            result = facade.run_two_file(args.current, args.target)
    except (ReportIOError, NoInputDataError) as e:
        logger.error(str(e))
        return 1

    for line in facade.render(result):
        print(line)

    if facade.errors:
        logger.warning(f"Skipped {len(facade.errors)} malformed entries, see messages above")

    if args.csv:
        try:
            facade.export_csv(result, args.csv)
        except OSError as e:
            logger.error(f"Failed to write CSV file {args.csv}: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
