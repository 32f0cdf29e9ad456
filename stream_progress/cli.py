#!/usr/bin/env python3
"""
Stream Progress CLI Entry Point

Copies lines from INPUT to OUTPUT unchanged while reporting progress on stderr.

Usage:
    stream-progress [INPUT] [-o OUTPUT] [--total N | --count] [--interval K]

Example:
    zcat events.log.gz | stream-progress --activity "Replay" --suffix "events" > events.log
    stream-progress big.csv -o copy.csv --count --interval 5000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm.contrib.logging import logging_redirect_tqdm

from .config import Config
from .error_handler import InvalidConfiguration, handle_error
from .logging_config import LOGGER_NAMESPACE, get_logger, setup_logging
from .progress import TqdmDisplay, track

logger = get_logger(__name__)

DEFAULT_CONFIG_NAME = "stream_progress.yaml"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="stream-progress",
        description="Pass lines through unchanged while reporting progress and an estimated completion time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cat data.jsonl | stream-progress --total 250000 > copy.jsonl
  stream-progress data.jsonl -o copy.jsonl --count
  stream-progress data.jsonl -o copy.jsonl --interval 100 --activity "Import"
        """
    )

    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="Input file (default: stdin)"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output file (default: stdout)"
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration YAML file (default: ./{DEFAULT_CONFIG_NAME} if present)"
    )

    parser.add_argument(
        "--activity", "-a",
        type=str,
        default=None,
        help="Activity label shown with each report (default: input file name)"
    )

    parser.add_argument(
        "--suffix", "-s",
        type=str,
        default=None,
        help="Unit label appended to the count"
    )

    total_group = parser.add_mutually_exclusive_group()
    total_group.add_argument(
        "--total", "-t",
        type=int,
        default=None,
        help="Number of lines expected; enables percent and ETA"
    )
    total_group.add_argument(
        "--count",
        action="store_true",
        help="Count the lines of INPUT first to obtain the total"
    )

    parser.add_argument(
        "--interval", "-i",
        type=int,
        default=None,
        help="Lines between progress reports"
    )

    parser.add_argument(
        "--display-id", "-d",
        type=int,
        default=None,
        help="Progress bar slot, for running several stages side by side"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file"
    )

    return parser.parse_args(argv)


def count_lines(path: Path) -> int:
    """Count lines of a text file"""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return sum(1 for _ in f)


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply CLI overrides to config"""
    if args.interval is not None:
        config.progress.interval = args.interval
        logger.debug(f"CLI override: interval = {args.interval}")

    if args.display_id is not None:
        config.progress.display_id = args.display_id
        logger.debug(f"CLI override: display id = {args.display_id}")

    if args.suffix is not None:
        config.progress.status_suffix = args.suffix

    if args.quiet:
        config.progress.show_progress = False
        config.logging.level = "WARNING"
    elif args.verbose:
        config.logging.level = "DEBUG"

    if args.log_file is not None:
        config.logging.log_file = str(args.log_file)

    return config


def stream_lines(source, sink, config: Config, activity: str, total: Optional[int]) -> int:
    """Copy lines from source to sink through a progress session. Returns the line count."""
    display = TqdmDisplay(disable=not config.progress.show_progress)
    copied = 0
    try:
        for line in track(
            source,
            activity,
            status_suffix=config.progress.status_suffix,
            total_expected=total,
            interval=config.progress.interval,
            display_id=config.progress.display_id,
            display=display,
            max_interval=config.progress.max_interval,
        ):
            sink.write(line)
            copied += 1
    finally:
        display.close()
    return copied


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config_path = args.config
    if config_path is None:
        default_config = Path.cwd() / DEFAULT_CONFIG_NAME
        if default_config.exists():
            config_path = default_config
    elif not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        return 1

    try:
        config = apply_overrides(Config.load(config_path), args)
        config.validate()
    except InvalidConfiguration as e:
        print(f"Error: {handle_error(e, 'configuration')}", file=sys.stderr)
        return 2

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.log_file or None,
        force=True,
        debug_mode=config.logging.debug_mode,
    )

    if args.count and args.input is None:
        print("Error: --count needs an INPUT file", file=sys.stderr)
        return 2

    activity = args.activity or (args.input.name if args.input else "stdin")
    source = sink = None

    try:
        total = args.total
        if args.count:
            total = count_lines(args.input)
            logger.info(f"Counted {total} lines in {args.input}")

        source = open(args.input, "r", encoding="utf-8", newline="") if args.input else sys.stdin
        sink = open(args.output, "w", encoding="utf-8", newline="") if args.output else sys.stdout

        with logging_redirect_tqdm(loggers=[logging.getLogger(LOGGER_NAMESPACE)]):
            copied = stream_lines(source, sink, config, activity, total)
        logger.info(f"{activity}: copied {copied} lines")
        return 0

    except InvalidConfiguration as e:
        print(f"Error: {handle_error(e, 'progress session')}", file=sys.stderr)
        return 2

    except BrokenPipeError:
        # Downstream reader went away; stop quietly
        logger.debug("Output pipe closed by reader")
        return 0

    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 130

    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {handle_error(e, 'streaming')}", file=sys.stderr)
        return 1

    finally:
        if source is not None and source is not sys.stdin:
            source.close()
        if sink is not None and sink is not sys.stdout:
            sink.close()


if __name__ == "__main__":
    sys.exit(main())
