"""CLI entry point for docker-reaper.

Usage:
    docker-reaper containers --min-age 1h -f label=ci --reap-networks
    docker-reaper --once --dry-run volumes --max-age 30m
    docker-reaper --every 5m networks -f label=ci -f label=nightly

Note: duration values accept Go-style duration strings (e.g. 1m30s).
"""

import argparse
import logging
import sys
import time
from collections.abc import Callable
from datetime import timedelta

from docker.errors import DockerException

from docker_reaper import __version__
from docker_reaper.cleanup.engine import CleanupEngine
from docker_reaper.handler import RESOURCE_KINDS, execute_reaper
from docker_reaper.models import Filter
from docker_reaper.utils.config import (
    ConfigurationError,
    ReaperConfig,
    configure_logging,
)
from docker_reaper.utils.docker_client import DockerClientManager
from docker_reaper.utils.durations import format_duration, parse_duration

logger = logging.getLogger(__name__)

DURATION_NOTE = "Note: <duration> values accept Go-style duration strings (e.g. 1m30s)"

FILTER_HELP = {
    "containers": "https://docs.docker.com/engine/reference/commandline/ps/#filter",
    "networks": "https://docs.docker.com/engine/reference/commandline/network_ls/#filter",
    "volumes": "https://docs.docker.com/engine/reference/commandline/volume_ls/#filter",
}


def duration_arg(value: str) -> timedelta:
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def filter_arg(value: str) -> Filter:
    try:
        return Filter.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _global_options() -> argparse.ArgumentParser:
    # Defaults are suppressed so options given after the subcommand do not
    # overwrite ones given before it.
    common = argparse.ArgumentParser(add_help=False)
    schedule = common.add_mutually_exclusive_group()
    schedule.add_argument(
        "--every",
        type=duration_arg,
        metavar="<duration>",
        default=argparse.SUPPRESS,
        help="Interval to wait after reaping resources (default: 60s)",
    )
    schedule.add_argument(
        "--once",
        action="store_true",
        default=argparse.SUPPRESS,
        help='Only reap resources once. Conflicts with "--every"',
    )
    common.add_argument(
        "--dry-run",
        "-d",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log output without actually removing resources",
    )
    common.add_argument(
        "--log-level",
        type=str.upper,
        default=argparse.SUPPRESS,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    common = _global_options()
    parser = argparse.ArgumentParser(
        prog="docker-reaper",
        description="Remove expired Docker resources",
        epilog=DURATION_NOTE,
        parents=[common],
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        metavar="{containers,networks,volumes}",
    )

    for kind in RESOURCE_KINDS:
        kind_parser = subparsers.add_parser(
            kind,
            parents=[common],
            help=f"Reaps matching expired {kind}",
            epilog=DURATION_NOTE,
        )
        kind_parser.add_argument(
            "--min-age",
            type=duration_arg,
            metavar="<duration>",
            default=None,
            help=f"Only reap {kind} older than this duration",
        )
        kind_parser.add_argument(
            "--max-age",
            type=duration_arg,
            metavar="<duration>",
            default=None,
            help=f"Only reap {kind} younger than this duration",
        )
        kind_parser.add_argument(
            "--filter",
            "-f",
            dest="filters",
            type=filter_arg,
            action="append",
            default=[],
            metavar="name=value",
            help=(
                f"Only reap {kind} matching a Docker Engine-supported filter "
                f"({FILTER_HELP[kind]}). Can be specified multiple times"
            ),
        )
        if kind == "containers":
            kind_parser.add_argument(
                "--reap-networks",
                action="store_true",
                help="Also attempt to remove the networks associated with reaped containers",
            )

    return parser


def apply_args(config: ReaperConfig, args: argparse.Namespace) -> ReaperConfig:
    """Override environment configuration with command-line values."""
    if "every" in args:
        config.every = args.every
        config.once = False
    if getattr(args, "once", False):
        config.once = True
    if getattr(args, "dry_run", False):
        config.dry_run = True
    if "log_level" in args:
        config.log_level = args.log_level
    if args.min_age is not None:
        config.min_age = args.min_age
    if args.max_age is not None:
        config.max_age = args.max_age
    if args.filters:
        config.filters = list(args.filters)
    config.reap_networks = getattr(args, "reap_networks", False)
    return config


def run_loop(
    engine: CleanupEngine,
    kind: str,
    config: ReaperConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Reap until interrupted, or once when ``config.once`` is set."""
    if config.once:
        logger.info("Reaping resources once")
    else:
        logger.info(f"Reaping resources every {format_duration(config.every)}")

    while True:
        execute_reaper(engine, kind, config)
        if config.once:
            break
        logger.debug(f"Sleeping for {format_duration(config.every)}")
        sleep(config.every.total_seconds())


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if "every" in args and getattr(args, "once", False):
        parser.error("argument --once: not allowed with argument --every")

    try:
        config = ReaperConfig.from_environment(validate=False)
    except ConfigurationError as e:
        parser.error(e.message)
    apply_args(config, args)

    errors = config.validate()
    if errors:
        parser.error("; ".join(errors))

    configure_logging(config)

    client_manager = DockerClientManager()
    try:
        engine = CleanupEngine(client_manager.api)
    except DockerException as e:
        logger.error(f"Failed to connect to Docker: {e}")
        return 1

    try:
        run_loop(engine, args.command, config)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
        return 130
    finally:
        client_manager.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
