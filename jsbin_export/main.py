"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from jsbin_export.config import DEFAULTS, LOG_LEVELS, load_config
from jsbin_export.errors import ConfigurationError
from jsbin_export.jobs.runner import ExportRunner
from jsbin_export.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Every option defaults to None so that unset options fall through to the
    environment, config.local.json and the built-in defaults.
    """
    parser = argparse.ArgumentParser(description="Export all your JS Bin bins to a local folder")

    # Credentials
    parser.add_argument("-u", "--username", default=None, help="JS Bin username")
    parser.add_argument("-p", "--password", default=None, help="JS Bin password")

    # Output
    parser.add_argument(
        "-f",
        "--folder",
        default=None,
        help=f"Output folder, deleted and recreated on every run (default: {DEFAULTS['folder']})",
    )
    parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Jinja2 template for index.html (default: packaged template)",
    )

    # Pacing
    parser.add_argument(
        "-d",
        "--delay",
        type=int,
        default=None,
        help=f"Milliseconds to wait before each bin request (default: {DEFAULTS['delay']})",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Only download the first N bins of the list (default: all)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: none)",
    )

    parser.add_argument(
        "--base-url",
        dest="base_url",
        default=None,
        help=f"Service URL (default: {DEFAULTS['base_url']})",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help=f"Log level (default: {DEFAULTS['log_level']})",
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point, returns the process exit code."""
    args = parse_args(argv)
    setup_logging(args.log_level or DEFAULTS["log_level"])

    try:
        config = load_config(vars(args))
    except ConfigurationError as e:
        logger.error(f"Error! {e}")
        return e.exit_code
    setup_logging(config.log_level)

    runner = ExportRunner(config)
    try:
        result = asyncio.run(runner.run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
