"""Command-line argument parsing for the payload change report."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .payload import DEFAULT_PAYLOAD


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the change report.

    Returns:
        Parsed CLI arguments containing the lookback duration, branch name,
        payload pull spec, concurrency and verbosity.
    """
    parser = argparse.ArgumentParser(
        prog="payload-changes",
        description=(
            "List recent commits of every source repository referenced by a "
            "release payload, oldest first."
        ),
    )

    parser.add_argument(
        "--since",
        default="1d",
        help="Relative time to search the commits from (eg. '1d', '48h', ...) (default: 1d).",
    )
    parser.add_argument(
        "--branch",
        default="master",
        help="Branch name to use for search (eg. 'release-4.6', ...) (default: master).",
    )
    parser.add_argument(
        "--payload",
        default=DEFAULT_PAYLOAD,
        help="Payload pull spec used to determine the list of repositories.",
    )
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=10,
        help="Maximum number of repositories fetched at the same time (default: 10).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
