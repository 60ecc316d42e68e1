"""Configuration parsing and validation for the payload change report."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta

from .errors import AuthenticationError, ConfigurationError
from .models import ProcessOptions

_DURATION_TERM = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h|d|w)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 7 * 86400.0,
}


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the change report."""

    payload: str
    token: str
    options: ProcessOptions


def parse_duration(value: str) -> timedelta:
    """Parse a lookback duration such as ``1d``, ``48h`` or ``1w2d3h``.

    A duration is one or more ``<number><unit>`` terms written without
    separators. Supported units are ``w``, ``d``, ``h``, ``m``, ``s``,
    ``ms``, ``us`` (or ``µs``) and ``ns``. A bare ``0`` and an empty value
    both mean no lookback.

    Args:
        value: Raw duration string.

    Returns:
        The parsed duration.

    Raises:
        ConfigurationError: If the value is not a valid duration.
    """
    text = value.strip()
    if not text or text == "0":
        return timedelta(0)

    total_seconds = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_TERM.match(text, position)
        if match is None:
            raise ConfigurationError(f"Invalid duration {value!r}: expected terms like '1d', '48h' or '1w2d'.")
        total_seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    return timedelta(seconds=total_seconds)


def load_config(payload: str, since: str, branch: str, concurrency: int) -> Config:
    """Build and validate application configuration.

    Args:
        payload: Release payload pull spec to inspect.
        since: Lookback duration string (see :func:`parse_duration`).
        branch: Branch whose commits are listed.
        concurrency: Maximum number of repositories fetched at once.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If any argument is empty or out of range.
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
    """
    if not payload.strip():
        raise ConfigurationError("Invalid value for 'payload': expected a non-empty pull spec.")
    if not branch.strip():
        raise ConfigurationError("Invalid value for 'branch': expected a non-empty branch name.")
    if concurrency <= 0:
        raise ConfigurationError("Invalid value for 'concurrency': expected an integer greater than 0.")

    lookback = parse_duration(since)

    token: str = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub token. "
            "Set the 'GITHUB_TOKEN' environment variable before running the change report."
        )

    return Config(
        payload=payload.strip(),
        token=token,
        options=ProcessOptions(
            concurrency=concurrency,
            since=lookback,
            branch_name=branch.strip(),
        ),
    )
