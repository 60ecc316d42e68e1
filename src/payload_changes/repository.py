"""Repository reference parsing."""

from __future__ import annotations

from typing import Optional, Tuple

GITHUB_PREFIX = "https://github.com/"


def parse_repository(reference: str) -> Optional[Tuple[str, str]]:
    """Split a GitHub repository URL into ``(organization, name)``.

    Only ``https://github.com/<organization>/<name>`` is accepted: both path
    segments must be non-empty and no further segments may follow.

    Returns:
        The ``(organization, name)`` pair, or ``None`` when the reference
        cannot be parsed.
    """
    if not reference.startswith(GITHUB_PREFIX):
        return None

    parts = reference[len(GITHUB_PREFIX):].split("/")
    if len(parts) != 2 or not all(parts):
        return None

    return parts[0], parts[1]


def format_repository(organization: str, name: str) -> str:
    """Render a repository as ``organization/name`` for messages."""
    return f"{organization}/{name}"
