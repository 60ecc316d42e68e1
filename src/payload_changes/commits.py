"""Commit retrieval and filtering for a single repository.

This module covers the per-repository half of the pipeline:
- Fetching the recent commits of one repository branch, where a failed API
  call is logged and yields no commits instead of failing the whole run.
- Dropping merge commits and sanitizing commit messages for display.
- Rendering commit times relative to the current time.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from .errors import CommitFetchError, RepositoryResolutionError
from .github_client import CommitSource
from .models import Change, ProcessOptions, RawCommit
from .repository import parse_repository

logger = logging.getLogger(__name__)

MERGE_COMMIT_MARKER = "Merge pull request"
SIGNATURE_MARKER = "Signed-off-by"
MAX_LINE_LENGTH = 80
TRUNCATION_MARKER = " ..."

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 12 * _MONTH
_LONG_TIME = 37 * _YEAR

# (upper bound in seconds, template, divisor)
_MAGNITUDES: Tuple[Tuple[float, str, int], ...] = (
    (1, "now", 1),
    (2, "1 second {suffix}", 1),
    (_MINUTE, "{count} seconds {suffix}", 1),
    (2 * _MINUTE, "1 minute {suffix}", 1),
    (_HOUR, "{count} minutes {suffix}", _MINUTE),
    (2 * _HOUR, "1 hour {suffix}", 1),
    (_DAY, "{count} hours {suffix}", _HOUR),
    (2 * _DAY, "1 day {suffix}", 1),
    (_WEEK, "{count} days {suffix}", _DAY),
    (2 * _WEEK, "1 week {suffix}", 1),
    (_MONTH, "{count} weeks {suffix}", _WEEK),
    (2 * _MONTH, "1 month {suffix}", 1),
    (_YEAR, "{count} months {suffix}", _MONTH),
    (18 * _MONTH, "1 year {suffix}", 1),
    (2 * _YEAR, "2 years {suffix}", 1),
    (_LONG_TIME, "{count} years {suffix}", _YEAR),
)


def fetch_repository_commits(
    source: CommitSource,
    repository: str,
    options: ProcessOptions,
    now: datetime,
) -> List[RawCommit]:
    """Fetch the commits of ``options.branch_name`` made since ``now - options.since``.

    API failures are logged with the repository reference and result in an
    empty list, so one unreachable repository does not abort the report.

    Raises:
        RepositoryResolutionError: If ``repository`` is not a parsable
            GitHub repository URL.
    """
    parsed = parse_repository(repository)
    if parsed is None:
        raise RepositoryResolutionError(f"unable to parse repository organization or name: {repository!r}")

    organization, name = parsed
    try:
        return source.list_commits(
            organization,
            name,
            options.branch_name,
            since=now - options.since,
        )
    except CommitFetchError as exc:
        logger.warning("[%s] %s", repository, exc, extra={"repository": repository})
        return []


def is_merge_commit(message: str) -> bool:
    """Return whether a commit message looks like a pull request merge.

    This is a heuristic on the message only and does not need an extra API
    request; merges with a custom message are not detected.
    """
    return MERGE_COMMIT_MARKER in message


def sanitize_message(message: str) -> str:
    """Clean a commit message for tabular display.

    Signature lines and whitespace-only lines are dropped; lines longer than
    80 characters are cut and suffixed with ``" ..."``; kept lines are
    stripped and rejoined in their original order.
    """
    lines: List[str] = []
    for line in message.split("\n"):
        if SIGNATURE_MARKER in line or not line.strip():
            continue
        if len(line) > MAX_LINE_LENGTH:
            line = line[:MAX_LINE_LENGTH] + TRUNCATION_MARKER
        lines.append(line.strip())
    return "\n".join(lines)


def humanize_time(value: datetime, now: Optional[datetime] = None) -> str:
    """Describe ``value`` relative to ``now``, e.g. ``"3 hours ago"``.

    Args:
        value: Timezone-aware timestamp to describe.
        now: Reference time; defaults to the current UTC time.

    Returns:
        A relative description; future timestamps end in ``"from now"``.
    """
    reference = now or datetime.now(timezone.utc)
    delta = (reference - value).total_seconds()
    suffix = "ago"
    if delta < 0:
        delta = -delta
        suffix = "from now"

    for upper_bound, template, divisor in _MAGNITUDES:
        if delta < upper_bound:
            return template.format(count=int(delta // divisor), suffix=suffix)

    return f"a long while {suffix}"


def build_changes(
    repository: str,
    commits: Sequence[RawCommit],
    now: Optional[datetime] = None,
) -> List[Change]:
    """Turn raw commits into report changes, skipping merge commits."""
    reference = now or datetime.now(timezone.utc)
    changes: List[Change] = []
    merges = 0

    for commit in commits:
        if is_merge_commit(commit.message):
            merges += 1
            continue
        changes.append(
            Change(
                url=commit.html_url,
                message=sanitize_message(commit.message),
                display_time=humanize_time(commit.committed_at, now=reference),
                original_time=commit.committed_at,
                repository=repository,
            )
        )

    logger.debug(
        "[%s] kept %d of %d commits, %d merges",
        repository,
        len(changes),
        len(commits),
        merges,
        extra={"repository": repository, "commits": len(commits), "merges": merges},
    )
    return changes
