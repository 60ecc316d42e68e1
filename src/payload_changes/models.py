"""Domain models for the payload change report.

These dataclasses intentionally model only the subset of release metadata and
GitHub API payload fields that are required to build the report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict


@dataclass(frozen=True, slots=True)
class ProcessOptions:
    """Per-run settings shared by every repository task."""

    concurrency: int
    since: timedelta
    branch_name: str


@dataclass(slots=True)
class ReleaseTag:
    """Represents one image tag of a release payload."""

    name: str
    annotations: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class RawCommit:
    """Represents the minimal commit data returned by the GitHub API."""

    message: str
    html_url: str
    committed_at: datetime


@dataclass(frozen=True, slots=True)
class Change:
    """Represents one reported, non-merge commit."""

    url: str
    message: str
    display_time: str
    original_time: datetime
    repository: str
