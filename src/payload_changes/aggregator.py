"""Concurrent change collection across all repositories of a payload."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .commits import build_changes, fetch_repository_commits
from .errors import RepositoryResolutionError, SchedulerError
from .github_client import CommitSource
from .models import Change, ProcessOptions

logger = logging.getLogger(__name__)


def process_repositories(
    source: CommitSource,
    options: ProcessOptions,
    repositories: Sequence[str],
    now: Optional[datetime] = None,
) -> List[Change]:
    """Fetch and filter the commits of every repository and merge them by time.

    Each repository is processed by its own task on a pool of
    ``options.concurrency`` worker threads; the remaining tasks queue until a
    worker frees up. Tasks publish their changes into one shared list under a
    lock held only for the append. Per-repository failures (unparsable
    reference, failed API call) are logged and contribute no changes.

    Args:
        source: Commit source shared by all workers.
        options: Per-run processing options.
        repositories: Repository references to process.
        now: Start time of the run; defaults to the current UTC time.

    Returns:
        All changes sorted by commit time, oldest first.

    Raises:
        SchedulerError: If a task or the worker pool fails unexpectedly. No
            partial result is returned in that case.
    """
    started_at = now or datetime.now(timezone.utc)
    changes: List[Change] = []
    changes_lock = threading.Lock()

    def process_one(repository: str) -> None:
        try:
            commits = fetch_repository_commits(source, repository, options, started_at)
        except RepositoryResolutionError as exc:
            logger.warning("[%s] %s", repository, exc, extra={"repository": repository})
            return

        repository_changes = build_changes(repository, commits)
        with changes_lock:
            changes.extend(repository_changes)

        logger.info(
            "[%s] %d changes",
            repository,
            len(repository_changes),
            extra={"repository": repository, "changes": len(repository_changes)},
        )

    try:
        with ThreadPoolExecutor(max_workers=options.concurrency) as executor:
            futures = {executor.submit(process_one, repository): repository for repository in repositories}
            wait(futures)
    except (RuntimeError, ValueError) as exc:
        raise SchedulerError(f"Unable to schedule repository processing: {exc}") from exc

    for future, repository in futures.items():
        error = future.exception()
        if error is not None:
            raise SchedulerError(f"Processing of repository {repository!r} failed unexpectedly: {error}") from error

    changes.sort(key=lambda change: change.original_time)
    return changes
