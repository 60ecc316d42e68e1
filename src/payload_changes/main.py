"""Application entry point for the payload change report."""

from __future__ import annotations

import logging
import sys

from .aggregator import process_repositories
from .cli import parse_args
from .config import load_config
from .errors import (
    AuthenticationError,
    ChangeReportError,
    ConfigurationError,
    PayloadFetchError,
    SchedulerError,
)
from .github_client import GitHubClient
from .payload import get_repositories_from_payload
from .report import render_changes

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_AUTHENTICATION_ERROR = 3
EXIT_PAYLOAD_ERROR = 4
EXIT_SCHEDULER_ERROR = 5


def configure_logging(verbose: bool = False) -> None:
    """Send diagnostics to stderr so the report on stdout stays clean."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_change_report() -> int:
    """Run the end-to-end change report flow and return a process exit code.

    Flow:
    1. Parse CLI arguments.
    2. Load and validate configuration (including ``GITHUB_TOKEN``).
    3. Resolve the release payload into its source repositories.
    4. Fetch, filter and merge the commits of every repository.
    5. Print the change table to stdout.

    Returns:
        ``0`` on success, otherwise a non-zero exit code per failure class.
    """
    try:
        args = parse_args()
        configure_logging(verbose=args.verbose)

        config = load_config(
            payload=args.payload,
            since=args.since,
            branch=args.branch,
            concurrency=args.concurrency,
        )

        repositories = get_repositories_from_payload(config.payload)
        logger.info(
            "Processing %d repositories for commits in %s branch, since %s ...",
            len(repositories),
            config.options.branch_name,
            config.options.since,
        )

        client = GitHubClient(token=config.token)
        changes = process_repositories(client, config.options, repositories)

        render_changes(changes)
        return EXIT_SUCCESS
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION_ERROR
    except AuthenticationError as exc:
        logger.error("Authentication error: %s", exc)
        return EXIT_AUTHENTICATION_ERROR
    except PayloadFetchError as exc:
        logger.error("Unable to resolve release payload: %s", exc)
        return EXIT_PAYLOAD_ERROR
    except SchedulerError as exc:
        logger.error("Repository processing failed: %s", exc)
        return EXIT_SCHEDULER_ERROR
    except ChangeReportError as exc:
        logger.error("Change report failed: %s", exc)
        return EXIT_UNEXPECTED_ERROR
    except Exception:
        logger.exception("Unexpected error while generating the change report")
        return EXIT_UNEXPECTED_ERROR


def main() -> None:
    """Console script entry point."""
    sys.exit(orchestrate_change_report())


if __name__ == "__main__":
    main()
