"""Resolve a release payload into the source repositories it was built from.

The payload is inspected with ``oc adm release info``, which prints the
release metadata as JSON. Every image tag of the release carries a
``io.openshift.build.source-location`` annotation pointing at the repository
the image was built from; many images share one repository.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Callable, Dict, List

from .errors import PayloadFetchError
from .models import ReleaseTag

logger = logging.getLogger(__name__)

DEFAULT_PAYLOAD = "quay.io/openshift-release-dev/ocp-release:4.9.0-fc.0-x86_64"
SOURCE_LOCATION_ANNOTATION = "io.openshift.build.source-location"

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def build_release_info_command(payload: str) -> List[str]:
    """Return the ``oc`` argument vector that prints release info as JSON."""
    return ["oc", "adm", "release", "info", payload, "--commit-urls", "-o", "json"]


def fetch_release_info(payload: str, runner: Runner = subprocess.run) -> Dict[str, Any]:
    """Run the release inspection command and decode its JSON output.

    Args:
        payload: Release payload pull spec.
        runner: ``subprocess.run`` compatible callable.

    Returns:
        The decoded release document.

    Raises:
        PayloadFetchError: If the command cannot be started, exits non-zero,
            or does not print a JSON object.
    """
    command = build_release_info_command(payload)
    logger.debug(
        "Inspecting release payload: %s",
        " ".join(command),
        extra={"payload": payload, "command": command},
    )

    try:
        completed = runner(command, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise PayloadFetchError(f"Unable to run {command[0]!r} for payload {payload!r}: {exc}") from exc

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        raise PayloadFetchError(
            f"Release inspection of {payload!r} exited with status {completed.returncode}: {stderr}"
        )

    try:
        document = json.loads(completed.stdout)
    except ValueError as exc:
        raise PayloadFetchError(f"Release inspection of {payload!r} returned invalid JSON") from exc

    if not isinstance(document, dict):
        raise PayloadFetchError(f"Release inspection of {payload!r} returned unexpected payload shape")

    return document


def _member(container: Dict[str, Any], key: str, default: Any) -> Any:
    value = container.get(key)
    return default if value is None else value


def _string_annotations(annotations: Dict[str, Any], item: Dict[str, Any]) -> Dict[str, str]:
    for key, value in annotations.items():
        if value is not None and not isinstance(value, str):
            raise PayloadFetchError(f"Release document annotation {key!r} is not a string: {item!r}")
    return {key: value or "" for key, value in annotations.items()}


def parse_release_tags(document: Dict[str, Any]) -> List[ReleaseTag]:
    """Extract the image tags from a decoded release document.

    Missing ``references``/``spec``/``tags`` levels decode as an empty tag
    list. Levels present with the wrong JSON type are rejected.

    Raises:
        PayloadFetchError: If the document structure has unexpected types.
    """
    references = _member(document, "references", {})
    if not isinstance(references, dict):
        raise PayloadFetchError("Release document 'references' has unexpected shape")

    spec = _member(references, "spec", {})
    if not isinstance(spec, dict):
        raise PayloadFetchError("Release document 'references.spec' has unexpected shape")

    items = _member(spec, "tags", [])
    if not isinstance(items, list):
        raise PayloadFetchError("Release document 'references.spec.tags' is not a list")

    tags: List[ReleaseTag] = []
    for item in items:
        if not isinstance(item, dict):
            raise PayloadFetchError(f"Release document tag has unexpected shape: {item!r}")

        annotations = _member(item, "annotations", {})
        if not isinstance(annotations, dict):
            raise PayloadFetchError(f"Release document tag annotations have unexpected shape: {item!r}")

        tags.append(
            ReleaseTag(
                name=str(item.get("name") or ""),
                annotations=_string_annotations(annotations, item),
            )
        )

    return tags


def extract_repositories(tags: List[ReleaseTag]) -> List[str]:
    """Return unique, non-empty source locations in order of first appearance."""
    repositories: List[str] = []
    seen = set()

    for tag in tags:
        source_location = tag.annotations.get(SOURCE_LOCATION_ANNOTATION)
        if not source_location:
            continue
        if source_location in seen:
            continue
        seen.add(source_location)
        repositories.append(source_location)

    return repositories


def get_repositories_from_payload(payload: str, runner: Runner = subprocess.run) -> List[str]:
    """Resolve a release payload into its ordered, de-duplicated repository list.

    Raises:
        PayloadFetchError: If the release metadata cannot be fetched or decoded.
    """
    tags = parse_release_tags(fetch_release_info(payload, runner=runner))
    repositories = extract_repositories(tags)

    logger.info(
        "Resolved %d repositories from %d tags of payload %s",
        len(repositories),
        len(tags),
        payload,
        extra={"payload": payload, "tags": len(tags), "repositories": len(repositories)},
    )
    return repositories
