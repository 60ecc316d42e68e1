"""Tests for the GitHub API client behavior with mocked HTTP."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from payload_changes.errors import CommitFetchError
from payload_changes.github_client import GitHubClient


def _response(status_code: int, payload=None, text: str = ""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload if payload is not None else []
    return response


def _commit_item(message: str, date: str = "2021-07-01T12:00:00Z", sha: str = "abc") -> dict:
    return {
        "sha": sha,
        "html_url": f"https://github.com/o/r/commit/{sha}",
        "commit": {"message": message, "committer": {"date": date}},
    }


def test_client_sends_token_and_accept_headers():
    """Verify the session is authenticated with the provided token."""
    client = GitHubClient(token="ghp_secret")

    assert client._session.headers["Authorization"] == "Bearer ghp_secret"
    assert client._session.headers["Accept"] == "application/vnd.github+json"


def test_list_commits_requests_branch_and_since():
    """Verify commit listing passes branch and UTC since timestamp as query params."""
    client = GitHubClient(token="t")
    client._session.get = Mock(return_value=_response(200, [_commit_item("Fix bug")]))

    commits = client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))

    call = client._session.get.call_args
    assert call.args[0] == "https://api.github.com/repos/o/r/commits"
    assert call.kwargs["params"] == {"sha": "master", "since": "2021-07-01T00:00:00Z"}
    assert len(commits) == 1
    assert commits[0].message == "Fix bug"
    assert commits[0].html_url == "https://github.com/o/r/commit/abc"
    assert commits[0].committed_at == datetime(2021, 7, 1, 12, tzinfo=timezone.utc)


def test_list_commits_skips_items_without_committer_date():
    """Verify commits lacking a committer date are ignored."""
    client = GitHubClient(token="t")
    item = _commit_item("No date")
    item["commit"]["committer"] = None
    client._session.get = Mock(return_value=_response(200, [item, _commit_item("Dated", sha="def")]))

    commits = client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))

    assert [commit.message for commit in commits] == ["Dated"]


def test_list_commits_http_error_raises_commit_fetch_error():
    """Verify HTTP errors surface as CommitFetchError naming the repository."""
    client = GitHubClient(token="t")
    client._session.get = Mock(return_value=_response(404, text="Not Found"))

    with pytest.raises(CommitFetchError, match="o/r"):
        client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))

    assert client._session.get.call_count == 1


def test_list_commits_transport_error_raises_commit_fetch_error():
    """Verify transport failures are not retried and raise CommitFetchError."""
    client = GitHubClient(token="t")
    client._session.get = Mock(side_effect=requests.ConnectionError("connection refused"))

    with pytest.raises(CommitFetchError):
        client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))

    assert client._session.get.call_count == 1


def test_list_commits_unexpected_payload_shape_raises():
    """Verify a non-list payload raises CommitFetchError."""
    client = GitHubClient(token="t")
    client._session.get = Mock(return_value=_response(200, {"message": "weird"}))

    with pytest.raises(CommitFetchError):
        client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))


def test_list_commits_invalid_json_raises():
    """Verify an undecodable body raises CommitFetchError."""
    client = GitHubClient(token="t")
    response = _response(200)
    response.json.side_effect = ValueError("no json")
    client._session.get = Mock(return_value=response)

    with pytest.raises(CommitFetchError):
        client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))


@pytest.mark.parametrize(
    "commit",
    [
        {"message": "Fix", "committer": {"date": 12345}},
        {"message": "Fix", "committer": "someone"},
        "not a commit object",
    ],
)
def test_list_commits_malformed_commit_fields_raise_commit_fetch_error(commit):
    """Verify wrongly typed commit, committer or date fields raise CommitFetchError."""
    client = GitHubClient(token="t")
    item = {"sha": "abc", "html_url": "https://github.com/o/r/commit/abc", "commit": commit}
    client._session.get = Mock(return_value=_response(200, [item]))

    with pytest.raises(CommitFetchError, match="o/r"):
        client.list_commits("o", "r", "master", since=datetime(2021, 7, 1, tzinfo=timezone.utc))
