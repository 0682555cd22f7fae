"""Tests for pull request publishing against a mocked GitHub API."""

import json

import httpx
import pytest

from cherrypicker.core.config import BranchIterationState
from cherrypicker.core.errors import HostApiError
from cherrypicker.hosting.github import GitHubClient
from cherrypicker.hosting.publisher import (
    ERROR_PR_REVIEW_FROM_AUTHOR,
    PullRequestPublisher,
    PullRequestRequest,
)

PULL = {
    "number": 7,
    "html_url": "https://github.com/octo/repo/pull/7",
}


class FakeGitHub:
    """MockTransport handler recording (method, path, json body)."""

    def __init__(self):
        self.requests = []
        self.failures = {}

    def fail(self, path_suffix, status, body):
        self.failures[path_suffix] = (status, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, payload))

        for suffix, (status, body) in self.failures.items():
            if request.url.path.endswith(suffix):
                return httpx.Response(status, json=body)
        if request.url.path.endswith("/pulls"):
            return httpx.Response(201, json=PULL)
        return httpx.Response(200, json={})

    def paths(self):
        return [path for _, path, _ in self.requests]


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def client(github):
    http = httpx.Client(transport=httpx.MockTransport(github))
    with GitHubClient(
        "octo/repo", "t0ken", api_url="https://api.github.com", client=http
    ) as gh:
        yield gh
    http.close()


@pytest.fixture
def publish(client, make_config, change):
    """Build a request from config overrides and publish it."""
    def _publish(pull_request=None, labels=None, draft=False,
                 base="release/1.1.0"):
        config = make_config(pull_request=pull_request)
        iteration = BranchIterationState.start(config, base, "pick-branch")
        if labels is not None:
            iteration.labels = labels
        iteration.draft = iteration.draft or draft
        request = PullRequestRequest.build(config, iteration, change)
        return PullRequestPublisher(client).publish(
            request, "pick-branch", base
        )
    return _publish


def test_create_uses_original_title_and_body(publish, github):
    pull = publish()

    assert (pull.number, pull.url) == (7, PULL["html_url"])
    assert github.requests == [(
        "POST", "/repos/octo/repo/pulls", {
            "head": "pick-branch",
            "base": "release/1.1.0",
            "title": "Fix crash on startup",
            "body": "Fixes #41",
            "draft": False,
        },
    )]


def test_title_and_body_templates(publish, github):
    publish(pull_request={
        "title": "[{target_branch}] {old_title}",
        "body": "Cherry-pick of #{old_pull_request_id} ({old_title})",
    })

    payload = github.requests[0][2]
    assert payload["title"] == "[release/1.1.0] Fix crash on startup"
    assert payload["body"] == "Cherry-pick of #42 (Fix crash on startup)"


def test_draft_is_forwarded(publish, github):
    publish(draft=True)
    assert github.requests[0][2]["draft"] is True


def test_labels_assignees_and_reviewers(publish, github):
    publish(pull_request={
        "labels": "backport, auto",
        "assignees": ["jane"],
        "reviewers": "alice,bob",
        "team_reviewers": ["core"],
    })

    assert github.requests[1:] == [
        ("POST", "/repos/octo/repo/issues/7/labels",
         {"labels": ["backport", "auto"]}),
        ("POST", "/repos/octo/repo/issues/7/assignees",
         {"assignees": ["jane"]}),
        ("POST", "/repos/octo/repo/pulls/7/requested_reviewers",
         {"reviewers": ["alice", "bob"]}),
        ("POST", "/repos/octo/repo/pulls/7/requested_reviewers",
         {"team_reviewers": ["core"]}),
    ]


def test_empty_lists_skip_calls(publish, github):
    publish()
    assert github.paths() == ["/repos/octo/repo/pulls"]


def test_inherited_labels_exclude_base_branch(publish, github):
    # Source labels are ("bug", "release/1.0.0")
    publish(
        pull_request={"labels": ["backport", "bug"], "inherit_labels": True},
        base="release/1.0.0",
    )

    assert github.requests[1][2] == {"labels": ["backport", "bug"]}


def test_inherited_labels_are_appended(publish, github):
    publish(
        pull_request={"labels": ["backport"], "inherit_labels": True},
        base="release/1.1.0",
    )

    assert github.requests[1][2] == {
        "labels": ["backport", "bug", "release/1.0.0"],
    }


def test_iteration_labels_are_published(publish, github):
    publish(labels=["backport", "conflict"])
    assert github.requests[1][2] == {"labels": ["backport", "conflict"]}


def test_self_review_is_only_a_warning(publish, github):
    github.fail("/requested_reviewers", 422, {
        "message": "Validation Failed",
        "errors": [ERROR_PR_REVIEW_FROM_AUTHOR + "."],
    })

    pull = publish(pull_request={
        "reviewers": ["author"], "team_reviewers": ["core"],
    })

    assert pull.number == 7
    # Team reviewers are still requested after the individual call fails
    assert github.paths().count(
        "/repos/octo/repo/pulls/7/requested_reviewers"
    ) == 2


def test_other_review_failure_raises(publish, github):
    github.fail("/requested_reviewers", 422, {
        "message": "Validation Failed",
        "errors": [{"message": "Reviews may only be requested from "
                               "collaborators."}],
    })

    with pytest.raises(HostApiError) as exc_info:
        publish(pull_request={"reviewers": ["stranger"]})

    assert exc_info.value.status_code == 422
    assert "collaborators" in str(exc_info.value)


def test_create_failure_raises(publish, github):
    github.fail("/pulls", 422, {
        "message": "Validation Failed",
        "errors": [{"message": "A pull request already exists"}],
    })

    with pytest.raises(HostApiError, match="already exists"):
        publish()


def test_label_failure_is_not_rolled_back(publish, github):
    github.fail("/labels", 404, {"message": "Not Found"})

    with pytest.raises(HostApiError, match="Not Found"):
        publish(pull_request={"labels": ["backport"]})

    assert github.paths()[0] == "/repos/octo/repo/pulls"


def test_client_sends_token(github):
    seen = {}

    def handler(request):
        seen["headers"] = request.headers
        return httpx.Response(201, json=PULL)

    http = httpx.Client(transport=httpx.MockTransport(handler))
    GitHubClient("octo/repo", "t0ken", client=http).create_pull_request(
        head="h", base="b", title="t", body=None
    )

    assert seen["headers"]["Authorization"] == "Bearer t0ken"
    assert seen["headers"]["Accept"] == "application/vnd.github+json"


def test_injected_client_is_not_reconfigured():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        return httpx.Response(201, json=PULL)

    http = httpx.Client(
        base_url="https://proxy.example.com",
        headers={"X-Trace": "1"},
        transport=httpx.MockTransport(handler),
    )
    gh = GitHubClient(
        "octo/repo", "t0ken", api_url="https://ghe.example.com/api/v3/",
        client=http,
    )
    gh.create_pull_request(head="h", base="b", title="t", body=None)

    assert http.base_url == "https://proxy.example.com/"
    assert "Authorization" not in http.headers
    assert seen["url"] == "https://ghe.example.com/api/v3/repos/octo/repo/pulls"
    assert seen["headers"]["Authorization"] == "Bearer t0ken"
    assert seen["headers"]["X-Trace"] == "1"

    gh.close()
    assert not http.is_closed
    http.close()


@pytest.mark.parametrize("repository", [None, "", "octo", "octo/", "a/b/c"])
def test_client_rejects_bad_repository(repository):
    from cherrypicker.core.errors import ConfigurationError

    with pytest.raises(ConfigurationError):
        GitHubClient(repository, "t0ken")
