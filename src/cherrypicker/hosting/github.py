"""Minimal GitHub REST client for opening and annotating pull requests."""

from __future__ import annotations

from typing import Any

import httpx

from cherrypicker.core.errors import ConfigurationError, HostApiError
from cherrypicker.core.log import logger
from cherrypicker.core.result import ChangeRequestRef


def split_repository(repository: str | None) -> tuple[str, str]:
    """Split 'owner/repo'.

    Raises:
        ConfigurationError: If repository is unset or malformed
    """
    if not repository or repository.count('/') != 1:
        raise ConfigurationError(
            f"Repository must be 'owner/repo', got {repository!r}"
        )
    owner, repo = repository.split('/')
    if not owner or not repo:
        raise ConfigurationError(
            f"Repository must be 'owner/repo', got {repository!r}"
        )
    return owner, repo


def _error_message(response: httpx.Response) -> str:
    """Flatten GitHub's {"message": ..., "errors": [...]} error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    message = str(body.get('message', '')) if isinstance(body, dict) else ''
    details = []
    for error in (body.get('errors') or []) if isinstance(body, dict) else []:
        if isinstance(error, dict):
            details.append(str(error.get('message') or error.get('code', '')))
        else:
            details.append(str(error))
    if details:
        message = f"{message}: {'; '.join(d for d in details if d)}"
    return message or response.reason_phrase


class GitHubClient:
    """Pulls and issues endpoints of one repository.

    Every call is independent; nothing is rolled back when a later call
    fails.
    """

    def __init__(
        self,
        repository: str | None,
        token: str | None,
        api_url: str = "https://api.github.com",
        timeout: float | None = 30.0,
        client: httpx.Client | None = None,
    ):
        self.owner, self.repo = split_repository(repository)
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        # Sent per request; an injected client is never reconfigured
        self._api_url = api_url.rstrip('/')
        self._headers = headers
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._api_url}/repos/{self.owner}/{self.repo}{path}"
        try:
            response = self._client.post(
                url, json=payload, headers=self._headers
            )
        except httpx.HTTPError as e:
            raise HostApiError(f"POST {url} failed: {e}") from e

        if not response.is_success:
            raise HostApiError(
                _error_message(response), status_code=response.status_code
            )
        return response.json() if response.content else {}

    def create_pull_request(
        self,
        head: str,
        base: str,
        title: str,
        body: str | None,
        draft: bool = False,
    ) -> ChangeRequestRef:
        payload = {
            "head": head,
            "base": base,
            "title": title,
            "draft": draft,
        }
        if body is not None:
            payload["body"] = body

        data = self._post("/pulls", payload)
        logger.info(
            f"Created pull request #{data['number']}: {data['html_url']}"
        )
        return ChangeRequestRef(
            number=data['number'], url=data['html_url'], data=data
        )

    def add_labels(self, number: int, labels: list[str]) -> None:
        self._post(f"/issues/{number}/labels", {"labels": labels})

    def add_assignees(self, number: int, assignees: list[str]) -> None:
        self._post(f"/issues/{number}/assignees", {"assignees": assignees})

    def request_reviewers(
        self,
        number: int,
        reviewers: list[str] | None = None,
        team_reviewers: list[str] | None = None,
    ) -> None:
        payload = {}
        if reviewers:
            payload["reviewers"] = reviewers
        if team_reviewers:
            payload["team_reviewers"] = team_reviewers
        self._post(f"/pulls/{number}/requested_reviewers", payload)
