"""The merged pull request that triggered the run."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cherrypicker.core.errors import ConfigurationError


class TriggeringChange(BaseModel):
    """Read-only view of the original pull request."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    body: str | None = None
    labels: tuple[str, ...] = ()
    merge_commit_sha: str
    base_ref: str = Field(description="Branch the original was merged into")

    @classmethod
    def from_payload(cls, payload: dict) -> TriggeringChange:
        """Build from a GitHub `pull_request` event payload.

        Raises:
            ConfigurationError: If the payload has no usable pull request
        """
        pull_request = payload.get('pull_request')
        if not pull_request:
            raise ConfigurationError("Event payload has no pull_request")
        if not pull_request.get('merge_commit_sha'):
            raise ConfigurationError(
                f"Pull request #{pull_request.get('number')} has no "
                "merge_commit_sha"
            )

        try:
            return cls(
                number=pull_request['number'],
                title=pull_request.get('title') or "",
                body=pull_request.get('body'),
                labels=tuple(
                    label['name']
                    for label in pull_request.get('labels') or []
                ),
                merge_commit_sha=pull_request['merge_commit_sha'],
                base_ref=(pull_request.get('base') or {}).get('ref', ""),
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise ConfigurationError(
                f"Malformed pull_request in event payload: {e}"
            ) from e


def load_triggering_change(event_path: Path | None) -> TriggeringChange:
    """Read the event payload file GitHub Actions provides.

    Raises:
        ConfigurationError: If the path is unset, unreadable or invalid
    """
    if event_path is None:
        raise ConfigurationError(
            "No event payload: set github.event_path or GITHUB_EVENT_PATH"
        )
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read event payload {event_path}: {e}"
        ) from e
    return TriggeringChange.from_payload(payload)
