"""Collaborators handed to every workflow node."""

from __future__ import annotations

from dataclasses import dataclass

from cherrypicker.core.config import RunConfig
from cherrypicker.git.catalog import BranchCatalog
from cherrypicker.git.engine import CherryPickEngine
from cherrypicker.git.executor import GitExecutor
from cherrypicker.hosting.event import TriggeringChange
from cherrypicker.hosting.publisher import PullRequestPublisher


@dataclass
class PipelineDeps:
    """Injected implementations; tests pass fakes for any of them."""

    config: RunConfig
    change: TriggeringChange
    git: GitExecutor
    catalog: BranchCatalog
    engine: CherryPickEngine
    publisher: PullRequestPublisher

    @property
    def commit(self) -> str:
        return self.change.merge_commit_sha
