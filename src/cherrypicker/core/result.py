"""Result types shared by the git layer, the publisher and the CLI."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from cherrypicker.core.errors import VcsCommandError


class CommandResult(BaseModel):
    """Captured output of one git invocation."""

    model_config = ConfigDict(frozen=True)

    args: list[str] = Field(default_factory=list)
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class OutcomeKind(str, Enum):
    CLEAN = "clean"
    EMPTY = "empty"
    CONFLICT = "conflict"
    FATAL = "fatal"


class CherryPickOutcome(BaseModel):
    """Classified result of applying one commit.

    A CONFLICT outcome carries the labels to add and the draft flag to
    force on the branch iteration that produced it.
    """

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    message: str = ""
    labels_to_add: tuple[str, ...] = ()
    force_draft: bool = False

    def raise_for_fatal(self) -> None:
        """Raise VcsCommandError if this outcome is FATAL."""
        if self.kind is OutcomeKind.FATAL:
            raise VcsCommandError(
                self.message,
                exit_code=self.exit_code,
                stderr=self.stderr,
            )


class ChangeRequestRef(BaseModel):
    """Identity of a pull request created on the hosting service."""

    number: int
    url: str
    data: dict = Field(default_factory=dict, repr=False)


class BranchResult(BaseModel):
    """What happened to one target branch during a fan-out run."""

    branch: str
    pr_branch: str
    outcome: OutcomeKind | None = None
    pull_request: ChangeRequestRef | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.pull_request is not None

    @property
    def skipped(self) -> bool:
        """The branch already had the commit; nothing was pushed."""
        return self.error is None and self.outcome is OutcomeKind.EMPTY


class RunSummary(BaseModel):
    """Per-branch results of a whole run, in processing order."""

    branches: list[BranchResult] = Field(default_factory=list)

    @property
    def failed(self) -> list[BranchResult]:
        return [r for r in self.branches if r.error is not None]

    @property
    def skipped(self) -> list[BranchResult]:
        return [r for r in self.branches if r.skipped]

    @property
    def pull_requests(self) -> list[ChangeRequestRef]:
        return [
            r.pull_request for r in self.branches if r.pull_request
        ]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
