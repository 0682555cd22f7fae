"""Application state and configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any

import platformdirs
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cherrypicker.core.base import BaseConfig, BaseState, FrozenConfig
from cherrypicker.core.log import Logger
from cherrypicker.core.result import CherryPickOutcome, OutcomeKind, RunSummary
from cherrypicker.core.yaml_settings import YamlWithIncludesSettingsSource


def _split_csv(value: Any) -> Any:
    """Accept 'a, b,c' as well as a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(',') if item.strip()]
    return value


CsvList = Annotated[list[str], NoDecode, BeforeValidator(_split_csv)]


def _env(name: str, default: str | None = None):
    return lambda: os.environ.get(name, default)


# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI, frozen once built)
# ============================================================

class GitConfig(FrozenConfig):
    """Workspace, target branch and cherry-pick settings."""

    workdir: Path = Field(
        default_factory=Path.cwd,
        description="Path to the local git working directory",
    )
    remote: str = Field(
        default="origin",
        description="Remote that target branches are read from and "
                    "pushed to",
    )
    branch: str = Field(
        description=(
            "Target branch (e.g. 'release/1.2.0'), or the branch prefix "
            "to scan (e.g. 'release') when target_next_branches is set"
        )
    )
    author: str = Field(
        default="github-actions[bot] "
                "<41898282+github-actions[bot]@users.noreply.github.com>",
        description="Commit author, formatted 'Display Name <email>'",
    )
    committer: str = Field(
        default="GitHub <noreply@github.com>",
        description="Committer, formatted 'Display Name <email>'",
    )
    cherry_pick_branch: str = Field(
        default="",
        description=(
            "Name of the branch holding the cherry-pick. Empty means "
            "'cherry-pick-<branch>-<commit>'. When fanning out, the "
            "target branch is appended: '<name>-<branch>'"
        ),
    )
    force: bool = Field(
        default=False,
        description="Force-push the cherry-pick branch",
    )
    unresolved_conflict: bool = Field(
        default=False,
        description=(
            "Commit conflicts with their markers instead of resolving "
            "them with the 'theirs' strategy"
        ),
    )
    target_next_branches: bool = Field(
        default=False,
        description=(
            "Cherry-pick into every branch under 'branch' whose version "
            "is newer than the triggering pull request's base branch"
        ),
    )


class PullRequestConfig(FrozenConfig):
    """Shape of the pull requests opened for each target branch."""

    title: str = Field(
        default="",
        description=(
            "Title template. Empty reuses the original title. "
            "Placeholders: {old_title}, {old_pull_request_id}, "
            "{target_branch}"
        ),
    )
    body: str = Field(
        default="",
        description=(
            "Body template. Empty reuses the original body. Same "
            "placeholders as title"
        ),
    )
    labels: CsvList = Field(
        default_factory=list,
        description="Labels to add (comma-separated)",
    )
    inherit_labels: bool = Field(
        default=False,
        description="Also add the original pull request's labels",
    )
    assignees: CsvList = Field(
        default_factory=list,
        description="Assignees (comma-separated)",
    )
    reviewers: CsvList = Field(
        default_factory=list,
        description="Reviewers (comma-separated)",
    )
    team_reviewers: CsvList = Field(
        default_factory=list,
        description="Team reviewers (comma-separated team slugs)",
    )
    draft: bool = Field(
        default=False,
        description="Open pull requests as drafts",
    )


class GitHubConfig(FrozenConfig):
    """Hosting service access and the triggering event."""

    model_config = ConfigDict(validate_default=True)

    token: str | None = Field(
        default_factory=_env("GITHUB_TOKEN"),
        description="API token (defaults to $GITHUB_TOKEN)",
        repr=False,
    )
    repository: str | None = Field(
        default_factory=_env("GITHUB_REPOSITORY"),
        description="'owner/repo' (defaults to $GITHUB_REPOSITORY)",
    )
    api_url: str = Field(
        default_factory=_env("GITHUB_API_URL", "https://api.github.com"),
        description="REST API base URL (defaults to $GITHUB_API_URL)",
    )
    event_path: Path | None = Field(
        default_factory=_env("GITHUB_EVENT_PATH"),
        description=(
            "JSON event payload holding the merged pull request "
            "(defaults to $GITHUB_EVENT_PATH)"
        ),
    )
    output_path: Path | None = Field(
        default_factory=_env("GITHUB_OUTPUT"),
        description="File receiving step outputs (defaults to $GITHUB_OUTPUT)",
    )
    timeout: float | None = Field(
        default=30.0,
        description="HTTP timeout in seconds (null waits forever)",
    )


class RunConfig(BaseConfig):
    """Everything a run needs, loaded once from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    git: GitConfig = Field(description="Git workspace and branch settings")
    pull_request: PullRequestConfig = Field(
        default_factory=PullRequestConfig,
        description="Pull request contents",
    )
    github: GitHubConfig = Field(
        default_factory=GitHubConfig,
        description="Hosting service settings",
    )

    continue_on_error: bool = Field(
        default=False,
        description=(
            "Keep going with the remaining branches when one fails, "
            "and report all failures at the end"
        ),
    )
    run_name: str = Field(
        default="run",
        description="Name used for the log directory and service name",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "cherrypicker"
        ),
        description="Root directory for log files",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> RunConfig:
        """Initialize the global logger singleton from this config."""
        from cherrypicker.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            level=self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
        )
        return self

    def close(self):
        """Close the global logger as well as child sections."""
        from cherrypicker.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during a run)
# ============================================================

class BranchIterationState(BaseState):
    """State owned by exactly one target branch.

    Built fresh from RunConfig for every branch; the lists are copies,
    so a conflict on one branch never shows up on the next.
    """

    branch: str
    pr_branch: str
    labels: list[str] = Field(default_factory=list)
    draft: bool = False
    outcome: OutcomeKind | None = None

    @classmethod
    def start(
        cls, config: RunConfig, branch: str, pr_branch: str
    ) -> BranchIterationState:
        return cls(
            branch=branch,
            pr_branch=pr_branch,
            labels=list(config.pull_request.labels),
            draft=config.pull_request.draft,
        )

    def record(self, outcome: CherryPickOutcome) -> None:
        """Fold a cherry-pick outcome into this branch's state."""
        self.outcome = outcome.kind
        for label in outcome.labels_to_add:
            if label not in self.labels:
                self.labels.append(label)
        if outcome.force_draft:
            self.draft = True


class FanOutState(BaseState):
    """Run-wide progress of the fan-out."""

    commit: str | None = Field(
        default=None,
        description="Commit being cherry-picked",
    )
    branches: list[str] = Field(
        default_factory=list,
        description="Target branches selected for this run",
    )
    current: BranchIterationState | None = Field(
        default=None,
        description="State of the branch being processed",
    )
    summary: RunSummary = Field(
        default_factory=RunSummary,
        description="Results of processed branches",
    )
    status: str = Field(
        default="pending",
        description="pending, running, complete, failed",
    )


class Runtime(BaseModel):
    """All runtime state, grouped by workflow."""

    fanout: FanOutState = Field(
        default_factory=FanOutState,
        description="Fan-out workflow runtime state",
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state for one invocation.

    - config: RunConfig loaded from YAML/env/CLI
    - runtime: state mutated while the run executes
    """

    config: RunConfig = Field(
        description="Run configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during the run)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="cherrypicker.yaml",
        env_file=".env",
        env_prefix="CHERRYPICKER_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init, YAML, .env, environment, secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )


__all__ = [
    "GitConfig",
    "PullRequestConfig",
    "GitHubConfig",
    "RunConfig",
    "BranchIterationState",
    "FanOutState",
    "Runtime",
    "State",
]
