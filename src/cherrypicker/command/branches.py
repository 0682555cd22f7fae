"""Branches command - preview which branches a run would target."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cherrypicker.core.errors import CherryPickerError
from cherrypicker.core.log import logger


class BranchesCommand(BaseModel):
    """Print the target branches without changing the workspace.

    Reads the remote branches already known locally; run `git fetch`
    first for an up-to-date answer.
    """

    model_config = ConfigDict(populate_by_name=True)

    base_ref: str | None = Field(
        default=None,
        alias="base-ref",
        description=(
            "Reference branch to compare against (e.g. 'release/1.0.0'). "
            "Defaults to the base branch of the triggering pull request"
        ),
    )

    async def run_workflow(self, state: "State") -> int:
        """Print one selected branch per line.

        Returns:
            Exit code (0=success, 1=failure)
        """
        from cherrypicker.git.catalog import BranchCatalog
        from cherrypicker.git.executor import GitExecutor
        from cherrypicker.hosting.event import load_triggering_change

        git_config = state.config.git
        try:
            if not git_config.target_next_branches:
                branches = [git_config.branch]
            else:
                base_ref = self.base_ref or load_triggering_change(
                    state.config.github.event_path
                ).base_ref
                catalog = BranchCatalog(
                    GitExecutor(git_config.workdir), remote=git_config.remote
                )
                branches = catalog.select_newer_branches(
                    git_config.branch, base_ref
                )
        except CherryPickerError as e:
            logger.error(f"Cannot select branches: {e}")
            return 1

        state.runtime.fanout.branches = branches
        for branch in branches:
            print(branch)
        return 0
