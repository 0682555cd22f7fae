"""Fan-out orchestration: setup once, then one branch graph per target."""

from __future__ import annotations

from cherrypicker.core.config import (
    BranchIterationState,
    FanOutState,
    RunConfig,
)
from cherrypicker.core.errors import CherryPickerError
from cherrypicker.core.log import logger
from cherrypicker.core.result import BranchResult, RunSummary
from cherrypicker.workflow.deps import PipelineDeps

# Each entry is run with ignore_nonzero_exit; any of them may have
# nothing to do.
CLEANUP_COMMANDS = (
    ['cherry-pick', '--abort'],
    ['reset', '--hard'],
    ['clean', '-fd'],
)


def pr_branch_name(config: RunConfig, branch: str, commit: str) -> str:
    """Explicit override, or 'cherry-pick-<branch>-<commit>'.

    When fanning out, the override is suffixed with the target branch so
    every branch gets its own name.
    """
    override = config.git.cherry_pick_branch
    if override:
        if config.git.target_next_branches:
            return f'{override}-{branch}'
        return override
    return f'cherry-pick-{branch}-{commit}'


class FanOutOrchestrator:
    """Runs the setup graph, then the branch graph for each target branch.

    Branches are processed strictly one after the other in selection
    order. Every branch gets a freshly built BranchIterationState, so
    labels and draft forced by a conflict never leak into the next one.

    By default the first failure propagates and aborts the run. With
    continue_on_error the failure is recorded in the summary, the
    workspace is cleaned and the next branch proceeds.
    """

    def __init__(self, deps: PipelineDeps, state: FanOutState | None = None):
        self.deps = deps
        self.state = state if state is not None else FanOutState()

    @property
    def config(self) -> RunConfig:
        return self.deps.config

    async def select(self) -> list[str]:
        """Run identity, sync and selection; return the target branches."""
        from cherrypicker.workflow.graph import create_setup_workflow
        from cherrypicker.workflow.nodes.configure_identity import (
            ConfigureIdentity,
        )

        workflow = create_setup_workflow()
        result = await workflow.run(
            ConfigureIdentity(), state=self.state, deps=self.deps
        )
        return result.output

    async def run(self) -> RunSummary:
        """Process every selected branch and return the run summary.

        Raises:
            CherryPickerError: First failure, unless continue_on_error
        """
        try:
            branches = await self.select()
            for branch in branches:
                await self._run_branch(branch)
        except Exception:
            self.state.status = "failed"
            raise

        summary = self.state.summary
        self.state.status = "failed" if summary.failed else "complete"
        logger.info(
            f"Processed {len(summary.branches)} branch(es): "
            f"{len(summary.pull_requests)} pull request(s) opened, "
            f"{len(summary.skipped)} already up to date, "
            f"{len(summary.failed)} failed"
        )
        return summary

    async def _run_branch(self, branch: str) -> None:
        from cherrypicker.workflow.graph import create_branch_workflow
        from cherrypicker.workflow.nodes.create_branch import (
            CreateLocalBranch,
        )

        pr_branch = pr_branch_name(self.config, branch, self.deps.commit)
        iteration = BranchIterationState.start(self.config, branch, pr_branch)
        self.state.current = iteration
        entry = BranchResult(branch=branch, pr_branch=pr_branch)
        self.state.summary.branches.append(entry)

        with logger.span(f"Cherry pick into {branch}", branch=branch):
            try:
                result = await create_branch_workflow().run(
                    CreateLocalBranch(), state=self.state, deps=self.deps
                )
            except CherryPickerError as e:
                entry.outcome = iteration.outcome
                entry.error = str(e)
                if not self.config.continue_on_error:
                    raise
                logger.error(f"Cherry pick into {branch} failed: {e}")
                self._clean_workspace()
                return
            finally:
                self.state.current = None

        entry.outcome = iteration.outcome
        entry.pull_request = result.output

    def _clean_workspace(self) -> None:
        with logger.span("Cleaning workspace"):
            for args in CLEANUP_COMMANDS:
                self.deps.git.execute(args, ignore_nonzero_exit=True)
