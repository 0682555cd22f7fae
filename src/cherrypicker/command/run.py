"""Run command - cherry-pick the merged pull request into target branches."""

from __future__ import annotations

from pydantic import BaseModel

from cherrypicker.core.errors import CherryPickerError
from cherrypicker.core.log import logger


class RunCommand(BaseModel):
    """Cherry-pick the triggering pull request's merge commit.

    Creates one branch per target, applies the commit, pushes it and
    opens a pull request, then writes step outputs when
    github.output_path (or $GITHUB_OUTPUT) is set.

    All configuration comes from cherrypicker.yaml, .env, environment
    variables or CLI flags.
    """

    async def run_workflow(self, state: "State") -> int:
        """Run the fan-out workflow.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code (0=success, 1=failure)
        """
        from cherrypicker.git.catalog import BranchCatalog
        from cherrypicker.git.engine import CherryPickEngine
        from cherrypicker.git.executor import GitExecutor
        from cherrypicker.hosting.event import load_triggering_change
        from cherrypicker.hosting.github import GitHubClient
        from cherrypicker.hosting.outputs import write_outputs
        from cherrypicker.hosting.publisher import PullRequestPublisher
        from cherrypicker.workflow.deps import PipelineDeps
        from cherrypicker.workflow.orchestrator import FanOutOrchestrator

        config = state.config
        try:
            change = load_triggering_change(config.github.event_path)
            logger.info(
                f"Cherry picking {change.merge_commit_sha} from "
                f"#{change.number} into {config.git.branch}"
            )

            git = GitExecutor(config.git.workdir)
            with GitHubClient(
                config.github.repository,
                config.github.token,
                api_url=config.github.api_url,
                timeout=config.github.timeout,
            ) as client:
                deps = PipelineDeps(
                    config=config,
                    change=change,
                    git=git,
                    catalog=BranchCatalog(git, remote=config.git.remote),
                    engine=CherryPickEngine(git),
                    publisher=PullRequestPublisher(client),
                )
                orchestrator = FanOutOrchestrator(
                    deps, state=state.runtime.fanout
                )
                summary = await orchestrator.run()
        except CherryPickerError as e:
            logger.error(f"Cherry pick failed: {e}")
            return 1

        for result in summary.failed:
            logger.error(f"{result.branch}: {result.error}")

        write_outputs(summary, config.github.output_path)
        return summary.exit_code
