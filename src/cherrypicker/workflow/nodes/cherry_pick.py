"""CherryPick node - apply the commit and fold the outcome into state."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from cherrypicker.core.config import FanOutState
from cherrypicker.core.log import logger
from cherrypicker.core.result import ChangeRequestRef, OutcomeKind
from cherrypicker.git.engine import Strategy
from cherrypicker.workflow.deps import PipelineDeps


@dataclass
class CherryPick(BaseNode[FanOutState, PipelineDeps, ChangeRequestRef | None]):
    """Run the engine; a FATAL outcome raises VcsCommandError.

    An EMPTY outcome means the branch already has the change. The
    pending cherry-pick is aborted and the branch ends without a push
    or a pull request.
    """

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> Push | End[None]:
        iteration = ctx.state.current
        strategy = Strategy.from_flag(ctx.deps.config.git.unresolved_conflict)

        outcome = ctx.deps.engine.apply(strategy, ctx.deps.commit)
        iteration.record(outcome)
        outcome.raise_for_fatal()

        if outcome.kind is OutcomeKind.EMPTY:
            logger.info(
                f"Commit is already part of {iteration.branch}; "
                "skipping push and pull request"
            )
            ctx.deps.git.execute(
                ['cherry-pick', '--abort'], ignore_nonzero_exit=True
            )
            return End(None)

        if outcome.kind is OutcomeKind.CONFLICT:
            logger.warning(
                f"Conflicts left unresolved on {iteration.pr_branch}; "
                "pull request will be a draft"
            )

        from cherrypicker.workflow.nodes.push import Push
        return Push()
