"""CreateLocalBranch node - branch off the target's remote tip."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from cherrypicker.core.config import FanOutState
from cherrypicker.core.log import logger
from cherrypicker.core.result import ChangeRequestRef
from cherrypicker.workflow.deps import PipelineDeps


@dataclass
class CreateLocalBranch(
    BaseNode[FanOutState, PipelineDeps, ChangeRequestRef | None]
):
    """`git checkout -b <pr-branch> <remote>/<branch>`."""

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> "CherryPick":
        iteration = ctx.state.current
        if iteration is None:
            raise ValueError("No branch iteration in progress")

        remote = ctx.deps.config.git.remote
        with logger.span(
            f"Create new branch {iteration.pr_branch} from {iteration.branch}"
        ):
            ctx.deps.git.execute([
                'checkout', '-b', iteration.pr_branch,
                f'{remote}/{iteration.branch}',
            ])

        from cherrypicker.workflow.nodes.cherry_pick import CherryPick
        return CherryPick()
