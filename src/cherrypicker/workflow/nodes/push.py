"""Push node - publish the cherry-pick branch to the remote."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from cherrypicker.core.config import FanOutState
from cherrypicker.core.log import logger
from cherrypicker.core.result import ChangeRequestRef
from cherrypicker.workflow.deps import PipelineDeps


def push_args(remote: str, pr_branch: str, force: bool) -> list[str]:
    args = ['push', '-u', remote, pr_branch]
    if force:
        args.append('--force')
    return args


@dataclass
class Push(BaseNode[FanOutState, PipelineDeps, ChangeRequestRef | None]):
    """`git push -u <remote> <pr-branch> [--force]`."""

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> "Publish":
        git_config = ctx.deps.config.git

        with logger.span("Push new branch to remote"):
            ctx.deps.git.execute(push_args(
                git_config.remote,
                ctx.state.current.pr_branch,
                git_config.force,
            ))

        from cherrypicker.workflow.nodes.publish import Publish
        return Publish()
