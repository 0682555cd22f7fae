"""Publish node - open the follow-up pull request."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from cherrypicker.core.config import FanOutState
from cherrypicker.core.result import ChangeRequestRef
from cherrypicker.hosting.publisher import PullRequestRequest
from cherrypicker.workflow.deps import PipelineDeps


@dataclass
class Publish(BaseNode[FanOutState, PipelineDeps, ChangeRequestRef | None]):
    """Hand this branch's request to the publisher."""

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> End[ChangeRequestRef]:
        iteration = ctx.state.current
        request = PullRequestRequest.build(
            ctx.deps.config, iteration, ctx.deps.change
        )
        pull = ctx.deps.publisher.publish(
            request, iteration.pr_branch, iteration.branch
        )
        return End(pull)
