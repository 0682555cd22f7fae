"""SyncRemotes node - refresh remote branches before any branch work."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from cherrypicker.core.config import FanOutState
from cherrypicker.core.log import logger
from cherrypicker.workflow.deps import PipelineDeps


@dataclass
class SyncRemotes(BaseNode[FanOutState, PipelineDeps, list[str]]):
    """Run `git remote update` and `git fetch --all`."""

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> "SelectBranches":
        with logger.span("Fetch all branches"):
            ctx.deps.git.execute(['remote', 'update'])
            ctx.deps.git.execute(['fetch', '--all'])

        from cherrypicker.workflow.nodes.select_branches import SelectBranches
        return SelectBranches()
