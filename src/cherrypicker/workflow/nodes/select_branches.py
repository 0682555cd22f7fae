"""SelectBranches node - decide which branches receive the commit."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from cherrypicker.core.config import FanOutState, RunConfig
from cherrypicker.core.log import logger
from cherrypicker.git.catalog import BranchCatalog
from cherrypicker.hosting.event import TriggeringChange
from cherrypicker.workflow.deps import PipelineDeps


def branches_to_cherry_pick(
    config: RunConfig,
    catalog: BranchCatalog,
    change: TriggeringChange,
) -> list[str]:
    """The configured branch, or every newer branch when fanning out."""
    if config.git.target_next_branches:
        return catalog.select_newer_branches(
            config.git.branch, change.base_ref
        )
    return [config.git.branch]


@dataclass
class SelectBranches(BaseNode[FanOutState, PipelineDeps, list[str]]):
    """Store the selected target branches and end the setup phase."""

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> End[list[str]]:
        branches = branches_to_cherry_pick(
            ctx.deps.config, ctx.deps.catalog, ctx.deps.change
        )
        ctx.state.branches = branches

        if branches:
            logger.info(
                f"Cherry pick into branches: {', '.join(branches)}"
            )
        else:
            logger.info("No target branches selected; nothing to do")
        return End(branches)
