"""ConfigureIdentity node - set author and committer for the run."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from cherrypicker.core.config import FanOutState
from cherrypicker.core.log import logger
from cherrypicker.git.executor import GitIdentity
from cherrypicker.workflow.deps import PipelineDeps


@dataclass
class ConfigureIdentity(BaseNode[FanOutState, PipelineDeps, list[str]]):
    """Parse author/committer and apply them to the git executor once."""

    async def run(
        self, ctx: GraphRunContext[FanOutState, PipelineDeps]
    ) -> "SyncRemotes":
        git_config = ctx.deps.config.git

        with logger.span("Configuring the committer and author"):
            identity = GitIdentity.parse(
                git_config.author, git_config.committer
            )
            ctx.deps.git.apply_identity(identity)

        ctx.state.status = "running"
        ctx.state.commit = ctx.deps.commit

        from cherrypicker.workflow.nodes.sync_remotes import SyncRemotes
        return SyncRemotes()
