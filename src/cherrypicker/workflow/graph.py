"""Graph workflow definitions."""

from pydantic_graph import Graph

from cherrypicker.core.config import FanOutState
from cherrypicker.core.log import logger


def create_setup_workflow():
    """Create the once-per-run setup graph.

    ConfigureIdentity → SyncRemotes → SelectBranches → End(branches)

    Returns:
        Graph whose run output is the list of target branches
    """
    logger.debug("Building setup workflow graph")

    # Import nodes (lazy to avoid circular imports)
    from cherrypicker.workflow.nodes.configure_identity import (
        ConfigureIdentity,
    )
    from cherrypicker.workflow.nodes.select_branches import SelectBranches
    from cherrypicker.workflow.nodes.sync_remotes import SyncRemotes

    return Graph(
        nodes=(
            ConfigureIdentity,
            SyncRemotes,
            SelectBranches,
        ),
        state_type=FanOutState,
    )


def create_branch_workflow():
    """Create the per-branch graph, run once for every target branch.

    CreateLocalBranch → CherryPick → Push → Publish → End(pull request)
    CherryPick ends with End(None) when the commit is already present.

    Returns:
        Graph whose run output is the opened ChangeRequestRef, or None
    """
    logger.debug("Building branch workflow graph")

    from cherrypicker.workflow.nodes.cherry_pick import CherryPick
    from cherrypicker.workflow.nodes.create_branch import CreateLocalBranch
    from cherrypicker.workflow.nodes.publish import Publish
    from cherrypicker.workflow.nodes.push import Push

    return Graph(
        nodes=(
            CreateLocalBranch,
            CherryPick,
            Push,
            Publish,
        ),
        state_type=FanOutState,
    )
