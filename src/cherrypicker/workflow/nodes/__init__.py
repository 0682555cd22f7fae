"""Workflow nodes for the setup and per-branch graphs."""

from cherrypicker.workflow.nodes.cherry_pick import CherryPick
from cherrypicker.workflow.nodes.configure_identity import ConfigureIdentity
from cherrypicker.workflow.nodes.create_branch import CreateLocalBranch
from cherrypicker.workflow.nodes.publish import Publish
from cherrypicker.workflow.nodes.push import Push
from cherrypicker.workflow.nodes.select_branches import SelectBranches
from cherrypicker.workflow.nodes.sync_remotes import SyncRemotes

__all__ = [
    "ConfigureIdentity",
    "SyncRemotes",
    "SelectBranches",
    "CreateLocalBranch",
    "CherryPick",
    "Push",
    "Publish",
]
