"""CLI command modules for cherrypicker."""

from cherrypicker.command.branches import BranchesCommand
from cherrypicker.command.run import RunCommand

__all__ = ["BranchesCommand", "RunCommand"]
