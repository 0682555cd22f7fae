#!/usr/bin/env python3
"""Cherrypicker CLI - backport a merged pull request to release branches."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from cherrypicker.command.branches import BranchesCommand
from cherrypicker.command.run import RunCommand
from cherrypicker.core.config import State
from cherrypicker.core.log import logger


class CliState(State):
    """Cherry-pick a merged pull request's commit into one or more
    branches and open a pull request for each.

    With --config.git.target_next_branches, every branch under
    --config.git.branch whose MAJOR.MINOR.PATCH version is newer than
    the original pull request's base branch receives the commit.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.git.branch value)
    2. cherrypicker.yaml in the current directory (plus includes)
    3. .env file for secrets
    4. Environment variables
       (CHERRYPICKER_CONFIG__GIT__BRANCH=value)

    GITHUB_TOKEN, GITHUB_REPOSITORY, GITHUB_EVENT_PATH and
    GITHUB_OUTPUT are picked up when running inside GitHub Actions.
    """

    run: CliSubCommand[RunCommand]
    branches: CliSubCommand[BranchesCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes the log file on exit
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
