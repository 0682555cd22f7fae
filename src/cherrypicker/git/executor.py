"""Git process boundary: run git in the workspace and capture output."""

from __future__ import annotations

import re
import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from cherrypicker.core.errors import ConfigurationError, VcsCommandError
from cherrypicker.core.log import logger
from cherrypicker.core.result import CommandResult
from cherrypicker.core.runner import Runner

_DISPLAY_NAME_EMAIL = re.compile(r'^([^<]+)\s*<([^>]+)>$')


@dataclass(frozen=True)
class Person:
    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


def parse_display_name_email(value: str) -> Person:
    """Parse 'Display Name <email@address.com>'.

    Raises:
        ConfigurationError: If value is not in that form
    """
    match = _DISPLAY_NAME_EMAIL.match(value.strip())
    if not match:
        raise ConfigurationError(
            f"The format of '{value}' is not a valid email address "
            "with display name"
        )
    return Person(name=match.group(1).strip(), email=match.group(2).strip())


@dataclass(frozen=True)
class GitIdentity:
    """Author and committer used for every commit the run creates."""

    author: Person
    committer: Person

    @classmethod
    def parse(cls, author: str, committer: str) -> GitIdentity:
        return cls(
            author=parse_display_name_email(author),
            committer=parse_display_name_email(committer),
        )

    def env(self) -> dict[str, str]:
        return {
            "GIT_AUTHOR_NAME": self.author.name,
            "GIT_AUTHOR_EMAIL": self.author.email,
            "GIT_COMMITTER_NAME": self.committer.name,
            "GIT_COMMITTER_EMAIL": self.committer.email,
        }


class GitExecutor:
    """Runs `git <args>` in one working directory.

    The identity is applied once per run and then passed to every
    invocation through the environment, never written to git config.
    """

    def __init__(
        self,
        workdir: Path,
        runner: Runner | None = None,
        log_level: str = "debug",
    ):
        self.workdir = Path(workdir)
        self.runner = runner or Runner()
        self.log_level = log_level
        self.identity: GitIdentity | None = None

    def apply_identity(self, identity: GitIdentity) -> None:
        self.identity = identity
        logger.info(
            f"Configured git committer as '{identity.committer}' "
            f"and author as '{identity.author}'"
        )

    def execute(
        self,
        args: Sequence[str],
        ignore_nonzero_exit: bool = False,
    ) -> CommandResult:
        """Run git with args.

        Args:
            args: Arguments after `git`
            ignore_nonzero_exit: Return the result instead of raising
                when git exits non-zero

        Returns:
            CommandResult with stdout, stderr and exit code

        Raises:
            VcsCommandError: git exited non-zero and
                ignore_nonzero_exit is False
        """
        args = list(args)
        command = ' '.join(shlex.quote(part) for part in ['git', *args])
        logger.debug("git", command=command, cwd=str(self.workdir))

        raw = self.runner.execute(
            command,
            cwd=self.workdir,
            log_level=self.log_level,
            check=False,
            env=self.identity.env() if self.identity else None,
        )
        result = CommandResult(
            args=args,
            stdout=raw.stdout,
            stderr=raw.stderr,
            exit_code=raw.exited,
        )

        if not result.ok and not ignore_nonzero_exit:
            raise VcsCommandError(
                f"git {args[0] if args else ''} failed with exit code "
                f"{result.exit_code}: {result.stderr.strip()}",
                args=args,
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return result
