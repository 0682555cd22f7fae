"""Pytest configuration and fixtures for cherrypicker tests."""

import tempfile
from pathlib import Path

import pytest
from invoke import Result

from cherrypicker.core.log import ConsoleSink, setup_logger
from cherrypicker.core.result import ChangeRequestRef
from cherrypicker.git.executor import GitExecutor
from cherrypicker.hosting.event import TriggeringChange

COMMIT = "abc123"


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure console-only logging for the whole test session.

    Nothing is sent to logfire.dev and no log file is written.
    """
    test_log_root = Path(tempfile.gettempdir()) / "cherrypicker-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


class FakeRunner:
    """Stands in for core.runner.Runner and records every command.

    Responses are matched by command prefix, first match wins. A prefix
    given several results returns them in turn and then repeats the
    last one.
    """

    def __init__(self):
        self.commands = []
        self.envs = []
        self._responses = []

    def respond(self, prefix, *results):
        self._responses.append((prefix, list(results)))

    def result(self, stdout="", stderr="", exited=0):
        return Result(stdout=stdout, stderr=stderr, exited=exited)

    def execute(self, command, cwd=None, timeout=None, log_level=None,
                check=True, env=None):
        self.commands.append(command)
        self.envs.append(env)
        for prefix, results in self._responses:
            if command.startswith(prefix):
                return results.pop(0) if len(results) > 1 else results[0]
        return Result(command=command)

    def matching(self, prefix):
        return [c for c in self.commands if c.startswith(prefix)]


class FakePublisher:
    """Records publish() calls and hands out increasing PR numbers.

    Branches listed in fail_on raise the given exception instead.
    """

    def __init__(self, fail_on=None, error=None):
        self.calls = []
        self.fail_on = set(fail_on or ())
        self.error = error

    def publish(self, request, pr_branch, base_branch):
        self.calls.append((request, pr_branch, base_branch))
        if base_branch in self.fail_on:
            raise self.error
        number = 100 + len(self.calls)
        return ChangeRequestRef(
            number=number,
            url=f"https://github.com/octo/repo/pull/{number}",
            data={"number": number},
        )


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def git(runner, tmp_path):
    """A real GitExecutor driving the fake runner."""
    return GitExecutor(tmp_path, runner=runner)


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def change():
    """A merged pull request into release/1.0.0."""
    return TriggeringChange(
        number=42,
        title="Fix crash on startup",
        body="Fixes #41",
        labels=("bug", "release/1.0.0"),
        merge_commit_sha=COMMIT,
        base_ref="release/1.0.0",
    )


@pytest.fixture
def make_config(tmp_path):
    """Build a RunConfig with a console-only logger and overrides."""
    from cherrypicker.core.config import RunConfig
    from cherrypicker.core.log import FileSink, Logger

    def _make(git=None, pull_request=None, **kwargs):
        return RunConfig(
            logger=Logger(
                console=ConsoleSink(level="debug"),
                file=FileSink(enabled=False),
                logfire={"enabled": False},
            ),
            git={"workdir": tmp_path, "branch": "release/1.0.0", **(git or {})},
            pull_request=pull_request or {},
            github={
                "repository": "octo/repo",
                "token": "t0ken",
                "event_path": None,
                "output_path": None,
            },
            log_root=tmp_path / "logs",
            run_name="test",
            **kwargs,
        )

    return _make
