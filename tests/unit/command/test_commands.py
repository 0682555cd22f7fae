"""Tests for the run and branches subcommands."""

import asyncio
import json
from types import SimpleNamespace

from cherrypicker.command.branches import BranchesCommand
from cherrypicker.command.run import RunCommand
from cherrypicker.core.config import Runtime


def _state(config):
    return SimpleNamespace(config=config, runtime=Runtime())


def test_run_without_event_payload_fails(make_config):
    state = _state(make_config())

    assert asyncio.run(RunCommand().run_workflow(state)) == 1
    assert state.runtime.fanout.status == "pending"


def test_run_with_invalid_event_payload_fails(make_config, tmp_path):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"action": "opened"}), encoding="utf-8")
    config = make_config()
    config.github = config.github.model_copy(update={"event_path": event})

    assert asyncio.run(RunCommand().run_workflow(_state(config))) == 1


def test_branches_without_fan_out_prints_configured_branch(make_config,
                                                          capsys):
    state = _state(make_config())

    assert asyncio.run(BranchesCommand().run_workflow(state)) == 0
    assert capsys.readouterr().out == "release/1.0.0\n"
    assert state.runtime.fanout.branches == ["release/1.0.0"]


def test_branches_fan_out_needs_a_reference(make_config):
    config = make_config(
        git={"branch": "release", "target_next_branches": True}
    )

    # No base-ref and no event payload to read it from
    assert asyncio.run(
        BranchesCommand().run_workflow(_state(config))
    ) == 1


def test_branches_rejects_unversioned_reference(make_config):
    config = make_config(
        git={"branch": "release", "target_next_branches": True}
    )

    assert asyncio.run(
        BranchesCommand(base_ref="main").run_workflow(_state(config))
    ) == 1
