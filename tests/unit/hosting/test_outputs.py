"""Tests for $GITHUB_OUTPUT step outputs."""

import json

from cherrypicker.core.result import (
    BranchResult,
    ChangeRequestRef,
    OutcomeKind,
    RunSummary,
)
from cherrypicker.hosting.outputs import build_outputs, write_outputs


def _summary():
    return RunSummary(branches=[
        BranchResult(
            branch="release/1.1.0",
            pr_branch="pick-1",
            outcome=OutcomeKind.CLEAN,
            pull_request=ChangeRequestRef(
                number=7, url="https://github.com/o/r/pull/7",
                data={"number": 7},
            ),
        ),
        BranchResult(
            branch="release/1.2.0",
            pr_branch="pick-2",
            error="Unexpected error: boom",
        ),
        BranchResult(
            branch="release/2.0.0",
            pr_branch="pick-3",
            outcome=OutcomeKind.CONFLICT,
            pull_request=ChangeRequestRef(
                number=9, url="https://github.com/o/r/pull/9",
                data={"number": 9, "draft": True},
            ),
        ),
    ])


def test_build_outputs_reports_last_pull_request():
    outputs = build_outputs(_summary())

    assert outputs["number"] == "9"
    assert outputs["html_url"] == "https://github.com/o/r/pull/9"
    assert json.loads(outputs["data"]) == {"number": 9, "draft": True}
    assert json.loads(outputs["pull_requests"]) == [
        {"branch": "release/1.1.0", "number": 7,
         "html_url": "https://github.com/o/r/pull/7"},
        {"branch": "release/2.0.0", "number": 9,
         "html_url": "https://github.com/o/r/pull/9"},
    ]


def test_build_outputs_without_pull_requests():
    assert build_outputs(RunSummary()) == {}


def test_summary_exit_code():
    assert _summary().exit_code == 1
    assert [r.branch for r in _summary().failed] == ["release/1.2.0"]
    assert RunSummary().exit_code == 0


def test_write_outputs_appends(tmp_path):
    output = tmp_path / "github_output"
    output.write_text("existing=1\n", encoding="utf-8")

    write_outputs(_summary(), output)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "existing=1"
    assert "number=9" in lines
    assert "html_url=https://github.com/o/r/pull/9" in lines


def test_write_outputs_without_path_is_noop(tmp_path):
    write_outputs(_summary(), None)
    assert list(tmp_path.iterdir()) == []


def test_empty_branch_counts_as_skipped_not_failed():
    summary = RunSummary(branches=[
        BranchResult(
            branch="release/1.1.0",
            pr_branch="pick-1",
            outcome=OutcomeKind.EMPTY,
        ),
    ])

    assert [r.branch for r in summary.skipped] == ["release/1.1.0"]
    assert summary.failed == []
    assert summary.exit_code == 0
    assert build_outputs(summary) == {}
