"""Step outputs in the GitHub Actions $GITHUB_OUTPUT format."""

from __future__ import annotations

import json
from pathlib import Path

from cherrypicker.core.log import logger
from cherrypicker.core.result import RunSummary


def build_outputs(summary: RunSummary) -> dict[str, str]:
    """Outputs for a run: the last pull request plus the full list.

    Returns an empty dict when no pull request was created.
    """
    pulls = summary.pull_requests
    if not pulls:
        return {}

    last = pulls[-1]
    return {
        'data': json.dumps(last.data),
        'number': str(last.number),
        'html_url': last.url,
        'pull_requests': json.dumps([
            {
                'branch': result.branch,
                'number': result.pull_request.number,
                'html_url': result.pull_request.url,
            }
            for result in summary.branches
            if result.pull_request
        ]),
    }


def write_outputs(summary: RunSummary, output_path: Path | None) -> None:
    """Append `name=value` lines to output_path, if one is configured."""
    outputs = build_outputs(summary)
    if output_path is None or not outputs:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")
    logger.debug("Wrote step outputs", path=str(output_path))
