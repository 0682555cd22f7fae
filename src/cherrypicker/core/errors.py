"""Exceptions raised by cherrypicker.

Benign conditions (empty cherry-pick, unresolved conflict, self-review
request) are not exceptions; they are absorbed where they are detected.
"""

from __future__ import annotations

from collections.abc import Sequence


class CherryPickerError(Exception):
    """Base class for failures that end a run with a non-zero status."""


class ConfigurationError(CherryPickerError):
    """Run configuration or event payload cannot be used."""


class VcsCommandError(CherryPickerError):
    """A git invocation failed in a way no marker accounts for."""

    def __init__(
        self,
        message: str,
        args: Sequence[str] = (),
        exit_code: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(args)
        self.exit_code = exit_code
        self.stderr = stderr


class InvalidBranchVersion(CherryPickerError, ValueError):
    """Branch name has no prefix/MAJOR.MINOR.PATCH suffix."""

    def __init__(self, branch: str):
        super().__init__(
            f"Branch '{branch}' does not end in a MAJOR.MINOR.PATCH version"
        )
        self.branch = branch


class HostApiError(CherryPickerError):
    """A hosting-service REST call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "CherryPickerError",
    "ConfigurationError",
    "VcsCommandError",
    "InvalidBranchVersion",
    "HostApiError",
]
