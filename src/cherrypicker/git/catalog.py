"""Remote branch discovery and version ordering."""

from __future__ import annotations

import re
from dataclasses import dataclass

from cherrypicker.core.errors import InvalidBranchVersion
from cherrypicker.core.log import logger
from cherrypicker.git.executor import GitExecutor

_VERSION_SUFFIX = re.compile(r'^(\d+)\.(\d+)\.(\d+)$')


@dataclass(frozen=True)
class BranchVersion:
    """A branch name split into prefix and MAJOR.MINOR.PATCH."""

    prefix: str
    major: int
    minor: int
    patch: int

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @classmethod
    def parse(cls, branch: str) -> BranchVersion | None:
        """Parse `prefix/X.Y.Z`; None when the suffix is not three integers.

        Examples:
            "release/1.2.3" → BranchVersion("release", 1, 2, 3)
            "release/1.2"   → None
            "main"          → None
        """
        prefix, sep, suffix = branch.rpartition('/')
        if not sep:
            return None
        match = _VERSION_SUFFIX.match(suffix)
        if not match:
            return None
        major, minor, patch = (int(part) for part in match.groups())
        return cls(prefix=prefix, major=major, minor=minor, patch=patch)

    def is_newer_than(self, other: BranchVersion) -> bool:
        return self.key > other.key


class BranchCatalog:
    """Lists remote branches under a pattern and filters them by version."""

    def __init__(self, git: GitExecutor, remote: str = "origin"):
        self.git = git
        self.remote = remote

    def list_branches(self, pattern: str) -> list[str]:
        """Remote branches under `pattern/`, in the order git reports them.

        Args:
            pattern: Branch prefix, e.g. 'release'

        Returns:
            Branch names without the remote prefix, e.g. 'release/1.0.0'

        Raises:
            VcsCommandError: If git for-each-ref fails
        """
        result = self.git.execute([
            'for-each-ref',
            '--format=%(refname:short)',
            f'refs/remotes/{self.remote}/{pattern}',
        ])

        remote_prefix = f'{self.remote}/'
        branches = []
        for line in result.stdout.splitlines():
            name = line.strip().strip('\'"')
            if not name:
                continue
            if name.startswith(remote_prefix):
                name = name[len(remote_prefix):]
            branches.append(name)
        return branches

    @staticmethod
    def is_newer(reference: str, candidate: str) -> bool:
        """True if candidate's version is strictly greater than reference's.

        Branches without a MAJOR.MINOR.PATCH suffix are never newer
        than anything, and nothing is newer than them.
        """
        ref_version = BranchVersion.parse(reference)
        cand_version = BranchVersion.parse(candidate)
        if ref_version is None or cand_version is None:
            return False
        return cand_version.is_newer_than(ref_version)

    def select_newer_branches(
        self, pattern: str, reference: str
    ) -> list[str]:
        """Branches under pattern whose version is newer than reference.

        Catalog order is preserved; nothing is sorted or deduplicated.

        Raises:
            InvalidBranchVersion: If reference has no version suffix
            VcsCommandError: If listing branches fails
        """
        if BranchVersion.parse(reference) is None:
            raise InvalidBranchVersion(reference)

        selected = []
        for branch in self.list_branches(pattern):
            if BranchVersion.parse(branch) is None:
                logger.warning(
                    f"Skipping branch without version suffix: {branch}"
                )
                continue
            if self.is_newer(reference, branch):
                selected.append(branch)

        logger.info(
            f"Branches newer than {reference}: "
            f"{', '.join(selected) if selected else '(none)'}"
        )
        return selected
