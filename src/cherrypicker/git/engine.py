"""Cherry-pick execution and outcome classification."""

from __future__ import annotations

from enum import Enum

from cherrypicker.core.log import logger
from cherrypicker.core.result import CherryPickOutcome, OutcomeKind
from cherrypicker.git.executor import GitExecutor

CHERRYPICK_EMPTY = (
    'The previous cherry-pick is now empty, '
    'possibly due to conflict resolution.'
)
CHERRYPICK_UNRESOLVED_CONFLICT = (
    'After resolving the conflicts, mark them with'
)

CONFLICT_LABEL = 'conflict'
CONFLICT_COMMIT_MESSAGE = 'leave conflicts unresolved'


class Strategy(str, Enum):
    """How conflicts are handled while cherry-picking."""

    AUTO_THEIRS = "auto-theirs"
    LEAVE_UNRESOLVED = "leave-unresolved"

    @classmethod
    def from_flag(cls, unresolved_conflict: bool) -> Strategy:
        return cls.LEAVE_UNRESOLVED if unresolved_conflict else cls.AUTO_THEIRS


def cherry_pick_args(strategy: Strategy, commit_ref: str) -> list[str]:
    args = ['cherry-pick', '-m', '1', '--strategy=recursive']
    if strategy is Strategy.AUTO_THEIRS:
        args.append('--strategy-option=theirs')
    args.append(commit_ref)
    return args


class CherryPickEngine:
    """Applies one commit to the checked-out branch."""

    def __init__(self, git: GitExecutor):
        self.git = git

    def apply(self, strategy: Strategy, commit_ref: str) -> CherryPickOutcome:
        """Cherry-pick commit_ref and classify what happened.

        A conflict under LEAVE_UNRESOLVED is committed with its markers
        before returning, so the branch can still be pushed.

        Returns:
            CherryPickOutcome tagged CLEAN, EMPTY, CONFLICT or FATAL
        """
        with logger.span(f"Cherry picking using {strategy.value} strategy"):
            result = self.git.execute(
                cherry_pick_args(strategy, commit_ref),
                ignore_nonzero_exit=True,
            )
            raw = dict(
                stdout=result.stdout,
                stderr=result.stderr,
                exit_code=result.exit_code,
            )

            if strategy is Strategy.AUTO_THEIRS:
                outcome = self._classify_auto_theirs(raw)
            else:
                outcome = self._classify_leave_unresolved(raw)

            if outcome.kind is OutcomeKind.CONFLICT:
                self.git.execute(['add', '.'])
                self.git.execute(['commit', '-m', CONFLICT_COMMIT_MESSAGE])

            logger.info(
                f"Cherry-pick of {commit_ref} finished: {outcome.kind.value}"
            )
            return outcome

    @staticmethod
    def _classify_auto_theirs(raw: dict) -> CherryPickOutcome:
        if raw['exit_code'] == 0:
            return CherryPickOutcome(kind=OutcomeKind.CLEAN, **raw)
        if CHERRYPICK_EMPTY in raw['stderr']:
            return CherryPickOutcome(kind=OutcomeKind.EMPTY, **raw)
        return CherryPickOutcome(
            kind=OutcomeKind.FATAL,
            message=f"Unexpected error: {raw['stderr']}",
            **raw,
        )

    @staticmethod
    def _classify_leave_unresolved(raw: dict) -> CherryPickOutcome:
        # Exit code is not consulted for conflicts: git exits non-zero
        # for them and the marker is what matters
        if CHERRYPICK_UNRESOLVED_CONFLICT in raw['stderr']:
            return CherryPickOutcome(
                kind=OutcomeKind.CONFLICT,
                labels_to_add=(CONFLICT_LABEL,),
                force_draft=True,
                **raw,
            )
        if CHERRYPICK_EMPTY in raw['stderr']:
            return CherryPickOutcome(kind=OutcomeKind.EMPTY, **raw)
        if raw['exit_code'] == 0:
            return CherryPickOutcome(kind=OutcomeKind.CLEAN, **raw)
        return CherryPickOutcome(
            kind=OutcomeKind.FATAL,
            message=raw['stderr'],
            **raw,
        )
