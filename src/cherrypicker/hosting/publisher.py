"""Turns a finished branch iteration into an opened pull request."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from cherrypicker.core.config import BranchIterationState, RunConfig
from cherrypicker.core.errors import HostApiError
from cherrypicker.core.log import logger
from cherrypicker.core.result import ChangeRequestRef
from cherrypicker.hosting.event import TriggeringChange
from cherrypicker.hosting.github import GitHubClient
from cherrypicker.hosting.templates import render_template

ERROR_PR_REVIEW_FROM_AUTHOR = (
    'Review cannot be requested from pull request author'
)


class PullRequestRequest(BaseModel):
    """Everything needed to open one follow-up pull request."""

    model_config = ConfigDict(frozen=True)

    title_template: str = ""
    body_template: str = ""
    labels: tuple[str, ...] = ()
    inherit_labels: bool = False
    assignees: tuple[str, ...] = ()
    reviewers: tuple[str, ...] = ()
    team_reviewers: tuple[str, ...] = ()
    draft: bool = False
    source: TriggeringChange

    @classmethod
    def build(
        cls,
        config: RunConfig,
        iteration: BranchIterationState,
        source: TriggeringChange,
    ) -> PullRequestRequest:
        """Combine run-wide settings with one branch's labels and draft."""
        pr = config.pull_request
        return cls(
            title_template=pr.title,
            body_template=pr.body,
            labels=tuple(iteration.labels),
            inherit_labels=pr.inherit_labels,
            assignees=tuple(pr.assignees),
            reviewers=tuple(pr.reviewers),
            team_reviewers=tuple(pr.team_reviewers),
            draft=iteration.draft,
            source=source,
        )

    def resolve_title(self, base_branch: str) -> str:
        return render_template(
            self.title_template,
            self.source.title,
            old_title=self.source.title,
            old_pull_request_id=self.source.number,
            target_branch=base_branch,
        )

    def resolve_body(self, base_branch: str) -> str | None:
        return render_template(
            self.body_template,
            self.source.body,
            old_title=self.source.title,
            old_pull_request_id=self.source.number,
            target_branch=base_branch,
        )

    def resolve_labels(self, base_branch: str) -> list[str]:
        """Configured labels, plus inherited ones other than base_branch."""
        labels = list(dict.fromkeys(self.labels))
        if self.inherit_labels:
            for label in self.source.labels:
                if label != base_branch and label not in labels:
                    labels.append(label)
        return labels


class PullRequestPublisher:
    """Opens the pull request, then applies labels, assignees, reviewers."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def publish(
        self,
        request: PullRequestRequest,
        pr_branch: str,
        base_branch: str,
    ) -> ChangeRequestRef:
        """Create the pull request pr_branch → base_branch.

        Raises:
            HostApiError: On any failure except a review requested from
                the pull request's own author
        """
        with logger.span("Opening pull request"):
            title = request.resolve_title(base_branch)
            body = request.resolve_body(base_branch)
            logger.info(f"Using title '{title}'")

            pull = self.client.create_pull_request(
                head=pr_branch,
                base=base_branch,
                title=title,
                body=body,
                draft=request.draft,
            )

            labels = request.resolve_labels(base_branch)
            if labels:
                logger.info(f"Applying labels '{', '.join(labels)}'")
                self.client.add_labels(pull.number, labels)

            if request.assignees:
                logger.info(
                    f"Applying assignees '{', '.join(request.assignees)}'"
                )
                self.client.add_assignees(
                    pull.number, list(request.assignees)
                )

            if request.reviewers:
                logger.info(
                    f"Requesting reviewers '{', '.join(request.reviewers)}'"
                )
                self._request_review(
                    pull.number, reviewers=list(request.reviewers)
                )

            if request.team_reviewers:
                logger.info(
                    "Requesting team reviewers "
                    f"'{', '.join(request.team_reviewers)}'"
                )
                self._request_review(
                    pull.number, team_reviewers=list(request.team_reviewers)
                )

            return pull

    def _request_review(self, number: int, **reviewers) -> None:
        try:
            self.client.request_reviewers(number, **reviewers)
        except HostApiError as e:
            if ERROR_PR_REVIEW_FROM_AUTHOR not in str(e):
                raise
            logger.warning(ERROR_PR_REVIEW_FROM_AUTHOR, pull_request=number)
