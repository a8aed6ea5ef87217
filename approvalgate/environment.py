"""
Approval issue lifecycle for a single workflow run.
"""
from __future__ import annotations

import logging
from typing import Optional

from approvalgate.config import GateConfig
from approvalgate.consensus import (
    APPROVED_WORDS,
    DENIED_WORDS,
    ApprovalStatus,
    ApprovalVerdict,
    evaluate_approvals,
    format_accepted_words,
)
from approvalgate.integrations.github import GitHubIssueClient

logger = logging.getLogger(__name__)


class ApprovalEnvironment:
    def __init__(self, config: GateConfig, client: GitHubIssueClient):
        self.config = config
        self.client = client
        self.issue_number: Optional[int] = None

    def run_url(self) -> str:
        return f"{self.config.server_url}/{self.config.repo_full_name}/actions/runs/{self.config.run_id}"

    def issue_url(self) -> Optional[str]:
        if self.issue_number is None:
            return None
        return f"{self.config.server_url}/{self.config.repo_full_name}/issues/{self.issue_number}"

    def issue_title(self) -> str:
        if self.config.issue_title:
            return self.config.issue_title
        return f"Manual approval required for workflow run {self.config.run_id}"

    def issue_body(self) -> str:
        names = self.config.deployment_names
        return (
            "Workflow is pending manual review.\n"
            f"URL: {self.run_url()}\n\n"
            f"Required approvers: {', '.join(self.config.approvers)}\n\n"
            f"Minimum approvals: {self.config.required_approvals}\n\n"
            f"Multiple deployment: {', '.join(names) if names else '-'}\n\n"
            f"Respond {format_accepted_words(APPROVED_WORDS, names)} to continue workflow "
            f"or {format_accepted_words(DENIED_WORDS)} to cancel."
        )

    def create_approval_issue(self) -> int:
        title = self.issue_title()
        body = self.issue_body()
        logger.info(
            "Creating approval issue in repo %s/%s: title=%r approvers=%s",
            self.config.repo_owner,
            self.config.repo_name,
            title,
            self.config.approvers,
        )
        logger.debug("Approval issue body:\n%s", body)
        self.issue_number = self.client.create_issue(title, body, self.config.approvers)
        logger.info("Approval issue created: %s", self.issue_url())
        return self.issue_number

    def evaluate_once(self) -> ApprovalVerdict:
        if self.issue_number is None:
            raise RuntimeError("approval issue has not been created")
        comments = self.client.list_comments(self.issue_number)
        return evaluate_approvals(
            comments,
            self.config.approvers,
            self.config.minimum_approvals,
            self.config.deployment_names,
        )

    def finalize(self, verdict: ApprovalVerdict) -> None:
        """Leave a closing note and close the issue once the vote is decided."""
        if self.issue_number is None or verdict.error is not None:
            return
        if verdict.status == ApprovalStatus.APPROVED:
            message = "All required approvals received, continuing workflow and closing this issue."
            if verdict.deployment_names:
                message += f"\n\nSelected deployments: {', '.join(verdict.deployment_names)}"
        elif verdict.status == ApprovalStatus.DENIED:
            message = "Request denied. Closing issue and failing workflow."
        else:
            return
        self.client.comment(self.issue_number, message)
        self.client.close_issue(self.issue_number)
        logger.info("Closed approval issue #%s as %s", self.issue_number, verdict.status.value)
