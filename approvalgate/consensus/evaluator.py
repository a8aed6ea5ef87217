"""
Approval consensus over an issue comment thread.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .classifier import extract_deployment_names, is_approval_word, is_denial_word
from .types import ApprovalStatus, ApprovalVerdict, Comment

logger = logging.getLogger(__name__)


def _approver_index(approvers: Sequence[str], name: str) -> int:
    for idx, approver in enumerate(approvers):
        if approver == name:
            return idx
    return -1


def evaluate_approvals(
    comments: Iterable[Comment],
    approvers: Sequence[str],
    minimum_approvals: int = 0,
    allowed_deployment_names: Iterable[str] = (),
) -> ApprovalVerdict:
    """
    Walk comments oldest-to-newest and return the first decisive verdict.

    A denial from any approver who has not yet approved stops the walk. An
    approval that brings the count to ``minimum_approvals`` (all approvers
    when 0) approves, carrying the deployment names attached to that comment.
    Otherwise the verdict stays PENDING.
    """
    required = minimum_approvals if minimum_approvals else len(approvers)
    allowed = frozenset(allowed_deployment_names or ())
    remaining: List[str] = list(approvers)

    for comment in comments:
        idx = _approver_index(remaining, comment.author)
        if idx < 0:
            continue

        extraction = extract_deployment_names(comment.body, allowed)
        if extraction.error is not None:
            logger.debug("Rejecting comment by %s: %s", comment.author, extraction.error)
            return ApprovalVerdict(status=ApprovalStatus.PENDING, error=extraction.error)

        if is_denial_word(extraction.body):
            logger.debug("Denied by %s", comment.author)
            return ApprovalVerdict(status=ApprovalStatus.DENIED)

        if is_approval_word(extraction.body):
            consumed = len(approvers) - len(remaining) + 1
            if consumed == required:
                logger.debug("Approved by %s (%d/%d)", comment.author, consumed, required)
                return ApprovalVerdict(
                    status=ApprovalStatus.APPROVED,
                    deployment_names=list(extraction.names),
                )
            remaining[idx] = remaining[-1]
            remaining.pop()

    return ApprovalVerdict(status=ApprovalStatus.PENDING)
