from approvalgate.consensus.classifier import extract_deployment_names, is_approval_word, is_denial_word
from approvalgate.consensus.evaluator import evaluate_approvals
from approvalgate.consensus.types import (
    ApprovalStatus,
    ApprovalVerdict,
    Comment,
    DeploymentExtraction,
    EvaluationError,
    EvaluationErrorKind,
)
from approvalgate.consensus.words import APPROVED_WORDS, DENIED_WORDS, format_accepted_words

__all__ = [
    "APPROVED_WORDS",
    "DENIED_WORDS",
    "ApprovalStatus",
    "ApprovalVerdict",
    "Comment",
    "DeploymentExtraction",
    "EvaluationError",
    "EvaluationErrorKind",
    "evaluate_approvals",
    "extract_deployment_names",
    "format_accepted_words",
    "is_approval_word",
    "is_denial_word",
]
