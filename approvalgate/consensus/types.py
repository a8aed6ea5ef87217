"""
Approval consensus types.
"""
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Optional


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class EvaluationErrorKind(str, Enum):
    MALFORMED_DEPLOYMENT_SYNTAX = "MALFORMED_DEPLOYMENT_SYNTAX"
    UNKNOWN_DEPLOYMENT_NAME = "UNKNOWN_DEPLOYMENT_NAME"


@dataclass(frozen=True)
class Comment:
    """An issue comment, as handed over by the ticket service."""
    author: str
    body: str


@dataclass(frozen=True)
class EvaluationError:
    """A comment whose deployment targets cannot be interpreted."""
    kind: EvaluationErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass
class DeploymentExtraction:
    """Vote text left after removing a bracketed deployment list."""
    body: str
    names: list[str] = field(default_factory=list)
    error: Optional[EvaluationError] = None


@dataclass
class ApprovalVerdict:
    """Outcome of one pass over the comment thread."""
    status: ApprovalStatus = ApprovalStatus.PENDING
    deployment_names: list[str] = field(default_factory=list)
    error: Optional[EvaluationError] = None

    @property
    def is_terminal(self) -> bool:
        return self.error is not None or self.status != ApprovalStatus.PENDING
