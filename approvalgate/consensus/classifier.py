"""
Single-comment classification: vote word detection and deployment targets.
"""
from __future__ import annotations

import re
from typing import Iterable, Pattern, Tuple

from .types import DeploymentExtraction, EvaluationError, EvaluationErrorKind
from .words import APPROVED_WORDS, DENIED_WORDS


def _compile(words: Iterable[str], tail: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(re.escape(word) + tail, re.IGNORECASE) for word in words)


# Approvals tolerate any run of "." / "!" and trailing blank lines; denials
# accept a single "." or "!" and nothing else.
_APPROVAL_PATTERNS = _compile(APPROVED_WORDS, r"[.!]*\n*")
_DENIAL_PATTERNS = _compile(DENIED_WORDS, r"[.!]?")

_DEPLOYMENT_LIST_RE = re.compile(r"\[(.*)\]\n*")


def is_approval_word(body: str) -> bool:
    return any(pattern.fullmatch(body or "") for pattern in _APPROVAL_PATTERNS)


def is_denial_word(body: str) -> bool:
    return any(pattern.fullmatch(body or "") for pattern in _DENIAL_PATTERNS)


def extract_deployment_names(body: str, allowed_names: Iterable[str]) -> DeploymentExtraction:
    """
    Split "approve[blue,green]" into the vote word and the selected targets.

    Extraction only happens when deployment names are configured. Errors are
    returned on the result, never raised.
    """
    body = body or ""
    allowed = frozenset(allowed_names or ())
    if not allowed or "[" not in body:
        return DeploymentExtraction(body=body)

    bracket = body.index("[")
    vote, selection = body[:bracket], body[bracket:]

    match = _DEPLOYMENT_LIST_RE.fullmatch(selection)
    if match is None:
        return DeploymentExtraction(
            body=body,
            error=EvaluationError(
                kind=EvaluationErrorKind.MALFORMED_DEPLOYMENT_SYNTAX,
                message=f"expected '[name,...]' after the vote word, got {selection!r}",
            ),
        )

    names = [token.strip() for token in match.group(1).split(",")]
    for name in names:
        if name not in allowed:
            return DeploymentExtraction(
                body=body,
                error=EvaluationError(
                    kind=EvaluationErrorKind.UNKNOWN_DEPLOYMENT_NAME,
                    message=f"deployment name {name!r} is not one of {sorted(allowed)}",
                ),
            )
    return DeploymentExtraction(body=vote, names=names)
