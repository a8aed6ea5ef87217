"""
Vote vocabulary shared by the classifier and the issue body.
"""
from __future__ import annotations

from typing import Sequence, Tuple

APPROVED_WORDS: Tuple[str, ...] = ("approved", "approve", "lgtm", "yes")
DENIED_WORDS: Tuple[str, ...] = ("denied", "deny", "no")


def format_accepted_words(words: Sequence[str], deployment_names: Sequence[str] = ()) -> str:
    """
    Render vote words for humans, e.g. '"approve[blue,green]", "lgtm[blue,green]"'.

    The bracketed list is only shown when there is an actual choice to make,
    i.e. more than one deployment name.
    """
    suffix = ""
    if len(deployment_names) > 1:
        suffix = "[" + ",".join(deployment_names) + "]"
    return ", ".join(f'"{word}{suffix}"' for word in words)
