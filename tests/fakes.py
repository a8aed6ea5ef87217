from typing import Dict, List, Optional, Sequence

from approvalgate.consensus.types import Comment


class FakeIssueClient:
    """In-memory stand-in for GitHubIssueClient."""

    def __init__(self, comment_batches: Optional[List[List[Comment]]] = None):
        self.created: List[Dict] = []
        self.comments_posted: List[tuple] = []
        self.closed: List[int] = []
        self.list_calls = 0
        self._batches = comment_batches or [[]]
        self.list_errors: List[Exception] = []

    def create_issue(self, title: str, body: str, assignees: Sequence[str]) -> int:
        self.created.append({"title": title, "body": body, "assignees": list(assignees)})
        return 42

    def list_comments(self, issue_number: int) -> List[Comment]:
        self.list_calls += 1
        if self.list_errors:
            raise self.list_errors.pop(0)
        idx = min(self.list_calls - 1, len(self._batches) - 1)
        return list(self._batches[idx])

    def comment(self, issue_number: int, body: str) -> None:
        self.comments_posted.append((issue_number, body))

    def close_issue(self, issue_number: int) -> None:
        self.closed.append(issue_number)
