from typing import Callable, List, Optional, Sequence, TypeVar

import requests
from github import Auth, Github, GithubException

from approvalgate.config import DEFAULT_API_URL
from approvalgate.consensus.types import Comment

T = TypeVar("T")


class GitHubClientError(RuntimeError):
    """Base GitHub integration error."""


class GitHubRequestFailed(GitHubClientError):
    """Raised when GitHub answers with an error status."""


class GitHubUnavailable(GitHubClientError):
    """Raised for transport errors talking to GitHub."""


class GitHubIssueClient:
    """
    Issue operations needed by the approval gate, scoped to one repository.
    Uses PyGithub.
    """

    def __init__(
        self,
        repo_full_name: str,
        token: str = "",
        *,
        base_url: str = DEFAULT_API_URL,
        github: Optional[Github] = None,
    ):
        self.repo_full_name = repo_full_name
        if github is not None:
            self.client = github
        elif token:
            self.client = Github(auth=Auth.Token(token), base_url=base_url)
        else:
            self.client = Github(base_url=base_url)
        self._repo = None

    def _call(self, what: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except GithubException as exc:
            raise GitHubRequestFailed(
                f"GitHub {what} failed for {self.repo_full_name} with status {exc.status}: {exc.data}"
            ) from exc
        except requests.RequestException as exc:
            raise GitHubUnavailable(f"GitHub {what} request failed for {self.repo_full_name}: {exc}") from exc

    def _repository(self):
        if self._repo is None:
            self._repo = self._call("repository lookup", lambda: self.client.get_repo(self.repo_full_name))
        return self._repo

    def _issue(self, issue_number: int):
        repo = self._repository()
        return self._call(f"issue #{issue_number} lookup", lambda: repo.get_issue(int(issue_number)))

    def create_issue(self, title: str, body: str, assignees: Sequence[str]) -> int:
        """Open an issue and return its number."""
        repo = self._repository()
        issue = self._call(
            "issue creation",
            lambda: repo.create_issue(title=title, body=body, assignees=list(assignees)),
        )
        return int(issue.number)

    def list_comments(self, issue_number: int) -> List[Comment]:
        """
        Fetch the full comment thread, oldest first.
        Deleted users and empty bodies come back as empty strings.
        """
        issue = self._issue(issue_number)

        def _fetch() -> List[Comment]:
            comments = []
            for c in issue.get_comments():
                login = c.user.login if c.user else ""
                comments.append(Comment(author=login or "", body=c.body or ""))
            return comments

        return self._call(f"comment listing for issue #{issue_number}", _fetch)

    def comment(self, issue_number: int, body: str) -> None:
        issue = self._issue(issue_number)
        self._call(f"comment on issue #{issue_number}", lambda: issue.create_comment(body))

    def close_issue(self, issue_number: int) -> None:
        issue = self._issue(issue_number)
        self._call(f"closing issue #{issue_number}", lambda: issue.edit(state="closed"))
