from approvalgate.integrations.github.client import (
    GitHubClientError,
    GitHubIssueClient,
    GitHubRequestFailed,
    GitHubUnavailable,
)

__all__ = [
    "GitHubClientError",
    "GitHubIssueClient",
    "GitHubRequestFailed",
    "GitHubUnavailable",
]
