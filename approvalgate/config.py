import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

# Load params from .env file
load_dotenv()

# GitHub Actions environment
ENV_REPO_FULL_NAME = "GITHUB_REPOSITORY"
ENV_REPO_OWNER = "GITHUB_REPOSITORY_OWNER"
ENV_RUN_ID = "GITHUB_RUN_ID"
ENV_SERVER_URL = "GITHUB_SERVER_URL"
ENV_API_URL = "GITHUB_API_URL"
ENV_OUTPUT_FILE = "GITHUB_OUTPUT"

# Action inputs
ENV_TOKEN = "INPUT_SECRET"
ENV_APPROVERS = "INPUT_APPROVERS"
ENV_MINIMUM_APPROVALS = "INPUT_MINIMUM-APPROVALS"
ENV_DEPLOYMENT_NAMES = "INPUT_MULTIPLE-DEPLOYMENT-NAMES"
ENV_ISSUE_TITLE = "INPUT_ISSUE-TITLE"

# Runtime tuning
ENV_POLLING_INTERVAL = "APPROVALGATE_POLLING_INTERVAL_SECONDS"
ENV_TIMEOUT_MINUTES = "APPROVALGATE_TIMEOUT_MINUTES"

DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_POLLING_INTERVAL_SECONDS = 10


class ConfigError(ValueError):
    """Raised when the action environment is missing or invalid."""


def split_list(raw: Optional[str]) -> List[str]:
    """Comma separated input -> list, dropping blanks."""
    if not raw:
        return []
    return [item.strip() for item in str(raw).split(",") if item.strip()]


def _env_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = str(env.get(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


class GateConfig(BaseModel):
    """
    Validated configuration for one approval gate run.
    """
    repo_full_name: str
    repo_owner: str = ""
    run_id: int
    token: str = Field(default="", repr=False)
    approvers: List[str]
    minimum_approvals: int = 0
    deployment_names: List[str] = Field(default_factory=list)
    issue_title: Optional[str] = None
    server_url: str = DEFAULT_SERVER_URL
    api_url: str = DEFAULT_API_URL
    polling_interval_seconds: int = DEFAULT_POLLING_INTERVAL_SECONDS
    timeout_minutes: Optional[int] = None

    @field_validator("repo_full_name")
    @classmethod
    def _check_repo(cls, value: str) -> str:
        parts = value.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"repo owner and name in unexpected format: {value}")
        return value

    @field_validator("approvers")
    @classmethod
    def _check_approvers(cls, value: List[str]) -> List[str]:
        cleaned = [a.strip() for a in value if a and a.strip()]
        if not cleaned:
            raise ValueError("at least one approver is required")
        return cleaned

    @field_validator("polling_interval_seconds")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("polling interval must be positive")
        return value

    @field_validator("timeout_minutes")
    @classmethod
    def _check_timeout(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive when set")
        return value

    @model_validator(mode="after")
    def _check_minimum(self) -> "GateConfig":
        if self.minimum_approvals < 0 or self.minimum_approvals > len(self.approvers):
            raise ValueError(
                f"minimum approvals must be between 0 and {len(self.approvers)}, "
                f"got {self.minimum_approvals}"
            )
        if not self.repo_owner:
            self.repo_owner = self.repo_full_name.split("/", 1)[0]
        return self

    @property
    def repo_name(self) -> str:
        return self.repo_full_name.split("/", 1)[1]

    @property
    def required_approvals(self) -> int:
        return self.minimum_approvals or len(self.approvers)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GateConfig":
        env = os.environ if env is None else env

        run_id = _env_int(env, ENV_RUN_ID, None)
        if run_id is None:
            raise ConfigError(f"{ENV_RUN_ID} is required")
        repo = str(env.get(ENV_REPO_FULL_NAME, "") or "").strip()
        if not repo:
            raise ConfigError(f"{ENV_REPO_FULL_NAME} is required")

        try:
            return cls(
                repo_full_name=repo,
                repo_owner=str(env.get(ENV_REPO_OWNER, "") or "").strip(),
                run_id=run_id,
                token=str(env.get(ENV_TOKEN, "") or ""),
                approvers=split_list(env.get(ENV_APPROVERS)),
                minimum_approvals=_env_int(env, ENV_MINIMUM_APPROVALS, 0),
                deployment_names=split_list(env.get(ENV_DEPLOYMENT_NAMES)),
                issue_title=str(env.get(ENV_ISSUE_TITLE, "") or "").strip() or None,
                server_url=str(env.get(ENV_SERVER_URL, "") or DEFAULT_SERVER_URL).rstrip("/"),
                api_url=str(env.get(ENV_API_URL, "") or DEFAULT_API_URL).rstrip("/"),
                polling_interval_seconds=_env_int(env, ENV_POLLING_INTERVAL, DEFAULT_POLLING_INTERVAL_SECONDS),
                timeout_minutes=_env_int(env, ENV_TIMEOUT_MINUTES, None),
            )
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            raise ConfigError(messages) from exc
