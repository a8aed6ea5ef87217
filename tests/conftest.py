import os

import pytest

from approvalgate.config import GateConfig
from tests.fakes import FakeIssueClient

_GATE_ENV_PREFIXES = ("GITHUB_", "INPUT_", "APPROVALGATE_")


@pytest.fixture(autouse=True)
def _clean_gate_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith(_GATE_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def gate_config():
    return GateConfig(
        repo_full_name="octo/widgets",
        run_id=1234,
        token="t0ken",
        approvers=["alice", "bob", "carol"],
        minimum_approvals=2,
    )


@pytest.fixture
def fake_client():
    return FakeIssueClient()
