import threading

from approvalgate.consensus.types import ApprovalStatus, Comment, EvaluationErrorKind
from approvalgate.environment import ApprovalEnvironment
from approvalgate.integrations.github import GitHubUnavailable
from approvalgate.poller import ApprovalPoller

from tests.fakes import FakeIssueClient


class _InstantEvent(threading.Event):
    """Never sleeps; records how often the poller waited."""

    def __init__(self, stop_after=None):
        super().__init__()
        self.waits = 0
        self._stop_after = stop_after

    def wait(self, timeout=None):
        self.waits += 1
        if self._stop_after is not None and self.waits >= self._stop_after:
            self.set()
        return self.is_set()


def _poller(gate_config, client, **kwargs):
    env = ApprovalEnvironment(gate_config, client)
    env.create_approval_issue()
    return ApprovalPoller(env, interval_seconds=10, **kwargs)


def test_polls_until_quorum(gate_config):
    client = FakeIssueClient(
        [
            [],
            [Comment("alice", "yes")],
            [Comment("alice", "yes"), Comment("bob", "approve")],
        ]
    )
    stop = _InstantEvent()
    verdict = _poller(gate_config, client).run(stop)
    assert verdict.status == ApprovalStatus.APPROVED
    assert client.list_calls == 3
    assert stop.waits == 2


def test_denial_stops_polling(gate_config):
    client = FakeIssueClient([[Comment("carol", "deny")]])
    verdict = _poller(gate_config, client).run(_InstantEvent())
    assert verdict.status == ApprovalStatus.DENIED
    assert client.list_calls == 1


def test_parse_error_stops_polling(gate_config):
    cfg = gate_config.model_copy(update={"deployment_names": ["blue", "green"]})
    client = FakeIssueClient([[Comment("alice", "approve[blue")]])
    env = ApprovalEnvironment(cfg, client)
    env.create_approval_issue()
    verdict = ApprovalPoller(env, interval_seconds=10).run(_InstantEvent())
    assert verdict.status == ApprovalStatus.PENDING
    assert verdict.error.kind == EvaluationErrorKind.MALFORMED_DEPLOYMENT_SYNTAX
    assert client.list_calls == 1


def test_transient_fetch_errors_are_retried(gate_config):
    client = FakeIssueClient([[Comment("alice", "yes"), Comment("bob", "yes")]])
    client.list_errors = [GitHubUnavailable("connection reset")]
    verdict = _poller(gate_config, client).run(_InstantEvent())
    assert verdict.status == ApprovalStatus.APPROVED
    assert client.list_calls == 2


def test_cancellation_returns_pending(gate_config):
    client = FakeIssueClient([[]])
    stop = _InstantEvent(stop_after=3)
    verdict = _poller(gate_config, client).run(stop)
    assert verdict.status == ApprovalStatus.PENDING
    assert verdict.error is None
    assert client.list_calls == 3


def test_already_cancelled_does_not_poll(gate_config):
    client = FakeIssueClient([[]])
    stop = threading.Event()
    stop.set()
    verdict = _poller(gate_config, client).run(stop)
    assert verdict.status == ApprovalStatus.PENDING
    assert client.list_calls == 0


def test_timeout_returns_pending(gate_config):
    ticks = iter([0.0, 5.0, 61.0])
    client = FakeIssueClient([[]])
    poller = _poller(gate_config, client, timeout_seconds=60, clock=lambda: next(ticks))
    verdict = poller.run(_InstantEvent())
    assert verdict.status == ApprovalStatus.PENDING
    assert client.list_calls == 2
