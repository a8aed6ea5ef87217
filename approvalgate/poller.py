from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from approvalgate.consensus import ApprovalStatus, ApprovalVerdict
from approvalgate.environment import ApprovalEnvironment
from approvalgate.integrations.github import GitHubClientError


logger = logging.getLogger(__name__)


class ApprovalPoller:
    """
    Re-reads the approval issue on a fixed interval until the vote is decided.

    Cancellation goes through ``stop_event``; the optional timeout bounds the
    whole loop. Both end the loop with a PENDING verdict.
    """

    def __init__(
        self,
        environment: ApprovalEnvironment,
        *,
        interval_seconds: float,
        timeout_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.environment = environment
        self.interval_seconds = max(0.0, float(interval_seconds))
        self.timeout_seconds = timeout_seconds
        self._clock = clock

    def tick(self) -> Optional[ApprovalVerdict]:
        """One poll. Returns None when comments could not be fetched."""
        try:
            return self.environment.evaluate_once()
        except GitHubClientError:
            logger.exception("approval poll failed, retrying on next tick")
            return None

    def run(self, stop_event: Optional[threading.Event] = None) -> ApprovalVerdict:
        stop_event = stop_event or threading.Event()
        deadline = None
        if self.timeout_seconds:
            deadline = self._clock() + self.timeout_seconds

        while not stop_event.is_set():
            verdict = self.tick()
            if verdict is not None and verdict.is_terminal:
                if verdict.error is not None:
                    logger.error("Approval comment could not be interpreted: %s", verdict.error)
                else:
                    logger.info("Approval decided: %s", verdict.status.value)
                return verdict
            if verdict is not None:
                logger.debug("Approval still pending")

            if deadline is not None and self._clock() >= deadline:
                logger.warning("Timed out waiting for approval after %ss", self.timeout_seconds)
                return ApprovalVerdict(status=ApprovalStatus.PENDING)
            if stop_event.wait(self.interval_seconds):
                break

        logger.warning("Approval polling cancelled")
        return ApprovalVerdict(status=ApprovalStatus.PENDING)
