"""Polling observer for service rollouts and one-off tasks.

The observer repeatedly calls a *probe* on a fixed interval until the probe
reports a terminal outcome, racing the poll loop against a hard deadline.
Probes decide what "terminal" and "succeeded" mean for their entities; the
observer owns timing, retry of transient read errors and cancellation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ecsploy.domain.deploy.model.value import Observation, ObservationStatus
from ecsploy.domain.deploy.port.control_plane import ControlPlane
from ecsploy.domain.shared.error import RemoteSubmissionFailure, TransientPollError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
TIMEOUT_DETAIL = "process timeout"


class ProbeStatus(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single poll."""

    status: ProbeStatus
    detail: str | None = None
    exit_code: int | None = None

    @classmethod
    def pending(cls) -> "ProbeResult":
        return cls(ProbeStatus.PENDING)

    @classmethod
    def succeeded(cls) -> "ProbeResult":
        return cls(ProbeStatus.SUCCEEDED)

    @classmethod
    def failed(cls, detail: str, exit_code: int | None = None) -> "ProbeResult":
        return cls(ProbeStatus.FAILED, detail=detail, exit_code=exit_code)


Probe = Callable[[], Awaitable[ProbeResult]]


class Observer:
    """Watches remote entities until they converge or a deadline passes.

    Polling sleeps ``poll_interval`` seconds before every probe, with no
    backoff. When the deadline fires the poll loop is cancelled at once, even
    mid-probe, and no further probes are issued. The remote operation behind
    an abandoned probe keeps running on the control plane; only its result
    is dropped.
    """

    def __init__(self, poll_interval: float = DEFAULT_POLL_INTERVAL):
        self._poll_interval = poll_interval

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def observe(self, probe: Probe, timeout: float, subject: str = "entities") -> Observation:
        """Poll ``probe`` until it is terminal or ``timeout`` seconds elapse.

        Returns exactly one of succeeded, failed (with the probe's detail) or
        timed out.
        """
        logger.info("Waiting for %s (timeout %ss)", subject, timeout)
        try:
            return await asyncio.wait_for(self._poll(probe, subject), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error("Timed out after %ss waiting for %s", timeout, subject)
            return Observation(status=ObservationStatus.TIMED_OUT, detail=TIMEOUT_DETAIL)

    async def _poll(self, probe: Probe, subject: str) -> Observation:
        polls = 0
        while True:
            await asyncio.sleep(self._poll_interval)
            polls += 1
            try:
                result = await probe()
            except TransientPollError as e:
                logger.warning("Poll %d for %s failed, retrying: %s", polls, subject, e)
                continue

            match result.status:
                case ProbeStatus.PENDING:
                    logger.debug("Poll %d: %s not converged yet", polls, subject)
                    continue
                case ProbeStatus.SUCCEEDED:
                    logger.info("%s converged after %d polls", subject, polls)
                    return Observation(status=ObservationStatus.SUCCEEDED)
                case ProbeStatus.FAILED:
                    logger.error("%s failed: %s", subject, result.detail)
                    return Observation(
                        status=ObservationStatus.FAILED,
                        detail=result.detail,
                        exit_code=result.exit_code,
                    )


# =============================================================================
# Probes
# =============================================================================


def task_probe(control_plane: ControlPlane, cluster: str, task_arns: list[str]) -> Probe:
    """Probe for one-off tasks.

    Nothing is evaluated until every task is STOPPED. Then every container of
    every task must have exited with code 0; the first non-zero exit code
    fails the whole set. A container without an exit code yet makes the poll
    inconclusive.
    """

    async def probe() -> ProbeResult:
        tasks = await control_plane.describe_tasks(cluster, task_arns)
        if len(tasks) < len(task_arns):
            return ProbeResult.pending()
        if not all(_task_stopped(task) for task in tasks):
            return ProbeResult.pending()

        for task in tasks:
            for container in task.get("containers", []):
                exit_code = container.get("exitCode")
                if exit_code is None:
                    logger.debug(
                        "Cannot read exit code of %s in %s yet (stopped reason: %s)",
                        container.get("name"),
                        task.get("taskArn"),
                        task.get("stoppedReason") or container.get("reason") or "unknown",
                    )
                    return ProbeResult.pending()
                if exit_code != 0:
                    return ProbeResult.failed(f"exit code: {exit_code}", exit_code=exit_code)
        return ProbeResult.succeeded()

    return probe


def _task_stopped(task: dict[str, Any]) -> bool:
    return task.get("lastStatus") == "STOPPED"


def service_probe(
    control_plane: ControlPlane, cluster: str, service: str, task_definition_arn: str
) -> Probe:
    """Probe for a service rollout onto ``task_definition_arn``.

    Succeeds once the deployment for that revision runs its desired count.
    Fails if the control plane marks that deployment's rollout as FAILED, or
    if the service can no longer be found.
    """

    async def probe() -> ProbeResult:
        try:
            description = await control_plane.describe_service(cluster, service)
        except RemoteSubmissionFailure as e:
            return ProbeResult.failed(e.message)
        for deployment in description.get("deployments", []):
            if deployment.get("taskDefinition") != task_definition_arn:
                continue
            if deployment.get("rolloutState") == "FAILED":
                return ProbeResult.failed(
                    deployment.get("rolloutStateReason") or "deployment rollout failed"
                )
            if deployment.get("runningCount") == deployment.get("desiredCount"):
                return ProbeResult.succeeded()
        return ProbeResult.pending()

    return probe
