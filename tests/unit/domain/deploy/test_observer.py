"""Unit tests for the polling observer and its probes."""

import asyncio
import time
from unittest.mock import AsyncMock

import pytest

from ecsploy.domain.deploy.model.value import ObservationStatus
from ecsploy.domain.deploy.service.observer import (
    Observer,
    ProbeResult,
    ProbeStatus,
    service_probe,
    task_probe,
)
from ecsploy.domain.shared.error import RemoteSubmissionFailure, TransientPollError

POLL = 0.01
NEW_ARN = "arn:aws:ecs:us-east-1:123456789012:task-definition/app:2"
OLD_ARN = "arn:aws:ecs:us-east-1:123456789012:task-definition/app:1"


def _sequence(*results):
    """Probe returning ``results`` in order, repeating the last one."""
    calls = []

    async def probe() -> ProbeResult:
        calls.append(1)
        item = results[min(len(calls), len(results)) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    probe.calls = calls  # type: ignore[attr-defined]
    return probe


def _task(arn: str, last_status: str = "STOPPED", *exit_codes: int | None) -> dict:
    return {
        "taskArn": arn,
        "lastStatus": last_status,
        "desiredStatus": "STOPPED",
        "containers": [
            {"name": f"c{i}", **({} if code is None else {"exitCode": code})}
            for i, code in enumerate(exit_codes)
        ],
    }


def _deployment(arn: str, running: int, desired: int, rollout: str = "IN_PROGRESS", reason: str = "") -> dict:
    return {
        "taskDefinition": arn,
        "runningCount": running,
        "desiredCount": desired,
        "rolloutState": rollout,
        "rolloutStateReason": reason,
    }


class TestObserver:
    @pytest.mark.asyncio
    async def test_succeeds_after_convergence(self):
        probe = _sequence(ProbeResult.pending(), ProbeResult.pending(), ProbeResult.succeeded())

        observation = await Observer(poll_interval=POLL).observe(probe, timeout=5)

        assert observation.status == ObservationStatus.SUCCEEDED
        assert observation.succeeded
        assert len(probe.calls) == 3

    @pytest.mark.asyncio
    async def test_times_out_when_never_terminal(self):
        probe = _sequence(ProbeResult.pending())

        observation = await Observer(poll_interval=POLL).observe(probe, timeout=0.1)

        assert observation.status == ObservationStatus.TIMED_OUT
        assert observation.detail == "process timeout"

    @pytest.mark.asyncio
    async def test_transient_error_then_success(self):
        probe = _sequence(
            TransientPollError("DescribeTasks failed"),
            ProbeResult.pending(),
            ProbeResult.succeeded(),
        )

        observation = await Observer(poll_interval=POLL).observe(probe, timeout=5)

        assert observation.status == ObservationStatus.SUCCEEDED
        assert len(probe.calls) == 3

    @pytest.mark.asyncio
    async def test_persistent_transient_errors_report_timeout(self):
        probe = _sequence(TransientPollError("throttled"))

        observation = await Observer(poll_interval=POLL).observe(probe, timeout=0.1)

        assert observation.status == ObservationStatus.TIMED_OUT
        assert observation.detail == "process timeout"

    @pytest.mark.asyncio
    async def test_failure_stops_polling(self):
        probe = _sequence(ProbeResult.pending(), ProbeResult.failed("exit code: 1", exit_code=1))

        observation = await Observer(poll_interval=POLL).observe(probe, timeout=5)
        await asyncio.sleep(POLL * 5)

        assert observation.status == ObservationStatus.FAILED
        assert observation.detail == "exit code: 1"
        assert observation.exit_code == 1
        assert len(probe.calls) == 2

    @pytest.mark.asyncio
    async def test_non_transient_errors_propagate(self):
        probe = _sequence(RuntimeError("bug"))

        with pytest.raises(RuntimeError, match="bug"):
            await Observer(poll_interval=POLL).observe(probe, timeout=5)

    @pytest.mark.asyncio
    async def test_deadline_abandons_in_flight_poll(self):
        calls = []

        async def hanging_probe() -> ProbeResult:
            calls.append(1)
            await asyncio.sleep(999)
            return ProbeResult.succeeded()

        start = time.monotonic()
        observation = await Observer(poll_interval=POLL).observe(hanging_probe, timeout=0.1)
        elapsed = time.monotonic() - start

        assert observation.status == ObservationStatus.TIMED_OUT
        assert elapsed < 2
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_no_polls_after_deadline(self):
        probe = _sequence(ProbeResult.pending())

        await Observer(poll_interval=POLL).observe(probe, timeout=0.1)
        polls_at_deadline = len(probe.calls)
        await asyncio.sleep(POLL * 10)

        assert len(probe.calls) == polls_at_deadline

    @pytest.mark.asyncio
    async def test_sleeps_before_first_poll(self):
        probe = _sequence(ProbeResult.succeeded())

        observation = await Observer(poll_interval=0.5).observe(probe, timeout=0.05)

        assert observation.status == ObservationStatus.TIMED_OUT
        assert probe.calls == []

    def test_default_poll_interval_is_five_seconds(self):
        assert Observer().poll_interval == 5.0


class TestTaskProbe:
    @pytest.mark.asyncio
    async def test_succeeds_when_all_containers_exit_zero(self):
        control_plane = AsyncMock()
        control_plane.describe_tasks.return_value = [
            _task("t1", "STOPPED", 0, 0),
            _task("t2", "STOPPED", 0),
        ]

        result = await task_probe(control_plane, "c1", ["t1", "t2"])()

        assert result.status == ProbeStatus.SUCCEEDED
        control_plane.describe_tasks.assert_awaited_once_with("c1", ["t1", "t2"])

    @pytest.mark.asyncio
    async def test_pending_until_every_task_stopped(self):
        control_plane = AsyncMock()
        control_plane.describe_tasks.return_value = [
            _task("t1", "STOPPED", 1),
            _task("t2", "RUNNING", None),
        ]

        result = await task_probe(control_plane, "c1", ["t1", "t2"])()

        assert result.status == ProbeStatus.PENDING

    @pytest.mark.asyncio
    async def test_pending_when_a_task_is_missing(self):
        control_plane = AsyncMock()
        control_plane.describe_tasks.return_value = [_task("t1", "STOPPED", 0)]

        result = await task_probe(control_plane, "c1", ["t1", "t2"])()

        assert result.status == ProbeStatus.PENDING

    @pytest.mark.asyncio
    async def test_reports_first_non_zero_exit_code(self):
        control_plane = AsyncMock()
        control_plane.describe_tasks.return_value = [
            _task("t1", "STOPPED", 0, 3),
            _task("t2", "STOPPED", 1),
        ]

        result = await task_probe(control_plane, "c1", ["t1", "t2"])()

        assert result.status == ProbeStatus.FAILED
        assert result.detail == "exit code: 3"
        assert result.exit_code == 3

    @pytest.mark.asyncio
    async def test_missing_exit_code_is_inconclusive(self):
        control_plane = AsyncMock()
        control_plane.describe_tasks.return_value = [_task("t1", "STOPPED", None)]

        result = await task_probe(control_plane, "c1", ["t1"])()

        assert result.status == ProbeStatus.PENDING

    @pytest.mark.asyncio
    async def test_missing_exit_code_logs_stopped_reason(self, caplog: pytest.LogCaptureFixture):
        control_plane = AsyncMock()
        task = _task("t1", "STOPPED", None)
        task["stoppedReason"] = "CannotPullContainerError: pull access denied"
        control_plane.describe_tasks.return_value = [task]

        with caplog.at_level("DEBUG", logger="ecsploy.domain.deploy.service.observer"):
            result = await task_probe(control_plane, "c1", ["t1"])()

        assert result.status == ProbeStatus.PENDING
        assert "CannotPullContainerError" in caplog.text


class TestServiceProbe:
    @pytest.mark.asyncio
    async def test_succeeds_when_new_deployment_reaches_desired_count(self):
        control_plane = AsyncMock()
        control_plane.describe_service.return_value = {
            "deployments": [_deployment(NEW_ARN, 2, 2), _deployment(OLD_ARN, 0, 0)]
        }

        result = await service_probe(control_plane, "c1", "s1", NEW_ARN)()

        assert result.status == ProbeStatus.SUCCEEDED
        control_plane.describe_service.assert_awaited_once_with("c1", "s1")

    @pytest.mark.asyncio
    async def test_pending_while_new_deployment_is_short(self):
        control_plane = AsyncMock()
        control_plane.describe_service.return_value = {
            "deployments": [_deployment(NEW_ARN, 1, 2), _deployment(OLD_ARN, 2, 2)]
        }

        result = await service_probe(control_plane, "c1", "s1", NEW_ARN)()

        assert result.status == ProbeStatus.PENDING

    @pytest.mark.asyncio
    async def test_old_deployment_does_not_count(self):
        control_plane = AsyncMock()
        control_plane.describe_service.return_value = {"deployments": [_deployment(OLD_ARN, 2, 2)]}

        result = await service_probe(control_plane, "c1", "s1", NEW_ARN)()

        assert result.status == ProbeStatus.PENDING

    @pytest.mark.asyncio
    async def test_failed_rollout_reports_reason(self):
        control_plane = AsyncMock()
        control_plane.describe_service.return_value = {
            "deployments": [
                _deployment(NEW_ARN, 0, 2, rollout="FAILED", reason="tasks failed to start")
            ]
        }

        result = await service_probe(control_plane, "c1", "s1", NEW_ARN)()

        assert result.status == ProbeStatus.FAILED
        assert result.detail == "tasks failed to start"

    @pytest.mark.asyncio
    async def test_missing_service_fails_rollout(self):
        control_plane = AsyncMock()
        control_plane.describe_service.side_effect = RemoteSubmissionFailure(
            "Service s1 in cluster c1: MISSING"
        )

        result = await service_probe(control_plane, "c1", "s1", NEW_ARN)()

        assert result.status == ProbeStatus.FAILED
        assert result.detail == "Service s1 in cluster c1: MISSING"
