import logging

import logfire

from ecsploy.domain.deploy.model.value import ObservationStatus, RunRequest, RunResult
from ecsploy.domain.deploy.port.control_plane import ControlPlane
from ecsploy.domain.deploy.service.observer import Observer, task_probe
from ecsploy.domain.deploy.service.task_definition import TaskDefinitionService
from ecsploy.domain.deploy.util.command import tokenize_command
from ecsploy.domain.shared.command import CommandHandler
from ecsploy.domain.shared.error import (
    DeploymentTimeout,
    EntityFailure,
    RemoteSubmissionFailure,
)

logger = logging.getLogger(__name__)


class RunTaskHandler(CommandHandler[RunRequest, RunResult]):
    """Run a one-off task and wait for every container to exit cleanly."""

    control_plane: ControlPlane
    task_definitions: TaskDefinitionService
    observer: Observer

    async def run(self, cmd: RunRequest) -> RunResult:
        # Parse before touching the control plane so bad input mints no revision
        command = tokenize_command(cmd.command)

        base = await self.task_definitions.describe(cmd.base_task_definition)
        registered = await self.task_definitions.register_with_image(base, cmd.image)
        task_definition_arn = registered["taskDefinitionArn"]

        override: dict = {"name": cmd.container_name}
        if command:
            override["command"] = command

        response = await self.control_plane.run_task(
            cmd.cluster,
            task_definition_arn,
            {"containerOverrides": [override]},
        )
        failures = response.get("failures") or []
        if failures:
            logger.error("Run task error: %s", failures)
            first = failures[0]
            raise RemoteSubmissionFailure(first.get("reason") or str(first))

        task_arns = [task["taskArn"] for task in response.get("tasks", [])]
        if not task_arns:
            raise RemoteSubmissionFailure("RunTask started no tasks")
        logfire.info("Running tasks", tasks=task_arns)

        observation = await self.observer.observe(
            task_probe(self.control_plane, cmd.cluster, task_arns),
            timeout=cmd.timeout,
            subject=f"{len(task_arns)} task(s)",
        )
        result = RunResult(
            task_definition_arn=task_definition_arn,
            task_arns=task_arns,
            observation=observation,
        )

        match observation.status:
            case ObservationStatus.SUCCEEDED:
                logger.info("Run task is success")
                return result
            case ObservationStatus.TIMED_OUT:
                raise DeploymentTimeout(result=result)
            case _:
                raise EntityFailure(
                    observation.detail or "task failed",
                    exit_code=observation.exit_code,
                    result=result,
                )
