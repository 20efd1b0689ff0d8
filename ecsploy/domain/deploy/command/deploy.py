import logging

import logfire

from ecsploy.domain.deploy.model.value import (
    DeployRequest,
    DeployResult,
    Observation,
    ObservationStatus,
)
from ecsploy.domain.deploy.port.control_plane import ControlPlane
from ecsploy.domain.deploy.service.observer import Observer, service_probe
from ecsploy.domain.deploy.service.task_definition import TaskDefinitionService
from ecsploy.domain.shared.command import CommandHandler
from ecsploy.domain.shared.error import (
    DeploymentTimeout,
    EcsployError,
    EntityFailure,
    RemoteSubmissionFailure,
)

logger = logging.getLogger(__name__)


class DeployHandler(CommandHandler[DeployRequest, DeployResult]):
    """Roll a service onto a new revision and wait for it to converge.

    On failure or timeout, and only when the request asks for it, the service
    is pointed back at the revision it ran before. That rollback is issued
    once and not observed.
    """

    control_plane: ControlPlane
    task_definitions: TaskDefinitionService
    observer: Observer

    async def run(self, cmd: DeployRequest) -> DeployResult:
        service = await self.control_plane.describe_service(cmd.cluster, cmd.service_name)
        previous_arn = service.get("taskDefinition")
        if not previous_arn:
            raise RemoteSubmissionFailure(
                f"Service {cmd.service_name} has no task definition in cluster {cmd.cluster}"
            )
        logger.info("Service %s currently runs %s", cmd.service_name, previous_arn)

        base = await self.task_definitions.describe(previous_arn)
        registered = await self.task_definitions.register_with_image(base, cmd.image)
        new_arn = registered["taskDefinitionArn"]

        await self.control_plane.update_service(cmd.cluster, cmd.service_name, new_arn)
        logfire.info("Service updated", service=cmd.service_name, task_definition=new_arn)

        observation = await self.observer.observe(
            service_probe(self.control_plane, cmd.cluster, cmd.service_name, new_arn),
            timeout=cmd.timeout,
            subject=f"service {cmd.service_name}",
        )
        result = DeployResult(
            service_name=cmd.service_name,
            task_definition_arn=new_arn,
            previous_task_definition_arn=previous_arn,
            observation=observation,
        )
        if observation.succeeded:
            return result

        if cmd.rollback:
            result = await self._rollback(cmd, result)
        raise _failure(observation, result)

    async def _rollback(self, cmd: DeployRequest, result: DeployResult) -> DeployResult:
        logger.warning(
            "Rolling back %s to %s", cmd.service_name, result.previous_task_definition_arn
        )
        try:
            await self.control_plane.update_service(
                cmd.cluster, cmd.service_name, result.previous_task_definition_arn
            )
        except EcsployError as e:
            logger.error("Rollback of %s failed: %s", cmd.service_name, e)
            return result.model_copy(update={"rollback_error": str(e)})
        return result.model_copy(update={"rolled_back": True})


def _failure(observation: Observation, result: DeployResult) -> EcsployError:
    if observation.status == ObservationStatus.TIMED_OUT:
        return DeploymentTimeout(_describe("process timeout", result), result=result)
    return EntityFailure(
        _describe(observation.detail or "deployment failed", result),
        exit_code=observation.exit_code,
        result=result,
    )


def _describe(message: str, result: DeployResult) -> str:
    if result.rolled_back:
        return f"{message}; rolled back to {result.previous_task_definition_arn}"
    if result.rollback_error:
        return f"{message}; rollback failed: {result.rollback_error}"
    return message
