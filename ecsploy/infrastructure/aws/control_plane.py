"""ECS control plane adapter using boto3."""

import asyncio
from collections.abc import Callable
from typing import Any

import logfire
from botocore.exceptions import BotoCoreError, ClientError

from ecsploy.config import AwsConfig
from ecsploy.domain.deploy.port.control_plane import ControlPlane
from ecsploy.domain.shared.error import (
    ConfigurationError,
    ExternalServiceError,
    RemoteSubmissionFailure,
    TransientPollError,
)
from ecsploy.infrastructure.aws.session import create_session


class EcsControlPlane(ControlPlane):
    """Calls the ECS API through a boto3 client.

    boto3 is blocking, so every call runs in a worker thread. Cancelling the
    awaiting coroutine returns immediately; the request itself finishes in
    the background and its result is discarded.
    """

    def __init__(self, client: Any):
        self._client = client

    async def describe_service(self, cluster: str, service: str) -> dict[str, Any]:
        response = await self._read(
            "DescribeServices", self._client.describe_services, cluster=cluster, services=[service]
        )
        services = response.get("services") or []
        if not services:
            failures = response.get("failures") or []
            reason = failures[0].get("reason") if failures else "not found"
            raise RemoteSubmissionFailure(f"Service {service} in cluster {cluster}: {reason}")
        return services[0]

    async def describe_task_definition(self, task_definition: str) -> dict[str, Any]:
        response = await self._read(
            "DescribeTaskDefinition",
            self._client.describe_task_definition,
            taskDefinition=task_definition,
        )
        return response["taskDefinition"]

    async def register_task_definition(self, **fields: Any) -> dict[str, Any]:
        response = await self._write(
            "RegisterTaskDefinition", self._client.register_task_definition, **fields
        )
        return response["taskDefinition"]

    async def update_service(
        self, cluster: str, service: str, task_definition: str
    ) -> dict[str, Any]:
        response = await self._write(
            "UpdateService",
            self._client.update_service,
            cluster=cluster,
            service=service,
            taskDefinition=task_definition,
        )
        return response["service"]

    async def run_task(
        self, cluster: str, task_definition: str, overrides: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._write(
            "RunTask",
            self._client.run_task,
            cluster=cluster,
            taskDefinition=task_definition,
            overrides=overrides,
        )

    async def describe_tasks(self, cluster: str, tasks: list[str]) -> list[dict[str, Any]]:
        response = await self._read(
            "DescribeTasks", self._client.describe_tasks, cluster=cluster, tasks=tasks
        )
        return response.get("tasks") or []

    async def _read(self, operation: str, call: Callable[..., dict], **params: Any) -> dict:
        return await self._call(operation, call, TransientPollError, **params)

    async def _write(self, operation: str, call: Callable[..., dict], **params: Any) -> dict:
        return await self._call(operation, call, RemoteSubmissionFailure, **params)

    async def _call(
        self,
        operation: str,
        call: Callable[..., dict],
        error_type: type[ExternalServiceError],
        **params: Any,
    ) -> dict:
        try:
            return await asyncio.to_thread(call, **params)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logfire.error("ECS call failed", operation=operation, code=code, error=str(e))
            raise error_type(f"{operation} failed: {e}", code=code) from e
        except BotoCoreError as e:
            logfire.error("ECS call failed", operation=operation, error=str(e))
            raise error_type(f"{operation} failed: {e}") from e


def create_control_plane(config: AwsConfig) -> EcsControlPlane:
    """Build an EcsControlPlane from AWS config."""
    session = create_session(config)
    try:
        client = session.client("ecs")
    except BotoCoreError as e:
        raise ConfigurationError(f"Cannot create ECS client: {e}") from e
    return EcsControlPlane(client)
