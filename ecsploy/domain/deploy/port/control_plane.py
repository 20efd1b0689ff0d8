"""Port for the ECS control plane."""

from abc import abstractmethod
from typing import Any, Protocol, runtime_checkable

from ecsploy.domain.shared.port import Port


@runtime_checkable
class ControlPlane(Port, Protocol):
    """Remote operations the deploy and run paths depend on.

    Payloads are the control plane's own camelCase dicts; the domain only
    interprets the handful of keys it needs. Failed writes raise
    ``RemoteSubmissionFailure``; failed reads used while polling raise
    ``TransientPollError``.
    """

    @abstractmethod
    async def describe_service(self, cluster: str, service: str) -> dict[str, Any]:
        """Return the service description (taskDefinition, deployments, counts)."""
        ...

    @abstractmethod
    async def describe_task_definition(self, task_definition: str) -> dict[str, Any]:
        """Return the full task definition for a family, family:revision or ARN."""
        ...

    @abstractmethod
    async def register_task_definition(self, **fields: Any) -> dict[str, Any]:
        """Register a new revision and return its task definition."""
        ...

    @abstractmethod
    async def update_service(
        self, cluster: str, service: str, task_definition: str
    ) -> dict[str, Any]:
        """Point the service at ``task_definition``."""
        ...

    @abstractmethod
    async def run_task(
        self, cluster: str, task_definition: str, overrides: dict[str, Any]
    ) -> dict[str, Any]:
        """Start a one-off task. The response carries ``tasks`` and ``failures``."""
        ...

    @abstractmethod
    async def describe_tasks(self, cluster: str, tasks: list[str]) -> list[dict[str, Any]]:
        """Return the current snapshot of each task."""
        ...
