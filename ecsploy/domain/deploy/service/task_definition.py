"""Task definition mutation and registration."""

import copy
import logging
from dataclasses import dataclass
from typing import Any

from ecsploy.domain.deploy.model.image import ImageRef
from ecsploy.domain.deploy.port.control_plane import ControlPlane

logger = logging.getLogger(__name__)

# Fields of a described task definition that RegisterTaskDefinition accepts.
# Everything else (taskDefinitionArn, revision, status, registeredAt, ...) is
# response-only and must not be sent back.
REGISTRABLE_FIELDS = (
    "family",
    "networkMode",
    "placementConstraints",
    "taskRoleArn",
    "volumes",
    "executionRoleArn",
    "requiresCompatibilities",
    "cpu",
    "memory",
    "pidMode",
    "ipcMode",
    "proxyConfiguration",
    "runtimePlatform",
    "ephemeralStorage",
)


def with_image(base: dict[str, Any], target: ImageRef | None) -> list[dict[str, Any]]:
    """Return ``base``'s container definitions with ``target`` swapped in.

    Containers are matched on the repository of their current image, not on
    their name, and only the first match is rewritten. Every other container
    is returned unchanged. With no target the containers are returned as they
    are.

    Raises:
        MalformedImageReference: If any container's current image is not ``repository:tag``.
    """
    containers = copy.deepcopy(base.get("containerDefinitions", []))
    if target is None:
        return containers

    # Every current image must parse, even past the first match
    repositories = [ImageRef.parse(c.get("image", "")).repository for c in containers]
    for container, repository in zip(containers, repositories):
        if repository == target.repository:
            container["image"] = str(target)
            break
    return containers


def _uses_repository(container: dict[str, Any], repository: str) -> bool:
    return ImageRef.parse(container.get("image", "")).repository == repository


@dataclass
class TaskDefinitionService:
    """Mints new task definition revisions from an existing one."""

    control_plane: ControlPlane

    async def describe(self, task_definition: str) -> dict[str, Any]:
        return await self.control_plane.describe_task_definition(task_definition)

    async def register_with_image(
        self, base: dict[str, Any], target: ImageRef | None
    ) -> dict[str, Any]:
        """Register a new revision of ``base`` using ``target`` as image.

        The base revision is left untouched so it stays addressable for
        rollback. Every call mints a new revision; retrying only produces an
        extra, identical revision.
        """
        containers = with_image(base, target)

        if target is not None and not any(
            _uses_repository(c, target.repository) for c in containers
        ):
            logger.warning(
                "No container in %s uses repository %s; registering unchanged",
                base.get("family"),
                target.repository,
            )

        fields = {key: base[key] for key in REGISTRABLE_FIELDS if base.get(key) is not None}
        registered = await self.control_plane.register_task_definition(
            containerDefinitions=containers,
            **fields,
        )
        logger.info("Registered task definition %s", registered.get("taskDefinitionArn"))
        return registered
