"""Unit tests for RegisterTaskDefinitionHandler."""

from unittest.mock import AsyncMock

import pytest

from ecsploy.domain.deploy.command.register import RegisterTaskDefinitionHandler
from ecsploy.domain.deploy.model.value import RegisterRequest
from ecsploy.domain.deploy.service.task_definition import TaskDefinitionService

NEW_ARN = "arn:aws:ecs:us-east-1:123456789012:task-definition/web:8"


def _make_handler() -> tuple[RegisterTaskDefinitionHandler, AsyncMock]:
    control_plane = AsyncMock()
    control_plane.describe_task_definition.return_value = {
        "family": "web",
        "revision": 7,
        "containerDefinitions": [{"name": "web", "image": "repo/web:v1"}],
    }
    control_plane.register_task_definition.return_value = {
        "taskDefinitionArn": NEW_ARN,
        "family": "web",
        "revision": 8,
    }
    handler = RegisterTaskDefinitionHandler(
        task_definitions=TaskDefinitionService(control_plane=control_plane)
    )
    return handler, control_plane


class TestRegisterTaskDefinition:
    @pytest.mark.asyncio
    async def test_registers_new_revision(self):
        handler, control_plane = _make_handler()

        result = await handler.run(RegisterRequest(base_task_definition="web", image="repo/web:v2"))

        assert result.task_definition_arn == NEW_ARN
        assert result.family == "web"
        assert result.revision == 8
        control_plane.describe_task_definition.assert_awaited_once_with("web")
        containers = control_plane.register_task_definition.call_args.kwargs["containerDefinitions"]
        assert containers == [{"name": "web", "image": "repo/web:v2"}]

    @pytest.mark.asyncio
    async def test_without_image_copies_definition(self):
        handler, control_plane = _make_handler()

        await handler.run(RegisterRequest(base_task_definition="web:7"))

        containers = control_plane.register_task_definition.call_args.kwargs["containerDefinitions"]
        assert containers == [{"name": "web", "image": "repo/web:v1"}]
        control_plane.update_service.assert_not_called()
        control_plane.run_task.assert_not_called()
