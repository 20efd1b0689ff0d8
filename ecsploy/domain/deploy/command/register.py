from ecsploy.domain.deploy.model.value import RegisterRequest, RegisterResult
from ecsploy.domain.deploy.service.task_definition import TaskDefinitionService
from ecsploy.domain.shared.command import CommandHandler


class RegisterTaskDefinitionHandler(CommandHandler[RegisterRequest, RegisterResult]):
    """Mint a new task definition revision without deploying it."""

    task_definitions: TaskDefinitionService

    async def run(self, cmd: RegisterRequest) -> RegisterResult:
        base = await self.task_definitions.describe(cmd.base_task_definition)
        registered = await self.task_definitions.register_with_image(base, cmd.image)
        return RegisterResult(
            task_definition_arn=registered["taskDefinitionArn"],
            family=registered.get("family"),
            revision=registered.get("revision"),
        )
