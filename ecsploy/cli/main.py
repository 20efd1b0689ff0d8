"""Main CLI application using Cyclopts.

Each command builds a request, resolves its handler from the DI container
and runs it on a fresh event loop. Any ecsploy error ends the process with a
single error line and exit code 1.
"""

import asyncio
import sys
from typing import Annotated, Any, NoReturn

import cyclopts
from pydantic import ValidationError

from ecsploy import __version__
from ecsploy.application.di import create_container
from ecsploy.cli.console import get_console
from ecsploy.config import Config, configure_logging
from ecsploy.domain.deploy.command import (
    DeployHandler,
    RegisterTaskDefinitionHandler,
    RunTaskHandler,
)
from ecsploy.domain.deploy.model.value import (
    DeployRequest,
    DeployResult,
    RegisterRequest,
    RunRequest,
    RunResult,
)
from ecsploy.domain.shared.command import Command, CommandHandler, Result
from ecsploy.domain.shared.error import EcsployError

app = cyclopts.App(
    name="ecsploy",
    help="Deploy images to ECS services and run one-off ECS tasks.",
    version=__version__,
)

Cluster = Annotated[str, cyclopts.Parameter(name=["--cluster", "-c"])]
Image = Annotated[str, cyclopts.Parameter(name=["--image", "-i"])]
Profile = Annotated[str, cyclopts.Parameter(name=["--profile", "-p"])]
Region = Annotated[str, cyclopts.Parameter(name=["--region", "-r"])]
Timeout = Annotated[int | None, cyclopts.Parameter(name=["--timeout", "-t"])]
BaseTaskDefinition = Annotated[str, cyclopts.Parameter(name=["--base-task-definition", "-d"])]


def _load_config(profile: str = "", region: str = "") -> Config:
    """Load config and apply command line AWS overrides."""
    config = Config()  # type: ignore[call-arg]
    overrides = {key: value for key, value in (("profile", profile), ("region", region)) if value}
    if overrides:
        config.aws = config.aws.model_copy(update=overrides)
    configure_logging(config.logging)
    return config


def _execute(config: Config, handler_type: type[CommandHandler[Any, Any]], cmd: Command) -> Any:
    """Resolve ``handler_type`` and run ``cmd`` on a new event loop."""

    async def _run() -> Result:
        container = create_container(config)
        try:
            async with container() as scope:
                handler = await scope.get(handler_type)
                return await handler.run(cmd)
        finally:
            await container.close()

    return asyncio.run(_run())


def _fail(error: Exception) -> NoReturn:
    console = get_console()
    console.error(str(error))
    result = getattr(error, "result", None)
    if isinstance(result, DeployResult):
        console.deploy_result(result)
    elif isinstance(result, RunResult):
        console.run_result(result)
    sys.exit(1)


@app.command
def deploy(
    cluster: Cluster,
    service_name: Annotated[str, cyclopts.Parameter(name=["--service-name", "-n"])],
    image: Image = "",
    profile: Profile = "",
    region: Region = "",
    timeout: Timeout = None,
    enable_rollback: bool = False,
) -> None:
    """Deploy a new image to an ECS service.

    Args:
        cluster: Name of ECS cluster.
        service_name: Name of service to deploy.
        image: Docker image to deploy, ex: repo/image:latest. Empty redeploys the current image.
        profile: AWS profile to use.
        region: AWS region name.
        timeout: Timeout seconds. The service is watched until the new revision is running.
        enable_rollback: Roll back to the previous task definition if the new one is not running before TIMEOUT.
    """
    console = get_console()
    config = _load_config(profile, region)
    try:
        request = DeployRequest(
            cluster=cluster,
            service_name=service_name,
            image=image,
            timeout=timeout or config.observer.timeout,
            rollback=enable_rollback,
        )
        with console.status(f"Deploying {service_name}..."):
            result: DeployResult = _execute(config, DeployHandler, request)
    except (EcsployError, ValidationError) as e:
        _fail(e)

    console.success("Deploy success")
    console.deploy_result(result)


@app.command
def run(
    cluster: Cluster,
    container_name: Annotated[str, cyclopts.Parameter(name=["--container-name", "-n"])],
    base_task_definition: BaseTaskDefinition,
    image: Image = "",
    command: str = "",
    profile: Profile = "",
    region: Region = "",
    timeout: Timeout = None,
) -> None:
    """Run a one-off ECS task and wait for it to exit.

    Args:
        cluster: Name of ECS cluster.
        container_name: Name of the container whose command is overridden.
        base_task_definition: Task definition (family, family:revision or ARN) to run.
        image: Docker image to run, ex: repo/image:latest. Empty keeps the current image.
        command: Command to run in the container, ex: "bundle exec rake db:migrate".
        profile: AWS profile to use.
        region: AWS region name.
        timeout: Timeout seconds. The task is watched until it stops.
    """
    console = get_console()
    config = _load_config(profile, region)
    try:
        request = RunRequest(
            cluster=cluster,
            container_name=container_name,
            base_task_definition=base_task_definition,
            image=image,
            command=command,
            timeout=timeout or config.observer.timeout,
        )
        with console.status("Running task..."):
            result: RunResult = _execute(config, RunTaskHandler, request)
    except (EcsployError, ValidationError) as e:
        _fail(e)

    console.success("Run task success")
    console.run_result(result)


@app.command
def register(
    base_task_definition: BaseTaskDefinition,
    image: Image = "",
    profile: Profile = "",
    region: Region = "",
) -> None:
    """Register a new task definition revision with a replaced image.

    Args:
        base_task_definition: Task definition (family, family:revision or ARN) to copy.
        image: Docker image to set, ex: repo/image:latest. Empty copies the definition as is.
        profile: AWS profile to use.
        region: AWS region name.
    """
    console = get_console()
    config = _load_config(profile, region)
    try:
        request = RegisterRequest(base_task_definition=base_task_definition, image=image)
        result = _execute(config, RegisterTaskDefinitionHandler, request)
    except (EcsployError, ValidationError) as e:
        _fail(e)

    console.success(f"Registered {result.task_definition_arn}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
