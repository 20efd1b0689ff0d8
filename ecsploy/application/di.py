from dishka import AsyncContainer, make_async_container

from ecsploy.config import Config
from ecsploy.domain.deploy.util.di import DeployProvider
from ecsploy.infrastructure.aws.di import AwsProvider
from ecsploy.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        AwsProvider(),
        DeployProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
