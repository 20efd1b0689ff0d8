from ecsploy.domain.deploy.command.deploy import DeployHandler
from ecsploy.domain.deploy.command.register import RegisterTaskDefinitionHandler
from ecsploy.domain.deploy.command.run import RunTaskHandler

__all__ = [
    "DeployHandler",
    "RegisterTaskDefinitionHandler",
    "RunTaskHandler",
]
