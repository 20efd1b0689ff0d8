from dishka import provide

from ecsploy.config import Config
from ecsploy.domain.deploy.command import (
    DeployHandler,
    RegisterTaskDefinitionHandler,
    RunTaskHandler,
)
from ecsploy.domain.deploy.service.observer import Observer
from ecsploy.domain.deploy.service.task_definition import TaskDefinitionService
from ecsploy.util.di.base import Provider
from ecsploy.util.di.scope import Scope


class DeployProvider(Provider):
    task_definitions = provide(TaskDefinitionService, scope=Scope.COMMAND)
    deploy_handler = provide(DeployHandler, scope=Scope.COMMAND)
    run_handler = provide(RunTaskHandler, scope=Scope.COMMAND)
    register_handler = provide(RegisterTaskDefinitionHandler, scope=Scope.COMMAND)

    @provide(scope=Scope.COMMAND)
    def get_observer(self, config: Config) -> Observer:
        return Observer(poll_interval=config.observer.poll_interval)
