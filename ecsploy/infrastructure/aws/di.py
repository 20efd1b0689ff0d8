from dishka import provide

from ecsploy.config import Config
from ecsploy.domain.deploy.port.control_plane import ControlPlane
from ecsploy.infrastructure.aws.control_plane import create_control_plane
from ecsploy.util.di.base import Provider
from ecsploy.util.di.scope import Scope


class AwsProvider(Provider):
    @provide(scope=Scope.APP)
    def get_control_plane(self, config: Config) -> ControlPlane:
        return create_control_plane(config.aws)
