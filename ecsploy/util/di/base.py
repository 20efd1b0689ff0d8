from dishka import Provider as DishkaProvider
from dishka import from_context

from ecsploy.config import Config
from ecsploy.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for ecsploy providers. Every provider can depend on Config."""

    config = from_context(provides=Config, scope=Scope.APP)
