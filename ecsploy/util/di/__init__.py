from ecsploy.util.di.base import Provider
from ecsploy.util.di.scope import Scope

__all__ = [
    "Provider",
    "Scope",
]
