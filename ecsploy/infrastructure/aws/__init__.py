from ecsploy.infrastructure.aws.control_plane import EcsControlPlane, create_control_plane
from ecsploy.infrastructure.aws.session import create_session

__all__ = [
    "EcsControlPlane",
    "create_control_plane",
    "create_session",
]
