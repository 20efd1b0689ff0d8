from ecsploy.domain.deploy.port.control_plane import ControlPlane

__all__ = [
    "ControlPlane",
]
