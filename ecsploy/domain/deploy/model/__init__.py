from ecsploy.domain.deploy.model.image import ImageRef
from ecsploy.domain.deploy.model.value import (
    DeployRequest,
    DeployResult,
    Observation,
    ObservationStatus,
    RegisterRequest,
    RegisterResult,
    RunRequest,
    RunResult,
)

__all__ = [
    "DeployRequest",
    "DeployResult",
    "ImageRef",
    "Observation",
    "ObservationStatus",
    "RegisterRequest",
    "RegisterResult",
    "RunRequest",
    "RunResult",
]
