"""Requests, results and observation outcomes for deploys and task runs."""

from enum import StrEnum

from pydantic import Field, field_validator

from ecsploy.domain.deploy.model.image import ImageRef
from ecsploy.domain.shared.command import Command, Result
from ecsploy.domain.shared.model.value import ValueObject

DEFAULT_TIMEOUT_SECONDS = 300


# =============================================================================
# Observation
# =============================================================================


class ObservationStatus(StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class Observation(ValueObject):
    """Terminal outcome of watching a service rollout or a set of tasks."""

    status: ObservationStatus
    detail: str | None = None
    exit_code: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == ObservationStatus.SUCCEEDED


# =============================================================================
# Commands
# =============================================================================


class ImageCommand(Command):
    """Command carrying an optional replacement image.

    ``None`` (or an empty string from the CLI) keeps the current image and
    only mints a fresh revision.
    """

    image: ImageRef | None = None

    @field_validator("image", mode="before")
    @classmethod
    def parse_image(cls, value: ImageRef | str | None) -> ImageRef | None:
        if value is None or isinstance(value, ImageRef):
            return value
        if not value:
            return None
        return ImageRef.parse(value)


class DeployRequest(ImageCommand):
    """Roll a service onto a new task definition revision."""

    cluster: str
    service_name: str
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    rollback: bool = False


class RunRequest(ImageCommand):
    """Run a one-off task from a base task definition."""

    cluster: str
    container_name: str
    base_task_definition: str
    command: str = ""
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)


class RegisterRequest(ImageCommand):
    """Register a new revision of a task definition with a replaced image."""

    base_task_definition: str


# =============================================================================
# Results
# =============================================================================


class DeployResult(Result):
    service_name: str
    task_definition_arn: str
    previous_task_definition_arn: str
    observation: Observation
    rolled_back: bool = False
    rollback_error: str | None = None


class RunResult(Result):
    task_definition_arn: str
    task_arns: list[str] = Field(default_factory=list)
    observation: Observation


class RegisterResult(Result):
    task_definition_arn: str
    family: str | None = None
    revision: int | None = None
