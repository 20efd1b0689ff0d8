"""Error hierarchy for ecsploy.

Error layers:
- EcsployError: Base class for all ecsploy errors
- DomainError: Invalid input, failed or timed out deploys and task runs
- InfrastructureError: Control plane and configuration failures

The CLI maps every EcsployError to a single error line and exit code 1.
"""

from typing import Any


class EcsployError(Exception):
    """Base class for all ecsploy errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(EcsployError):
    """Base class for domain errors."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class MalformedImageReference(ValidationError):
    """Image reference is not of the form ``repository:tag``."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Malformed image reference: {value!r}", field="image")
        self.value = value


class CommandParseError(ValidationError):
    """Task command could not be split into arguments."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Parse error in a task command: {message}", field="command")


class EntityFailure(DomainError):
    """An observed task or service reached a terminal but unsuccessful state.

    ``result`` carries the partial deploy/run result (including rollback
    outcome) when one is available.
    """

    def __init__(
        self,
        detail: str,
        exit_code: int | None = None,
        result: Any = None,
    ) -> None:
        super().__init__(detail, code="ENTITY_FAILURE")
        self.detail = detail
        self.exit_code = exit_code
        self.result = result


class DeploymentTimeout(DomainError):
    """Deadline elapsed before the observed entities converged."""

    def __init__(self, message: str = "process timeout", result: Any = None) -> None:
        super().__init__(message, code="TIMED_OUT")
        self.result = result


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(EcsployError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """The ECS control plane is unavailable or failed."""


class RemoteSubmissionFailure(ExternalServiceError):
    """The control plane rejected a request or reported inline failures."""


class TransientPollError(ExternalServiceError):
    """A read during polling failed. Retried on the next tick."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
