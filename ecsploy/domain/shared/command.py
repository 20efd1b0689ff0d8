"""Command and CommandHandler base classes.

Handlers are dataclasses whose fields are their collaborators. Every
``run()`` is traced in a logfire span named after the handler class.
"""

from abc import ABCMeta, abstractmethod
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from typing import Any, Generic, TypeVar, dataclass_transform

import logfire
from pydantic import BaseModel


class Command(BaseModel): ...


class Result(BaseModel): ...


C = TypeVar("C", bound=Command)
R = TypeVar("R", bound=Result)

# Unbound async handler method: (self, cmd) -> Coroutine -> Result
_HandlerMethod = Callable[..., Coroutine[Any, Any, Any]]


def _wrap_run_with_span(cls: type, original_run: _HandlerMethod) -> _HandlerMethod:
    """Wrap the run() method in a logfire span."""

    @wraps(original_run)
    async def traced_run(self: Any, cmd: Any) -> Any:
        with logfire.span(cls.__name__, command=type(cmd).__name__):
            return await original_run(self, cmd)

    return traced_run


@dataclass_transform()
class _CommandHandlerMeta(ABCMeta):
    """Metaclass that combines ABC with auto-dataclass and tracing for subclasses."""

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            cls = dataclass(cls)

            original_run = cls.__dict__.get("run")
            if original_run is not None:
                cls.run = _wrap_run_with_span(cls, original_run)

        return cls


class CommandHandler(Generic[C, R], metaclass=_CommandHandlerMeta):
    """Base class for command handlers. Subclasses are automatically dataclasses.

        class DeployHandler(CommandHandler[DeployRequest, DeployResult]):
            control_plane: ControlPlane
            observer: Observer

            async def run(self, cmd: DeployRequest) -> DeployResult: ...
    """

    @abstractmethod
    async def run(self, cmd: C) -> R: ...
