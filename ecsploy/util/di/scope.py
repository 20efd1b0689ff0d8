"""Custom Dishka scopes for ecsploy."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """ecsploy dependency injection scopes.

    Hierarchy: APP -> COMMAND

    - APP: Process lifetime (config, AWS clients)
    - COMMAND: A single deploy, run or register invocation
    """

    APP = new_scope("APP")
    COMMAND = new_scope("COMMAND")
