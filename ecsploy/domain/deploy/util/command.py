"""Shell-style tokenizing of task command overrides."""

import shlex

from ecsploy.domain.shared.error import CommandParseError


def tokenize_command(command: str) -> list[str]:
    """Split a shell-style command string into an argument vector.

    Quoting and escaping follow POSIX shell rules. An empty (or blank) string
    yields ``[]``, meaning the container's default command is kept.

    Raises:
        CommandParseError: On unbalanced quotes or a trailing escape.
    """
    if not command or not command.strip():
        return []
    try:
        return shlex.split(command)
    except ValueError as e:
        raise CommandParseError(str(e)) from e
