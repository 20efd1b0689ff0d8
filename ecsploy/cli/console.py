"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
All CLI output should go through this module.
"""

from rich.console import Console as RichConsole
from rich.table import Table

from ecsploy.domain.deploy.model.value import DeployResult, RunResult


class Console:
    """CLI output manager wrapping rich.

    Status lines go to stdout, errors to stderr.
    """

    def __init__(self, *, force_terminal: bool | None = None) -> None:
        """Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None).
        """
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        """Print a success message."""
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def deploy_result(self, result: DeployResult) -> None:
        """Print the revisions involved in a deploy."""
        table = Table(show_header=False, box=None)
        table.add_row("[dim]Service[/dim]", result.service_name)
        table.add_row("[dim]Task definition[/dim]", result.task_definition_arn)
        table.add_row("[dim]Previous[/dim]", result.previous_task_definition_arn)
        if result.rolled_back:
            table.add_row("[dim]Rolled back[/dim]", "yes")
        elif result.rollback_error:
            table.add_row("[dim]Rollback error[/dim]", result.rollback_error)
        self._console.print(table)

    def run_result(self, result: RunResult) -> None:
        """Print the tasks started by a run."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", style="dim", width=3)
        table.add_column("Task")
        for i, arn in enumerate(result.task_arns, 1):
            table.add_row(str(i), arn)
        self._console.print(table)

    def status(self, message: str):
        """Return a status context manager for long operations.

        Usage:
            with console.status("Waiting..."):
                do_something()
        """
        return self._console.status(message)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
