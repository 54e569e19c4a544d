"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich for spinners, colored output and formatted summaries. Supports
verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, List

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner

from .models import SyncSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Collection updated")
        >>> with handler.spinner("Fetching collection..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Args:
            message: Message to display with spinner

        Example:
            >>> with handler.spinner("Converting specifications..."):
            ...     pass
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_removals(self, removed_folders: List[str], removed_requests: List[str]) -> None:
        """Display folders and requests no longer present in the generated collection.

        Args:
            removed_folders: Folder keys missing from the generated collection
            removed_requests: Request keys missing from the generated collection
        """
        if not removed_folders and not removed_requests:
            self.console.print("[green]No removals detected.[/green]")
            return

        self.console.print("[yellow]Detected removals vs Postman:[/yellow]")
        for key in removed_folders:
            self.console.print(f"  - folder: {key}")
        for key in removed_requests:
            self.console.print(f"  - request: {key}")

    def print_summary(self, summary: SyncSummary) -> None:
        """Display the result of a sync run.

        Args:
            summary: Counts and flags collected during the run
        """
        title = "Dry Run - Payload Preview" if summary.dry_run else "Sync Summary"
        self.console.print(f"\n[bold]{title}:[/bold]")
        self.console.print(f"  Strategy: {summary.strategy}")
        self.console.print(
            f"  Payload: {summary.folder_count} folder(s), {summary.request_count} request(s)"
        )

        if summary.preserved_count > 0:
            self.console.print(
                f"  [blue]↺[/blue] Preserved metadata on {summary.preserved_count} item(s)"
            )

        removed = len(summary.removed_folders) + len(summary.removed_requests)
        if removed > 0:
            verb = "Dropped" if summary.strategy == "replace" else "Kept (no longer generated)"
            self.console.print(f"  [yellow]−[/yellow] {verb}: {removed} item(s)")

        if summary.dry_run:
            self.console.print("\n[yellow]Dry run: nothing was written to Postman[/yellow]")
        elif summary.created:
            self.console.print("\n[green]Collection created successfully[/green]")
        else:
            self.console.print("\n[green]Collection updated successfully[/green]")
