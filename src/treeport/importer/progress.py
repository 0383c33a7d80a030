"""
Progress Reporting Module.

Wraps a Rich progress bar for the import row loop. Progress is cosmetic: it
is advanced in batches of rows and disappears entirely in quiet mode.
"""

from typing import Optional

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

DEFAULT_PROGRESS_INTERVAL = 1_000


class ProgressManager:
    """
    Manages the Rich progress bar of one import.

    This class decouples the visual presentation logic from the transcoding
    loop. Rows are counted locally and pushed to the bar every
    `update_interval` rows, and once more when the context exits.
    """

    def __init__(
        self,
        name: str,
        total: int,
        quiet: bool = False,
        update_interval: int = DEFAULT_PROGRESS_INTERVAL,
    ):
        """
        Args:
            name (str): Label of the bar (the target store name).
            total (int): Number of rows to import.
            quiet (bool): Disable all progress output.
            update_interval (int): Rows between two bar refreshes.
        """
        self.name = name
        self.total = total
        self.update_interval = max(1, update_interval)
        self.progress = Progress(
            TextColumn("[bold cyan]{task.fields[name]}"),
            BarColumn(),
            MofNCompleteColumn(),
            "[progress.percentage]{task.percentage:>3.1f}%",
            "•",
            TimeRemainingColumn(),
            "•",
            TimeElapsedColumn(),
            expand=True,
            disable=quiet,
        )
        self.task: Optional[TaskID] = None
        self._pending = 0

    def setup(self):
        """Creates the progress task. Must be called before the row loop starts."""
        self.task = self.progress.add_task("", total=self.total, name=self.name)

    def advance(self):
        """Counts one imported row; refreshes the bar every `update_interval` rows."""
        self._pending += 1
        if self._pending >= self.update_interval:
            self.flush()

    def flush(self):
        if self.task is not None and self._pending:
            self.progress.advance(self.task, self._pending)
        self._pending = 0

    def update_status(self, status: str, style: str = "white"):
        """
        Updates the label of the bar, e.g. to flag a failure.

        Args:
            status: The status message to display.
            style: The rich style string (e.g., 'red', 'bold yellow').
        """
        if self.task is not None:
            self.progress.update(self.task, name=f"[{style}]{self.name}: {status}")

    def __enter__(self) -> "ProgressManager":
        self.progress.start()
        self.setup()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.flush()
        if exc_type is not None:
            self.update_status("Failed", "red")
        self.progress.stop()
