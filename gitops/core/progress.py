"""Terminal rendering of clone transfer progress with rich."""

from collections.abc import Generator
from contextlib import contextmanager

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
)


class RichProgressCallback:
    """Draws one rich task per transfer phase.

    The task's ``detail`` field mirrors the item description passed to
    on_progress and is blank otherwise. A phase's bar disappears when the
    phase completes, so only the running phase is on screen.
    """

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self.task_id: TaskID | None = None

    def on_start(self, total: int, description: str) -> None:
        self.task_id = self.progress.add_task(description, total=total, detail="")

    def on_progress(self, current: int, item_description: str | None = None) -> None:
        # Updates that arrive outside a phase have no bar to move
        if self.task_id is not None:
            self.progress.update(self.task_id, completed=current, detail=item_description or "")

    def on_complete(self) -> None:
        if self.task_id is not None:
            self.progress.remove_task(self.task_id)
            self.task_id = None

    @contextmanager
    def paused(self) -> Generator[None, None, None]:
        """Stop the live display while the terminal is needed for input.

        The live display captures stderr, so a prompt written there could
        stay hidden while the terminal waits for the answer.
        """
        self.progress.stop()
        try:
            yield
        finally:
            self.progress.start()


@contextmanager
def progress_context(
    quiet_mode: bool = False,
) -> Generator[RichProgressCallback | None, None, None]:
    """Live transfer display for the duration of a clone.

    Args:
        quiet_mode: Draw nothing and yield None.

    Yields:
        RichProgressCallback bound to a transient rich Progress, or None.
    """
    if quiet_mode:
        yield None
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("[cyan]{task.fields[detail]}"),
        transient=True,
    ) as progress:
        yield RichProgressCallback(progress)
