"""Transfer progress port.

Clones report what git is doing as a sequence of named phases
("Counting objects", "Receiving objects", "Resolving deltas"). The adapter
that parses git's output calls into this protocol; the CLI decides how, or
whether, to draw it.
"""

from typing import Protocol


class ProgressCallback(Protocol):
    """Receiver for phase-by-phase transfer progress.

    Every phase is bracketed by exactly one on_start and one on_complete,
    and phases never overlap: the next on_start only follows the previous
    phase's on_complete. A failed transfer still completes the phase it
    was in.
    """

    def on_start(self, total: int, description: str) -> None:
        """Begin a phase.

        Args:
            total: Object count git announced for the phase.
            description: Phase name as git prints it, e.g. "Receiving objects".
        """
        ...

    def on_progress(self, current: int, item_description: str | None = None) -> None:
        """Report how many of the phase's objects are done.

        Args:
            current: Objects processed so far; never exceeds the phase total.
            item_description: Free-form detail about the current step. The
                git relay leaves it unset.
        """
        ...

    def on_complete(self) -> None:
        """End the current phase."""
        ...
