"""Progress reporting for traversal runs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.status import Status


@runtime_checkable
class ProgressListener(Protocol):
    """Receives "files processed / approximate total" updates."""

    def update(self, processed: int, total: int, label: str) -> None:
        ...


class StatusProgress:
    """Render progress on a rich status spinner.

    Usage:
        with console.status("Collecting related files...") as status:
            run(root, policy, progress=StatusProgress(status))
    """

    def __init__(self, status: Status) -> None:
        self._status = status

    def update(self, processed: int, total: int, label: str) -> None:
        self._status.update(f"[bold green]{label}[/bold green] ({processed}/{total})")

