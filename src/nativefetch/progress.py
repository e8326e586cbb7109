"""Download and extraction progress reporting."""

from __future__ import annotations

from collections.abc import Callable

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    ProgressColumn,
    TaskID,
    TaskProgressColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

ProgressCallback = Callable[[str, int, int | None], None]
# Signature: (artifact_name, current, total_or_none)


class PhaseProgress:
    """A rich ``Progress`` display for one phase, started on first update."""

    def __init__(self, verb: str, *columns: ProgressColumn) -> None:
        self.verb = verb
        self.columns = columns
        self.progress: Progress | None = None
        self._tasks: dict[str, TaskID] = {}

    def update(self, artifact_name: str, current: int, total: int | None) -> None:
        if self.progress is None:
            self.progress = Progress("[progress.description]{task.description}", BarColumn(), *self.columns, TimeRemainingColumn())
            self.progress.start()
        if artifact_name not in self._tasks:
            self._tasks[artifact_name] = self.progress.add_task(f"{self.verb} {artifact_name}", total=total)
        task_id = self._tasks[artifact_name]
        if total and self.progress.tasks[task_id].total != total:
            self.progress.update(task_id, total=total)
        self.progress.update(task_id, completed=current)
        if total and current >= total:
            self._tasks.pop(artifact_name)
            if not self._tasks:
                self.stop()

    def stop(self) -> None:
        if self.progress is not None:
            self.progress.stop()
            self.progress = None
        self._tasks.clear()


class RichProgressHandler:
    """Rich-based progress display with separate download and extraction bars."""

    def __init__(self) -> None:
        self.download = PhaseProgress("Downloading", DownloadColumn(), TransferSpeedColumn())
        self.extract = PhaseProgress("Extracting", TaskProgressColumn())

    def on_download(self, artifact_name: str, downloaded: int, total: int | None) -> None:
        """Report download progress for an artifact."""
        self.download.update(artifact_name, downloaded, total)

    def on_extract(self, artifact_name: str, extracted: int, total: int | None) -> None:
        """Report extraction progress for an artifact."""
        # A download without Content-Length never completes on its own
        self.download.stop()
        self.extract.update(artifact_name, extracted, total)

    def close(self) -> None:
        """Stop both displays, also for bars whose total was never known."""
        self.download.stop()
        self.extract.stop()
