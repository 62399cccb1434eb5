"""Rich-based progress display for AssessPO optimization runs."""

from __future__ import annotations

import sys

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)


def _is_interactive() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


class ProgressDisplay:
    """Progress bar + status line for a single optimization run."""

    def __init__(self, max_rounds: int, verbose: bool = True):
        self._rich = verbose and _is_interactive()
        self._text = verbose and not _is_interactive()
        self._max_rounds = max_rounds
        self._progress: Progress | None = None
        self._task_id = None
        self._console = Console(stderr=True) if self._rich else None

    def start(self) -> None:
        if not self._rich:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]Optimizing"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TextColumn("best: {task.fields[best]:.1f}/20"),
            console=self._console,
        )
        self._task_id = self._progress.add_task(
            "optimize", total=self._max_rounds, best=0.0,
        )
        self._progress.start()

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

    def set_status(self, text: str) -> None:
        if self._progress is None:
            return
        self._progress.update(self._task_id, description=f"[dim]  ↳ {text}")

    def complete_round(self, round_index: int, score: float, grade: str, best: float) -> None:
        if self._rich and self._progress is not None:
            self._progress.update(self._task_id, advance=1, best=best)
            arrow = "↑" if score >= best else " "
            self._progress.console.print(
                f"  [dim]Round {round_index + 1}  score={score:.1f}  "
                f"grade={grade} {arrow}[/dim]"
            )
        elif self._text:
            arrow = "^" if score >= best else " "
            print(
                f"  Round {round_index + 1}/{self._max_rounds}  "
                f"score={score:.1f}  grade={grade}  best={best:.1f} {arrow}",
                file=sys.stderr,
            )

    def finish(self, score: float, grade: str, rounds: int, goal_met: bool) -> None:
        self.stop()
        outcome = "goal met" if goal_met else "iteration cap reached"
        if self._rich and self._console is not None:
            self._console.print(f"\n[bold green]✓ Optimization complete[/bold green] ({outcome})")
            self._console.print(f"  Score: {score:.1f}/20  Grade: {grade}")
            self._console.print(f"  Rounds: {rounds}")
        elif self._text:
            print(f"\nOptimization complete ({outcome})", file=sys.stderr)
            print(f"  Score: {score:.1f}/20  Grade: {grade}", file=sys.stderr)
            print(f"  Rounds: {rounds}", file=sys.stderr)
