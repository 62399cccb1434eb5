"""Bounded record of recent optimization rounds."""

from assesspo.types import OptimizationEntry


class HistoryBuffer:
    """Keeps the most recent ``capacity`` entries, oldest first."""

    def __init__(self, capacity: int = 2) -> None:
        if capacity < 0:
            raise ValueError("HistoryBuffer capacity must be >= 0")
        self._capacity = capacity
        self._entries: list[OptimizationEntry] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(self, entry: OptimizationEntry) -> None:
        """Append an entry, evicting from the front once over capacity."""
        self._entries.append(entry)
        if len(self._entries) > self._capacity:
            del self._entries[: len(self._entries) - self._capacity]

    def recent(self) -> tuple[OptimizationEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
