from typing import List, Tuple
from battle.model import Event

class EventLog:
    """Append-only record of everything a battle produced."""

    def __init__(self):
        self._log: List[Event] = []

    def __len__(self) -> int:
        return len(self._log)

    def append_many(self, evts: List[Event]) -> Tuple[int, int]:
        """Append events and return (start_offset, end_offset)."""
        start = len(self._log)
        self._log.extend(evts)
        end = len(self._log) - 1
        return start, end

    def of_kind(self, kind: str) -> List[Event]:
        return [e for e in self._log if e.kind == kind]
