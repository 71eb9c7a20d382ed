from typing import Iterable, List, Mapping, Optional

from linkcheck.core.models import LinkStatus, ResultEntry, Summary


def summarize(entries: Iterable[ResultEntry]) -> Summary:
    total = valid = 0
    for entry in entries:
        total += 1
        if entry.status.valid:
            valid += 1
    return Summary(total=total, valid=valid, invalid=total - valid)


class Aggregator:
    """Merges per-source batches of verdicts into one flat, arrival-ordered list."""

    def __init__(self):
        self._entries: List[ResultEntry] = []

    def add_batch(self, statuses: Iterable[LinkStatus], source: str, lines: Optional[Mapping[int, Optional[int]]] = None) -> None:
        lines = lines or {}
        for status in statuses:
            self._entries.append(ResultEntry(status=status, source=source, line=lines.get(status.index)))

    def entries(self, only_dead: bool = False) -> List[ResultEntry]:
        if only_dead:
            return [entry for entry in self._entries if not entry.status.valid]
        return list(self._entries)

    def summary(self, only_dead: bool = False) -> Summary:
        return summarize(self.entries(only_dead))

    def __len__(self):
        return len(self._entries)
