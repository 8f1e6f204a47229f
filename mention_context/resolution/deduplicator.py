"""Deduplication of resolved files and symbols."""

import logging

from ..models import FileEntry
from ..models import SymbolEntry

logger = logging.getLogger(__name__)


def ranges_touch(first: tuple[int, int], second: tuple[int, int]) -> bool:
    """True when two inclusive line ranges overlap or are adjacent."""
    return second[0] <= first[1] + 1 and second[1] >= first[0] - 1


def merge_ranged_entries(first: FileEntry, second: FileEntry) -> FileEntry | None:
    """Merge two ranged entries of one file into their union range.

    The union content is rebuilt line by line from the two slices, so no
    re-read is needed. Returns None when the ranges are disjoint.
    """
    if first.line_range is None or second.line_range is None:
        raise ValueError("merge_ranged_entries requires two ranged entries")
    if not ranges_touch(first.line_range, second.line_range):
        return None

    lines: dict[int, str] = {}
    for entry in (first, second):
        start = entry.line_range[0]
        for offset, line in enumerate(entry.content.split("\n")):
            lines.setdefault(start + offset, line)

    start = min(first.line_range[0], second.line_range[0])
    end = max(first.line_range[1], second.line_range[1])
    content = "\n".join(lines.get(number, "") for number in range(start, end + 1))
    return first.model_copy(update={"content": content, "line_range": (start, end)})


class ContextDeduplicator:
    """Collapses duplicate files by path and duplicate symbols by identity.

    Files keep the position of the first mention of their path:
    - a whole-file entry beats any ranged entry, whatever the order
    - of two whole-file entries the first one is kept
    - overlapping or adjacent ranges merge into their union
    - a range disjoint from the kept one is dropped

    Symbols are keyed by (name, file, line); the later entry wins.
    """

    def __init__(self) -> None:
        self._files_by_path: dict[str, FileEntry] = {}
        self._symbols_by_key: dict[tuple[str, str, int], SymbolEntry] = {}

    def add_file(self, entry: FileEntry) -> None:
        existing = self._files_by_path.get(entry.path)
        if existing is None:
            self._files_by_path[entry.path] = entry
            return
        self._files_by_path[entry.path] = self._combine(existing, entry)

    def add_symbol(self, symbol: SymbolEntry) -> None:
        self._symbols_by_key[symbol.key] = symbol

    def get_unique_files(self) -> tuple[FileEntry, ...]:
        return tuple(self._files_by_path.values())

    def get_unique_symbols(self) -> tuple[SymbolEntry, ...]:
        return tuple(self._symbols_by_key.values())

    @staticmethod
    def _combine(existing: FileEntry, incoming: FileEntry) -> FileEntry:
        if existing.is_whole_file:
            return existing
        if incoming.is_whole_file:
            return incoming

        merged = merge_ranged_entries(existing, incoming)
        if merged is None:
            logger.debug(
                f"Dropping disjoint range {incoming.line_range} of {incoming.path}; keeping {existing.line_range}"
            )
            return existing
        return merged


def deduplicate(
    files: tuple[FileEntry, ...], symbols: tuple[SymbolEntry, ...]
) -> tuple[tuple[FileEntry, ...], tuple[SymbolEntry, ...]]:
    """Run one deduplication pass over resolved files and symbols."""
    deduplicator = ContextDeduplicator()
    for entry in files:
        deduplicator.add_file(entry)
    for symbol in symbols:
        deduplicator.add_symbol(symbol)
    return deduplicator.get_unique_files(), deduplicator.get_unique_symbols()
