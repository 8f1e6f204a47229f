"""Reduction stages used by the context optimizer.

Each stage is a pure function over tuples of frozen entries.
"""

import math
from datetime import datetime

from ..estimator import TokenEstimator
from ..estimator import estimate_tokens
from ..languages import language_priority
from ..metadata import file_tokens
from ..models import FileEntry
from ..models import SymbolEntry
from ..models import SymbolKind
from ..settings import EngineSettings

SYMBOL_KIND_PRIORITY: dict[SymbolKind, int] = {
    SymbolKind.FUNCTION: 10,
    SymbolKind.CLASS: 9,
    SymbolKind.METHOD: 8,
    SymbolKind.INTERFACE: 7,
    SymbolKind.TYPE: 6,
    SymbolKind.VARIABLE: 5,
    SymbolKind.CONSTANT: 4,
    SymbolKind.ENUM: 3,
}


def symbol_tokens(symbol: SymbolEntry, estimator: TokenEstimator, overhead: int) -> int:
    """Estimated cost of one symbol, including a fixed per-symbol overhead."""
    return (
        estimate_tokens(symbol.name, estimator)
        + estimate_tokens(symbol.content, estimator)
        + estimate_tokens(symbol.signature, estimator)
        + estimate_tokens(symbol.documentation, estimator)
        + overhead
    )


def footprint(
    files: tuple[FileEntry, ...],
    symbols: tuple[SymbolEntry, ...],
    estimator: TokenEstimator,
    symbol_overhead: int,
) -> int:
    """Combined file and symbol tokens; decides whether symbols are budgeted."""
    return file_tokens(files, estimator) + sum(symbol_tokens(s, estimator, symbol_overhead) for s in symbols)


def strip_file_metadata(files: tuple[FileEntry, ...]) -> tuple[FileEntry, ...]:
    return tuple(f.model_copy(update={"size": None, "last_modified": None, "git_status": None}) for f in files)


def prioritize_files(
    files: tuple[FileEntry, ...],
    prioritize_recent: bool = False,
    recency: dict[str, datetime] | None = None,
) -> tuple[FileEntry, ...]:
    """Order files from most to least worth keeping.

    Language rank dominates, then recency (newest first, when enabled),
    then smaller content. The sort is stable.

    Args:
        files: Files to order
        prioritize_recent: Use modification times as the second key
        recency: Modification times by path; falls back to each file's own
            ``last_modified`` so callers may strip metadata beforehand
    """
    recency = recency or {}

    def sort_key(entry: FileEntry) -> tuple[int, float, int]:
        age = 0.0
        if prioritize_recent:
            modified = recency.get(entry.path) or entry.last_modified
            age = -modified.timestamp() if modified is not None else math.inf
        return (-language_priority(entry.language), age, len(entry.content))

    return tuple(sorted(files, key=sort_key))


def truncate_content(content: str, settings: EngineSettings) -> str | None:
    """Keep roughly ``truncate_ratio`` of the lines: head and tail around one marker.

    Marker lines from earlier passes are discarded before counting, so the
    result always holds exactly one. Returns None when the content is too
    short to shrink meaningfully.
    """
    marker = settings.truncation_marker
    lines = [line for line in content.split("\n") if line != marker]
    target = math.floor(len(lines) * settings.truncate_ratio)
    if target < settings.min_truncated_lines:
        return None

    keep_head = math.floor(target * settings.head_ratio)
    keep_tail = target - keep_head
    tail = lines[len(lines) - keep_tail :] if keep_tail else []
    return "\n".join(lines[:keep_head] + [marker] + tail)


def largest_file_index(files: tuple[FileEntry, ...]) -> int:
    """Index of the first file with the longest content, or -1 if none."""
    largest = -1
    largest_size = -1
    for index, entry in enumerate(files):
        if len(entry.content) > largest_size:
            largest, largest_size = index, len(entry.content)
    return largest


def budget_symbols(
    symbols: tuple[SymbolEntry, ...],
    token_budget: int,
    estimator: TokenEstimator,
    overhead: int,
) -> tuple[SymbolEntry, ...]:
    """Keep the highest-ranked symbols that fit in ``token_budget``.

    Symbols are ranked by kind; selection stops at the first symbol that
    would overflow the budget.
    """
    ranked = sorted(symbols, key=lambda s: -SYMBOL_KIND_PRIORITY.get(s.kind, 0))
    kept: list[SymbolEntry] = []
    used = 0
    for symbol in ranked:
        cost = symbol_tokens(symbol, estimator, overhead)
        if used + cost > token_budget:
            break
        kept.append(symbol)
        used += cost
    return tuple(kept)
