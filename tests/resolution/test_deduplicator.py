"""Tests for file and symbol deduplication."""

import pytest
from mention_context.models import FileEntry
from mention_context.models import SymbolEntry
from mention_context.models import SymbolKind
from mention_context.resolution.deduplicator import ContextDeduplicator
from mention_context.resolution.deduplicator import deduplicate
from mention_context.resolution.deduplicator import merge_ranged_entries
from mention_context.resolution.deduplicator import ranges_touch

LINES = [f"line {n}" for n in range(1, 11)]


def ranged(start: int, end: int, path: str = "a.py") -> FileEntry:
    return FileEntry(path=path, content="\n".join(LINES[start - 1 : end]), line_range=(start, end), language="python")


def whole(path: str = "a.py", content: str = "\n".join(LINES)) -> FileEntry:
    return FileEntry(path=path, content=content, language="python")


@pytest.mark.parametrize(
    ("first", "second", "touch"),
    [
        ((1, 3), (2, 4), True),
        ((1, 3), (4, 6), True),
        ((4, 6), (1, 3), True),
        ((1, 3), (5, 6), False),
        ((5, 6), (1, 3), False),
        ((2, 8), (3, 4), True),
    ],
)
def test_ranges_touch(first, second, touch):
    """Overlapping and adjacent ranges touch; gaps do not."""
    assert ranges_touch(first, second) is touch


def test_adjacent_ranges_merge_with_content():
    """Adjacent ranges merge with their content stitched together."""
    merged = merge_ranged_entries(ranged(1, 3), ranged(4, 6))

    assert merged.line_range == (1, 6)
    assert merged.content == "\n".join(LINES[0:6])


def test_contained_range_merge():
    """A range inside another merges to the outer range."""
    merged = merge_ranged_entries(ranged(2, 8), ranged(3, 4))

    assert merged.line_range == (2, 8)
    assert merged.content == ranged(2, 8).content


def test_disjoint_ranges_do_not_merge():
    """Ranges with a gap are not merged."""
    assert merge_ranged_entries(ranged(1, 2), ranged(5, 6)) is None


def test_merge_requires_ranges():
    """Merging a whole-file entry is a programming error."""
    with pytest.raises(ValueError):
        merge_ranged_entries(whole(), ranged(1, 2))


def test_disjoint_range_keeps_first_seen():
    """A disjoint later range is dropped in favour of the first."""
    files, _ = deduplicate((ranged(1, 2), ranged(7, 8)), ())

    assert files == (ranged(1, 2),)


def test_three_ranges_chain_into_one():
    """Successive adjacent ranges chain into one entry."""
    files, _ = deduplicate((ranged(1, 2), ranged(3, 4), ranged(5, 9)), ())

    assert len(files) == 1
    assert files[0].line_range == (1, 9)
    assert files[0].content == "\n".join(LINES[0:9])


def test_first_whole_file_is_kept_in_place():
    """Of two whole-file entries the first is kept in its position."""
    early = whole("a.py", "old")
    late = whole("a.py", "new")

    files, _ = deduplicate((early, whole("b.py"), late), ())

    assert [f.path for f in files] == ["a.py", "b.py"]
    assert files[0].content == "old"


def test_whole_file_not_replaced_by_later_range():
    """A later ranged entry never replaces a whole file."""
    files, _ = deduplicate((whole(), ranged(2, 3)), ())

    assert files == (whole(),)


def test_symbols_last_write_wins():
    """Symbols with the same key keep the last entry."""
    first = SymbolEntry(name="f", kind=SymbolKind.FUNCTION, file="a.py", line=1)
    other = SymbolEntry(name="g", kind=SymbolKind.FUNCTION, file="a.py", line=9)
    second = SymbolEntry(name="f", kind=SymbolKind.FUNCTION, file="a.py", line=1, signature="def f()")

    deduplicator = ContextDeduplicator()
    for s in (first, other, second):
        deduplicator.add_symbol(s)

    assert deduplicator.get_unique_symbols() == (second, other)


def test_same_symbol_name_on_different_lines_kept():
    """Same-named symbols on different lines are distinct."""
    a = SymbolEntry(name="f", kind=SymbolKind.FUNCTION, file="a.py", line=1)
    b = SymbolEntry(name="f", kind=SymbolKind.FUNCTION, file="a.py", line=20)

    _, symbols = deduplicate((), (a, b))

    assert symbols == (a, b)
