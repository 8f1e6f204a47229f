"""Pytest configuration and in-memory providers for mention_context tests."""

from datetime import UTC
from datetime import datetime

import pytest
from mention_context.models import ChangedFile
from mention_context.models import DiagnosticEntry
from mention_context.models import FileStat
from mention_context.models import SymbolEntry
from mention_context.models import SymbolLocation


class FakeFiles:
    """FileAccess backed by a dict of path -> content."""

    def __init__(self, contents: dict[str, str], mtimes: dict[str, datetime] | None = None, failing=()):
        self.contents = contents
        self.mtimes = mtimes or {}
        self.failing = set(failing)
        self.patterns: list[str] = []

    async def read(self, path: str) -> str:
        if path in self.failing or path not in self.contents:
            raise FileNotFoundError(path)
        return self.contents[path]

    async def list(self, pattern: str) -> list[str]:
        self.patterns.append(pattern)
        if pattern.endswith("/**/*"):
            root = pattern[: -len("/**/*")] + "/"
            return sorted(p for p in self.contents if p.startswith(root))
        root = pattern[: -len("/*")] + "/"
        return sorted(p for p in self.contents if p.startswith(root) and "/" not in p[len(root) :])

    async def stat(self, path: str) -> FileStat:
        if path not in self.contents:
            raise FileNotFoundError(path)
        return FileStat(size=len(self.contents[path].encode("utf-8")), last_modified=self.mtimes.get(path))


class FakeGit:
    def __init__(self, changed: list[ChangedFile] | None = None, diff: str = "", branch: str = "main"):
        self.changed = changed or []
        self.diff_text = diff
        self.branch = branch
        self.diff_calls: list[dict] = []

    async def diff(self, staged: bool = False, file: str | None = None) -> str:
        self.diff_calls.append({"staged": staged, "file": file})
        return self.diff_text

    async def changed_files(self) -> list[ChangedFile]:
        return list(self.changed)

    async def current_branch(self) -> str:
        return self.branch


class FakeDiagnostics:
    def __init__(self, entries: list[DiagnosticEntry]):
        self.entries = entries

    async def for_file(self, path: str | None = None) -> list[DiagnosticEntry]:
        if path is None:
            return list(self.entries)
        return [d for d in self.entries if d.file == path]


class FakeSymbols:
    """SymbolLookup over a name -> symbols table; names in ``failing`` raise."""

    def __init__(
        self,
        table: dict[str, list[SymbolEntry]],
        references: dict[tuple[str, int], list[SymbolLocation]] | None = None,
        failing=(),
    ):
        self.table = table
        self.references = references or {}
        self.failing = set(failing)
        self.find_calls: list[tuple[str, str | None]] = []

    async def find(self, name: str, kind: str | None = None) -> list[SymbolEntry]:
        self.find_calls.append((name, kind))
        if name in self.failing:
            raise LookupError(f"lookup failed for {name}")
        return list(self.table.get(name, []))

    async def definition_at(self, file: str, line: int, column: int) -> SymbolEntry | None:
        for symbols in self.table.values():
            for symbol in symbols:
                if symbol.file == file and symbol.line == line:
                    return symbol
        return None

    async def references_at(self, file: str, line: int, column: int) -> list[SymbolLocation]:
        return list(self.references.get((file, line), []))


@pytest.fixture
def fake_files():
    return FakeFiles


@pytest.fixture
def fake_git():
    return FakeGit


@pytest.fixture
def fake_diagnostics():
    return FakeDiagnostics


@pytest.fixture
def fake_symbols():
    return FakeSymbols


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
