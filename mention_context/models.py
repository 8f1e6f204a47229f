"""Data models for mention resolution and context optimization.

Every model is frozen and every collection is a tuple, so a resolved
context is a value: the optimizer builds new instances instead of
editing the ones it was given.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class MentionKind(StrEnum):
    """Mention kinds with a built-in resolver."""

    FILE = "file"
    FOLDER = "folder"
    DIRECTORY = "directory"
    ERROR = "error"
    DIFF = "diff"
    RECENT = "recent"
    OPEN = "open"
    MODIFIED = "modified"
    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    TYPE = "type"
    INTERFACE = "interface"
    VARIABLE = "variable"


SYMBOL_MENTION_KINDS = frozenset(
    {
        MentionKind.FUNCTION,
        MentionKind.CLASS,
        MentionKind.METHOD,
        MentionKind.TYPE,
        MentionKind.INTERFACE,
        MentionKind.VARIABLE,
    }
)


class GitStatus(StrEnum):
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    UNTRACKED = "?"


class SymbolKind(StrEnum):
    FUNCTION = "function"
    CLASS = "class"
    METHOD = "method"
    INTERFACE = "interface"
    TYPE = "type"
    VARIABLE = "variable"
    CONSTANT = "constant"
    ENUM = "enum"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class MentionToken(_Frozen):
    """A parsed mention awaiting resolution.

    Attributes:
        kind: Mention kind as written (built-in or custom)
        value: Mention target, e.g. a path or symbol name
        params: Extra parameters such as ``lines`` or ``recursive``
        source_span: Start/end offsets of the mention in its source text
        raw: Original mention text
    """

    kind: str
    value: str = ""
    params: dict[str, str] = Field(default_factory=dict)
    source_span: tuple[int, int] = (0, 0)
    raw: str = ""

    @property
    def mention_kind(self) -> MentionKind | None:
        """Built-in kind for this token, or None for custom kinds."""
        try:
            return MentionKind(self.kind)
        except ValueError:
            return None

    def param(self, name: str, default: str | None = None) -> str | None:
        return self.params.get(name, default)

    def flag(self, name: str) -> bool:
        """True when the parameter is present and set to ``true``."""
        return self.params.get(name, "").lower() == "true"

    def describe(self) -> str:
        return self.raw or f"@{self.kind}:{self.value}"


class FileStat(_Frozen):
    size: int
    last_modified: datetime | None = None


class FileEntry(_Frozen):
    """File content contributed to a context.

    A ``line_range`` of None means the entry holds the whole file.
    """

    path: str
    content: str
    line_range: tuple[int, int] | None = None
    language: str = "text"
    size: int | None = None
    last_modified: datetime | None = None
    git_status: GitStatus | None = None
    truncated: bool = False

    @property
    def is_whole_file(self) -> bool:
        return self.line_range is None


class SymbolLocation(_Frozen):
    file: str
    line: int
    column: int = 0


class SymbolEntry(_Frozen):
    name: str
    kind: SymbolKind
    file: str
    line: int
    column: int = 0
    content: str | None = None
    signature: str | None = None
    documentation: str | None = None
    dependencies: tuple[str, ...] | None = None
    container_name: str | None = None
    usages: tuple[SymbolLocation, ...] | None = None

    @property
    def key(self) -> tuple[str, str, int]:
        """Identity used for deduplication."""
        return (self.name, self.file, self.line)


class DiagnosticEntry(_Frozen):
    file: str
    line: int
    column: int = 0
    severity: Severity = Severity.ERROR
    message: str
    code: str | int | None = None
    source: str | None = None


class ChangedFile(_Frozen):
    path: str
    status: GitStatus = GitStatus.MODIFIED
    additions: int = 0
    deletions: int = 0


class GitSnapshot(_Frozen):
    diff: str = ""
    branch: str = ""
    changed_files: tuple[ChangedFile, ...] = ()


class ContextMetadata(_Frozen):
    """Derived statistics; always produced by ``compute_metadata``."""

    token_count: int = 0
    file_count: int = 0
    symbol_count: int = 0
    diagnostic_count: int = 0
    generated_at: datetime
    estimated_reading_time_minutes: int = 0


class ResolutionWarning(_Frozen):
    """Why a token (or part of one) contributed nothing."""

    token: MentionToken | None = None
    reason: str


class Contribution(_Frozen):
    """Partial context produced by resolving a single token.

    Contributions form a monoid under ``merge``; the empty contribution is
    ``Contribution()``.
    """

    files: tuple[FileEntry, ...] = ()
    diagnostics: tuple[DiagnosticEntry, ...] = ()
    symbols: tuple[SymbolEntry, ...] = ()
    git: GitSnapshot | None = None
    raw_notes: str | None = None
    warnings: tuple[ResolutionWarning, ...] = ()

    @classmethod
    def failure(cls, token: MentionToken | None, reason: str) -> Contribution:
        return cls(warnings=(ResolutionWarning(token=token, reason=reason),))

    def merge(self, other: Contribution) -> Contribution:
        """Combine two contributions; ``other`` is the later one."""
        notes = [n for n in (self.raw_notes, other.raw_notes) if n is not None]
        return Contribution(
            files=self.files + other.files,
            diagnostics=self.diagnostics + other.diagnostics,
            symbols=self.symbols + other.symbols,
            git=other.git if other.git is not None else self.git,
            raw_notes="\n".join(notes) if notes else None,
            warnings=self.warnings + other.warnings,
        )


class ResolvedContext(_Frozen):
    files: tuple[FileEntry, ...] = ()
    diagnostics: tuple[DiagnosticEntry, ...] = ()
    symbols: tuple[SymbolEntry, ...] = ()
    git: GitSnapshot | None = None
    raw_notes: str | None = None
    metadata: ContextMetadata
    warnings: tuple[ResolutionWarning, ...] = ()
