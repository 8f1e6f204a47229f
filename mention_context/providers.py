"""Capabilities the resolution engine consumes.

Concrete implementations (filesystem, git, language servers, editors) live
outside this package. Each capability is a narrow async protocol; a
``ProviderSet`` bundles whichever ones the caller has available.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Protocol
from typing import runtime_checkable

from .models import ChangedFile
from .models import Contribution
from .models import DiagnosticEntry
from .models import FileStat
from .models import MentionToken
from .models import SymbolEntry
from .models import SymbolLocation


@runtime_checkable
class FileAccess(Protocol):
    async def read(self, path: str) -> str: ...

    async def list(self, pattern: str) -> list[str]: ...

    async def stat(self, path: str) -> FileStat: ...


@runtime_checkable
class VersionControl(Protocol):
    async def diff(self, staged: bool = False, file: str | None = None) -> str: ...

    async def changed_files(self) -> list[ChangedFile]: ...

    async def current_branch(self) -> str: ...


@runtime_checkable
class Diagnostics(Protocol):
    async def for_file(self, path: str | None = None) -> list[DiagnosticEntry]: ...


@runtime_checkable
class SymbolLookup(Protocol):
    async def find(self, name: str, kind: str | None = None) -> list[SymbolEntry]: ...

    async def definition_at(self, file: str, line: int, column: int) -> SymbolEntry | None: ...

    async def references_at(self, file: str, line: int, column: int) -> list[SymbolLocation]: ...


@runtime_checkable
class MentionProvider(Protocol):
    """Resolver for a custom (or overridden) mention kind."""

    kind: str

    async def resolve(self, token: MentionToken) -> Contribution: ...


@dataclass
class ProviderSet:
    """The capabilities available to one resolution call.

    ``custom`` maps mention kinds to providers; a registered provider takes
    precedence over the built-in resolver for the same kind.
    """

    files: FileAccess | None = None
    git: VersionControl | None = None
    diagnostics: Diagnostics | None = None
    symbols: SymbolLookup | None = None
    custom: dict[str, MentionProvider] = field(default_factory=dict)

    def register(self, provider: MentionProvider) -> None:
        self.custom[provider.kind] = provider

    def provider_for(self, kind: str) -> MentionProvider | None:
        return self.custom.get(kind)
