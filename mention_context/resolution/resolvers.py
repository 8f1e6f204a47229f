"""Built-in resolvers for the well-known mention kinds.

Resolvers may raise; the engine converts any exception into a warning for
the token. Failures that only affect part of a token (one unreadable file
in a folder) are recorded here and the rest of the token still resolves.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from collections.abc import Callable

from ..languages import detect_language
from ..models import Contribution
from ..models import FileEntry
from ..models import FileStat
from ..models import GitSnapshot
from ..models import GitStatus
from ..models import MentionKind
from ..models import MentionToken
from ..models import ResolutionWarning
from ..models import SymbolEntry
from ..providers import FileAccess
from ..providers import ProviderSet
from ..settings import EngineSettings

logger = logging.getLogger(__name__)

Resolver = Callable[[MentionToken], Awaitable[Contribution]]


def parse_line_range(value: str) -> tuple[int, int] | None:
    """Parse ``start-end`` or ``N`` into an inclusive range; None if malformed."""
    start_text, _, end_text = value.strip().partition("-")
    try:
        start = int(start_text)
        end = int(end_text) if end_text.strip() else start
    except ValueError:
        return None
    return start, end


def slice_lines(content: str, start: int, end: int) -> tuple[str, tuple[int, int]]:
    """Cut ``content`` to an inclusive 1-indexed range clamped to its bounds.

    Returns:
        The sliced text and the effective range
    """
    lines = content.split("\n")
    last = len(lines)
    start = min(max(1, start), last)
    end = min(max(start, end), last)
    return "\n".join(lines[start - 1 : end]), (start, end)


class BuiltinResolvers:
    """Resolvers for every ``MentionKind``, bound to one provider set."""

    def __init__(self, providers: ProviderSet, settings: EngineSettings | None = None):
        self.providers = providers
        self.settings = settings or EngineSettings()
        self._handlers: dict[MentionKind, Resolver] = {
            MentionKind.FILE: self.resolve_file,
            MentionKind.FOLDER: self.resolve_folder,
            MentionKind.DIRECTORY: self.resolve_folder,
            MentionKind.ERROR: self.resolve_errors,
            MentionKind.DIFF: self.resolve_diff,
            MentionKind.RECENT: self.resolve_editor_state,
            MentionKind.OPEN: self.resolve_editor_state,
            MentionKind.MODIFIED: self.resolve_modified,
            MentionKind.FUNCTION: self.resolve_symbol,
            MentionKind.CLASS: self.resolve_symbol,
            MentionKind.METHOD: self.resolve_symbol,
            MentionKind.TYPE: self.resolve_symbol,
            MentionKind.INTERFACE: self.resolve_symbol,
            MentionKind.VARIABLE: self.resolve_symbol,
        }

    def handler_for(self, kind: MentionKind) -> Resolver:
        return self._handlers[kind]

    async def resolve_file(self, token: MentionToken) -> Contribution:
        files = self.providers.files
        if files is None:
            return Contribution.failure(token, "no file access provider configured")
        if not token.value:
            return Contribution.failure(token, "file mention has no path")

        content = await files.read(token.value)
        stat = await files.stat(token.value)

        line_range = None
        lines_param = token.param("lines")
        if lines_param:
            requested = parse_line_range(lines_param)
            if requested is None:
                logger.debug(f"Ignoring malformed line range '{lines_param}' for {token.value}")
            else:
                content, line_range = slice_lines(content, *requested)

        return Contribution(files=(self._file_entry(token.value, content, stat, line_range=line_range),))

    async def resolve_folder(self, token: MentionToken) -> Contribution:
        files = self.providers.files
        if files is None:
            return Contribution.failure(token, "no file access provider configured")
        if not token.value:
            return Contribution.failure(token, "folder mention has no path")

        root = token.value.rstrip("/") or "."
        pattern = f"{root}/**/*" if token.flag("recursive") else f"{root}/*"
        limit = self._folder_limit(token)

        paths = await files.list(pattern)
        entries, warnings = await self._read_many(token, files, [(path, None) for path in paths[:limit]])
        return Contribution(files=entries, warnings=warnings)

    async def resolve_errors(self, token: MentionToken) -> Contribution:
        diagnostics = self.providers.diagnostics
        if diagnostics is None:
            return Contribution.failure(token, "no diagnostics provider configured")

        found = await diagnostics.for_file(token.value or None)
        return Contribution(diagnostics=tuple(found))

    async def resolve_diff(self, token: MentionToken) -> Contribution:
        git = self.providers.git
        if git is None:
            return Contribution.failure(token, "no version control provider configured")

        diff = await git.diff(staged=token.flag("staged"), file=token.value or None)
        changed = await git.changed_files()
        branch = await git.current_branch()
        return Contribution(git=GitSnapshot(diff=diff, branch=branch, changed_files=tuple(changed)))

    async def resolve_modified(self, token: MentionToken) -> Contribution:
        git = self.providers.git
        files = self.providers.files
        if git is None or files is None:
            return Contribution.failure(token, "modified files need both version control and file access providers")

        changed = await git.changed_files()
        entries, warnings = await self._read_many(token, files, [(c.path, c.status) for c in changed])
        return Contribution(files=entries, warnings=warnings)

    async def resolve_editor_state(self, token: MentionToken) -> Contribution:
        # Editor state (recent/open files) only arrives through a registered provider.
        logger.debug(f"No provider registered for '{token.kind}' mentions")
        return Contribution.failure(token, f"'{token.kind}' mentions need a registered provider")

    async def resolve_symbol(self, token: MentionToken) -> Contribution:
        lookup = self.providers.symbols
        if lookup is None:
            return Contribution.failure(token, "no symbol provider configured")

        file = token.param("file")
        line = token.param("line")
        if file and line:
            found = await lookup.definition_at(file, int(line), int(token.param("column") or 0))
            symbols = [found] if found is not None else []
        elif token.value:
            symbols = list(await lookup.find(token.value, token.kind))
        else:
            return Contribution.failure(token, "symbol mention has no name or location")

        if token.flag("references"):
            symbols = [await self._with_usages(symbol) for symbol in symbols]

        dependencies, warnings = await self._expand_dependencies(token, symbols)
        return Contribution(symbols=tuple(symbols) + dependencies, warnings=warnings)

    async def _with_usages(self, symbol: SymbolEntry) -> SymbolEntry:
        usages = await self.providers.symbols.references_at(symbol.file, symbol.line, symbol.column)
        return symbol.model_copy(update={"usages": tuple(usages)})

    async def _expand_dependencies(
        self, token: MentionToken, symbols: list[SymbolEntry]
    ) -> tuple[tuple[SymbolEntry, ...], tuple[ResolutionWarning, ...]]:
        """Look up the declared dependencies of ``symbols``, one level deep.

        Dependencies of the symbols found here are not followed.
        """
        seen = {(s.name, s.file) for s in symbols}
        added: list[SymbolEntry] = []
        warnings: list[ResolutionWarning] = []

        for symbol in symbols:
            for dependency in symbol.dependencies or ():
                try:
                    candidates = await self.providers.symbols.find(dependency)
                except Exception as e:
                    logger.warning(f"Failed to expand dependency {dependency} of {symbol.name}: {e}")
                    warnings.append(ResolutionWarning(token=token, reason=f"dependency {dependency}: {e}"))
                    continue
                for candidate in candidates:
                    if (candidate.name, candidate.file) not in seen:
                        seen.add((candidate.name, candidate.file))
                        added.append(candidate)

        return tuple(added), tuple(warnings)

    async def _read_many(
        self, token: MentionToken, files: FileAccess, targets: list[tuple[str, GitStatus | None]]
    ) -> tuple[tuple[FileEntry, ...], tuple[ResolutionWarning, ...]]:
        """Read several files, skipping the ones that fail."""
        entries: list[FileEntry] = []
        warnings: list[ResolutionWarning] = []

        for path, git_status in targets:
            try:
                content = await files.read(path)
                stat = await files.stat(path)
            except Exception as e:
                logger.warning(f"Skipping {path} while resolving {token.describe()}: {e}")
                warnings.append(ResolutionWarning(token=token, reason=f"{path}: {e}"))
                continue
            entries.append(self._file_entry(path, content, stat, git_status=git_status))

        return tuple(entries), tuple(warnings)

    def _folder_limit(self, token: MentionToken) -> int:
        raw = token.param("limit")
        if raw is None:
            return self.settings.default_folder_limit
        try:
            limit = int(raw)
        except ValueError:
            logger.debug(f"Ignoring malformed folder limit '{raw}'")
            return self.settings.default_folder_limit
        return limit if limit > 0 else self.settings.default_folder_limit

    @staticmethod
    def _file_entry(
        path: str,
        content: str,
        stat: FileStat,
        line_range: tuple[int, int] | None = None,
        git_status: GitStatus | None = None,
    ) -> FileEntry:
        return FileEntry(
            path=path,
            content=content,
            line_range=line_range,
            language=detect_language(path),
            size=stat.size,
            last_modified=stat.last_modified,
            git_status=git_status,
        )
