"""Context optimizer: shrink a resolved context to fit a token budget."""

import logging
from typing import Any

from ..estimator import TokenEstimator
from ..estimator import estimate_tokens
from ..metadata import file_tokens
from ..metadata import refresh_metadata
from ..models import FileEntry
from ..models import ResolvedContext
from ..models import SymbolEntry
from ..settings import EngineSettings
from .stages import budget_symbols
from .stages import footprint
from .stages import largest_file_index
from .stages import prioritize_files
from .stages import strip_file_metadata
from .stages import truncate_content
from .strategy import OptimizationStrategy

logger = logging.getLogger(__name__)


class ContextOptimizer:
    """Applies ordered, lossy reduction stages until a context fits its budget.

    The budget is checked against the file token count, the same estimate
    ``metadata.token_count`` reports. Stages:
    1. Drop per-file metadata (unless the strategy keeps it)
    2. Rank files by language, recency and size
    3. Truncate the largest file, or drop the lowest-ranked one, until the
       files fit
    4. If files and symbols together still exceed the budget, keep only the
       highest-ranked symbols within a share of it

    A context whose files already fit is returned unchanged. Stripping
    metadata does not change the file token count, so stage 1 never ends the
    run by itself.

    The input context is never modified; a new one is always returned. A
    budget that cannot be reached is not an error: the best effort is
    returned and callers can compare ``metadata`` against their limit.
    """

    def __init__(self, settings: EngineSettings | None = None, estimator: TokenEstimator | None = None):
        self.settings = settings or EngineSettings()
        self.estimator = estimator or self.settings.estimator()

    def optimize(self, context: ResolvedContext, strategy: OptimizationStrategy | dict[str, Any]) -> ResolvedContext:
        if not isinstance(strategy, OptimizationStrategy):
            strategy = OptimizationStrategy.model_validate(strategy)

        files, symbols = context.files, context.symbols
        current = self.measure(files)
        if current <= strategy.max_tokens:
            return self._finish(context, files, symbols)

        logger.info(f"Context exceeds token limit: {current} > {strategy.max_tokens}. Optimizing...")
        recency = {f.path: f.last_modified for f in files if f.last_modified is not None}

        if not strategy.include_file_metadata:
            files = strip_file_metadata(files)

        files = prioritize_files(files, strategy.prioritize_recent_files, recency)
        files = self._shrink_files(files, strategy)

        combined = footprint(files, symbols, self.estimator, self.settings.symbol_overhead)
        if combined > strategy.max_tokens and not strategy.preserve_symbols:
            allocation = int(strategy.max_tokens * self.settings.symbol_budget_ratio)
            symbols = budget_symbols(symbols, allocation, self.estimator, self.settings.symbol_overhead)

        optimized = self._finish(context, files, symbols)
        logger.info(
            f"Context optimized: {optimized.metadata.token_count} tokens, "
            f"{len(files)} files, {len(symbols)} symbols"
        )
        return optimized

    def measure(self, files: tuple[FileEntry, ...]) -> int:
        """Token count compared against the budget."""
        return file_tokens(files, self.estimator)

    def _shrink_files(self, files: tuple[FileEntry, ...], strategy: OptimizationStrategy) -> tuple[FileEntry, ...]:
        remaining = list(files)
        current = self.measure(files)

        while remaining and current > strategy.max_tokens:
            if strategy.truncate_content:
                index = largest_file_index(tuple(remaining))
                largest = remaining[index]
                shortened = truncate_content(largest.content, self.settings)
                if shortened is not None and len(shortened) < len(largest.content):
                    current += self._tokens(shortened) - self._tokens(largest.content)
                    remaining[index] = largest.model_copy(update={"content": shortened, "truncated": True})
                    continue

            dropped = remaining.pop()
            current -= self._tokens(dropped.content)
            logger.debug(f"Dropped {dropped.path} from context")

        return tuple(remaining)

    def _tokens(self, text: str) -> int:
        return estimate_tokens(text, self.estimator)

    def _finish(
        self,
        context: ResolvedContext,
        files: tuple[FileEntry, ...],
        symbols: tuple[SymbolEntry, ...],
    ) -> ResolvedContext:
        updated = context.model_copy(update={"files": files, "symbols": symbols})
        return refresh_metadata(updated, self.estimator, self.settings.lines_per_minute)


def optimize(
    context: ResolvedContext,
    strategy: OptimizationStrategy | dict[str, Any],
    settings: EngineSettings | None = None,
) -> ResolvedContext:
    """Return a copy of ``context`` reduced to fit ``strategy.max_tokens``."""
    return ContextOptimizer(settings).optimize(context, strategy)
