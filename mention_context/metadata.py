"""Derived context statistics."""

import math
from collections.abc import Iterable
from collections.abc import Sized
from datetime import UTC
from datetime import datetime

from .estimator import TokenEstimator
from .estimator import estimate_tokens
from .models import ContextMetadata
from .models import FileEntry
from .models import ResolvedContext

DEFAULT_LINES_PER_MINUTE = 50


def count_lines(content: str) -> int:
    return len(content.split("\n"))


def file_tokens(files: Iterable[FileEntry], estimator: TokenEstimator | None = None) -> int:
    """Sum of estimated tokens over file contents."""
    return sum(estimate_tokens(f.content, estimator) for f in files)


def compute_metadata(
    files: tuple[FileEntry, ...],
    symbols: Sized,
    diagnostics: Sized,
    estimator: TokenEstimator | None = None,
    lines_per_minute: int = DEFAULT_LINES_PER_MINUTE,
) -> ContextMetadata:
    """Build the metadata snapshot for a set of context entries.

    ``token_count`` covers file content only; reading time assumes
    ``lines_per_minute`` lines read per minute.
    """
    total_lines = sum(count_lines(f.content) for f in files)
    return ContextMetadata(
        token_count=file_tokens(files, estimator),
        file_count=len(files),
        symbol_count=len(symbols),
        diagnostic_count=len(diagnostics),
        generated_at=datetime.now(UTC),
        estimated_reading_time_minutes=math.ceil(total_lines / lines_per_minute),
    )


def refresh_metadata(
    context: ResolvedContext,
    estimator: TokenEstimator | None = None,
    lines_per_minute: int = DEFAULT_LINES_PER_MINUTE,
) -> ResolvedContext:
    """Copy of ``context`` with metadata recomputed from its entries."""
    metadata = compute_metadata(
        context.files,
        context.symbols,
        context.diagnostics,
        estimator=estimator,
        lines_per_minute=lines_per_minute,
    )
    return context.model_copy(update={"metadata": metadata})
