"""Optimization strategy."""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from ..settings import OptimizationDefaults


class OptimizationStrategy(BaseModel):
    """How far and how aggressively to shrink a context.

    A non-positive ``max_tokens`` is rejected at construction.
    """

    model_config = ConfigDict(frozen=True)

    max_tokens: int = Field(gt=0, description="Token budget for the optimized context")
    prioritize_recent_files: bool = Field(default=False, description="Rank newer files ahead of older ones")
    include_file_metadata: bool = Field(default=False, description="Keep size, mtime and git status on files")
    truncate_content: bool = Field(default=False, description="Truncate large files before dropping any")
    preserve_symbols: bool = Field(default=False, description="Never drop symbols to meet the budget")

    @classmethod
    def from_defaults(cls, defaults: OptimizationDefaults, max_tokens: int | None = None) -> "OptimizationStrategy":
        return cls(
            max_tokens=max_tokens if max_tokens is not None else defaults.max_context_tokens,
            prioritize_recent_files=defaults.prioritize_recent_files,
            include_file_metadata=defaults.include_file_metadata,
            truncate_content=defaults.truncate_content,
            preserve_symbols=defaults.preserve_symbols,
        )
