"""Resolve-then-optimize pipeline with configured defaults."""

import logging
from collections.abc import Iterable

from .models import MentionToken
from .models import ResolvedContext
from .optimization import ContextOptimizer
from .optimization import OptimizationStrategy
from .providers import ProviderSet
from .resolution import ResolutionEngine
from .settings import EngineSettings
from .settings import OptimizationDefaults

logger = logging.getLogger(__name__)


class ContextPipeline:
    """Runs resolution and optimization with one shared set of settings."""

    def __init__(
        self,
        providers: ProviderSet | None = None,
        settings: EngineSettings | None = None,
        defaults: OptimizationDefaults | None = None,
    ):
        self.settings = settings or EngineSettings()
        self.defaults = defaults or OptimizationDefaults()
        estimator = self.settings.estimator()
        self.resolver = ResolutionEngine(providers, self.settings, estimator)
        self.optimizer = ContextOptimizer(self.settings, estimator)

    def strategy(self, max_tokens: int | None = None) -> OptimizationStrategy:
        return OptimizationStrategy.from_defaults(self.defaults, max_tokens)

    async def prepare(self, tokens: Iterable[MentionToken], max_tokens: int | None = None) -> ResolvedContext:
        """Resolve ``tokens`` and fit the result to the configured budget."""
        context = await self.resolver.resolve(tokens)
        optimized = self.optimizer.optimize(context, self.strategy(max_tokens))
        logger.debug(f"Prepared context: {summarize(optimized)!r}")
        return optimized


def summarize(context: ResolvedContext) -> str:
    """One-paragraph description of what a context holds."""
    lines = [
        "Context Summary:",
        f"- {len(context.files)} files provided",
        f"- {len(context.symbols)} symbols/functions provided",
        f"- {len(context.diagnostics)} diagnostics/errors provided",
    ]
    if context.git is not None:
        lines.append("- Git changes and diff information provided")
    lines.append(f"- ~{context.metadata.token_count} tokens of file content")
    return "\n".join(lines)
