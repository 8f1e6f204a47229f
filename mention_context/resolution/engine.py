"""Resolution engine: mention tokens in, one deduplicated context out."""

import functools
import logging
from collections.abc import Iterable

from ..estimator import TokenEstimator
from ..metadata import compute_metadata
from ..models import Contribution
from ..models import MentionToken
from ..models import ResolvedContext
from ..providers import ProviderSet
from ..settings import EngineSettings
from .deduplicator import deduplicate
from .resolvers import BuiltinResolvers

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Resolves mention tokens against a provider set.

    Tokens are resolved one at a time in the order given, then folded into
    a single contribution, deduplicated, and measured. A token that fails
    for any reason contributes nothing but a warning.
    """

    def __init__(
        self,
        providers: ProviderSet | None = None,
        settings: EngineSettings | None = None,
        estimator: TokenEstimator | None = None,
    ):
        self.providers = providers or ProviderSet()
        self.settings = settings or EngineSettings()
        self.estimator = estimator or self.settings.estimator()
        self._builtins = BuiltinResolvers(self.providers, self.settings)

    async def resolve(self, tokens: Iterable[MentionToken]) -> ResolvedContext:
        contributions = [await self.resolve_token(token) for token in tokens]
        combined = functools.reduce(Contribution.merge, contributions, Contribution())

        files, symbols = deduplicate(combined.files, combined.symbols)
        metadata = compute_metadata(
            files,
            symbols,
            combined.diagnostics,
            estimator=self.estimator,
            lines_per_minute=self.settings.lines_per_minute,
        )

        logger.info(
            f"Resolved {len(contributions)} mentions: {metadata.file_count} files, "
            f"{metadata.symbol_count} symbols, {metadata.diagnostic_count} diagnostics, "
            f"~{metadata.token_count} tokens, {len(combined.warnings)} warnings"
        )

        return ResolvedContext(
            files=files,
            diagnostics=combined.diagnostics,
            symbols=symbols,
            git=combined.git,
            raw_notes=combined.raw_notes,
            metadata=metadata,
            warnings=combined.warnings,
        )

    async def resolve_token(self, token: MentionToken) -> Contribution:
        """Resolve one token; never raises."""
        logger.debug(f"Resolving {token.describe()}")
        try:
            provider = self.providers.provider_for(token.kind)
            if provider is not None:
                result = await provider.resolve(token)
                return result if isinstance(result, Contribution) else Contribution.model_validate(result)

            kind = token.mention_kind
            if kind is None:
                logger.warning(f"No resolver for mention kind: {token.kind}")
                return Contribution.failure(token, f"unknown mention kind '{token.kind}'")

            return await self._builtins.handler_for(kind)(token)
        except Exception as e:
            logger.warning(f"Error resolving {token.describe()}: {e}")
            return Contribution.failure(token, f"{type(e).__name__}: {e}")


async def resolve(
    tokens: Iterable[MentionToken],
    providers: ProviderSet | None = None,
    settings: EngineSettings | None = None,
) -> ResolvedContext:
    """Resolve ``tokens`` into a fresh context."""
    return await ResolutionEngine(providers, settings).resolve(tokens)
