"""Mention resolution and token-budget optimization.

Turns parsed mention tokens into one deduplicated context gathered from
pluggable providers, and shrinks that context to a token budget.
"""

from .errors import MentionContextError
from .errors import SettingsError
from .estimator import CharRatioEstimator
from .estimator import TokenEstimator
from .estimator import estimate_tokens
from .models import ChangedFile
from .models import ContextMetadata
from .models import Contribution
from .models import DiagnosticEntry
from .models import FileEntry
from .models import FileStat
from .models import GitSnapshot
from .models import GitStatus
from .models import MentionKind
from .models import MentionToken
from .models import ResolutionWarning
from .models import ResolvedContext
from .models import Severity
from .models import SymbolEntry
from .models import SymbolKind
from .models import SymbolLocation
from .optimization import ContextOptimizer
from .optimization import OptimizationStrategy
from .optimization import optimize
from .pipeline import ContextPipeline
from .providers import Diagnostics
from .providers import FileAccess
from .providers import MentionProvider
from .providers import ProviderSet
from .providers import SymbolLookup
from .providers import VersionControl
from .resolution import ResolutionEngine
from .resolution import resolve
from .settings import EngineSettings
from .settings import OptimizationDefaults
from .settings import SettingsManager

__all__ = [
    "ChangedFile",
    "CharRatioEstimator",
    "ContextMetadata",
    "ContextOptimizer",
    "ContextPipeline",
    "Contribution",
    "DiagnosticEntry",
    "Diagnostics",
    "EngineSettings",
    "FileAccess",
    "FileEntry",
    "FileStat",
    "GitSnapshot",
    "GitStatus",
    "MentionContextError",
    "MentionKind",
    "MentionProvider",
    "MentionToken",
    "OptimizationDefaults",
    "OptimizationStrategy",
    "ProviderSet",
    "ResolutionEngine",
    "ResolutionWarning",
    "ResolvedContext",
    "SettingsError",
    "SettingsManager",
    "Severity",
    "SymbolEntry",
    "SymbolKind",
    "SymbolLocation",
    "SymbolLookup",
    "TokenEstimator",
    "VersionControl",
    "estimate_tokens",
    "optimize",
    "resolve",
]
