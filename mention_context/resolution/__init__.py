"""Mention resolution: dispatch, merge, deduplication."""

from .deduplicator import ContextDeduplicator
from .deduplicator import deduplicate
from .engine import ResolutionEngine
from .engine import resolve
from .resolvers import BuiltinResolvers

__all__ = [
    "BuiltinResolvers",
    "ContextDeduplicator",
    "ResolutionEngine",
    "deduplicate",
    "resolve",
]
