"""Token-budget optimization of resolved contexts."""

from .optimizer import ContextOptimizer
from .optimizer import optimize
from .strategy import OptimizationStrategy

__all__ = ["ContextOptimizer", "OptimizationStrategy", "optimize"]
