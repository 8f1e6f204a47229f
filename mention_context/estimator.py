"""Token estimation shared by resolution and optimization.

Both engines size content through the same estimator so that a budget of
N tokens means the same thing before and after optimization.
"""

import math
from typing import Protocol

DEFAULT_CHARS_PER_TOKEN = 4


class TokenEstimator(Protocol):
    """Anything that can estimate the token cost of a string."""

    def estimate(self, text: str) -> int: ...


class CharRatioEstimator:
    """Estimates tokens as ``ceil(len(text) / chars_per_token)``."""

    def __init__(self, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> None:
        if chars_per_token <= 0:
            raise ValueError(f"chars_per_token must be positive, got {chars_per_token}")
        self.chars_per_token = chars_per_token

    def estimate(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self.chars_per_token)

    def __repr__(self) -> str:
        return f"CharRatioEstimator(chars_per_token={self.chars_per_token})"


default_estimator = CharRatioEstimator()


def estimate_tokens(text: str | None, estimator: TokenEstimator | None = None) -> int:
    """Estimate tokens for ``text`` (None counts as empty)."""
    if not text:
        return 0
    return (estimator or default_estimator).estimate(text)
