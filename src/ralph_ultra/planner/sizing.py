"""Fixed token and duration profiles per complexity tier."""
from __future__ import annotations

from dataclasses import dataclass

from ralph_ultra.model.enums import Complexity


@dataclass(frozen=True)
class TokenEstimate:
    input_tokens: int
    output_tokens: int
    duration_minutes: float

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


TOKEN_ESTIMATES: dict[Complexity, TokenEstimate] = {
    Complexity.SIMPLE: TokenEstimate(5_000, 2_000, 15),
    Complexity.MEDIUM: TokenEstimate(15_000, 6_000, 30),
    Complexity.COMPLEX: TokenEstimate(40_000, 15_000, 60),
}

# Self-hosted models run this much slower than hosted ones.
LOCAL_SLOWDOWN = 1.5


def estimate_for(complexity: Complexity) -> TokenEstimate:
    return TOKEN_ESTIMATES[Complexity(complexity)]
