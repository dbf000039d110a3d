"""Summary statistics over an encoded token stream."""

from collections.abc import Sequence
from dataclasses import dataclass

from .types import Token


@dataclass(frozen=True)
class TokenStats:
    total_tokens: int
    unique_tokens: int
    # mean unit length in characters
    average_length: float
    character_count: int


def token_stats(tokens: Sequence[Token]) -> TokenStats:
    """Count tokens, distinct units and covered characters; average is 0.0 for no tokens."""
    chars = sum(len(tok.value) for tok in tokens)
    return TokenStats(
        total_tokens=len(tokens),
        unique_tokens=len({tok.value for tok in tokens}),
        average_length=chars / len(tokens) if tokens else 0.0,
        character_count=chars,
    )


__all__ = ["TokenStats", "token_stats"]
