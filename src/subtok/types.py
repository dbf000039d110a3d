"""
Core types for tokenization.
"""

from dataclasses import dataclass

type TokenId = int
type Unit = str
type UnitPair = tuple[Unit, Unit]
type Span = tuple[str, int]

# id given to units that have no vocabulary entry and no unknown token to fall back on
UNKNOWN_ID: TokenId = -1


@dataclass(frozen=True, slots=True)
class Token:
    """One encoded unit and where it starts in the source text."""

    id: TokenId
    value: Unit
    offset: int
    is_special: bool = False

    @property
    def is_unknown(self) -> bool:
        return self.id == UNKNOWN_ID

    @property
    def end(self) -> int:
        return self.offset + len(self.value)


__all__ = ["TokenId", "Unit", "UnitPair", "Span", "Token", "UNKNOWN_ID"]
