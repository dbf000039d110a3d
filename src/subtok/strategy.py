"""Special token handling for encoding."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
import logging
from typing import Final, Literal, overload, override

import regex as re

from .errors import SpecialTokenError, StrategyError
from .types import TokenId

log = logging.getLogger(__name__)

type Segment = tuple[str, int, bool]

# =========================================================================================

# special token handling strategies


class SpecialTokenStrategy(ABC):
    """
    Base strategy for handling special tokens found in text being encoded.

    Without a strategy the encoder treats special token strings as ordinary
    text. With one, the allowed special tokens are cut out of the text first
    and each is emitted as a single token.
    """

    @abstractmethod
    def handle(
        self, text: str, special_toks: Mapping[str, TokenId]
    ) -> Mapping[str, TokenId]:
        """Return the special tokens to keep atomic while encoding ``text``."""

    def segment(self, text: str, special_toks: Mapping[str, TokenId]) -> list[Segment]:
        """
        Split ``text`` around allowed special tokens.

        :returns: ``(segment, start_offset, is_special)`` triples covering ``text``
            in order; empty ordinary segments are dropped.
        """
        allowed = [seq for seq in self.handle(text, special_toks) if seq]
        if not allowed:
            return [(text, 0, False)] if text else []

        # longest first so a special token never loses to one of its prefixes;
        # escape metachars like "|" in tokens such as "<|endoftext|>"
        alternation = "|".join(re.escape(seq) for seq in sorted(allowed, key=len, reverse=True))
        segments: list[Segment] = []
        pos = 0
        for m in re.finditer(alternation, text):
            if m.start() > pos:
                segments.append((text[pos : m.start()], pos, False))
            segments.append((m.group(0), m.start(), True))
            pos = m.end()
        if pos < len(text):
            segments.append((text[pos:], pos, False))
        return segments


class AllowAllStrategy(SpecialTokenStrategy):
    """Strategy that allows all registered special tokens."""

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, TokenId]
    ) -> Mapping[str, TokenId]:
        """Return all registered special tokens unchanged."""
        if not special_toks:
            log.warning("no special tokens registered")
        return special_toks


class AllowNoneRaiseStrategy(SpecialTokenStrategy):
    """Strategy that raises if special tokens are found in text to be encoded."""

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, TokenId]
    ) -> Mapping[str, TokenId]:
        """Raise when text contains disallowed special tokens."""
        found = {seq for seq in special_toks if seq in text}
        if found:
            raise SpecialTokenError(
                "special tokens found in text but not allowed", found_tokens=found
            )
        return {}


class AllowNoneStrategy(SpecialTokenStrategy):
    """Strategy that encodes special token strings as ordinary text."""

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, TokenId]
    ) -> Mapping[str, TokenId]:
        """Ignore special tokens, warning when any appears in ``text``."""
        if any(seq in text for seq in special_toks):
            log.warning("special tokens found in text but not allowed")
        return {}


class AllowCustomStrategy(SpecialTokenStrategy):
    """Strategy that allows only specified special tokens."""

    def __init__(self, allowed_subset: set[str]) -> None:
        """Store the special token subset allowed during encoding."""
        super().__init__()
        self.allowed_subset = allowed_subset

    @override
    def handle(
        self, text: str, special_toks: Mapping[str, TokenId]
    ) -> Mapping[str, TokenId]:
        """Return only special tokens present in the allowed subset."""
        return {
            seq: tok for seq, tok in special_toks.items() if seq in self.allowed_subset
        }


StrategyName = Literal["all", "none", "none-raise", "custom"]

_SPECIAL_TOKEN_STRATEGIES: Final[dict[str, type[SpecialTokenStrategy]]] = {
    "all": AllowAllStrategy,
    "none": AllowNoneStrategy,
    "none-raise": AllowNoneRaiseStrategy,
    "custom": AllowCustomStrategy,
}


def list_strategies() -> list[str]:
    """Return available special token strategy names."""
    return list(_SPECIAL_TOKEN_STRATEGIES.keys())


@overload
def get_strategy(
    name: Literal["all", "none", "none-raise"],
) -> SpecialTokenStrategy: ...


@overload
def get_strategy(
    name: Literal["custom"], allowed_subset: set[str]
) -> AllowCustomStrategy: ...


def get_strategy(
    name: StrategyName = "none-raise", allowed_subset: set[str] | None = None
) -> SpecialTokenStrategy:
    """
    Create a special token strategy by name.

    :param name: Strategy identifier: "all", "none", "none-raise", or "custom".
    :param allowed_subset: Required for "custom"; tokens allowed during encoding.
    :raises StrategyError: If name is unknown or allowed_subset is missing for custom.
    """
    if name not in _SPECIAL_TOKEN_STRATEGIES:
        raise StrategyError(
            "unknown strategy name",
            invalid_name=name,
            available_strats=list(_SPECIAL_TOKEN_STRATEGIES.keys()),
        )

    if name == "custom":
        if allowed_subset is None:
            raise StrategyError("allowed_subset is required for custom strategy")
        return AllowCustomStrategy(allowed_subset)

    return _SPECIAL_TOKEN_STRATEGIES[name]()


__all__ = [
    "StrategyName",
    "SpecialTokenStrategy",
    "AllowAllStrategy",
    "AllowNoneStrategy",
    "AllowNoneRaiseStrategy",
    "AllowCustomStrategy",
    "list_strategies",
    "get_strategy",
]
