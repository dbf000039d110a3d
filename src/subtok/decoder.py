"""Decoding token ids back into text."""

from collections.abc import Iterable
import logging

from .types import Token, TokenId
from .vocab import VocabularyModel

log = logging.getLogger(__name__)


class Decoder:
    """Turns token ids back into text; ids missing from the model decode to ``""``."""

    def __init__(self, model: VocabularyModel) -> None:
        self.model = model

    def decode(self, ids: Iterable[TokenId]) -> str:
        parts: list[str] = []
        for tok in ids:
            seq = self.model.string_of.get(tok)
            if seq is None:
                log.debug(f"token id {tok} not in vocabulary, decoding as empty string")
                continue
            parts.append(seq)
        return "".join(parts)

    def decode_tokens(self, tokens: Iterable[Token]) -> str:
        return self.decode(tok.id for tok in tokens)

    def decode_batch(self, batch: Iterable[Iterable[TokenId]]) -> list[str]:
        return [self.decode(ids) for ids in batch]


def decode(ids: Iterable[TokenId], model: VocabularyModel) -> str:
    """One-shot form of ``Decoder(model).decode(ids)``."""
    return Decoder(model).decode(ids)


__all__ = ["Decoder", "decode"]
