"""
Tokenizer facade bundling a vocabulary model with its encoder and decoder.
"""

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from .decoder import Decoder
from .encoder import EncodeStep, Encoder
from .pattern import SplitConfig
from .stats import TokenStats, token_stats
from .strategy import SpecialTokenStrategy, StrategyName, get_strategy
from .trainer import BPETrainer
from .types import Token, TokenId
from .vocab import VocabularyModel

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Trained BPE tokenizer.

    Wraps an immutable :class:`VocabularyModel`; training again produces a
    new ``Tokenizer`` rather than changing this one.
    """

    def __init__(self, model: VocabularyModel, unknown_token: str | None = None) -> None:
        self.model = model
        self.encoder = Encoder(model, unknown_token=unknown_token)
        self.decoder = Decoder(model)

    @classmethod
    def train(
        cls,
        corpus: str | list[str],
        vocab_size: int,
        split_config: SplitConfig | str | None = None,
        special_tokens: list[str] | tuple[str, ...] = (),
        *,
        verbose: bool = False,
        unknown_token: str | None = None,
    ) -> "Tokenizer":
        """
        Train a model on ``corpus`` and wrap it.

        :raises ConfigError: If the split pattern does not compile.
        """
        trainer = BPETrainer(vocab_size, split_config, special_tokens, verbose=verbose)
        result = trainer.train(corpus)
        log.info(
            f"trained vocabulary of {result.model.size} tokens "
            f"({result.n_merges_completed} merges)"
        )
        return cls(result.model, unknown_token=unknown_token)

    # -----------------------------------------------------------------------------------
    # encode / decode

    def encode(
        self,
        text: str,
        strategy: SpecialTokenStrategy | StrategyName | None = None,
    ) -> list[Token]:
        """Encode text into tokens; ``strategy`` may be a strategy or its name."""
        return self.encoder.encode(text, _as_strategy(strategy))

    def encode_ids(
        self,
        text: str,
        strategy: SpecialTokenStrategy | StrategyName | None = None,
    ) -> list[TokenId]:
        return self.encoder.encode_ids(text, _as_strategy(strategy))

    def encode_batch(
        self,
        texts: list[str],
        strategy: SpecialTokenStrategy | StrategyName | None = None,
        num_workers: int | None = None,
    ) -> list[list[Token]]:
        if not texts:
            return []
        return self.encoder.encode_batch(texts, _as_strategy(strategy), num_workers)

    def decode(self, ids: Iterable[TokenId]) -> str:
        """Decode ids into text; unknown ids contribute nothing."""
        return self.decoder.decode(ids)

    def decode_batch(self, batch: Iterable[Iterable[TokenId]]) -> list[str]:
        return self.decoder.decode_batch(batch)

    def trace(self, text: str) -> list[EncodeStep]:
        return self.encoder.trace(text)

    def stats(self, text: str) -> TokenStats:
        """Return token statistics for the encoding of ``text``."""
        return token_stats(self.encode(text))

    # -----------------------------------------------------------------------------------
    # model access

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return self.model.size

    def render_vocab(self) -> str:
        return self.model.render()

    def to_dict(self) -> dict[str, Any]:
        return self.model.to_dict()

    def to_json(self, indent: int | None = None) -> str:
        return self.model.to_json(indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], unknown_token: str | None = None) -> "Tokenizer":
        return cls(VocabularyModel.from_dict(data), unknown_token=unknown_token)

    @classmethod
    def from_json(cls, payload: str, unknown_token: str | None = None) -> "Tokenizer":
        return cls(VocabularyModel.from_json(payload), unknown_token=unknown_token)


def _as_strategy(
    strategy: SpecialTokenStrategy | StrategyName | None,
) -> SpecialTokenStrategy | None:
    if strategy is None or isinstance(strategy, SpecialTokenStrategy):
        return strategy
    return get_strategy(strategy)


__all__ = ["Tokenizer"]
