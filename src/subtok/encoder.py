"""Encoding text into tokens with a trained vocabulary model."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import functools
import logging
from math import ceil
import os
from typing import Final

from ._bpe import apply_ranked_merges
from .errors import ConfigError
from .pattern import PatternSplitter
from .strategy import SpecialTokenStrategy
from .types import UNKNOWN_ID, Token, TokenId, Unit
from .vocab import VocabularyModel

log = logging.getLogger(__name__)

# special tokens picked up as the unknown-unit fallback when none is named
UNKNOWN_TOKEN_NAMES: Final[tuple[str, ...]] = ("<UNK>", "<unk>", "[UNK]")

# distinct pre-tokens whose segmentation an encoder keeps
DEFAULT_CACHE_SIZE: Final[int] = 65_536


@dataclass(frozen=True)
class EncodeStep:
    """How one pre-token was segmented, with the token emitted for each unit."""

    pre_token: str
    offset: int
    tokens: tuple[Token, ...]

    @property
    def units(self) -> tuple[Unit, ...]:
        return tuple(tok.value for tok in self.tokens)

    @property
    def ids(self) -> tuple[TokenId, ...]:
        return tuple(tok.id for tok in self.tokens)


class Encoder:
    """
    Applies a model's learned merges to new text.

    Holds a reference to the model and never modifies it, so one model can
    back any number of encoders and threads.
    """

    def __init__(
        self,
        model: VocabularyModel,
        unknown_token: str | None = None,
        cache_size: int | None = DEFAULT_CACHE_SIZE,
    ) -> None:
        """
        Prepare an encoder for ``model``.

        :param model: Trained vocabulary model.
        :param unknown_token: Vocabulary entry used for units the model has never
            seen. Defaults to a special token named ``<UNK>``/``<unk>``/``[UNK]``
            when the model has one; otherwise unseen units get ``UNKNOWN_ID``.
        :param cache_size: Most distinct pre-tokens whose segmentation is kept,
            least recently used evicted first; ``None`` keeps all of them.
        :raises ConfigError: If the split pattern does not compile or
            ``unknown_token`` is not in the vocabulary.
        """
        self.model = model
        self.splitter = PatternSplitter(model.split_config)

        if unknown_token is not None:
            if unknown_token not in model.id_of:
                raise ConfigError(f"unknown token {unknown_token!r} is not in the vocabulary")
            self.unknown_id: TokenId = model.id_of[unknown_token]
        else:
            self.unknown_id = next(
                (model.id_of[seq] for seq in UNKNOWN_TOKEN_NAMES if model.is_special(seq)),
                UNKNOWN_ID,
            )

        # segmentation depends only on the model, so entries never go stale
        self._segment = functools.lru_cache(maxsize=cache_size)(self._segment_uncached)

    def segment(self, pre_token: str) -> tuple[Unit, ...]:
        """Return the final units for one pre-token."""
        return self._segment(pre_token)

    def cache_info(self) -> functools._CacheInfo:
        """Hit, miss and size counters of the segmentation cache."""
        return self._segment.cache_info()

    def _segment_uncached(self, pre_token: str) -> tuple[Unit, ...]:
        return tuple(apply_ranked_merges(list(pre_token), self.model.ranks))

    def encode(
        self, text: str, strategy: SpecialTokenStrategy | None = None
    ) -> list[Token]:
        """
        Encode text into tokens.

        If ``strategy`` is ``None``, special token strings are ordinary text.
        When a strategy is provided, the special tokens it allows are kept as
        atomic tokens while the text around them is encoded normally.

        Units missing from the vocabulary get the unknown-token id (or
        ``UNKNOWN_ID``); encoding always covers the whole text.

        :param text: Text to encode.
        :param strategy: Strategy used to select allowed special tokens.
        :returns: Tokens in text order with character offsets into ``text``.
        :raises SpecialTokenError: If the strategy rejects special tokens found in ``text``.
        """
        if strategy is None:
            segments = [(text, 0, False)]
        else:
            specials = {seq: self.model.id_of[seq] for seq in self.model.special_tokens}
            segments = strategy.segment(text, specials)

        tokens: list[Token] = []
        for seg, seg_start, special in segments:
            if special:
                tokens.append(Token(self.model.id_of[seg], seg, seg_start, True))
                continue
            for pre_token, start in self.splitter.split(seg):
                self._emit(pre_token, seg_start + start, tokens)
        return tokens

    def encode_ids(
        self, text: str, strategy: SpecialTokenStrategy | None = None
    ) -> list[TokenId]:
        return [tok.id for tok in self.encode(text, strategy)]

    def encode_batch(
        self,
        texts: list[str],
        strategy: SpecialTokenStrategy | None = None,
        num_workers: int | None = None,
    ) -> list[list[Token]]:
        """
        Encode many texts, in input order.

        :param texts: Text inputs to encode.
        :param strategy: Optional special token handling strategy.
        :param num_workers: Worker threads; ``None`` uses the CPU count, ``0`` means 1.
        """
        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)

        if workers == 1 or len(texts) <= 1:
            return [self.encode(text, strategy) for text in texts]

        # group texts to reduce task-scheduling overhead when the input
        # contains many documents
        group_size = max(1, ceil(len(texts) / (workers * 2)))
        groups = [texts[idx : idx + group_size] for idx in range(0, len(texts), group_size)]

        def encode_group(group: list[str]) -> list[list[Token]]:
            return [self.encode(text, strategy) for text in group]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            encoded_groups = list(pool.map(encode_group, groups))
        return [encoded for group in encoded_groups for encoded in group]

    def trace(self, text: str) -> list[EncodeStep]:
        """Return the pre-tokens of ``text`` with the tokens each was segmented into."""
        steps: list[EncodeStep] = []
        for pre_token, start in self.splitter.split(text):
            tokens: list[Token] = []
            self._emit(pre_token, start, tokens)
            steps.append(EncodeStep(pre_token, start, tuple(tokens)))
        return steps

    def _emit(self, pre_token: str, start: int, out: list[Token]) -> None:
        offset = start
        for unit in self.segment(pre_token):
            tok = self.model.id_of.get(unit)
            if tok is None:
                log.debug(f"unit {unit!r} at offset {offset} not in vocabulary")
                tok = self.unknown_id
            out.append(Token(tok, unit, offset, self.model.is_special(unit)))
            offset += len(unit)


def encode(text: str, model: VocabularyModel) -> list[Token]:
    """One-shot form of ``Encoder(model).encode(text)``."""
    return Encoder(model).encode(text)


__all__ = ["Encoder", "EncodeStep", "DEFAULT_CACHE_SIZE", "UNKNOWN_TOKEN_NAMES", "encode"]
