"""
Vocabulary model: the immutable result of a training run.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cached_property
import json
import logging
from types import MappingProxyType
import unicodedata
from typing import Any, Final, NamedTuple

from .errors import ConfigError, ModelLoadError
from .pattern import DEFAULT_SPLIT_CONFIG, PatternSplitter, SplitConfig
from .types import TokenId, Unit, UnitPair

FORMAT_VERSION: Final[str] = "1"

log = logging.getLogger(__name__)


class Merge(NamedTuple):
    """One learned merge; ``rank`` is the order it was learned in."""

    left: Unit
    right: Unit
    result: Unit
    rank: int

    @property
    def pair(self) -> UnitPair:
        return (self.left, self.right)


@dataclass(frozen=True)
class VocabularyModel:
    """
    Token <-> id mapping, ordered merge history, special tokens and split config.

    Ids are dense from 0: special tokens first (in given order), then the base
    alphabet in code point order, then merge results in rank order. Instances
    never change after construction; build new ones with :meth:`build`,
    :meth:`from_dict` or by training.
    """

    id_of: Mapping[Unit, TokenId]
    string_of: Mapping[TokenId, Unit]
    merges: tuple[Merge, ...]
    special_tokens: tuple[str, ...]
    split_config: SplitConfig = DEFAULT_SPLIT_CONFIG

    def __hash__(self) -> int:
        # mapping views are unhashable; hash their frozen contents instead
        return hash(
            (tuple(self.id_of.items()), self.merges, self.special_tokens, self.split_config)
        )

    @classmethod
    def build(
        cls,
        vocab: Mapping[Unit, TokenId],
        merges: Iterable[UnitPair],
        special_tokens: Iterable[str] = (),
        split_config: SplitConfig = DEFAULT_SPLIT_CONFIG,
    ) -> "VocabularyModel":
        """
        Validate raw parts and freeze them into a model.

        Merge ranks are the positions of the pairs in ``merges``.

        :raises ModelLoadError: If ids are not dense and unique, a merge pair repeats,
            merges or special tokens reference units missing from ``vocab``, or
            special tokens do not hold ids ``0..k-1`` in order.
        """
        id_of = dict(vocab)
        string_of = {tok: seq for seq, tok in id_of.items()}

        if len(string_of) != len(id_of):
            raise ModelLoadError("vocabulary ids must be unique", field="vocab")
        if set(string_of) != set(range(len(string_of))):
            raise ModelLoadError(
                "vocabulary ids must be dense and start at 0", field="vocab"
            )

        frozen_merges: list[Merge] = []
        seen_pairs: set[UnitPair] = set()
        for rank, (left, right) in enumerate(merges):
            if (left, right) in seen_pairs:
                raise ModelLoadError(
                    f"merge {rank} repeats pair {(left, right)!r}", field="merges"
                )
            seen_pairs.add((left, right))
            result = left + right
            for unit in (left, right, result):
                if unit not in id_of:
                    raise ModelLoadError(
                        f"merge {rank} references unknown unit {unit!r}", field="merges"
                    )
            frozen_merges.append(Merge(left, right, result, rank))

        specials = tuple(dict.fromkeys(special_tokens))
        for tok, seq in enumerate(specials):
            if seq not in id_of:
                raise ModelLoadError(
                    f"special token {seq!r} missing from vocabulary",
                    field="special_tokens",
                )
            # special tokens own the lowest ids, in order
            if id_of[seq] != tok:
                raise ModelLoadError(
                    f"special token {seq!r} has id {id_of[seq]}, expected {tok}",
                    field="special_tokens",
                )

        # ordering: ids ascending so iteration follows allocation order
        id_of = dict(sorted(id_of.items(), key=lambda item: item[1]))
        string_of = dict(sorted(string_of.items()))

        return cls(
            id_of=MappingProxyType(id_of),
            string_of=MappingProxyType(string_of),
            merges=tuple(frozen_merges),
            special_tokens=specials,
            split_config=split_config,
        )

    # -----------------------------------------------------------------------------------
    # lookups

    @property
    def size(self) -> int:
        """Return the number of entries in the vocabulary."""
        return len(self.id_of)

    def __len__(self) -> int:
        return len(self.id_of)

    @cached_property
    def ranks(self) -> Mapping[UnitPair, int]:
        """Pair -> rank lookup used when replaying merges."""
        return MappingProxyType({m.pair: m.rank for m in self.merges})

    @cached_property
    def special_set(self) -> frozenset[str]:
        return frozenset(self.special_tokens)

    @property
    def alphabet(self) -> tuple[Unit, ...]:
        """Base units: everything that is neither special nor a merge result."""
        derived = {m.result for m in self.merges}
        return tuple(
            seq
            for seq in self.id_of
            if seq not in self.special_set and seq not in derived
        )

    def id_for(self, unit: Unit) -> TokenId | None:
        return self.id_of.get(unit)

    def string_for(self, tok: TokenId) -> Unit | None:
        return self.string_of.get(tok)

    def is_special(self, unit: Unit) -> bool:
        return unit in self.special_set

    # -----------------------------------------------------------------------------------
    # transport

    def to_dict(self) -> dict[str, Any]:
        """Return the transport form: vocab, merge pairs in rank order, specials, split config."""
        return {
            "version": FORMAT_VERSION,
            "vocab": dict(self.id_of),
            "merges": [[m.left, m.right] for m in self.merges],
            "special_tokens": list(self.special_tokens),
            "split_config": self.split_config.to_dict(),
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VocabularyModel":
        """
        Rebuild a model from its transport form.

        Accepts both the snake_case keys written by :meth:`to_dict` and the
        camelCase ``specialTokens``/``splitConfig``/``regexConfig`` keys.

        :raises ModelLoadError: If a field is missing or malformed.
        :raises ConfigError: If the split pattern does not compile.
        """
        if not isinstance(data, Mapping):
            raise ModelLoadError("model payload must be a mapping")

        ver = data.get("version", FORMAT_VERSION)
        if str(ver) != FORMAT_VERSION:
            raise ModelLoadError(
                "model format version mismatch", version_mismatch=(str(ver), FORMAT_VERSION)
            )

        vocab = _require(data, "vocab", Mapping)
        for seq, tok in vocab.items():
            if not isinstance(seq, str) or isinstance(tok, bool) or not isinstance(tok, int):
                raise ModelLoadError(
                    f"vocab entries must map str to int: {seq!r} -> {tok!r}", field="vocab"
                )

        merges: list[UnitPair] = []
        for entry in _require(data, "merges", list):
            if (
                not isinstance(entry, (list, tuple))
                or len(entry) != 2
                or not all(isinstance(u, str) for u in entry)
            ):
                raise ModelLoadError(f"invalid merge entry: {entry!r}", field="merges")
            merges.append((entry[0], entry[1]))

        specials = data.get("special_tokens", data.get("specialTokens", []))
        if not isinstance(specials, list) or not all(isinstance(s, str) for s in specials):
            raise ModelLoadError("special tokens must be a list of str", field="special_tokens")

        raw_config = data.get("split_config", data.get("splitConfig", data.get("regexConfig")))
        if raw_config is None:
            split_config = DEFAULT_SPLIT_CONFIG
        elif isinstance(raw_config, Mapping):
            try:
                split_config = SplitConfig.from_dict(dict(raw_config))
            except ConfigError as e:
                raise ModelLoadError(str(e), field="split_config") from e
            # fail at load time rather than at first encode
            PatternSplitter(split_config)
        else:
            raise ModelLoadError("split config must be a mapping", field="split_config")

        model = cls.build(vocab, merges, specials, split_config)
        log.debug(
            f"model loaded: {len(model.special_tokens)} special tokens, "
            f"{len(model.merges)} merges, {model.size} total tokens"
        )
        return model

    @classmethod
    def from_json(cls, payload: str) -> "VocabularyModel":
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ModelLoadError(f"model payload is not valid JSON: {e.msg}") from e
        return cls.from_dict(data)

    def render(self) -> str:
        """
        Return a human-readable vocabulary listing.

        Special tokens come first, then every entry by id; merge results show
        the two units they were built from.
        """
        lines: list[str] = []
        for seq in self.special_tokens:
            lines.append(f"ST [{self.id_of[seq]}] {seq}")

        by_result = {m.result: m for m in self.merges}
        for seq, tok in self.id_of.items():
            if seq in self.special_set:
                continue
            # token arises from merging: show derivation from child units
            if seq in by_result:
                m = by_result[seq]
                lines.append(
                    f"[{tok}] [{_display(m.left)}][{_display(m.right)}] -> {_display(seq)}"
                )
            else:
                lines.append(f"[{tok}] {_display(seq)}")
        return "\n".join(lines)


def _display(unit: Unit) -> str:
    # all-space units would be invisible in the listing
    if unit and not unit.strip(" "):
        return "\u00b7" * len(unit)
    # Cc, Cf, Cn, ... all start with "C"
    return "".join(
        f"\\u{ord(c):04x}" if unicodedata.category(c).startswith("C") else c for c in unit
    )


def _require(data: Mapping[str, Any], key: str, kind: type) -> Any:
    if key not in data:
        raise ModelLoadError("missing field", field=key)
    value = data[key]
    if not isinstance(value, kind):
        raise ModelLoadError(f"expected {kind.__name__}", field=key)
    return value


__all__ = ["FORMAT_VERSION", "Merge", "VocabularyModel"]
