"""Standalone BPE training module."""

from collections import Counter
from dataclasses import dataclass
import logging

from ._bpe import best_pair, bpe_freqs, bpe_merge
from ._decorators import measure_time
from ._progress import MergeProgress
from .errors import ConfigError
from .pattern import PatternSplitter, SplitConfig, as_split_config
from .types import TokenId, Unit, UnitPair
from .vocab import VocabularyModel

log = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """Results from one BPE training run."""

    model: VocabularyModel
    # distinct pre-token -> final working split, in first-occurrence order
    splits: dict[str, tuple[Unit, ...]]
    n_merges_completed: int


class BPETrainer:
    """
    BPE trainer that learns merges over the pre-tokens of a corpus.

    Example:
       >>> trainer = BPETrainer(vocab_size=10, split_config="whole-text")
       >>> result = trainer.train("aaabdaaabac")
       >>> [m.result for m in result.model.merges][:2]
       ['aa', 'aaa']
    """

    def __init__(
        self,
        vocab_size: int,
        split_config: SplitConfig | str | None = None,
        special_tokens: list[str] | tuple[str, ...] = (),
        verbose: bool = False,
    ) -> None:
        """
        Configure a training run.

        :param vocab_size: Upper bound on the final vocabulary size, special tokens included.
        :param split_config: Pre-tokenization rule, or the name of a preset.
        :param special_tokens: Tokens given the lowest ids, in order; duplicates collapse.
        :param verbose: Log each learned merge when ``True``.
        :raises ConfigError: If ``vocab_size`` is not an int or the pattern does not compile.
        """
        if isinstance(vocab_size, bool) or not isinstance(vocab_size, int):
            raise ConfigError(f"vocab size must be an int, got {vocab_size!r}")
        self.vocab_size = vocab_size
        self.split_config = as_split_config(split_config)
        # compile now so a bad pattern fails before any corpus is read
        self.splitter = PatternSplitter(self.split_config)
        self.special_tokens: list[str] = list(dict.fromkeys(special_tokens))
        self.verbose = verbose

    @measure_time("bpe training")
    def train(self, corpus: str | list[str]) -> TrainingResult:
        """
        Learn merges from ``corpus`` until the vocabulary is full or no pair is left.

        Each round counts adjacent pairs over every working split, picks the
        most frequent one (first observed wins a tie), gives the merged unit
        the next id and rewrites every split. A pair whose concatenation is
        already in the vocabulary is never picked, which keeps special tokens
        out of merge learning and ids one-to-one.

        Every round rescans all splits; identical pre-tokens are counted once
        with a weight, which does not change the outcome.

        :param corpus: Training text as a single string or list of strings.
        :returns: The trained model, final splits and merge count.
        """
        # handle list input
        if isinstance(corpus, list):
            corpus = "".join(corpus)

        id_of: dict[Unit, TokenId] = {seq: tok for tok, seq in enumerate(self.special_tokens)}

        # identical pre-tokens share one working split, weighted by occurrence
        word_counts = Counter(self.splitter.pre_tokens(corpus))
        words: list[list[Unit]] = [list(word) for word in word_counts]
        weights = list(word_counts.values())

        # python str ordering is code point order
        alphabet = sorted({ch for word in word_counts for ch in word} - id_of.keys())
        for ch in alphabet:
            id_of[ch] = len(id_of)

        log.debug(
            f"seeded {len(self.special_tokens)} special tokens and {len(alphabet)} base units "
            f"from {sum(weights)} pre-tokens ({len(words)} distinct)"
        )

        n_requested = max(self.vocab_size - len(id_of), 0)
        merges: list[UnitPair] = []
        progress = MergeProgress(log, n_requested)

        while len(id_of) < self.vocab_size:
            counts = bpe_freqs(words, weights)
            pair = best_pair(counts, eligible=lambda p: p[0] + p[1] not in id_of)
            if pair is None:
                break

            merged = pair[0] + pair[1]
            id_of[merged] = len(id_of)
            merges.append(pair)
            words = [bpe_merge(word, pair, merged) for word in words]

            if self.verbose:
                log.info(
                    f"merge {len(merges)}/{n_requested}: {pair} -> {merged!r} "
                    f"({counts[pair]} occurrences)"
                )
            else:
                progress.update(len(merges))

        if len(merges) < n_requested:
            log.warning(
                f"no more pairs to merge after {len(merges)} merges "
                f"(requested {n_requested}) stopping early"
            )

        model = VocabularyModel.build(id_of, merges, self.special_tokens, self.split_config)
        splits = {word: tuple(units) for word, units in zip(word_counts, words)}
        return TrainingResult(model=model, splits=splits, n_merges_completed=len(merges))


def train(
    corpus: str | list[str],
    vocab_size: int,
    split_config: SplitConfig | str | None = None,
    special_tokens: list[str] | tuple[str, ...] = (),
    *,
    verbose: bool = False,
) -> VocabularyModel:
    """
    Train a vocabulary model.

    :param corpus: Training text as a single string or list of strings.
    :param vocab_size: Upper bound on the final vocabulary size.
    :param split_config: Pre-tokenization rule or preset name; whitespace preset by default.
    :param special_tokens: Tokens given ids ``0..k-1`` in order.
    :param verbose: Log each learned merge when ``True``.
    :raises ConfigError: If the split pattern does not compile.
    """
    trainer = BPETrainer(vocab_size, split_config, special_tokens, verbose=verbose)
    return trainer.train(corpus).model


__all__ = ["BPETrainer", "TrainingResult", "train"]
