"""Factory functions for creating trainers and loading tokenizers."""

from collections.abc import Mapping
from typing import Any, Literal, overload

from .pattern import SplitConfig, get_split_config
from .tokenizer import Tokenizer
from .trainer import BPETrainer

Pattern = Literal[
    "whitespace",
    "word-punct",
    "simple-word",
    "social",
    "code",
    "whole-text",
    "gpt2",
    "gpt4",
    "llama3",
]


@overload
def get_trainer(
    vocab_size: int,
    pattern: Pattern = "whitespace",
    *,
    special_tokens: list[str] | tuple[str, ...] = (),
    verbose: bool = False,
) -> BPETrainer: ...


@overload
def get_trainer(
    vocab_size: int,
    *,
    custom_pattern: str,
    options: str = "g",
    special_tokens: list[str] | tuple[str, ...] = (),
    verbose: bool = False,
) -> BPETrainer: ...


def get_trainer(
    vocab_size: int,
    pattern: Pattern = "whitespace",
    *,
    custom_pattern: str | None = None,
    options: str = "g",
    special_tokens: list[str] | tuple[str, ...] = (),
    verbose: bool = False,
) -> BPETrainer:
    """
    Create a trainer with a built-in or custom split pattern.

    :param vocab_size: Upper bound on the trained vocabulary size.
    :param pattern: Built-in pattern name (e.g., "whitespace", "gpt4").
                    Ignored if custom_pattern is provided.
    :param custom_pattern: Custom pattern string. Overrides pattern parameter.
    :param options: Option letters for ``custom_pattern``.
    :param special_tokens: Special tokens given the lowest ids.
    :return: Configured trainer.
    :raises ConfigError: If custom_pattern is invalid or the pattern name is unknown.

    .. code-block:: python

        # Use built-in pattern
        trainer = get_trainer(300, "word-punct")

        # Use custom pattern
        trainer = get_trainer(300, custom_pattern=r"[#@]?\\w+", options="gi")
        tok = Tokenizer(trainer.train(corpus).model)
    """
    if custom_pattern is not None:
        config = SplitConfig(custom_pattern, options)
    else:
        # get_split_config() handles invalid pattern names
        config = get_split_config(pattern)
    return BPETrainer(vocab_size, config, special_tokens, verbose=verbose)


def from_pretrained(payload: str | Mapping[str, Any], unknown_token: str | None = None) -> Tokenizer:
    """
    Load a tokenizer from a model in transport form.

    :param payload: JSON text or an already decoded mapping.
    :return: Tokenizer wrapping the rebuilt model.
    :raises ModelLoadError: If the payload is malformed.

    .. code-block:: python

        tokenizer = from_pretrained(old.to_json())
        tokens = tokenizer.encode("Hello world")
    """
    if isinstance(payload, str):
        return Tokenizer.from_json(payload, unknown_token=unknown_token)
    return Tokenizer.from_dict(payload, unknown_token=unknown_token)


__all__ = ["Pattern", "get_trainer", "from_pretrained"]
